"""
Test Suite
==========

Test suite matching the taskfile2d2/ package structure.

Test Categories:
- unit: Unit tests for individual components
- integration: Parse, translate and CLI round trips
"""
