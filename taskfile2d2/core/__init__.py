"""
Core Business Logic
==================

Core modules for Taskfile processing and D2 generation.

Modules:
- taskfile: Taskfile parsing, validation, and document model construction
- d2: D2 statement building and Taskfile to D2 translation
"""
