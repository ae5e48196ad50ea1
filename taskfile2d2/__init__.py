"""
Taskfile to D2
==============

Translate Taskfile (version 3) workflow definitions into D2 diagram
descriptions that map task dependencies, task calls and variable passing.

This package provides:
- Typed Taskfile document model with YAML parsing and schema validation
- D2 statement builder
- Translation engine emitting nodes, edges, icons and styles
- Command line interface for files and standard streams
"""

__version__ = "0.0.1"
__author__ = "taskfile2d2 Team"
