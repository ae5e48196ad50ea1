"""
Taskfile Processing Module
=========================

Components:
- parser: YAML loading, schema validation and model construction
"""

from .parser import TaskfileParser, TaskfileValidator, parse_taskfile, validate_taskfile_syntax

__all__ = ["TaskfileParser", "TaskfileValidator", "parse_taskfile", "validate_taskfile_syntax"]
