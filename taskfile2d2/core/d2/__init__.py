"""
D2 Generation Module
====================

Components:
- writer: Ordered D2 statement builder
- translator: Taskfile to D2 translation engine
- icons: Embedded icon data URIs
- identifiers: Generated keys for synthetic containers
"""

from .translator import TaskfileTranslator, taskfile_to_d2, translate_taskfile
from .writer import D2Writer

__all__ = ["D2Writer", "TaskfileTranslator", "taskfile_to_d2", "translate_taskfile"]
