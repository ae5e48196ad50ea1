"""
Data Models
===========

Pydantic models for the Taskfile document: tasks, calls, variables,
required variables, commands and derived task origins.
"""
