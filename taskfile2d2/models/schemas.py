"""
Pydantic Models and Schemas
===========================

Typed representation of a Taskfile (version 3) document.

Heterogeneous YAML entries (dependencies, commands, required variables) are
decoded once into a closed set of models so that the translation engine
never inspects raw YAML values.
"""

from typing import Optional, List, Dict, Any, Set, Union, Literal
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from taskfile2d2.exceptions import ConflictingCommandsError, MalformedEntryError


# Enums
class TaskOrigin(str, Enum):
    """Where a called task comes from, as far as static analysis can tell."""
    INTERNAL = "internal"
    EXTERNAL = "external"
    UNKNOWN = "unknown"
    INCLUDED = "included"


# Variables
class Variable(BaseModel):
    """A variable binding passed along with a task call."""
    name: str = Field(..., description="Variable name")
    value: Any = Field(None, description="Variable value, opaque beyond display")


class RequiredVariable(BaseModel):
    """A variable a task requires, optionally restricted to an enumeration."""
    name: str = Field(..., description="Variable name")
    enum: List[str] = Field(default_factory=list, description="Allowed values")

    @classmethod
    def from_entry(cls, entry: Any) -> "RequiredVariable":
        """
        Decode a ``requires.vars`` entry.

        Args:
            entry: Either a bare variable name or a ``{name, enum}`` mapping

        Returns:
            RequiredVariable instance

        Raises:
            MalformedEntryError: If the entry has any other shape
        """
        if isinstance(entry, str):
            return cls(name=entry)
        if isinstance(entry, dict) and isinstance(entry.get("name"), str):
            allowed = entry.get("enum") or []
            if not isinstance(allowed, list):
                raise MalformedEntryError(
                    f"Required variable '{entry['name']}' enum must be a list, got {type(allowed).__name__}"
                )
            return cls(name=entry["name"], enum=[str(value) for value in allowed])
        raise MalformedEntryError(f"Unsupported required variable entry: {entry!r}")


# Calls and commands
def _sorted_bindings(passed_vars: Any) -> List[Variable]:
    """Variable bindings in name order; anything but a mapping carries none."""
    if not isinstance(passed_vars, dict):
        return []
    return [
        Variable(name=str(name), value=passed_vars[name])
        for name in sorted(passed_vars, key=str)
    ]


class TaskCall(BaseModel):
    """A reference to another task, with the variables passed to it."""
    kind: Literal["task"] = "task"
    task_name: str = Field(..., description="Called task, optionally namespace:name")
    vars: List[Variable] = Field(default_factory=list, description="Bindings sorted by name")

    @property
    def namespace(self) -> Optional[str]:
        """Include namespace of the called task, if any."""
        if ":" not in self.task_name:
            return None
        return self.task_name.split(":", 1)[0]

    @property
    def local_name(self) -> str:
        """Task name inside its namespace."""
        if ":" not in self.task_name:
            return self.task_name
        return self.task_name.split(":", 1)[1]

    @classmethod
    def from_mapping(cls, entry: Dict[str, Any]) -> "TaskCall":
        """Build a call from a ``{task, vars}`` mapping."""
        return cls(task_name=entry["task"], vars=_sorted_bindings(entry.get("vars")))

    @classmethod
    def from_entry(cls, entry: Any) -> "TaskCall":
        """
        Decode a ``deps`` entry.

        Args:
            entry: Either a bare task name or a ``{task, vars}`` mapping

        Returns:
            TaskCall instance

        Raises:
            MalformedEntryError: If the entry has any other shape
        """
        if isinstance(entry, str):
            return cls(task_name=entry)
        if isinstance(entry, dict) and isinstance(entry.get("task"), str):
            return cls.from_mapping(entry)
        raise MalformedEntryError(f"Unsupported dependency entry: {entry!r}")


class ShellCommand(BaseModel):
    """A plain shell command line."""
    kind: Literal["shell"] = "shell"
    command: str


class OpaqueCommand(BaseModel):
    """Any other command entry (``defer``, ``cmd`` mappings, ...), kept as is."""
    kind: Literal["opaque"] = "opaque"
    raw: Any = None


Command = Union[ShellCommand, TaskCall, OpaqueCommand]


def decode_command(entry: Any) -> Command:
    """Decode a ``cmd``/``cmds`` entry into a command model."""
    if isinstance(entry, str):
        return ShellCommand(command=entry)
    if isinstance(entry, dict) and isinstance(entry.get("task"), str):
        return TaskCall.from_mapping(entry)
    return OpaqueCommand(raw=entry)


# Tasks
class Task(BaseModel):
    """A single Taskfile task."""
    name: str = Field("", description="Task name, the key in Taskfile.tasks")
    desc: str = Field("", description="Task description")
    summary: str = Field("", description="Task summary")
    silent: bool = Field(False, description="Suppress template resolution echo")
    internal: bool = Field(False, description="Not callable directly from the Task CLI")

    required_vars: List[RequiredVariable] = Field(default_factory=list)
    vars: Dict[str, Any] = Field(default_factory=dict)
    deps: List[TaskCall] = Field(default_factory=list)
    cmd: Optional[Command] = None
    cmds: Optional[List[Command]] = None

    @property
    def has_description(self) -> bool:
        return bool(self.desc or self.summary)

    def resolved_commands(self) -> List[Command]:
        """
        Commands forming the task body.

        Returns:
            ``[cmd]`` when the single-command form is used, ``cmds`` otherwise

        Raises:
            ConflictingCommandsError: If both ``cmd`` and ``cmds`` are set
        """
        if self.cmd is not None and self.cmds is not None:
            raise ConflictingCommandsError(self.name or None)
        if self.cmd is not None:
            return [self.cmd]
        return list(self.cmds or [])

    def dependency_calls(self) -> List[TaskCall]:
        """Tasks run before this one, in declaration order."""
        return list(self.deps)

    def inline_calls(self) -> List[TaskCall]:
        """Tasks invoked from the command list, shell commands skipped."""
        return [command for command in self.resolved_commands() if isinstance(command, TaskCall)]

    def required_variables(self) -> List[RequiredVariable]:
        return list(self.required_vars)


class Taskfile(BaseModel):
    """Complete Taskfile document model."""
    version: str = Field(..., description="Schema version")
    includes: Dict[str, Any] = Field(default_factory=dict, description="Included Taskfiles")
    vars: Dict[str, Any] = Field(default_factory=dict, description="Global variables")
    tasks: Dict[str, Task] = Field(default_factory=dict, description="Tasks by name")

    model_config = ConfigDict(frozen=True)

    def list_includes(self) -> Set[str]:
        """Names of the included Taskfiles."""
        return set(self.includes)

    def has_task(self, name: str) -> bool:
        return name in self.tasks
