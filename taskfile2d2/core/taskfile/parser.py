"""
Taskfile Parser
===============

Converts raw Taskfile YAML into the typed document model. The document
structure is validated with Cerberus before any model is built; entry
shapes are decoded once into the closed command/call models.
"""

from typing import Dict, List, Any, Optional, Tuple, Union
import yaml  # type: ignore[import-untyped]
from pydantic import ValidationError
from cerberus import Validator  # type: ignore[import-untyped]

from taskfile2d2.config.logging import get_logger
from taskfile2d2.exceptions import MalformedDocumentError, UnsupportedVersionError
from taskfile2d2.models.schemas import (
    Taskfile,
    Task,
    TaskCall,
    RequiredVariable,
    decode_command,
)

logger = get_logger(__name__)

SUPPORTED_VERSION = "3"


class TaskfileValidator:
    """Taskfile structure validation using Cerberus schemas."""

    def __init__(self) -> None:
        self.logger: Any = logger.bind(component="validator")
        self._setup_schemas()

    def _setup_schemas(self) -> None:
        """Setup validation schemas."""
        # Only the keys the translation reads are checked, Taskfile has many more
        self.requires_schema = {
            "vars": {"type": "list", "nullable": True},
        }

        self.task_schema = {
            "desc": {"type": ["string", "number"], "nullable": True},
            "summary": {"type": ["string", "number"], "nullable": True},
            "silent": {"type": "boolean", "nullable": True},
            "internal": {"type": "boolean", "nullable": True},
            "requires": {
                "type": "dict",
                "nullable": True,
                "allow_unknown": True,
                "schema": self.requires_schema,
            },
            "vars": {"type": "dict", "nullable": True},
            "deps": {"type": "list", "nullable": True},
            "cmd": {"nullable": True},
            "cmds": {"type": "list", "nullable": True},
        }

        self.document_schema: Dict[str, Any] = {
            "version": {"type": ["string", "number"], "nullable": True},
            "includes": {"type": "dict", "nullable": True},
            "vars": {"type": "dict", "nullable": True},
            "tasks": {
                "type": "dict",
                "nullable": True,
                "keysrules": {"type": "string"},
                "valuesrules": {
                    "type": "dict",
                    "nullable": True,
                    "allow_unknown": True,
                    "schema": self.task_schema,
                },
            },
        }

    def validate_document(self, data: Dict[str, Any]) -> Tuple[bool, List[str], List[str]]:
        """
        Validate Taskfile document structure.

        Args:
            data: Document data to validate

        Returns:
            Tuple of (is_valid, errors, warnings)
        """
        validator = Validator(self.document_schema)  # type: ignore[misc]
        validator.allow_unknown = True  # type: ignore[attr-defined]

        is_valid = validator.validate(data)  # type: ignore[misc]
        errors: List[str] = []
        warnings: List[str] = []

        if not is_valid:
            errors.extend(self._format_validation_errors(validator.errors))  # type: ignore[attr-defined]
            return False, errors, warnings

        warnings.extend(self._collect_warnings(data))
        return True, errors, warnings

    def _format_validation_errors(self, errors: Any, path: str = "") -> List[str]:
        """Format Cerberus validation errors into readable messages."""
        formatted_errors: List[str] = []

        for field, error_info in errors.items():
            current_path = f"{path}.{field}" if path else str(field)

            for error in error_info if isinstance(error_info, list) else [error_info]:
                if isinstance(error, dict):
                    formatted_errors.extend(self._format_validation_errors(error, current_path))
                else:
                    formatted_errors.append(f"{current_path}: {error}")

        return formatted_errors

    def _collect_warnings(self, data: Dict[str, Any]) -> List[str]:
        """Non fatal findings: calls into namespaces that are not included."""
        warnings: List[str] = []
        includes = set(data.get("includes") or {})

        for task_name, task in (data.get("tasks") or {}).items():
            for entry in (task or {}).get("deps") or []:
                target = entry.get("task") if isinstance(entry, dict) else entry
                if isinstance(target, str) and ":" in target:
                    namespace = target.split(":", 1)[0]
                    if namespace not in includes:
                        warnings.append(
                            f"tasks.{task_name}.deps: '{target}' refers to namespace "
                            f"'{namespace}' which is not included"
                        )

        return warnings


class TaskfileParser:
    """YAML Taskfile parser."""

    def __init__(self) -> None:
        self.logger: Any = logger.bind(parser="yaml")
        self.validator = TaskfileValidator()

    def parse(self, content: Union[bytes, str]) -> Taskfile:
        """
        Parse Taskfile YAML content into a Taskfile model.

        Args:
            content: Raw Taskfile content

        Returns:
            Parsed Taskfile

        Raises:
            MalformedDocumentError: If the content is not a valid Taskfile
            UnsupportedVersionError: If the Taskfile version is not supported
            MalformedEntryError: If a dependency, command or variable entry has an unknown shape
        """
        self.logger.debug("Parsing Taskfile content", size=len(content))

        try:
            raw_data = yaml.safe_load(content)
        except yaml.YAMLError as e:
            error_msg = f"Invalid YAML syntax: {e}"
            self.logger.error("YAML parsing failed", error=error_msg)
            raise MalformedDocumentError("Invalid Taskfile", [error_msg]) from e

        if raw_data is None:
            raise MalformedDocumentError("Invalid Taskfile", ["Empty YAML document"])

        if not isinstance(raw_data, dict):
            raise MalformedDocumentError(
                "Invalid Taskfile",
                [f"YAML content must be a mapping, got {type(raw_data).__name__}"],
            )

        is_valid, errors, warnings = self.validator.validate_document(raw_data)
        if not is_valid:
            self.logger.error("Taskfile validation failed", error_count=len(errors), errors=errors[:3])
            raise MalformedDocumentError("Invalid Taskfile", errors)

        for warning in warnings:
            self.logger.warning("Taskfile validation warning", warning=warning)

        version = self._normalize_version(raw_data.get("version"))
        if version != SUPPORTED_VERSION:
            self.logger.error("Unsupported Taskfile version", version=version)
            raise UnsupportedVersionError(version, SUPPORTED_VERSION)

        try:
            taskfile = self._convert_to_taskfile(raw_data, version)
        except ValidationError as e:
            errors = [
                f"{'.'.join(str(loc) for loc in error['loc'])}: {error['msg']}"
                for error in e.errors()
            ]
            self.logger.error("Taskfile model conversion failed", errors=errors[:3])
            raise MalformedDocumentError("Invalid Taskfile", errors) from e

        self.logger.debug(
            "Taskfile parsed", task_count=len(taskfile.tasks), include_count=len(taskfile.includes)
        )
        return taskfile

    def validate_syntax(self, content: Union[bytes, str]) -> bool:
        """
        Validate YAML syntax only.

        Args:
            content: Raw Taskfile content

        Returns:
            True if syntax is valid, False otherwise
        """
        try:
            yaml.safe_load(content)
            return True
        except yaml.YAMLError:
            return False

    def _normalize_version(self, version: Any) -> Optional[str]:
        """Scalars compare by their text, ``version: 3`` is the same as ``'3'``."""
        if version is None:
            return None
        return str(version)

    def _convert_to_taskfile(self, raw_data: Dict[str, Any], version: str) -> Taskfile:
        """
        Convert validated YAML data to a Taskfile.

        Args:
            raw_data: Validated YAML data
            version: Normalized version string

        Returns:
            Taskfile instance
        """
        tasks: Dict[str, Task] = {}
        for task_name, task_data in (raw_data.get("tasks") or {}).items():
            tasks[task_name] = self._convert_to_task(task_name, task_data or {})

        return Taskfile(
            version=version,
            includes=self._string_keys(raw_data.get("includes")),
            vars=self._string_keys(raw_data.get("vars")),
            tasks=tasks,
        )

    def _convert_to_task(self, task_name: str, task_data: Dict[str, Any]) -> Task:
        """
        Convert raw task data to a Task.

        Args:
            task_name: Key of the task in the tasks mapping
            task_data: Validated task data

        Returns:
            Task instance
        """
        requires = task_data.get("requires") or {}
        cmd = task_data.get("cmd")
        cmds = task_data.get("cmds")

        return Task(
            name=task_name,
            desc=self._text(task_data.get("desc")),
            summary=self._text(task_data.get("summary")),
            silent=bool(task_data.get("silent")),
            internal=bool(task_data.get("internal")),
            required_vars=[RequiredVariable.from_entry(entry) for entry in requires.get("vars") or []],
            vars=self._string_keys(task_data.get("vars")),
            deps=[TaskCall.from_entry(entry) for entry in task_data.get("deps") or []],
            cmd=decode_command(cmd) if cmd is not None else None,
            cmds=[decode_command(entry) for entry in cmds] if cmds is not None else None,
        )

    def _text(self, value: Any) -> str:
        return "" if value is None else str(value)

    def _string_keys(self, mapping: Optional[Dict[Any, Any]]) -> Dict[str, Any]:
        """YAML keys may be numbers or booleans, Taskfile treats them as names."""
        return {str(key): value for key, value in (mapping or {}).items()}


def parse_taskfile(content: Union[bytes, str]) -> Taskfile:
    """
    Parse Taskfile content.

    Args:
        content: Raw Taskfile YAML

    Returns:
        Parsed Taskfile
    """
    if not content or not content.strip():
        raise MalformedDocumentError("Invalid Taskfile", ["Empty Taskfile content provided"])

    return TaskfileParser().parse(content)


def validate_taskfile_syntax(content: Union[bytes, str]) -> bool:
    """
    Validate Taskfile YAML syntax without building the model.

    Args:
        content: Raw Taskfile YAML

    Returns:
        True if syntax is valid, False otherwise
    """
    if not content or not content.strip():
        return False

    return TaskfileParser().validate_syntax(content)
