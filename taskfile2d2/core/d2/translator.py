"""
Taskfile to D2 Translator
=========================

Walks a parsed Taskfile and emits D2 statements: the icon ``vars`` block,
a legend, one container per include, one node per task with its icon,
description and style, edges for required variables, dependencies and
task calls, and the global style rules.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional, Set, Union
import jinja2

from taskfile2d2.config.logging import get_logger
from taskfile2d2.config.settings import get_settings
from taskfile2d2.core.taskfile.parser import parse_taskfile
from taskfile2d2.exceptions import TranslationError
from taskfile2d2.models.schemas import Task, TaskCall, TaskOrigin, Taskfile

from .icons import (
    EXTERNAL_TASK_ICON_NAME,
    ICONS,
    INCLUDED_TASKFILE_ICON_NAME,
    INTERNAL_TASK_ICON_NAME,
    UNKNOWN_TASK_ICON_NAME,
    VAR_ICON_NAME,
    icon_ref,
)
from .identifiers import IdentifierFactory
from .writer import D2Writer

logger = get_logger(__name__)

REQUIRED_BY_LABEL = "required by"
DEPENDENCY_LABEL = "calls as dependency"
DEPENDENCY_PASSED_LABEL = "passed to {style {stroke-dash: 3; stroke: green}}"
CALL_PASSED_LABEL = "passed to {style.stroke-dash: 3}"
SET_TO_LABEL = "set to"
SILENT_FILL = "grey"

_VALUE_ESCAPES = str.maketrans({"'": "\\'", '"': '\\"', "{": "\\{", "}": "\\}"})


def quote_key(name: str) -> str:
    """Quote a name for use as a D2 key."""
    return f"'{name}'"


def task_path(task_name: str) -> str:
    """
    D2 path of a called task.

    ``sub:build`` becomes ``'sub'.'build'`` so included tasks are drawn
    inside the container of their include.
    """
    return quote_key(task_name.replace(":", "'.'"))


def format_value(value: Any) -> str:
    """
    Display form of a passed variable value.

    Best effort: quotes and braces are escaped, deeply nested values may
    still produce text D2 cannot parse.
    """
    return repr(value).translate(_VALUE_ESCAPES)


def required_variable_label(name: str, enum: list) -> str:
    if not enum:
        return name
    return f'"{name}\\n[{", ".join(enum)}]"'


def description_markdown(task: Task) -> str:
    """Markdown block holding the task description and summary."""
    markdown_text = ""
    if task.desc:
        markdown_text += f"## Description\n{task.desc}\n"
    if task.summary:
        markdown_text += f"## Summary\n{task.summary}\n"
    return f"|md\n{markdown_text}|"


class CallClassifier:
    """
    Classify call targets for a single translation run.

    Included Taskfiles are never read, so the first reference to each
    ``namespace:task`` pair is reported unknown and later ones as included.
    """

    def __init__(self, taskfile: Taskfile) -> None:
        self.taskfile = taskfile
        self.included_tasks: Dict[str, Set[str]] = {}

    def add_include(self, namespace: str) -> None:
        self.included_tasks[namespace] = set()

    def classify(self, call: TaskCall) -> TaskOrigin:
        namespace = call.namespace
        if namespace is not None:
            seen = self.included_tasks.setdefault(namespace, set())
            if call.local_name in seen:
                return TaskOrigin.INCLUDED
            seen.add(call.local_name)
            return TaskOrigin.UNKNOWN

        task = self.taskfile.tasks.get(call.task_name)
        if task is None:
            # Possibly templated at run time, statically unknowable
            return TaskOrigin.UNKNOWN
        return TaskOrigin.INTERNAL if task.internal else TaskOrigin.EXTERNAL


@dataclass
class TranslationRun:
    """State of one translation; discarded when it completes."""
    writer: D2Writer
    identifiers: IdentifierFactory
    classifier: CallClassifier


class TaskfileTranslator:
    """Jinja2 assisted Taskfile to D2 translator."""

    def __init__(self, identifier_strategy: Optional[str] = None) -> None:
        self.settings = get_settings()
        self.identifier_strategy = identifier_strategy or self.settings.identifier_strategy
        self.logger: Any = logger.bind(component="translator")
        self._setup_jinja2_environment()

    def _setup_jinja2_environment(self) -> None:
        """Setup Jinja2 template environment for the static D2 blocks."""
        template_dir = Path(__file__).parent / "templates"
        self.env = jinja2.Environment(
            loader=jinja2.FileSystemLoader(str(template_dir)),
            autoescape=False,
            undefined=jinja2.StrictUndefined,
        )

    def translate(self, taskfile: Taskfile) -> str:
        """
        Translate a Taskfile into D2.

        Args:
            taskfile: Parsed Taskfile

        Returns:
            D2 diagram source

        Raises:
            TranslationError: If a static block template cannot be rendered
            FatalTaskfileError: If a task violates a model invariant
        """
        self.logger.info(
            "Translating Taskfile to D2",
            task_count=len(taskfile.tasks),
            include_count=len(taskfile.includes),
        )
        run = TranslationRun(
            writer=D2Writer(),
            identifiers=IdentifierFactory(self.identifier_strategy),
            classifier=CallClassifier(taskfile),
        )

        self._write_icon_vars(run)
        self._write_legend(run)

        for include in sorted(taskfile.list_includes()):
            self._write_include(run, include)

        for task_name in sorted(taskfile.tasks):
            self._write_task(run, task_name, taskfile.tasks[task_name])

        self._write_styles(run)

        d2 = run.writer.render()
        self.logger.info("D2 generation completed", statement_count=len(run.writer), d2_length=len(d2))
        return d2

    def _render_template(self, template_name: str, **context: Any) -> str:
        try:
            return self.env.get_template(template_name).render(**context)
        except jinja2.TemplateError as e:
            error_msg = f"Template rendering failed: {e}"
            self.logger.error("D2 generation failed", template=template_name, error=error_msg)
            raise TranslationError(error_msg) from e

    def _write_icon_vars(self, run: TranslationRun) -> None:
        run.writer.append("vars", self._render_template("vars.d2.j2", icons=ICONS))

    def _write_legend(self, run: TranslationRun) -> None:
        # Generated key, a task may well be called "Legend"
        legend = self._render_template(
            "legend.d2.j2",
            refs={
                "var": icon_ref(VAR_ICON_NAME),
                "external": icon_ref(EXTERNAL_TASK_ICON_NAME),
                "internal": icon_ref(INTERNAL_TASK_ICON_NAME),
                "unknown": icon_ref(UNKNOWN_TASK_ICON_NAME),
                "included": icon_ref(INCLUDED_TASKFILE_ICON_NAME),
            },
            silent_fill=SILENT_FILL,
        )
        run.writer.append(run.identifiers.new("legend"), legend)

    def _write_include(self, run: TranslationRun, include: str) -> None:
        run.classifier.add_include(include)
        run.writer.append(f"{quote_key(include)}.icon", icon_ref(INCLUDED_TASKFILE_ICON_NAME))

    def _write_task(self, run: TranslationRun, task_name: str, task: Task) -> None:
        """
        Write the node of a task and every relationship it declares.

        Args:
            run: Current translation run
            task_name: Key of the task in the Taskfile
            task: Task model
        """
        self.logger.debug("Writing task", task=task_name, internal=task.internal, silent=task.silent)
        key = quote_key(task_name)

        if task.has_description:
            run.writer.append(f"{key}.Text", description_markdown(task))
        if task.silent:
            run.writer.append(f"{key}.style.fill", SILENT_FILL)

        icon = INTERNAL_TASK_ICON_NAME if task.internal else EXTERNAL_TASK_ICON_NAME
        run.writer.append(f"{key}.icon", icon_ref(icon))

        for required_var in task.required_variables():
            var_key = quote_key(required_var.name)
            label = required_variable_label(required_var.name, required_var.enum)
            run.writer.append(var_key, f"{label} {{shape: image; icon: {icon_ref(VAR_ICON_NAME)}}}")
            run.writer.append(f"{var_key} -> {key}", REQUIRED_BY_LABEL)

        for dep_call in task.dependency_calls():
            self._write_call(run, task_name, dep_call, DEPENDENCY_LABEL, DEPENDENCY_PASSED_LABEL)

        for number, task_call in enumerate(task.inline_calls(), start=1):
            self._write_call(run, task_name, task_call, f"calls ({number})", CALL_PASSED_LABEL)

    def _write_call(
        self,
        run: TranslationRun,
        source: str,
        call: TaskCall,
        call_label: str,
        passed_label: str,
    ) -> None:
        """
        Write the edge(s) of a task call.

        Passed variables are drawn in an intermediate "With" container
        between the caller and the called task.

        Args:
            run: Current translation run
            source: Calling task name
            call: Called task and passed variables
            call_label: Label of the edge leaving the caller
            passed_label: Label of the edge entering the called task
        """
        source_key = quote_key(source)
        target = task_path(call.task_name)

        if not call.vars:
            run.writer.append(f"{source_key} -> {target}", call_label)
        else:
            container = run.identifiers.new("with")
            run.writer.append(f"{source_key} -> {container}", call_label)
            run.writer.append(f"{container} -> {target}", passed_label)
            run.writer.append(container, "With {shape: parallelogram; style.stroke-dash: 3}")
            for variable in call.vars:
                var_key = f"{container}.{quote_key(variable.name)}"
                value_key = f"{container}.{run.identifiers.new('value')}"
                run.writer.append(var_key, f"{{shape: image; icon: {icon_ref(VAR_ICON_NAME)}}}")
                run.writer.append(value_key, f"{format_value(variable.value)} {{shape: text}}")
                run.writer.append(f"{var_key} -> {value_key}", SET_TO_LABEL)

        origin = run.classifier.classify(call)
        if origin is TaskOrigin.UNKNOWN:
            self.logger.debug("Unknown task called", source=source, target=call.task_name)
            run.writer.append(f"{target}.icon", icon_ref(UNKNOWN_TASK_ICON_NAME))

    def _write_styles(self, run: TranslationRun) -> None:
        run.writer.append(
            self._render_template(
                "styles.d2.j2",
                labels={"required": REQUIRED_BY_LABEL, "dependency": DEPENDENCY_LABEL},
            )
        )


def translate_taskfile(taskfile: Taskfile, identifier_strategy: Optional[str] = None) -> str:
    """
    Translate a parsed Taskfile into D2.

    Args:
        taskfile: Parsed Taskfile
        identifier_strategy: Optional override of the configured identifier strategy

    Returns:
        D2 diagram source
    """
    return TaskfileTranslator(identifier_strategy).translate(taskfile)


def taskfile_to_d2(content: Union[bytes, str], identifier_strategy: Optional[str] = None) -> str:
    """
    Parse Taskfile YAML and translate it into D2.

    Args:
        content: Raw Taskfile YAML
        identifier_strategy: Optional override of the configured identifier strategy

    Returns:
        D2 diagram source
    """
    return translate_taskfile(parse_taskfile(content), identifier_strategy)
