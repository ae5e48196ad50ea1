"""
Integration Tests for End-to-End Pipeline
=========================================

Basic integration tests for the Taskfile to D2 pipeline, from YAML on
disk to the written diagram.
"""

import os
import subprocess
import sys

import pytest

from taskfile2d2.cli import convert_file
from taskfile2d2.core.d2.translator import TaskfileTranslator
from taskfile2d2.core.taskfile.parser import TaskfileParser

from tests.utils.assertions import (
    assert_has_line, assert_line_order, count_lines, generated_ids, normalize_identifiers,
)

PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

PROJECT_TASKFILE = """\
version: 3
includes:
  docker: ./docker/Taskfile.yml
  k8s:
    taskfile: ./k8s
    optional: true
vars:
  IMAGE: registry.example.com/app
tasks:
  default:
    desc: Show available tasks
    cmds:
      - task --list
  build:
    desc: Build the binary
    cmds:
      - go build ./...
  image:
    deps: [build]
    requires:
      vars: [TAG]
    cmds:
      - task: docker:build
        vars:
          TAG: '{{.TAG}}'
          PUSH: false
  login:
    internal: true
    silent: true
    cmds:
      - echo "$TOKEN" | docker login --password-stdin
  release:
    desc: Release an image
    summary: Builds, logs in and pushes
    deps:
      - image
      - task: login
    requires:
      vars:
        - TAG
        - name: CHANNEL
          enum: [stable, beta]
    cmds:
      - task: docker:push
      - task: k8s:rollout
        vars:
          CHANNEL: '{{.CHANNEL}}'
      - task: docker:push
"""


class TestBasicPipeline:
    """Test the YAML to D2 pipeline."""

    @pytest.fixture
    def taskfile_parser(self):
        """Create Taskfile parser instance."""
        return TaskfileParser()

    @pytest.fixture
    def d2_translator(self):
        """Create translator instance."""
        return TaskfileTranslator("counter")

    def test_project_taskfile(self, taskfile_parser, d2_translator):
        """Test complete pipeline with a realistic Taskfile."""
        # Step 1: Parse YAML
        taskfile = taskfile_parser.parse(PROJECT_TASKFILE)
        assert taskfile.version == "3"
        assert taskfile.list_includes() == {"docker", "k8s"}
        assert taskfile.tasks["login"].internal is True

        # Step 2: Translate
        d2 = d2_translator.translate(taskfile)

        # Step 3: Verify structure
        assert_line_order(
            d2,
            "vars: {",
            "_t2d2_legend_1: Legend {",
            "'docker'.icon: ${includedTaskfileIcon}",
            "'k8s'.icon: ${includedTaskfileIcon}",
            "'build'.Text: |md",
            "'default'.Text: |md",
            "'image'.icon: ${externalTaskIcon}",
            "'login'.style.fill: grey",
            "'login'.icon: ${internalTaskIcon}",
            "'release'.Text: |md",
            "(** -> **)[*].style: {",
        )

        assert_has_line(d2, "'TAG' -> 'image': required by")
        assert_has_line(d2, "'TAG' -> 'release': required by")
        assert_has_line(d2, r"""'CHANNEL': "CHANNEL\n[stable, beta]" {shape: image; icon: ${varIcon}}""")
        assert_has_line(d2, "'image' -> 'build': calls as dependency")
        assert_has_line(d2, "'release' -> 'image': calls as dependency")
        assert_has_line(d2, "'release' -> 'login': calls as dependency")

        # image passes PUSH and TAG to docker:build
        assert_has_line(d2, "'image' -> _t2d2_with_2: calls (1)")
        assert_has_line(d2, "_t2d2_with_2 -> 'docker'.'build': passed to {style.stroke-dash: 3}")
        assert_has_line(d2, "_t2d2_with_2._t2d2_value_3: False {shape: text}")
        assert_has_line(d2, r"_t2d2_with_2._t2d2_value_4: \'\{\{.TAG\}\}\' {shape: text}")

        assert_has_line(d2, "'release' -> 'docker'.'push': calls (1)")
        assert_has_line(d2, "'release' -> _t2d2_with_5: calls (2)")
        assert_has_line(d2, "'release' -> 'docker'.'push': calls (3)")
        assert count_lines(d2, "'docker'.'push'.icon: ${unknownTaskIcon}") == 1
        assert count_lines(d2, "'k8s'.'rollout'.icon: ${unknownTaskIcon}") == 1
        assert count_lines(d2, "'docker'.'build'.icon: ${unknownTaskIcon}") == 1

        assert set(generated_ids(d2)) == {
            "_t2d2_legend_1", "_t2d2_with_2", "_t2d2_value_3",
            "_t2d2_value_4", "_t2d2_with_5", "_t2d2_value_6",
        }

    def test_fresh_run_state(self, taskfile_parser, d2_translator):
        """Namespaced calls are reported unknown again in every run."""
        taskfile = taskfile_parser.parse(PROJECT_TASKFILE)

        first = d2_translator.translate(taskfile)
        second = d2_translator.translate(taskfile)

        assert first == second
        assert count_lines(second, "'docker'.'push'.icon: ${unknownTaskIcon}") == 1

    def test_uuid_and_counter_agree(self, taskfile_parser):
        taskfile = taskfile_parser.parse(PROJECT_TASKFILE)

        counter = TaskfileTranslator("counter").translate(taskfile)
        uuid = TaskfileTranslator("uuid").translate(taskfile)

        assert normalize_identifiers(counter) == normalize_identifiers(uuid)

    def test_convert_file(self, tmp_path):
        source = tmp_path / "Taskfile.yml"
        source.write_text(PROJECT_TASKFILE, encoding="utf-8")

        output = convert_file(source)

        assert output == tmp_path / "Taskfile.yml.d2"
        expected = TaskfileTranslator("counter").translate(TaskfileParser().parse(PROJECT_TASKFILE))
        assert output.read_text(encoding="utf-8") == expected


@pytest.mark.integration
class TestModuleEntryPoint:
    """Test running the package as a program."""

    def run_module(self, content: bytes, *args: str, cwd=None) -> subprocess.CompletedProcess:
        env = dict(os.environ, TASKFILE2D2_LOG_LEVEL="ERROR")
        env["PYTHONPATH"] = os.pathsep.join(filter(None, [PROJECT_ROOT, env.get("PYTHONPATH")]))
        return subprocess.run(
            [sys.executable, "-m", "taskfile2d2", *args],
            input=content,
            capture_output=True,
            env=env,
            cwd=cwd,
            check=False,
        )

    def test_stdin_to_stdout(self):
        result = self.run_module(PROJECT_TASKFILE.encode("utf-8"))

        assert result.returncode == 0
        assert result.stdout.decode("utf-8").startswith("vars: {")
        assert_has_line(result.stdout.decode("utf-8"), "'image' -> 'build': calls as dependency")

    def test_fatal_exit_status(self):
        result = self.run_module(b"version: '2'\n")

        assert result.returncode == 2
        assert result.stdout == b""
        assert b"Error: Only version 3" in result.stderr

    def test_project_dotenv_in_working_directory(self, tmp_path):
        """Settings load at import time and must skip the project's own .env keys."""
        (tmp_path / "Taskfile.yml").write_text(PROJECT_TASKFILE, encoding="utf-8")
        (tmp_path / ".env").write_text("DATABASE_URL=postgres://x\n", encoding="utf-8")

        result = self.run_module(b"", "Taskfile.yml", cwd=tmp_path)

        assert result.returncode == 0, result.stderr.decode("utf-8")
        assert (tmp_path / "Taskfile.yml.d2").exists()
