"""
Test Configuration
==================

Pytest configuration with fixtures for all test types.
Provides test settings, parsers, translators and sample Taskfiles.
"""

import io
from pathlib import Path
from typing import Callable, Generator

import pytest
from pydantic_settings import SettingsConfigDict

import taskfile2d2.config.settings as settings_module
from taskfile2d2.config.settings import Settings
from taskfile2d2.core.d2.translator import TaskfileTranslator
from taskfile2d2.core.taskfile.parser import TaskfileParser, parse_taskfile
from taskfile2d2.models.schemas import Taskfile

from tests.data import MINIMAL_TASKFILE


# Test settings override
class TestSettings(Settings):
    """Test-specific settings."""

    environment: str = "testing"
    debug: bool = True
    log_level: str = "DEBUG"
    identifier_strategy: str = "counter"

    model_config = SettingsConfigDict(env_file=".env.test", env_prefix="TASKFILE2D2_TEST_")


@pytest.fixture(scope="session")
def test_settings() -> TestSettings:
    """Test settings fixture."""
    return TestSettings()


@pytest.fixture(scope="session", autouse=True)
def override_settings(test_settings: TestSettings) -> Generator[TestSettings, None, None]:
    """Override application settings for testing."""
    previous = settings_module.settings
    settings_module.settings = test_settings
    yield test_settings
    settings_module.settings = previous


@pytest.fixture
def parser() -> TaskfileParser:
    """Create Taskfile parser instance."""
    return TaskfileParser()


@pytest.fixture
def translator() -> TaskfileTranslator:
    """Create translator with deterministic identifiers."""
    return TaskfileTranslator(identifier_strategy="counter")


@pytest.fixture
def translate(translator: TaskfileTranslator) -> Callable[[str], str]:
    """Parse YAML and translate it in one step."""

    def _translate(content: str) -> str:
        return translator.translate(parse_taskfile(content))

    return _translate


@pytest.fixture
def minimal_taskfile() -> Taskfile:
    """Parsed minimal Taskfile."""
    return parse_taskfile(MINIMAL_TASKFILE)


@pytest.fixture
def taskfile_path(tmp_path: Path) -> Path:
    """Minimal Taskfile written to disk."""
    path = tmp_path / "Taskfile.yml"
    path.write_text(MINIMAL_TASKFILE, encoding="utf-8")
    return path


class FakeStdin(io.TextIOWrapper):
    """Piped standard input backed by bytes."""

    def __init__(self, content: bytes, tty: bool = False) -> None:
        super().__init__(io.BytesIO(content), encoding="utf-8")
        self._tty = tty

    def isatty(self) -> bool:
        return self._tty


@pytest.fixture
def fake_stdin(monkeypatch: pytest.MonkeyPatch) -> Callable[..., FakeStdin]:
    """Replace sys.stdin with piped or terminal input."""

    def _install(content: bytes = b"", tty: bool = False) -> FakeStdin:
        stdin = FakeStdin(content, tty=tty)
        monkeypatch.setattr("sys.stdin", stdin)
        return stdin

    return _install
