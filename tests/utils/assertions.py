"""
Test Assertions
===============

Custom assertion helpers for testing Taskfile to D2 conversion.
"""

import re
from typing import List

GENERATED_ID_PATTERN = re.compile(r"_t2d2_[a-z]+_\d+|u[0-9a-f]{32}")


def d2_lines(d2: str) -> List[str]:
    """Split D2 output into its lines."""
    return d2.split("\n")


def normalize_identifiers(d2: str) -> str:
    """Replace generated container keys with a fixed placeholder."""
    return GENERATED_ID_PATTERN.sub("<id>", d2)


def assert_has_line(d2: str, line: str) -> None:
    """Assert that D2 output contains an exact line."""
    assert line in d2_lines(d2), f"Missing D2 line: {line!r}"


def assert_no_line(d2: str, line: str) -> None:
    """Assert that D2 output does not contain an exact line."""
    assert line not in d2_lines(d2), f"Unexpected D2 line: {line!r}"


def count_lines(d2: str, line: str) -> int:
    """Count occurrences of an exact line."""
    return d2_lines(d2).count(line)


def assert_line_order(d2: str, *lines: str) -> None:
    """Assert that the given lines occur in this order."""
    all_lines = d2_lines(d2)
    positions = []
    for line in lines:
        assert line in all_lines, f"Missing D2 line: {line!r}"
        positions.append(all_lines.index(line))
    assert positions == sorted(positions), f"Lines out of order: {lines}"


def assert_no_generated_containers(d2: str) -> None:
    """Assert that no variable passing container was emitted."""
    assert "With {shape: parallelogram" not in d2
    assert "set to" not in d2


def generated_ids(d2: str) -> List[str]:
    """All generated container keys in order of appearance."""
    return GENERATED_ID_PATTERN.findall(d2)
