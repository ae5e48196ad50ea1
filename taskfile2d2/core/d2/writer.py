"""
D2 Writer
=========

Ordered accumulator of D2 statements. Later statements may refine earlier
declarations of the same key, so order is preserved exactly and nothing is
deduplicated or validated.
"""

from typing import List, Tuple


class D2Writer:
    """Append-only list of D2 statement lines."""

    def __init__(self) -> None:
        self._statements: List[str] = []

    def append(self, key: str, *values: str) -> None:
        """
        Append statements for a key.

        Args:
            key: D2 key, or a complete statement when no values are given
            values: One ``key: value`` line is appended per value
        """
        if not values:
            self._statements.append(key)
            return
        for value in values:
            self._statements.append(f"{key}: {value}")

    @property
    def statements(self) -> Tuple[str, ...]:
        return tuple(self._statements)

    def render(self) -> str:
        """Join all statements with newlines, in append order."""
        return "\n".join(self._statements)

    def __len__(self) -> int:
        return len(self._statements)

    def __str__(self) -> str:
        return self.render()
