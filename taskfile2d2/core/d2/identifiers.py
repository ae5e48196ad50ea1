"""Identifiers for the synthetic D2 containers (legend, passed variables, values)."""

import itertools
import uuid


class IdentifierFactory:
    """
    Generate D2 keys that are never referenced by name outside the run.

    ``counter`` yields stable keys such as ``_t2d2_with_3`` so repeated
    translations are byte-identical; ``uuid`` yields random uuid4 keys.
    Counter keys are predictable: a task named exactly ``_t2d2_legend_1``
    shares its D2 key with the legend and the two merge.
    """

    PREFIX = "_t2d2"
    STRATEGIES = ("counter", "uuid")

    def __init__(self, strategy: str = "counter") -> None:
        if strategy not in self.STRATEGIES:
            raise ValueError(f"Unsupported identifier strategy: {strategy}")
        self.strategy = strategy
        self._counter = itertools.count(1)

    def new(self, kind: str) -> str:
        """Return a fresh identifier for a container of the given kind."""
        if self.strategy == "uuid":
            # Leading letter keeps the key from parsing as a number
            return f"u{uuid.uuid4().hex}"
        return f"{self.PREFIX}_{kind}_{next(self._counter)}"
