"""Ordering trace — snapshots of per-rank order during crossing minimisation.

Mirrors the ordering debug output of other layered-layout tools so the two
can be diffed line by line: one line for the initial order, one per sweep,
and one for the order finally kept.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

logger = logging.getLogger(__name__)


@dataclass
class OrderStep:
    """One snapshot of the ordering."""

    label: str
    layers: list[list[str]]
    crossings: int

    def format(self) -> list[str]:
        lines = [f"{self.label}: crossings={self.crossings}"]
        for rank, ids in enumerate(self.layers):
            lines.append(f"  rank {rank}: [{', '.join(ids)}]")
        return lines


@dataclass
class OrderTrace:
    """Collects ``OrderStep`` snapshots and logs them at DEBUG level.

    Recording is always on; ``log_steps`` only controls whether the steps are
    also emitted through ``logging`` as they happen.
    """

    log_steps: bool = False
    steps: list[OrderStep] = field(default_factory=list)

    def record(self, label: str, layers: list[list[str]], crossings: int) -> None:
        step = OrderStep(label=label, layers=[list(layer) for layer in layers], crossings=crossings)
        self.steps.append(step)
        if self.log_steps:
            for line in step.format():
                logger.debug(line)

    def labels(self) -> list[str]:
        return [s.label for s in self.steps]

    def format(self) -> str:
        return "\n".join(line for step in self.steps for line in step.format())
