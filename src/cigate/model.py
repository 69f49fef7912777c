# model.py
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Tuple, Union


@dataclass(frozen=True)
class Step:
    """A single command (step) of the CI gate."""
    name: str
    run: str
    cwd: str | None = None


@dataclass(frozen=True)
class Scope:
    """
    Steps that execute inside one subdirectory.

    The directory is entered before the first step and the previous working
    directory is restored once the scope ends, whatever the outcome.
    """
    path: str
    steps: Tuple["Item", ...]


# Anything the runner accepts in a pipeline
Item = Union[Step, Scope]


class RunOutcome(str, Enum):
    PASSED = "passed"
    FAILED = "failed"


@dataclass
class GateResult:
    """Terminal state of a gate run."""
    outcome: RunOutcome
    exit_code: int = 0
    executed: list[str] = field(default_factory=list)

    # set on failure only
    failed_step: Optional[str] = None
    message: Optional[str] = None

    @property
    def passed(self) -> bool:
        return self.outcome is RunOutcome.PASSED
