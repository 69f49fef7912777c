# dsl.py
from __future__ import annotations

from typing import List

from .model import Item, Scope, Step


# ---------------------------------------------------------------------
# Step helper
# ---------------------------------------------------------------------

def sh(name: str, cmd: str, *, cwd: str | None = None) -> Step:
    """Create a shell step."""
    return Step(name=name, run=cmd, cwd=cwd)


def x(cmd: str, *, cwd: str | None = None) -> Step:
    """Shell step labelled with its own command line."""
    return Step(name=cmd, run=cmd, cwd=cwd)


# ---------------------------------------------------------------------
# Scoped directory helper
# ---------------------------------------------------------------------

def within(path: str, *steps: Item) -> Scope:
    """
    Group steps that run inside `path`.

    Example:
        within("examples/rust/opensk",
            x("cargo test --features=test"),
            x("cargo fmt -- --check"),
        )
    """
    if not steps:
        raise ValueError(f"within({path!r}) must have at least one step")
    return Scope(path=path, steps=tuple(steps))


# ---------------------------------------------------------------------
# Workflow helper (single-file story)
# ---------------------------------------------------------------------

def wf(*items: Item) -> List[Item]:
    """
    Workflow definition helper.

    Users can write:
        from cigate import wf, sh, within

        def workflow():
            return wf(
                sh("lint", "ruff check ."),
                within("docs", sh("build docs", "make html")),
            )

    Or use STEPS directly:
        STEPS = wf(sh(...), sh(...))
    """
    for item in items:
        if not isinstance(item, (Step, Scope)):
            raise TypeError(f"wf() expects Step or Scope items, got {type(item).__name__}")
    return list(items)


def iter_steps(items: List[Item]):
    """Yield (scope_path, step) pairs in execution order; scope_path is None at top level."""
    for item in items:
        if isinstance(item, Scope):
            for path, step in iter_steps(list(item.steps)):
                yield (item.path if path is None else f"{item.path}/{path}"), step
        else:
            yield None, item
