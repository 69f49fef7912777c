# runner.py
from __future__ import annotations

import os
import runpy
import subprocess
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from .git_facts.git import has_modified_files, modified_files, short_status, status_paths
from .model import GateResult, Item, RunOutcome, Scope, Step
from .ui.console import Console, get_console
from .workdir import pushd

SUCCESS_MARKER = "CI passed"

# Exit codes for failures that do not come from a step
EXIT_ERROR = 1
EXIT_MODIFIED = 3
EXIT_UNTRACKED = 4
EXIT_NOT_RUNNABLE = 127

TOOL_HINTS = {
    "cargo": "Install the Rust toolchain (https://rustup.rs) or fix PATH.",
    "git": "Install Git or fix PATH.",
    "mdl": "Install markdownlint (gem install mdl) or let scripts/wrapper.sh fetch it.",
    "taplo": "Install taplo (cargo install taplo-cli) or fix PATH.",
}


# ----------------------------------------------------------------------
# Errors
# ----------------------------------------------------------------------

class CIError(Exception):
    """Base class for everything that fails the gate."""

    @property
    def gate_exit_code(self) -> int:
        return EXIT_ERROR


@dataclass
class StepFailure(CIError):
    step: str
    cmd: str
    exit_code: int

    @property
    def message(self) -> str:
        return f"step '{self.step}' failed"

    @property
    def gate_exit_code(self) -> int:
        # negative return codes mean "killed by signal", reported like a shell would
        if self.exit_code < 0:
            return 128 - self.exit_code
        if 0 < self.exit_code < 256:
            return self.exit_code
        return EXIT_ERROR

    def __str__(self) -> str:
        return f"step '{self.step}' failed (exit={self.exit_code}): {self.cmd}"


@dataclass
class StepSetupError(CIError):
    step: str
    reason: str

    @property
    def message(self) -> str:
        return f"step '{self.step}' could not start"

    @property
    def gate_exit_code(self) -> int:
        return EXIT_NOT_RUNNABLE

    def __str__(self) -> str:
        return f"step '{self.step}' could not start: {self.reason}"


@dataclass
class TreeDirty(CIError):
    """Working tree is not clean after every step passed."""
    kind: str  # "modified" or "untracked"
    message: str
    paths: List[str] = field(default_factory=list)

    @property
    def gate_exit_code(self) -> int:
        return EXIT_MODIFIED if self.kind == "modified" else EXIT_UNTRACKED

    def __str__(self) -> str:
        lines = [self.message]
        lines.extend(f"  {p}" for p in self.paths)
        return "\n".join(lines)


def tool_hint(cmd: str) -> Optional[str]:
    """Install hint for the program a command line starts with, if it is a known one."""
    parts = cmd.split()
    if not parts:
        return None
    tool = os.path.basename(parts[0])
    return TOOL_HINTS.get(tool)


# ----------------------------------------------------------------------
# Workflow loading (local file)
# ----------------------------------------------------------------------

def load_workflow(path: str | Path) -> List[Item]:
    """
    Load a workflow from a python file path.

    The file must define either:
      - workflow() -> List[Step | Scope]
      - STEPS = [Step | Scope, ...]
    """
    wf_path = Path(path).expanduser().resolve()
    if not wf_path.exists():
        raise FileNotFoundError(f"Workflow file not found: {wf_path}")
    if wf_path.suffix != ".py":
        raise ValueError(f"Workflow must be a .py file, got: {wf_path.name}")

    module_name = f"cigate_workflow_{wf_path.stem}"
    globals_dict = runpy.run_path(str(wf_path), run_name=module_name)

    items = None
    if "workflow" in globals_dict and callable(globals_dict["workflow"]):
        items = globals_dict["workflow"]()
    elif "STEPS" in globals_dict:
        items = globals_dict["STEPS"]

    if not isinstance(items, list) or not all(isinstance(i, (Step, Scope)) for i in items):
        raise TypeError(
            "Workflow must return/define a list of Step or Scope. "
            "Define workflow() -> list or STEPS = [...]."
        )
    return items


# ----------------------------------------------------------------------
# Execution primitives
# ----------------------------------------------------------------------

def _run_step(step: Step, console: Console) -> None:
    cwd = (Path(os.getcwd()) / (step.cwd or ".")).resolve()

    console.print_step(step.name)
    console.print_command(step.run, step.cwd)

    if not cwd.is_dir():
        raise StepSetupError(step=step.name, reason=f"cwd not found: {cwd}")

    # output is streamed, not captured: the tools' own logs are the CI log
    sys.stdout.flush()
    proc = subprocess.run(step.run, shell=True, cwd=str(cwd))

    if proc.returncode != 0:
        raise StepFailure(step=step.name, cmd=step.run, exit_code=proc.returncode)


def _run_items(items: List[Item], console: Console, executed: List[str]) -> None:
    for item in items:
        if isinstance(item, Scope):
            if not Path(item.path).is_dir():
                raise StepSetupError(
                    step=f"cd {item.path}",
                    reason=f"directory not found: {Path(item.path).resolve()}",
                )
            console.print_scope(item.path)
            with pushd(item.path):
                _run_items(list(item.steps), console, executed)
            console.print_debug(f"left {item.path}, back in {os.getcwd()}")
        else:
            executed.append(item.name)
            _run_step(item, console)


def check_tree(repo_root: str | Path, console: Console) -> None:
    """
    Fail unless the working tree matches the last commit.

    Raises:
        TreeDirty: tracked files were modified, or untracked files exist.
        StepFailure: git itself failed.
    """
    root = Path(repo_root)
    try:
        console.print_debug("checking for modified files")
        if has_modified_files(cwd=root):
            raise TreeDirty(kind="modified", message="Modified files", paths=modified_files(cwd=root))

        console.print_debug("checking for untracked files")
        lines = short_status(cwd=root)
        paths = status_paths(cwd=root) if lines else []
    except subprocess.CalledProcessError as e:
        cmd = " ".join(e.cmd) if isinstance(e.cmd, list) else str(e.cmd)
        raise StepFailure(step=cmd, cmd=cmd, exit_code=e.returncode) from e

    if lines:
        for line in lines:
            print(line, file=sys.stderr)
        raise TreeDirty(kind="untracked", message="Untracked files", paths=paths)


def _report(err: CIError, console: Console) -> None:
    if isinstance(err, StepFailure):
        console.print_failure(
            err.step,
            str(err),
            exit_code=err.exit_code,
            hint=tool_hint(err.cmd) if err.exit_code == EXIT_NOT_RUNNABLE else None,
        )
    elif isinstance(err, StepSetupError):
        console.print_failure(err.step, str(err))
    elif isinstance(err, TreeDirty):
        console.print_error(
            err.message,
            "The working tree changed while the gate ran.",
            details=err.paths,
            suggestion="Commit the changes, fix the step that produced them, or add the files to .gitignore.",
        )
    else:
        console.print_error("CI failed", str(err))


# ----------------------------------------------------------------------
# Public API
# ----------------------------------------------------------------------

def run_gate(
    items: List[Item],
    *,
    repo_root: str | Path = ".",
    console: Console | None = None,
    check_clean: bool = True,
) -> GateResult:
    """
    Run `items` in order from `repo_root` and stop on the first failure.

    When every step passed and `check_clean` is set, the working tree must
    have neither modified tracked files nor untracked files.
    """
    console = console or get_console()
    root = Path(repo_root).resolve()
    executed: List[str] = []

    try:
        with pushd(root):
            _run_items(items, console, executed)
        if check_clean:
            check_tree(root, console)
    except CIError as e:
        _report(e, console)
        return GateResult(
            outcome=RunOutcome.FAILED,
            exit_code=e.gate_exit_code,
            executed=executed,
            failed_step=getattr(e, "step", None),
            message=getattr(e, "message", str(e)),
        )

    console.print_success(SUCCESS_MARKER)
    return GateResult(outcome=RunOutcome.PASSED, exit_code=0, executed=executed)
