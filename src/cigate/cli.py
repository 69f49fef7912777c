# cli.py
from __future__ import annotations

import subprocess
import sys
from pathlib import Path

import click

from cigate.dsl import iter_steps
from cigate.git_facts.git import repo_root as git_repo_root
from cigate.pipeline import workflow as default_workflow
from cigate.runner import load_workflow, run_gate
from cigate.ui.console import Console, get_console, set_console


def resolve_workflow(workflow_arg: str | None):
    """
    Return (label, items) for the workflow to run.

    Without an explicit workflow file the built-in CI pipeline is used.
    """
    console = get_console()

    if not workflow_arg:
        return "built-in", default_workflow()

    workflow_path = Path(workflow_arg)
    if not workflow_path.exists() and workflow_path.suffix != ".py":
        workflow_path = Path(str(workflow_path) + ".py")
    if not workflow_path.exists():
        console.print_error(
            "Workflow file not found",
            f"Could not find workflow file: {workflow_arg}",
            suggestion="Create a workflow file or run without --workflow to use the built-in pipeline.",
        )
        sys.exit(1)

    return workflow_path.name, load_workflow(workflow_path)


@click.group()
@click.option(
    "--debug",
    is_flag=True,
    default=False,
    envvar="CIGATE_DEBUG",
    help="Enable debug mode (show stack traces and detailed output)",
)
@click.pass_context
def cli(ctx, debug):
    """cigate: sequential, fail-fast CI gate."""
    console = Console(debug=debug)
    set_console(console)
    ctx.ensure_object(dict)
    ctx.obj["debug"] = debug


@cli.command()
@click.option(
    "--workflow",
    default=None,
    envvar="CIGATE_WORKFLOW",
    help="Workflow file path (defaults to the built-in CI pipeline)",
)
@click.option(
    "--repo-root",
    default=".",
    show_default=True,
    type=click.Path(exists=True, file_okay=False),
    help="Repository root the steps run from",
)
@click.pass_context
def run(ctx, workflow, repo_root):
    """Run every step in order, then check the working tree is clean."""
    console = get_console()

    try:
        top = git_repo_root(cwd=repo_root)
    except (subprocess.CalledProcessError, FileNotFoundError):
        console.print_error(
            "Not a git repository",
            f"{Path(repo_root).resolve()} is not inside a git work tree.",
            suggestion="Run from a repository checkout or pass --repo-root <dir>.",
        )
        sys.exit(1)

    try:
        label, items = resolve_workflow(workflow)

        console.print_run_started(
            repository=top.name,
            workflow=label,
            step_count=sum(1 for _ in iter_steps(items)),
        )

        result = run_gate(items, repo_root=repo_root, console=console)
    except KeyboardInterrupt:
        console.print_info("\nInterrupted by user")
        sys.exit(130)
    except Exception as e:
        console.print_exception(e)
        sys.exit(1)

    sys.exit(result.exit_code)


@cli.command()
@click.option(
    "--workflow",
    default=None,
    envvar="CIGATE_WORKFLOW",
    help="Workflow file path (defaults to the built-in CI pipeline)",
)
def plan(workflow):
    """List the steps in execution order without running them."""
    console = get_console()

    try:
        label, items = resolve_workflow(workflow)
    except Exception as e:
        console.print_exception(e)
        sys.exit(1)

    console.print_info(f"Workflow: {label}")
    for index, (scope, step) in enumerate(iter_steps(items), start=1):
        console.print_plan_step(index, step.name, scope)


if __name__ == "__main__":
    cli()
