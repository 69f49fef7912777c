from .dsl import sh, x, within, wf
from .model import GateResult, RunOutcome, Scope, Step
from .runner import run_gate, load_workflow

__all__ = ["sh", "x", "within", "wf", "run_gate", "load_workflow", "GateResult", "RunOutcome", "Scope", "Step"]
