# pipeline.py
# The continuous integration sequence, in the order it must run.
from __future__ import annotations

from typing import List

from .dsl import wf, within, x
from .git_facts.git import submodule_init_cmd
from .model import Item

OPENSK_SUBMODULE = "third_party/OpenSK"
OPENSK_EXAMPLE_DIR = "examples/rust/opensk"


def workflow() -> List[Item]:
    return wf(
        x("./scripts/ci-copyright.sh"),
        x("cargo xtask textreview"),
        x("./scripts/wrapper.sh mdl -g -s markdownlint.rb ."),
        x("./scripts/ci-taplo.sh"),
        # the applet builds below compile code from this checkout
        x(submodule_init_cmd(OPENSK_SUBMODULE)),
        x("cargo xtask applet rust opensk"),
        x("cargo xtask --release applet rust opensk"),
        within(
            OPENSK_EXAMPLE_DIR,
            x("cargo test --features=test"),
            x("cargo fmt -- --check"),
            # TODO: add clippy for the wasm32 lib target and the test feature once they build warning-free
        ),
    )
