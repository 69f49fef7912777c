# cigate_workflow.py
# Gate for cigate itself: cigate run --workflow cigate_workflow.py
from __future__ import annotations

from cigate import sh, wf


def workflow():
    return wf(
        sh("Install package", "pip install -e '.[test]'"),
        sh("Run pytest", "pytest -q -p no:cacheprovider"),
    )
