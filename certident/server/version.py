"""Build and runtime version information."""

from __future__ import annotations

import json
import platform
import sys
from dataclasses import dataclass

# Fallbacks used when the build does not stamp real values.
_GIT_VERSION = "unknown"
_GIT_COMMIT = "unknown"
_GIT_TREE_STATE = "unknown"
_BUILD_DATE = "unknown"

_LABELS = (
    ("git_version", "GitVersion"),
    ("git_commit", "GitCommit"),
    ("git_tree_state", "GitTreeState"),
    ("build_date", "BuildDate"),
    ("python_version", "PythonVersion"),
    ("compiler", "Compiler"),
    ("platform", "Platform"),
)


@dataclass(frozen=True)
class Info:
    """Version details of the running build."""

    git_version: str
    git_commit: str
    git_tree_state: str
    build_date: str
    python_version: str
    compiler: str
    platform: str

    def _pairs(self) -> list[tuple[str, str]]:
        return [(label, getattr(self, attr)) for attr, label in _LABELS]

    def __str__(self) -> str:
        pairs = self._pairs()
        width = max(len(label) + 1 for label, _ in pairs) + 2
        return "".join(f"{label + ':':<{width}}{value}\n" for label, value in pairs)

    def json_string(self) -> str:
        """Return the version details as indented JSON."""
        return json.dumps(dict(self._pairs()), indent=2)


def version_info() -> Info:
    """Collect the version details of this build and interpreter."""
    machine = platform.machine().lower() or "unknown"
    return Info(
        git_version=_GIT_VERSION,
        git_commit=_GIT_COMMIT,
        git_tree_state=_GIT_TREE_STATE,
        build_date=_BUILD_DATE,
        python_version=platform.python_version(),
        compiler=platform.python_implementation(),
        platform=f"{sys.platform}/{machine}",
    )