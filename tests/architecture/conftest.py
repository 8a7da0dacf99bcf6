"""Fixtures describing the worktrace package for pytestarch rules."""

from pathlib import Path

import pytest
from pytestarch import (
    EvaluableArchitecture,
    LayeredArchitecture,
    get_evaluable_architecture,
)

SRC_DIR = Path(__file__).resolve().parents[2] / "src"
PACKAGE = "worktrace"


@pytest.fixture(scope="session")
def evaluable() -> EvaluableArchitecture:
    """Import graph of the installed-from-source worktrace package."""
    return get_evaluable_architecture(str(SRC_DIR), str(SRC_DIR / PACKAGE))


@pytest.fixture(scope="session")
def layers() -> LayeredArchitecture:
    """Result model, tracking helpers, and adapters as named layers.

    Module names are rooted at the repository, hence the 'src.' prefix.
    """
    architecture = LayeredArchitecture()
    for layer in ("domain", "application", "infrastructure"):
        architecture = architecture.layer(layer).containing_modules(
            [f"src.{PACKAGE}.{layer}"]
        )
    return architecture
