"""Top-level package for the CBT toolkit.

Provides subpackages:
- cbt_toolkit.parsing – quiz markup → ExamDefinition
- cbt_toolkit.ledger – attempt history and performance cache documents
- cbt_toolkit.analysis – mastery classification and adaptive selection
- cbt_toolkit.controller – end-to-end study workflow
"""


def _get_version() -> str:
    """Get version from pyproject.toml (dev) or importlib.metadata (installed)."""
    from pathlib import Path

    pyproject = Path(__file__).resolve().parent.parent.parent / "pyproject.toml"
    if pyproject.exists():
        try:
            for line in pyproject.read_text(encoding="utf-8").splitlines():
                if line.strip().startswith("version"):
                    # Parse: version = "0.3.0"
                    return line.split("=")[1].strip().strip('"').strip("'")
        except OSError:
            pass

    from importlib.metadata import PackageNotFoundError, version as pkg_version

    try:
        return pkg_version("cbt_toolkit")
    except PackageNotFoundError:
        return "0.0.0"


__version__ = _get_version()
__copyright__ = "Copyright 2026 The cbt_toolkit Authors. Licensed under the Polyform Noncommercial License 1.0.0"
__all__: list[str] = ["__version__"]
