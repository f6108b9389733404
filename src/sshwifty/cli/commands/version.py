"""Version command for sshwifty-config CLI."""

import platform
from importlib.metadata import PackageNotFoundError, version
from typing import List, Tuple

from sshwifty.configuration import ENVIRO_TYPE_NAME, RENAMED_PREFIX, HookType

# Distributions the configuration loader depends on
RUNTIME_DEPENDENCIES = ("pydantic", "pyyaml")


def _installed(dist: str) -> str:
    try:
        return version(dist)
    except PackageNotFoundError:
        return "missing"


def version_lines() -> List[Tuple[str, str]]:
    """Return (label, value) pairs describing this installation."""
    lines = [
        ("sshwifty", _installed("sshwifty")),
        ("python", platform.python_version()),
    ]
    lines.extend((dist, _installed(dist)) for dist in RUNTIME_DEPENDENCIES)
    lines.append(("source", ENVIRO_TYPE_NAME))
    lines.append(("indirection", f"{RENAMED_PREFIX}<NAME>"))
    lines.append(("hooks", ", ".join(h.value for h in HookType)))
    return lines


def cmd_version() -> int:
    """Display version and loader information.

    Returns:
        Exit code (always 0).
    """
    lines = version_lines()
    width = max(len(label) for label, _ in lines)
    for label, value in lines:
        print(f"{label.ljust(width)}  {value}")
    return 0
