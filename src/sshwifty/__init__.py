"""sshwifty - Web SSH client server configuration.

Quick Start:
    >>> import sshwifty
    >>>
    >>> source, config = sshwifty.enviro()()
    >>> for server in config.servers:
    ...     print(f"Listening on {server.listen_address()}")
"""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("sshwifty")
except PackageNotFoundError:
    __version__ = "0.0.0.dev0"

from sshwifty.configuration import (
    Configuration,
    ConfigLoadError,
    HookType,
    Preset,
    Server,
    enviro,
    redundant,
)

__all__ = [
    "__version__",
    "Configuration",
    "ConfigLoadError",
    "HookType",
    "Preset",
    "Server",
    "enviro",
    "redundant",
]
