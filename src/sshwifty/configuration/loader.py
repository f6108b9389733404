"""Generic configuration loader contract.

A loader is a callable taking an optional logger and returning the
human-readable name of its source together with the loaded
Configuration. Hard failures raise ConfigLoadError; no partial
configuration is ever returned.

Example:
    >>> from sshwifty.configuration import enviro, redundant
    >>> source, config = redundant(enviro())()
    >>> print(f"Loaded from {source}: {len(config.servers)} server(s)")
"""

import logging
from typing import Callable, List, Optional, Tuple

from sshwifty.configuration.schema import Configuration

logger = logging.getLogger(__name__)


class ConfigLoadError(Exception):
    """Error loading or validating configuration."""

    pass


Loader = Callable[[Optional[logging.Logger]], Tuple[str, Configuration]]


def redundant(*loaders: Loader) -> Loader:
    """Create a loader that tries each of the given loaders in order.

    The first loader that succeeds wins. Failures are logged and the next
    loader is tried.

    Args:
        *loaders: Loaders to try, in order of preference.

    Returns:
        A loader returning the result of the first successful loader.

    Raises:
        ConfigLoadError: (from the returned loader) if no loader is given
            or every loader failed.
    """

    def load(log: Optional[logging.Logger] = None) -> Tuple[str, Configuration]:
        log = log or logger

        if not loaders:
            raise ConfigLoadError("No configuration loader available")

        failures: List[str] = []
        for candidate in loaders:
            try:
                return candidate(log)
            except ConfigLoadError as e:
                log.warning(f"Unable to load configuration: {e}")
                failures.append(str(e))

        raise ConfigLoadError(
            "Unable to load configuration from any source: " + "; ".join(failures)
        )

    return load
