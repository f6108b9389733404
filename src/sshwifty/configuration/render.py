"""Human-readable rendering of a loaded Configuration.

Secrets are masked so the output can be shared in bug reports.
"""

from typing import Any, Dict

import yaml

from sshwifty.configuration.schema import Configuration

REDACTED = "******"

SECRET_FIELDS = ("shared_key", "socks5_password")


def redact(config: Configuration) -> Dict[str, Any]:
    """Return a JSON-compatible dict of config with secrets masked."""
    data = config.to_dict()
    for name in SECRET_FIELDS:
        if data.get(name):
            data[name] = REDACTED
    return data


def dump_yaml(config: Configuration) -> str:
    """Render the redacted configuration as YAML."""
    return yaml.safe_dump(redact(config), sort_keys=False, allow_unicode=True)
