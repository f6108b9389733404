"""Show command for sshwifty-config CLI."""

import json
import sys

from sshwifty.configuration import ConfigLoadError, dump_yaml, enviro, redact


def cmd_show(output_format: str = "yaml") -> int:
    """Print the loaded configuration with secrets masked.

    Args:
        output_format: "yaml" or "json".

    Returns:
        Exit code (0 for success, 1 for load errors).
    """
    try:
        _, config = enviro()()
    except ConfigLoadError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 1

    if output_format == "json":
        print(json.dumps(redact(config), indent=2))
    else:
        print(dump_yaml(config), end="")
    return 0
