"""Check command for sshwifty-config CLI."""

import sys

from sshwifty.configuration import ConfigLoadError, HookType, enviro


def cmd_check() -> int:
    """Load the configuration from the environment and summarize it.

    Returns:
        Exit code (0 for success, 1 for load errors).
    """
    try:
        source, config = enviro()()
    except ConfigLoadError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 1

    print(f"Source: {source}")
    print(f"  Host name: {config.host_name or '(any)'}")
    print(f"  Shared key: {'set' if config.shared_key else 'not set'}")
    print(f"  Dial timeout: {config.dial_timeout.total_seconds():g}s")

    if config.socks5:
        print(f"  SOCKS5: {config.socks5}")

    for hook_type in HookType:
        commands = config.hook_commands(hook_type)
        if commands:
            print(f"  Hook {hook_type.value}: {len(commands)} command(s)")

    print(f"  Servers: {len(config.servers)}")
    for server in config.servers:
        tls_info = " (TLS)" if server.is_tls() else ""
        print(f"    - {server.listen_address()}{tls_info}")

    print(f"  Presets: {len(config.presets)}")
    for preset in config.presets:
        print(f"    - {preset.title} [{preset.type}] -> {preset.host}")

    if config.only_allow_preset_remotes:
        print("  Only preset remotes are allowed")

    print("\nConfiguration is valid.")
    return 0
