"""Configuration system for sshwifty.

Assembles the immutable runtime Configuration of the server. The
environment source reads SSHWIFTY_* variables and supports:
- One-hop indirection (SSHWIFTY_ENV_RENAMED:<OTHER_NAME>)
- Best-effort numeric parsing (malformed numbers become 0)
- JSON encoded hook command lists and presets
- Pydantic validation of the assembled values

Example usage:
    >>> from sshwifty.configuration import enviro, ConfigLoadError
    >>> try:
    ...     source, config = enviro()()
    ... except ConfigLoadError as e:
    ...     print(f"Refusing to start: {e}")
"""

from sshwifty.configuration.schema import (
    Configuration,
    CommonFields,
    HookCommand,
    HookType,
    Hooks,
    Preset,
    RawPreset,
    Server,
    ServerFields,
)
from sshwifty.configuration.loader import (
    ConfigLoadError,
    Loader,
    redundant,
)
from sshwifty.configuration.builders import (
    build_common,
    build_server,
    concretize_presets,
    parse_meta_value,
)
from sshwifty.configuration.enviro import (
    ENVIRO_TYPE_NAME,
    RENAMED_PREFIX,
    enviro,
    parse_env,
    parse_uint,
    parse_json_string_array,
    parse_presets,
    build_hooks,
)
from sshwifty.configuration.render import dump_yaml, redact

__all__ = [
    # Schema models
    "Configuration",
    "CommonFields",
    "HookCommand",
    "HookType",
    "Hooks",
    "Preset",
    "RawPreset",
    "Server",
    "ServerFields",
    # Loader
    "ConfigLoadError",
    "Loader",
    "redundant",
    # Builders
    "build_common",
    "build_server",
    "concretize_presets",
    "parse_meta_value",
    # Environment source
    "ENVIRO_TYPE_NAME",
    "RENAMED_PREFIX",
    "enviro",
    "parse_env",
    "parse_uint",
    "parse_json_string_array",
    "parse_presets",
    "build_hooks",
    # Rendering
    "dump_yaml",
    "redact",
]
