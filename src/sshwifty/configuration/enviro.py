"""Environment variable configuration loader.

Builds a Configuration entirely from SSHWIFTY_* environment variables.

Any variable may be redirected to another one by setting its value to
``SSHWIFTY_ENV_RENAMED:<OTHER_NAME>``. Only one hop is followed.

Numeric variables are parsed best-effort: absent or malformed values
become 0. JSON variables (hooks and presets) must be well-formed when set.

Example:
    >>> from sshwifty.configuration import enviro
    >>> load = enviro({"SSHWIFTY_LISTENPORT": "8182"})
    >>> source, config = load()
    >>> config.servers[0].listen_port
    8182
"""

import logging
import os
from datetime import timedelta
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple

from pydantic import TypeAdapter, ValidationError

from sshwifty.configuration.builders import (
    build_common,
    build_server,
    concretize_presets,
)
from sshwifty.configuration.loader import ConfigLoadError, Loader
from sshwifty.configuration.schema import (
    CommonFields,
    Configuration,
    HookType,
    Hooks,
    Preset,
    Server,
    ServerFields,
)

logger = logging.getLogger(__name__)

ENVIRO_TYPE_NAME = "Environment Variable"

RENAMED_PREFIX = "SSHWIFTY_ENV_RENAMED:"

_string_array = TypeAdapter(List[str])
_preset_array = TypeAdapter(Optional[List[Dict[str, Any]]])

CommonBuilder = Callable[[CommonFields], CommonFields]
ServerBuilder = Callable[[ServerFields], Server]
Concretizer = Callable[[List[Dict[str, Any]]], List[Preset]]


def parse_env(name: str, environ: Optional[Mapping[str, str]] = None) -> str:
    """Read an environment variable, following one level of indirection.

    Args:
        name: Variable name.
        environ: Variables to read from (default: os.environ).

    Returns:
        The value, or "" if the variable is not set.

    Examples:
        >>> parse_env("A", {"A": "SSHWIFTY_ENV_RENAMED:B", "B": "b"})
        'b'
        >>> parse_env("MISSING", {})
        ''
    """
    environ = os.environ if environ is None else environ
    value = environ.get(name, "")
    if not value.startswith(RENAMED_PREFIX):
        return value
    return environ.get(value[len(RENAMED_PREFIX):], "")


def parse_uint(text: str, bits: int = 32) -> int:
    """Parse an unsigned decimal integer of the given bit width.

    Anything that isn't a plain ASCII decimal in range yields 0.

    Examples:
        >>> parse_uint("8080", 16)
        8080
        >>> parse_uint("70000", 16)
        0
        >>> parse_uint("-1")
        0
    """
    if not text.isascii() or not text.isdigit():
        return 0
    # Longer than the largest value of the width, also keeps int() within
    # its digit limit
    digits = text.lstrip("0") or "0"
    if len(digits) > len(str(1 << bits)):
        return 0
    value = int(digits)
    if value >= 1 << bits:
        return 0
    return value


def parse_json_string_array(text: str) -> List[str]:
    """Decode a JSON array of strings.

    Raises:
        pydantic.ValidationError: If text is not a JSON array of strings.
    """
    return _string_array.validate_json(text, strict=True)


def parse_presets(text: str) -> List[Dict[str, Any]]:
    """Decode a JSON array of raw preset records.

    Surrounding whitespace is ignored. Blank text and JSON null yield no
    presets.

    Raises:
        pydantic.ValidationError: If text is not a JSON array of objects.
    """
    text = text.strip()
    if not text:
        return []
    return _preset_array.validate_json(text) or []


def build_hooks(environ: Optional[Mapping[str, str]] = None) -> Hooks:
    """Assemble the hook table from the environment.

    Only hooks whose variable is set are present. Each present hook holds
    a single command list.

    Raises:
        ConfigLoadError: If a hook variable is not a JSON string array.
    """
    hooks: Hooks = {}

    before_connecting = parse_env("SSHWIFTY_HOOK_BEFORE_CONNECTING", environ)
    if before_connecting:
        try:
            command = parse_json_string_array(before_connecting)
        except ValidationError as e:
            raise ConfigLoadError(
                f"Unable to parse SSHWIFTY_HOOK_BEFORE_CONNECTING: {e}"
            ) from e
        hooks[HookType.BEFORE_CONNECTING] = [command]

    return hooks


def enviro(
    environ: Optional[Mapping[str, str]] = None,
    build_common: CommonBuilder = build_common,
    build_server: ServerBuilder = build_server,
    concretize: Optional[Concretizer] = None,
) -> Loader:
    """Create an environment variable based configuration loader.

    Args:
        environ: Variables to read from (default: os.environ at load time).
        build_common: Validates the common field bag.
        build_server: Turns the server field bag into a Server.
        concretize: Resolves raw preset records (default: concretize_presets
            against the same environment).

    Returns:
        A loader returning ``(ENVIRO_TYPE_NAME, Configuration)``.
    """

    def load(log: Optional[logging.Logger] = None) -> Tuple[str, Configuration]:
        log = log or logger
        log.info("Loading configuration from environment variables ...")

        env = os.environ if environ is None else environ

        def get(name: str) -> str:
            return parse_env(name, env)

        dial_timeout = parse_uint(get("SSHWIFTY_DIALTIMEOUT"), 32)
        hook_timeout = parse_uint(get("SSHWIFTY_HOOKTIMEOUT"), 32)

        hooks = build_hooks(env)

        # The bag is left unvalidated, validation belongs to build_common
        try:
            common = build_common(
                CommonFields.model_construct(
                    host_name=get("SSHWIFTY_HOSTNAME"),
                    shared_key=get("SSHWIFTY_SHAREDKEY"),
                    dial_timeout=dial_timeout,
                    socks5=get("SSHWIFTY_SOCKS5"),
                    socks5_user=get("SSHWIFTY_SOCKS5_USER"),
                    socks5_password=get("SSHWIFTY_SOCKS5_PASSWORD"),
                    hooks=hooks,
                    hook_timeout=hook_timeout,
                    only_allow_preset_remotes=len(
                        get("SSHWIFTY_ONLYALLOWPRESETREMOTES")
                    ) > 0,
                )
            )
        except Exception as e:
            raise ConfigLoadError(f"failed to build the configuration: {e}") from e

        server = build_server(
            ServerFields(
                listen_interface=get("SSHWIFTY_LISTENINTERFACE"),
                listen_port=parse_uint(get("SSHWIFTY_LISTENPORT"), 16),
                initial_timeout=parse_uint(get("SSHWIFTY_INITIALTIMEOUT"), 32),
                read_timeout=parse_uint(get("SSHWIFTY_READTIMEOUT"), 32),
                write_timeout=parse_uint(get("SSHWIFTY_WRITETIMEOUT"), 32),
                heartbeat_timeout=parse_uint(get("SSHWIFTY_HEARTBEATTIMEOUT"), 32),
                read_delay=parse_uint(get("SSHWIFTY_READDELAY"), 32),
                # Historical name, missing the D of DELAY
                write_delay=parse_uint(get("SSHWIFTY_WRITEELAY"), 32),
                tls_certificate_file=get("SSHWIFTY_TLSCERTIFICATEFILE"),
                tls_certificate_key_file=get("SSHWIFTY_TLSCERTIFICATEKEYFILE"),
                server_message=get("SSHWIFTY_SERVERMESSAGE"),
            )
        )

        try:
            raw_presets = parse_presets(get("SSHWIFTY_PRESETS"))
        except ValidationError as e:
            raise ConfigLoadError(f'invalid "SSHWIFTY_PRESETS": {e}') from e

        try:
            if concretize is None:
                presets = concretize_presets(raw_presets, env)
            else:
                presets = concretize(raw_presets)
        except Exception as e:
            raise ConfigLoadError(f"unable to parse Preset data: {e}") from e

        return ENVIRO_TYPE_NAME, Configuration(
            host_name=common.host_name,
            shared_key=common.shared_key,
            dial_timeout=timedelta(seconds=common.dial_timeout),
            socks5=common.socks5,
            socks5_user=common.socks5_user,
            socks5_password=common.socks5_password,
            hooks=common.hooks,
            hook_timeout=timedelta(seconds=common.hook_timeout),
            servers=(server,),
            presets=tuple(presets),
            only_allow_preset_remotes=common.only_allow_preset_remotes,
        )

    return load
