"""Pydantic models for the sshwifty runtime configuration.

Defines the final immutable configuration values along with the flat
field bags that configuration sources fill in before the values are
built and validated.
"""

from datetime import timedelta
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Tuple

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_serializer,
    field_validator,
    model_validator,
)


class HookType(str, Enum):
    """Lifecycle points at which external commands may be executed."""

    BEFORE_CONNECTING = "before_connecting"


# One hook command is an argv-style list of strings
HookCommand = List[str]

Hooks = Dict[HookType, List[HookCommand]]

# Read-only hook table of a built Configuration
HookTable = Mapping[HookType, Tuple[Tuple[str, ...], ...]]


class Server(BaseModel):
    """A listening server definition.

    Attributes:
        listen_interface: Network interface/address to listen on.
        listen_port: Port to listen on.
        initial_timeout: Timeout of the initial handshake.
        read_timeout: Read timeout of established connections.
        write_timeout: Write timeout of established connections.
        heartbeat_timeout: Interval between heartbeats.
        read_delay: Delay inserted before each read.
        write_delay: Delay inserted before each write.
        tls_certificate_file: Path to the TLS certificate file.
        tls_certificate_key_file: Path to the TLS certificate key file.
        server_message: Message shown to the operator's users.
    """

    model_config = ConfigDict(frozen=True)

    listen_interface: str = ""
    listen_port: int = Field(default=0, ge=0, le=65535)
    initial_timeout: timedelta = timedelta(0)
    read_timeout: timedelta = timedelta(0)
    write_timeout: timedelta = timedelta(0)
    heartbeat_timeout: timedelta = timedelta(0)
    read_delay: timedelta = timedelta(0)
    write_delay: timedelta = timedelta(0)
    tls_certificate_file: str = ""
    tls_certificate_key_file: str = ""
    server_message: str = ""

    def is_tls(self) -> bool:
        """Whether both TLS certificate and key are configured."""
        return bool(self.tls_certificate_file) and bool(self.tls_certificate_key_file)

    def listen_address(self) -> str:
        """Return the ``interface:port`` address of the server."""
        iface = self.listen_interface
        if ":" in iface and not iface.startswith("["):
            iface = f"[{iface}]"
        return f"{iface}:{self.listen_port}"


class Preset(BaseModel):
    """A concretized remote-connection preset."""

    model_config = ConfigDict(frozen=True)

    title: str
    type: str = ""
    host: str = ""
    tab_color: str = ""
    meta: Dict[str, str] = Field(default_factory=dict)


class RawPreset(BaseModel):
    """Schema of an unconcretized preset record.

    Unknown keys are ignored. Meta values are still unparsed and may carry
    a ``scheme://`` prefix.
    """

    model_config = ConfigDict(extra="ignore")

    title: str
    type: str = ""
    host: str = ""
    tab_color: str = ""
    meta: Dict[str, str] = Field(default_factory=dict)

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: str) -> str:
        """Reject blank titles."""
        if not v.strip():
            raise ValueError("Preset title must not be empty")
        return v

    @field_validator("tab_color")
    @classmethod
    def validate_tab_color(cls, v: str) -> str:
        """Normalize and validate a hex tab color."""
        v = v.strip().lstrip("#")
        if not v:
            return ""
        if len(v) != 6 or any(c not in "0123456789abcdefABCDEF" for c in v):
            raise ValueError(f"Invalid tab color: {v!r}")
        return v.lower()


class CommonFields(BaseModel):
    """Flat bag of the fields shared by every configuration source."""

    model_config = ConfigDict(frozen=True)

    host_name: str = ""
    shared_key: str = ""
    dial_timeout: int = Field(default=0, ge=0)
    socks5: str = ""
    socks5_user: str = ""
    socks5_password: str = ""
    hooks: Hooks = Field(default_factory=dict)
    hook_timeout: int = Field(default=0, ge=0)
    only_allow_preset_remotes: bool = False

    @field_validator("socks5")
    @classmethod
    def validate_socks5(cls, v: str) -> str:
        """Validate that a SOCKS5 address is ``host:port``."""
        if not v:
            return v
        host, sep, port = v.rpartition(":")
        if not sep or not host or not port.isdigit() or int(port) > 65535:
            raise ValueError(f"Invalid SOCKS5 address {v!r}, expecting host:port")
        return v

    @model_validator(mode="after")
    def validate_socks5_credentials(self) -> "CommonFields":
        """Validate that SOCKS5 credentials come with an address."""
        if (self.socks5_user or self.socks5_password) and not self.socks5:
            raise ValueError("SOCKS5 credentials are set but SOCKS5 address is not")
        return self


class ServerFields(BaseModel):
    """Flat bag of a single server's fields, timings as plain integers."""

    listen_interface: str = ""
    listen_port: int = Field(default=0, ge=0, le=65535)
    initial_timeout: int = Field(default=0, ge=0)
    read_timeout: int = Field(default=0, ge=0)
    write_timeout: int = Field(default=0, ge=0)
    heartbeat_timeout: int = Field(default=0, ge=0)
    read_delay: int = Field(default=0, ge=0)
    write_delay: int = Field(default=0, ge=0)
    tls_certificate_file: str = ""
    tls_certificate_key_file: str = ""
    server_message: str = ""


class Configuration(BaseModel):
    """The final, immutable runtime configuration.

    Attributes:
        host_name: Host name the server is reachable at.
        shared_key: Shared secret required from clients.
        dial_timeout: Timeout of outbound dials.
        socks5: SOCKS5 proxy address, empty when not used.
        socks5_user: SOCKS5 user name.
        socks5_password: SOCKS5 password.
        hooks: Command lists per hook type. A missing key means no commands.
        hook_timeout: Timeout of hook execution.
        servers: Listening servers, at least one.
        presets: Concretized presets.
        only_allow_preset_remotes: Restrict connections to preset remotes.
    """

    model_config = ConfigDict(frozen=True)

    host_name: str = ""
    shared_key: str = ""
    dial_timeout: timedelta = timedelta(0)
    socks5: str = ""
    socks5_user: str = ""
    socks5_password: str = ""
    hooks: HookTable = Field(default_factory=dict, validate_default=True)
    hook_timeout: timedelta = timedelta(0)
    servers: Tuple[Server, ...] = Field(min_length=1)
    presets: Tuple[Preset, ...] = ()
    only_allow_preset_remotes: bool = False

    @field_validator("hooks")
    @classmethod
    def freeze_hooks(cls, v: HookTable) -> HookTable:
        """Wrap the hook table in a read-only mapping."""
        return MappingProxyType(dict(v))

    @field_serializer("hooks")
    def serialize_hooks(self, hooks: HookTable) -> Dict[str, List[List[str]]]:
        return {
            hook_type.value: [list(command) for command in commands]
            for hook_type, commands in hooks.items()
        }

    def hook_commands(self, hook_type: HookType) -> Tuple[Tuple[str, ...], ...]:
        """Return the command lists of a hook, empty when none are set."""
        return self.hooks.get(hook_type, ())

    def to_dict(self) -> Dict[str, Any]:
        """Return a JSON-compatible dict of the configuration."""
        return self.model_dump(mode="json")

