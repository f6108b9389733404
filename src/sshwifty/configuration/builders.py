"""Default builders turning flat field bags into validated values.

Configuration sources fill in CommonFields, ServerFields and raw preset
records, then hand them to these builders. The environment loader takes
the builders as injectable callables, so any of them can be replaced.
"""

import logging
import os
from datetime import timedelta
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

from pydantic import ValidationError

from sshwifty.configuration.schema import (
    CommonFields,
    Preset,
    RawPreset,
    Server,
    ServerFields,
)

logger = logging.getLogger(__name__)


def build_common(fields: CommonFields) -> CommonFields:
    """Validate the common field bag.

    Numeric values are passed through unchanged.

    Raises:
        pydantic.ValidationError: If a cross-field rule is violated.
    """
    return CommonFields.model_validate(fields.model_dump())


def build_server(fields: ServerFields) -> Server:
    """Convert a server field bag into a Server.

    Timeouts are given in seconds, delays in milliseconds.
    """
    return Server(
        listen_interface=fields.listen_interface,
        listen_port=fields.listen_port,
        initial_timeout=timedelta(seconds=fields.initial_timeout),
        read_timeout=timedelta(seconds=fields.read_timeout),
        write_timeout=timedelta(seconds=fields.write_timeout),
        heartbeat_timeout=timedelta(seconds=fields.heartbeat_timeout),
        read_delay=timedelta(milliseconds=fields.read_delay),
        write_delay=timedelta(milliseconds=fields.write_delay),
        tls_certificate_file=fields.tls_certificate_file,
        tls_certificate_key_file=fields.tls_certificate_key_file,
        server_message=fields.server_message,
    )


def parse_meta_value(value: str, environ: Optional[Mapping[str, str]] = None) -> str:
    """Resolve a preset meta value that may carry a scheme prefix.

    Supports:
    - literal://text     - text, verbatim
    - environment://NAME - value of environment variable NAME
    - file://path        - file contents, surrounding whitespace trimmed

    Values without a recognized scheme are returned unchanged.

    Raises:
        OSError: If a file:// value cannot be read.

    Examples:
        >>> parse_meta_value("literal://file://x")
        'file://x'
        >>> parse_meta_value("environment://USER", {"USER": "root"})
        'root'
    """
    scheme, sep, rest = value.partition("://")
    if not sep:
        return value

    scheme = scheme.lower()
    if scheme == "literal":
        return rest
    elif scheme == "environment":
        environ = os.environ if environ is None else environ
        return environ.get(rest, "")
    elif scheme == "file":
        return Path(rest).read_text(encoding="utf-8").strip()
    else:
        return value


def concretize_presets(
    raw: List[Dict[str, Any]],
    environ: Optional[Mapping[str, str]] = None,
) -> List[Preset]:
    """Resolve raw preset records into Presets, keeping their order.

    Args:
        raw: Decoded preset records.
        environ: Environment used by environment:// meta values.

    Returns:
        List of concretized presets.

    Raises:
        ValueError: If a record is invalid or a meta value can't be resolved.
    """
    presets: List[Preset] = []

    for index, record in enumerate(raw):
        try:
            spec = RawPreset.model_validate(record)
        except ValidationError as e:
            raise ValueError(f"invalid preset #{index}: {e}") from e

        meta: Dict[str, str] = {}
        for key, value in spec.meta.items():
            try:
                meta[key] = parse_meta_value(value, environ)
            except OSError as e:
                raise ValueError(
                    f"unable to parse meta {key!r} of preset {spec.title!r}: {e}"
                ) from e

        presets.append(
            Preset(
                title=spec.title,
                type=spec.type.strip(),
                host=spec.host,
                tab_color=spec.tab_color,
                meta=meta,
            )
        )

    logger.debug(f"Concretized {len(presets)} preset(s)")
    return presets
