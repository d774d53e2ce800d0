"""Configuration and application setup for the demo WebAuthn server."""
from __future__ import annotations

import os
from typing import Optional

from flask import Flask, has_request_context, request

from webauthn_options import Configuration
from webauthn_options.server import DEFAULT_TIMEOUT

app = Flask(__name__)
app.secret_key = os.urandom(32)  # Used for session.
app.json.sort_keys = False  # Options keep their wire order.


def _env_int(name: str, default: int) -> int:
    """Return the named env var as a non-negative integer, or ``default``."""

    raw_value = os.environ.get(name)
    if raw_value is None:
        return default

    try:
        value = int(raw_value.strip())
    except ValueError:
        return default
    if value < 0:
        return default
    return value


_DEFAULT_RP_NAME = os.environ.get("FIDO_SERVER_RP_NAME", "Demo server")
_DEFAULT_RP_ID = os.environ.get("FIDO_SERVER_RP_ID")
app.config.setdefault("FIDO_SERVER_RP_NAME", _DEFAULT_RP_NAME)
app.config.setdefault("FIDO_SERVER_RP_ID", _DEFAULT_RP_ID)
app.config.setdefault(
    "FIDO_SERVER_TIMEOUT", _env_int("FIDO_SERVER_TIMEOUT", DEFAULT_TIMEOUT)
)
app.config.setdefault(
    "FIDO_SERVER_ATTESTATION", os.environ.get("FIDO_SERVER_ATTESTATION", "none")
)


def determine_rp_id(explicit_id: Optional[str] = None) -> str:
    """Resolve the relying party identifier for the current request."""

    if explicit_id:
        return explicit_id

    configured_id = app.config.get("FIDO_SERVER_RP_ID")
    if isinstance(configured_id, str) and configured_id.strip():
        return configured_id.strip()

    if has_request_context():
        host = request.host.split(":", 1)[0].strip().lower()
        if not host:
            return "localhost"
        if host in {"127.0.0.1", "::1"}:
            return "localhost"
        return host

    return "localhost"


def build_configuration(
    *,
    rp_id: Optional[str] = None,
    rp_name: Optional[str] = None,
) -> Configuration:
    """Create the :class:`Configuration` snapshot for the active request."""

    rp_name_value = rp_name or app.config.get("FIDO_SERVER_RP_NAME") or "Demo server"

    return Configuration(
        domain=determine_rp_id(rp_id),
        name=rp_name_value,
        timeout_millis=app.config.get("FIDO_SERVER_TIMEOUT", DEFAULT_TIMEOUT),
    )


__all__ = [
    "app",
    "build_configuration",
    "determine_rp_id",
]
