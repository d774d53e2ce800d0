"""Routes for the registration flow."""
from __future__ import annotations

import os
from typing import Any, Dict, List, Mapping, Optional

from flask import jsonify, request, session

from webauthn_options import (
    CredentialDescriptor,
    InvalidEntity,
    User,
    WebAuthnOptionsError,
    create_options,
    websafe_decode,
    websafe_encode,
)

from ..config import app, build_configuration

CHALLENGE_LENGTH = 32
USER_HANDLE_LENGTH = 32


def _error_envelope(message: str) -> Dict[str, Any]:
    return {"status": "error", "errorMessage": message}


def _parse_user(payload: Mapping[str, Any]) -> Optional[User]:
    username = payload.get("username")
    if username is None:
        return None

    display_name = payload.get("displayName", username)
    raw_user_id = payload.get("userId")
    if raw_user_id is None:
        # The handle is random, never derived from the user name.
        user_id = os.urandom(USER_HANDLE_LENGTH)
    else:
        user_id = websafe_decode(raw_user_id)

    return User.create(user_id, username, display_name)


def _parse_exclude_credentials(raw_credentials: Any) -> List[CredentialDescriptor]:
    if raw_credentials is None:
        return []
    if not isinstance(raw_credentials, list):
        raise InvalidEntity("excludeCredentials", "excludeCredentials must be a list")

    descriptors: List[CredentialDescriptor] = []
    for entry in raw_credentials:
        if isinstance(entry, str):
            descriptors.append(CredentialDescriptor.create(websafe_decode(entry)))
        elif isinstance(entry, Mapping):
            descriptors.append(
                CredentialDescriptor.create(
                    websafe_decode(entry.get("id", "")),
                    entry.get("transports"),
                )
            )
        else:
            raise InvalidEntity(
                "excludeCredentials", "Unsupported excludeCredentials entry"
            )
    return descriptors


@app.route("/api/register/begin", methods=["POST"])
def register_begin():
    payload = request.get_json(silent=True) or {}
    if not isinstance(payload, Mapping):
        payload = {}

    try:
        user = _parse_user(payload)
        options = create_options(
            os.urandom(CHALLENGE_LENGTH),
            build_configuration(),
            payload.get("authenticatorSelection"),
            _parse_exclude_credentials(payload.get("excludeCredentials")),
            user=user,
            attestation=payload.get("attestation")
            or app.config.get("FIDO_SERVER_ATTESTATION")
            or "none",
        )
    except WebAuthnOptionsError as exc:
        app.logger.warning("Rejected registration request: %s", exc)
        return jsonify(_error_envelope(str(exc))), 400

    session["challenge"] = websafe_encode(options.challenge)
    session["register_rp_id"] = options.rp.id
    if user is not None:
        session["user_id"] = websafe_encode(user.id)
    else:
        session.pop("user_id", None)

    app.logger.info(
        "Issued registration options for RP %s (%d excluded credentials)",
        options.rp.id,
        len(options.exclude_credentials),
    )
    return jsonify(options.to_dict())
