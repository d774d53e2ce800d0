"""Assembly of credential creation options for a registration ceremony."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Mapping, Optional, Sequence, Union

from fido2.webauthn import AttestationConveyancePreference

from .cose import preferred_algorithms
from .errors import ValidationError
from .webauthn import (
    STATUS_OK,
    AuthenticatorSelectionCriteria,
    CredentialCreateOptions,
    CredentialDescriptor,
    RelyingParty,
    User,
)

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 60000


def _select_first(mapping: Mapping[str, Any], keys: Sequence[str]) -> Any:
    for key in keys:
        if key in mapping:
            return mapping[key]
    return None


@dataclass(frozen=True)
class Configuration:
    """Snapshot of the relying party settings used to build options.

    :param domain: The RP ID.
    :param name: The RP display name.
    :param timeout_millis: Ceremony timeout hint for the client.
    """

    domain: str
    name: str
    timeout_millis: int = DEFAULT_TIMEOUT

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> Configuration:
        timeout = _select_first(data, ("timeoutMillis", "timeout_millis", "timeout"))
        return cls(
            domain=data.get("domain"),  # type: ignore[arg-type]
            name=data.get("name"),  # type: ignore[arg-type]
            timeout_millis=DEFAULT_TIMEOUT if timeout is None else timeout,
        )


def _validate_config(config: Any) -> Configuration:
    if isinstance(config, Mapping):
        config = Configuration.from_mapping(config)
    elif not isinstance(config, Configuration):
        raise ValidationError(
            "config", f"Unsupported configuration type: {type(config).__name__}"
        )

    if not isinstance(config.domain, str) or not config.domain:
        raise ValidationError("domain", "Relying party domain must not be empty")
    if not isinstance(config.name, str) or not config.name:
        raise ValidationError("name", "Relying party name must not be empty")
    timeout = config.timeout_millis
    if isinstance(timeout, bool) or not isinstance(timeout, int) or timeout < 0:
        raise ValidationError("timeout", "Timeout must be a non-negative integer")
    return config


def create_options(
    challenge: bytes,
    config: Union[Configuration, Mapping[str, Any]],
    authenticator_selection: Optional[
        Union[AuthenticatorSelectionCriteria, Mapping[str, Any]]
    ] = None,
    exclude_credentials: Optional[
        Sequence[Union[CredentialDescriptor, Mapping[str, Any]]]
    ] = None,
    *,
    user: Optional[Union[User, Mapping[str, Any]]] = None,
    attestation: Union[
        AttestationConveyancePreference, str
    ] = AttestationConveyancePreference.NONE,
) -> CredentialCreateOptions:
    """Build the options for a new registration ceremony.

    Nothing is generated here: the challenge must come from a secure random
    source owned by the caller, who is also responsible for storing it for
    verification of the response. The same inputs always produce the same
    options.

    Mappings given for the user, the selection criteria or excluded
    credentials are read in their wire form (binary members as base64url).

    :param challenge: Random challenge bytes, unique to this ceremony.
    :param config: The relying party configuration.
    :param authenticator_selection: Selection criteria, passed through as is.
    :param exclude_credentials: Credentials already registered for the user.
        None is the same as an empty sequence.
    :param user: The user entity, omitted from the options when None.
    :param attestation: Attestation conveyance preference.
    :return: The populated options, with status "ok".
    """
    if not isinstance(challenge, (bytes, bytearray, memoryview)):
        raise ValidationError(
            "challenge", f"Challenge must be bytes, got {type(challenge).__name__}"
        )
    challenge = bytes(challenge)
    if not challenge:
        raise ValidationError("challenge", "Challenge must not be empty")

    config = _validate_config(config)

    options = CredentialCreateOptions(
        status=STATUS_OK,
        error_message="",
        rp=RelyingParty.create(config.domain, config.name),
        user=user,
        challenge=challenge,
        pub_key_cred_params=preferred_algorithms(),
        timeout=config.timeout_millis,
        attestation=attestation,
        authenticator_selection=authenticator_selection,
        exclude_credentials=exclude_credentials,
    )
    logger.debug(
        "Built credential creation options for RP %s (%d excluded credentials)",
        options.rp.id,
        len(options.exclude_credentials),
    )
    return options
