"""Entities of the PublicKeyCredentialCreationOptions dictionary."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional, Sequence, Tuple, Type, TypeVar

from fido2.cose import CoseKey
from fido2.webauthn import (
    AttestationConveyancePreference,
    AuthenticatorAttachment,
    AuthenticatorTransport,
    PublicKeyCredentialType,
    UserVerificationRequirement,
)

from .errors import InvalidEntity
from .utils import _WireDataObject, binary_field, wire_field

STATUS_OK = "ok"
STATUS_ERROR = "error"

ALLOWED_ATTESTATION = (
    AttestationConveyancePreference.NONE,
    AttestationConveyancePreference.INDIRECT,
    AttestationConveyancePreference.DIRECT,
)

E = TypeVar("E", bound=Enum)
W = TypeVar("W", bound=_WireDataObject)


def _set(obj: Any, name: str, value: Any) -> None:
    object.__setattr__(obj, name, value)


def _require_text(field: str, value: Any) -> str:
    if not isinstance(value, str) or not value:
        raise InvalidEntity(field, f"{field!r} must be a non-empty string")
    return value


def _require_bytes(field: str, value: Any) -> bytes:
    if not isinstance(value, (bytes, bytearray, memoryview)):
        raise InvalidEntity(
            field, f"{field!r} must be bytes, got {type(value).__name__}"
        )
    value = bytes(value)
    if not value:
        raise InvalidEntity(field, f"{field!r} must not be empty")
    return value


def _coerce_enum(enum_cls: Type[E], field: str, value: Any) -> E:
    # fido2 string enums map unknown values to None instead of raising.
    try:
        member = enum_cls(value)
    except ValueError:
        member = None
    if member is None:
        raise InvalidEntity(field, f"Unsupported {field!r} value: {value!r}")
    return member


def _coerce_entity(cls: Type[W], field: str, value: Any) -> W:
    if isinstance(value, cls):
        return value
    if isinstance(value, Mapping):
        return cls.from_dict(value)
    raise InvalidEntity(
        field, f"{field!r} must be a {cls.__name__}, got {type(value).__name__}"
    )


def _coerce_sequence(cls: Type[W], field: str, values: Any) -> Tuple[W, ...]:
    if isinstance(values, (str, bytes, bytearray, Mapping)) or not isinstance(
        values, Iterable
    ):
        raise InvalidEntity(field, f"{field!r} must be a sequence")
    return tuple(_coerce_entity(cls, field, v) for v in values)


@dataclass(frozen=True)
class RelyingParty(_WireDataObject):
    """The Relying Party the credential is scoped to.

    :param name: Human-readable name shown by the client.
    :param id: The RP ID, the effective registrable domain.
    """

    name: str = wire_field("name")
    id: str = wire_field("id")

    def __post_init__(self):
        _require_text("rp.name", self.name)
        _require_text("rp.id", self.id)

    @classmethod
    def create(cls, domain: str, name: str) -> RelyingParty:
        return cls(name=name, id=domain)


@dataclass(frozen=True)
class User(_WireDataObject):
    """The user account a credential is created for.

    The id is an opaque user handle. Authorization decisions key on it, never on
    name or display_name, and it must not be derived from either.
    """

    name: str = wire_field("name")
    id: bytes = binary_field("id")
    display_name: str = wire_field("displayName")

    def __post_init__(self):
        _require_text("user.name", self.name)
        _set(self, "id", _require_bytes("user.id", self.id))
        _require_text("user.displayName", self.display_name)

    @classmethod
    def create(cls, id: bytes, name: str, display_name: str) -> User:
        return cls(name=name, id=id, display_name=display_name)


@dataclass(frozen=True)
class PubKeyCredParam(_WireDataObject):
    """A credential type paired with a COSE algorithm identifier."""

    type: PublicKeyCredentialType = wire_field("type")
    alg: int = wire_field("alg")

    def __post_init__(self):
        _set(
            self,
            "type",
            _coerce_enum(PublicKeyCredentialType, "pubKeyCredParams.type", self.type),
        )
        if isinstance(self.alg, bool) or not isinstance(self.alg, int):
            raise InvalidEntity(
                "pubKeyCredParams.alg", "COSE algorithm must be an integer"
            )
        if self.alg not in CoseKey.supported_algorithms():
            raise InvalidEntity(
                "pubKeyCredParams.alg", f"Unsupported COSE algorithm: {self.alg}"
            )

    @classmethod
    def for_alg(cls, alg: int) -> PubKeyCredParam:
        return cls(type=PublicKeyCredentialType.PUBLIC_KEY, alg=alg)


@dataclass(frozen=True)
class CredentialDescriptor(_WireDataObject):
    """Identifies an existing credential, used for the exclusion list."""

    type: PublicKeyCredentialType = wire_field("type")
    id: bytes = binary_field("id")
    transports: Optional[Sequence[AuthenticatorTransport]] = wire_field(
        "transports", default=None
    )

    def __post_init__(self):
        _set(
            self,
            "type",
            _coerce_enum(
                PublicKeyCredentialType, "excludeCredentials.type", self.type
            ),
        )
        _set(self, "id", _require_bytes("excludeCredentials.id", self.id))
        if self.transports is not None:
            if isinstance(self.transports, (str, bytes)) or not isinstance(
                self.transports, Iterable
            ):
                raise InvalidEntity(
                    "excludeCredentials.transports", "transports must be a sequence"
                )
            _set(
                self,
                "transports",
                tuple(
                    _coerce_enum(
                        AuthenticatorTransport, "excludeCredentials.transports", t
                    )
                    for t in self.transports
                ),
            )

    @classmethod
    def create(
        cls, id: bytes, transports: Optional[Sequence[Any]] = None
    ) -> CredentialDescriptor:
        return cls(type=PublicKeyCredentialType.PUBLIC_KEY, id=id, transports=transports)


@dataclass(frozen=True)
class AuthenticatorSelectionCriteria(_WireDataObject):
    authenticator_attachment: Optional[AuthenticatorAttachment] = wire_field(
        "authenticatorAttachment", default=None
    )
    require_resident_key: bool = wire_field("requireResidentKey", default=False)
    user_verification: Optional[UserVerificationRequirement] = wire_field(
        "userVerification", default=None
    )

    def __post_init__(self):
        if self.authenticator_attachment is not None:
            _set(
                self,
                "authenticator_attachment",
                _coerce_enum(
                    AuthenticatorAttachment,
                    "authenticatorSelection.authenticatorAttachment",
                    self.authenticator_attachment,
                ),
            )
        if not isinstance(self.require_resident_key, bool):
            raise InvalidEntity(
                "authenticatorSelection.requireResidentKey",
                "requireResidentKey must be a boolean",
            )
        if self.user_verification is not None:
            _set(
                self,
                "user_verification",
                _coerce_enum(
                    UserVerificationRequirement,
                    "authenticatorSelection.userVerification",
                    self.user_verification,
                ),
            )


@dataclass(frozen=True)
class CredentialCreateOptions(_WireDataObject):
    """Options sent to the client to start a registration ceremony.

    Instances are immutable. Binary members (the challenge, the user handle and
    excluded credential ids) are held as bytes and only turned into base64url
    text by :meth:`to_dict`.

    The status and error_message members are the response envelope. A
    successfully built object always has status "ok"; "error" is reserved for
    ceremony failures reported by later steps.
    """

    status: str = wire_field("status")
    error_message: str = wire_field("errorMessage")
    rp: RelyingParty = wire_field("rp")
    user: Optional[User] = wire_field("user", required=False)
    challenge: bytes = binary_field("challenge")
    pub_key_cred_params: Sequence[PubKeyCredParam] = wire_field("pubKeyCredParams")
    timeout: int = wire_field("timeout")
    attestation: AttestationConveyancePreference = wire_field(
        "attestation", default=AttestationConveyancePreference.NONE
    )
    authenticator_selection: Optional[AuthenticatorSelectionCriteria] = wire_field(
        "authenticatorSelection", default=None
    )
    exclude_credentials: Sequence[CredentialDescriptor] = wire_field(
        "excludeCredentials", default=()
    )

    def __post_init__(self):
        if self.status not in (STATUS_OK, STATUS_ERROR):
            raise InvalidEntity("status", f"Unsupported status: {self.status!r}")
        if not isinstance(self.error_message, str):
            raise InvalidEntity("errorMessage", "errorMessage must be a string")

        _set(self, "rp", _coerce_entity(RelyingParty, "rp", self.rp))
        if self.user is not None:
            _set(self, "user", _coerce_entity(User, "user", self.user))
        _set(self, "challenge", _require_bytes("challenge", self.challenge))

        params = _coerce_sequence(
            PubKeyCredParam, "pubKeyCredParams", self.pub_key_cred_params
        )
        if not params:
            raise InvalidEntity("pubKeyCredParams", "pubKeyCredParams is empty")
        _set(self, "pub_key_cred_params", params)

        if (
            isinstance(self.timeout, bool)
            or not isinstance(self.timeout, int)
            or self.timeout < 0
        ):
            raise InvalidEntity("timeout", "timeout must be a non-negative integer")

        attestation = _coerce_enum(
            AttestationConveyancePreference, "attestation", self.attestation
        )
        if attestation not in ALLOWED_ATTESTATION:
            raise InvalidEntity(
                "attestation", f"Unsupported attestation: {attestation.value!r}"
            )
        _set(self, "attestation", attestation)

        if self.authenticator_selection is not None:
            _set(
                self,
                "authenticator_selection",
                _coerce_entity(
                    AuthenticatorSelectionCriteria,
                    "authenticatorSelection",
                    self.authenticator_selection,
                ),
            )

        _set(
            self,
            "exclude_credentials",
            _coerce_sequence(
                CredentialDescriptor,
                "excludeCredentials",
                () if self.exclude_credentials is None else self.exclude_credentials,
            ),
        )
