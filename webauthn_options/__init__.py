"""Server side PublicKeyCredentialCreationOptions for WebAuthn registration."""

from __future__ import annotations

from .cose import ES256, RS256, algorithm_name, preferred_algorithms
from .errors import (
    InvalidEntity,
    MalformedEncoding,
    ValidationError,
    WebAuthnOptionsError,
)
from .server import Configuration, create_options
from .utils import websafe_decode, websafe_encode
from .webauthn import (
    AuthenticatorSelectionCriteria,
    CredentialCreateOptions,
    CredentialDescriptor,
    PubKeyCredParam,
    RelyingParty,
    User,
)

__version__ = "0.1.0"

__all__ = [
    "AuthenticatorSelectionCriteria",
    "Configuration",
    "CredentialCreateOptions",
    "CredentialDescriptor",
    "ES256",
    "InvalidEntity",
    "MalformedEncoding",
    "PubKeyCredParam",
    "RS256",
    "RelyingParty",
    "User",
    "ValidationError",
    "WebAuthnOptionsError",
    "algorithm_name",
    "create_options",
    "preferred_algorithms",
    "websafe_decode",
    "websafe_encode",
]
