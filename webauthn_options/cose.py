"""Signature algorithm preferences advertised in pubKeyCredParams."""

from __future__ import annotations

from typing import Tuple

from fido2 import cose

from .errors import InvalidEntity
from .webauthn import PubKeyCredParam

# External authenticators support the ES256 algorithm.
ES256 = PubKeyCredParam.for_alg(cose.ES256.ALGORITHM)

# Windows Hello supports the RS256 algorithm.
RS256 = PubKeyCredParam.for_alg(cose.RS256.ALGORITHM)

# Ordered from most to least broadly supported. New entries must keep that
# order, authenticators pick the first algorithm they can handle.
_PREFERRED_ALGORITHMS: Tuple[PubKeyCredParam, ...] = (ES256, RS256)


def preferred_algorithms() -> Tuple[PubKeyCredParam, ...]:
    """Get the credential parameters to offer, in priority order."""
    return _PREFERRED_ALGORITHMS


def algorithm_name(alg: int) -> str:
    """Get the COSE name of a supported algorithm identifier, e.g. "ES256"."""
    if alg not in cose.CoseKey.supported_algorithms():
        raise InvalidEntity("alg", f"Unsupported COSE algorithm: {alg}")
    return cose.CoseKey.for_alg(alg).__name__
