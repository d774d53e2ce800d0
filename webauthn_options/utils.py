"""Canonical binary codec and the serialization base for wire entities."""

from __future__ import annotations

import binascii
import json
import re
from dataclasses import MISSING, field, fields
from enum import Enum
from typing import Any, Callable, Dict, Mapping, Optional, Type, TypeVar, Union

from fido2.utils import websafe_decode as _websafe_decode
from fido2.utils import websafe_encode as _websafe_encode

from .errors import InvalidEntity, MalformedEncoding

_ALPHABET = "ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789-_"
_WEBSAFE_RE = re.compile(r"[A-Za-z0-9_-]*")

# Bits of the final character that fall outside the encoded bytes, keyed by
# the length of the unpadded text modulo 4.
_TRAILING_BITS_MASK = {2: 0x0F, 3: 0x03}


def websafe_encode(data: bytes) -> str:
    """Encode bytes as unpadded URL-safe base64.

    :param data: The bytes to encode.
    :return: Text using the ``-``/``_`` alphabet, without ``=`` padding.
    """
    return _websafe_encode(bytes(data))


def websafe_decode(data: Union[str, bytes]) -> bytes:
    """Decode unpadded URL-safe base64 text, strictly.

    Only the URL-safe alphabet is accepted. Padding, whitespace, the standard
    ``+``/``/`` characters, impossible lengths and non-canonical trailing bits
    all raise :class:`MalformedEncoding`, so that every accepted text is the
    exact encoding of the returned bytes.

    :param data: The text (or ASCII bytes) to decode.
    :return: The decoded bytes.
    """
    if isinstance(data, (bytes, bytearray, memoryview)):
        try:
            text = bytes(data).decode("ascii")
        except UnicodeDecodeError as e:
            raise MalformedEncoding("base64url data must be ASCII") from e
    elif isinstance(data, str):
        text = data
    else:
        raise MalformedEncoding(
            f"Expected base64url text, got {type(data).__name__}"
        )

    if not _WEBSAFE_RE.fullmatch(text):
        raise MalformedEncoding("Invalid character in base64url data")

    remainder = len(text) % 4
    if remainder == 1:
        raise MalformedEncoding(f"Invalid base64url length: {len(text)}")
    if remainder and _ALPHABET.index(text[-1]) & _TRAILING_BITS_MASK[remainder]:
        raise MalformedEncoding("Non-canonical trailing bits in base64url data")

    try:
        return _websafe_decode(text)
    except (binascii.Error, ValueError) as e:
        raise MalformedEncoding(str(e)) from e


def wire_field(
    name: str,
    *,
    serialize: Optional[Callable[[Any], Any]] = None,
    deserialize: Optional[Callable[[Any], Any]] = None,
    required: bool = True,
    **kwargs,
) -> Any:
    """Declare a dataclass field together with its wire name and converters.

    A field declared with required=False and no default may be absent from
    the wire, in which case from_dict passes None.
    """
    metadata = {
        "wire_name": name,
        "serialize": serialize,
        "deserialize": deserialize,
        "required": required,
    }
    return field(metadata=metadata, **kwargs)


def _binary_from_wire(value: Any) -> bytes:
    # Raw bytes are already decoded, only text goes through the codec.
    if isinstance(value, (bytes, bytearray, memoryview)):
        return bytes(value)
    if not isinstance(value, str):
        raise MalformedEncoding(
            f"Expected base64url text, got {type(value).__name__}"
        )
    return websafe_decode(value)


def binary_field(name: str, **kwargs) -> Any:
    """Declare a bytes field that travels as canonical base64url text.

    When read from a mapping, text is decoded and bytes are taken as is.
    """
    return wire_field(
        name, serialize=websafe_encode, deserialize=_binary_from_wire, **kwargs
    )


def _to_wire(value: Any) -> Any:
    if isinstance(value, _WireDataObject):
        return value.to_dict()
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (list, tuple)):
        return [_to_wire(v) for v in value]
    return value


T = TypeVar("T", bound="_WireDataObject")


class _WireDataObject:
    """Base for dataclasses that map to a WebAuthn JSON dictionary.

    Members set to None are left out of the output, optional members are
    therefore omitted rather than sent as null.
    """

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {}
        for f in fields(self):  # type: ignore[arg-type]
            value = getattr(self, f.name)
            if value is None:
                continue
            serialize = f.metadata.get("serialize") or _to_wire
            data[f.metadata.get("wire_name", f.name)] = serialize(value)
        return data

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), separators=(",", ":"))

    @classmethod
    def from_dict(cls: Type[T], data: Mapping[str, Any]) -> T:
        if isinstance(data, cls):
            return data
        if not isinstance(data, Mapping):
            raise InvalidEntity(
                cls.__name__,
                f"Expected a mapping for {cls.__name__}, got {type(data).__name__}",
            )

        kwargs: Dict[str, Any] = {}
        for f in fields(cls):  # type: ignore[arg-type]
            wire_name = f.metadata.get("wire_name", f.name)
            if wire_name in data:
                key = wire_name
            elif f.name in data:
                key = f.name
            else:
                if f.default is not MISSING or f.default_factory is not MISSING:
                    continue
                if f.metadata.get("required", True):
                    raise InvalidEntity(
                        wire_name, f"Missing required field {wire_name!r}"
                    )
                kwargs[f.name] = None
                continue
            value = data[key]
            deserialize = f.metadata.get("deserialize")
            if value is not None and deserialize is not None:
                value = deserialize(value)
            kwargs[f.name] = value
        return cls(**kwargs)

    @classmethod
    def from_json(cls: Type[T], text: Union[str, bytes]) -> T:
        try:
            data = json.loads(text)
        except ValueError as e:
            raise InvalidEntity(cls.__name__, f"Invalid JSON: {e}") from e
        return cls.from_dict(data)
