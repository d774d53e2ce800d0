import dataclasses
import unittest

from fido2.webauthn import (
    AuthenticatorAttachment,
    AuthenticatorTransport,
    PublicKeyCredentialType,
    UserVerificationRequirement,
)

from webauthn_options import (
    AuthenticatorSelectionCriteria,
    CredentialDescriptor,
    InvalidEntity,
    MalformedEncoding,
    RelyingParty,
    User,
)


class TestRelyingParty(unittest.TestCase):
    def test_create(self):
        rp = RelyingParty.create("example.com", "Example Corp")

        self.assertEqual(rp.id, "example.com")
        self.assertEqual(rp.name, "Example Corp")
        self.assertEqual(rp.to_dict(), {"name": "Example Corp", "id": "example.com"})

    def test_no_normalization(self):
        rp = RelyingParty.create("Example.COM", "  Example Corp ")

        self.assertEqual(rp.id, "Example.COM")
        self.assertEqual(rp.name, "  Example Corp ")

    def test_empty_fields(self):
        with self.assertRaises(InvalidEntity) as ctx:
            RelyingParty.create("", "Example Corp")
        self.assertEqual(ctx.exception.field, "rp.id")

        with self.assertRaises(InvalidEntity) as ctx:
            RelyingParty.create("example.com", "")
        self.assertEqual(ctx.exception.field, "rp.name")

    def test_non_string(self):
        with self.assertRaises(InvalidEntity):
            RelyingParty.create(None, "Example Corp")

    def test_frozen(self):
        rp = RelyingParty.create("example.com", "Example Corp")
        with self.assertRaises(dataclasses.FrozenInstanceError):
            rp.id = "evil.com"  # type: ignore[misc]


class TestUser(unittest.TestCase):
    def test_create(self):
        user = User.create(b"\xfb\xff\x01", "alice", "Alice A.")

        self.assertEqual(user.id, b"\xfb\xff\x01")
        self.assertEqual(
            user.to_dict(), {"name": "alice", "id": "-_8B", "displayName": "Alice A."}
        )

    def test_id_copied_to_bytes(self):
        raw = bytearray(b"user-handle")
        user = User.create(raw, "alice", "Alice")
        raw[0] = 0

        self.assertIsInstance(user.id, bytes)
        self.assertEqual(user.id, b"user-handle")

    def test_empty_id(self):
        with self.assertRaises(InvalidEntity) as ctx:
            User.create(b"", "alice", "Alice")
        self.assertEqual(ctx.exception.field, "user.id")

    def test_text_id_rejected(self):
        with self.assertRaises(InvalidEntity):
            User.create("alice", "alice", "Alice")

    def test_empty_names(self):
        with self.assertRaises(InvalidEntity) as ctx:
            User.create(b"id", "", "Alice")
        self.assertEqual(ctx.exception.field, "user.name")

        with self.assertRaises(InvalidEntity) as ctx:
            User.create(b"id", "alice", "")
        self.assertEqual(ctx.exception.field, "user.displayName")

    def test_from_dict(self):
        user = User.from_dict({"name": "alice", "id": "-_8B", "displayName": "Alice"})

        self.assertEqual(user, User.create(b"\xfb\xff\x01", "alice", "Alice"))

    def test_from_dict_malformed_id(self):
        with self.assertRaises(MalformedEncoding):
            User.from_dict({"name": "alice", "id": "+/8B", "displayName": "Alice"})

    def test_from_dict_missing_field(self):
        with self.assertRaises(InvalidEntity) as ctx:
            User.from_dict({"name": "alice", "id": "-_8B"})
        self.assertEqual(ctx.exception.field, "displayName")

    def test_from_dict_not_a_mapping(self):
        with self.assertRaises(InvalidEntity):
            User.from_dict(["alice"])


class TestCredentialDescriptor(unittest.TestCase):
    def test_create_without_transports(self):
        descriptor = CredentialDescriptor.create(b"\x01\x02\x03")

        self.assertEqual(descriptor.type, PublicKeyCredentialType.PUBLIC_KEY)
        self.assertIsNone(descriptor.transports)
        self.assertEqual(descriptor.to_dict(), {"type": "public-key", "id": "AQID"})

    def test_create_with_transports(self):
        descriptor = CredentialDescriptor.create(b"\x01\x02\x03", ["usb", "nfc"])

        self.assertEqual(
            descriptor.transports,
            (AuthenticatorTransport.USB, AuthenticatorTransport.NFC),
        )
        self.assertEqual(
            descriptor.to_dict(),
            {"type": "public-key", "id": "AQID", "transports": ["usb", "nfc"]},
        )

    def test_transports_list_not_aliased(self):
        transports = ["usb"]
        descriptor = CredentialDescriptor.create(b"\x01", transports)
        transports.append("ble")

        self.assertEqual(descriptor.transports, (AuthenticatorTransport.USB,))

    def test_unknown_transport(self):
        with self.assertRaises(InvalidEntity):
            CredentialDescriptor.create(b"\x01", ["carrier-pigeon"])

    def test_transports_must_be_sequence(self):
        with self.assertRaises(InvalidEntity):
            CredentialDescriptor.create(b"\x01", "usb")

    def test_empty_id(self):
        with self.assertRaises(InvalidEntity) as ctx:
            CredentialDescriptor.create(b"")
        self.assertEqual(ctx.exception.field, "excludeCredentials.id")

    def test_wrong_type(self):
        with self.assertRaises(InvalidEntity):
            CredentialDescriptor(type="password", id=b"\x01")

    def test_from_dict(self):
        descriptor = CredentialDescriptor.from_dict(
            {"type": "public-key", "id": "AQID", "transports": ["internal"]}
        )

        self.assertEqual(descriptor.id, b"\x01\x02\x03")
        self.assertEqual(descriptor.transports, (AuthenticatorTransport.INTERNAL,))


class TestAuthenticatorSelectionCriteria(unittest.TestCase):
    def test_defaults_omit_optional_members(self):
        criteria = AuthenticatorSelectionCriteria()

        self.assertFalse(criteria.require_resident_key)
        self.assertEqual(criteria.to_dict(), {"requireResidentKey": False})

    def test_all_members(self):
        criteria = AuthenticatorSelectionCriteria(
            authenticator_attachment="platform",
            require_resident_key=True,
            user_verification="required",
        )

        self.assertEqual(
            criteria.authenticator_attachment, AuthenticatorAttachment.PLATFORM
        )
        self.assertEqual(
            criteria.user_verification, UserVerificationRequirement.REQUIRED
        )
        self.assertEqual(
            criteria.to_dict(),
            {
                "authenticatorAttachment": "platform",
                "requireResidentKey": True,
                "userVerification": "required",
            },
        )

    def test_from_dict(self):
        criteria = AuthenticatorSelectionCriteria.from_dict(
            {"authenticatorAttachment": "cross-platform", "userVerification": "discouraged"}
        )

        self.assertEqual(
            criteria.authenticator_attachment, AuthenticatorAttachment.CROSS_PLATFORM
        )
        self.assertFalse(criteria.require_resident_key)

    def test_invalid_values(self):
        with self.assertRaises(InvalidEntity):
            AuthenticatorSelectionCriteria(authenticator_attachment="roaming")
        with self.assertRaises(InvalidEntity):
            AuthenticatorSelectionCriteria(user_verification="sometimes")
        with self.assertRaises(InvalidEntity):
            AuthenticatorSelectionCriteria(require_resident_key="yes")
