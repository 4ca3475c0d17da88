from __future__ import annotations

import json
import unittest
from datetime import datetime, timedelta, timezone

from jsontoken.crypto import HmacSHA256Signer
from jsontoken.errors import MalformedTokenError, NotSignableError, TokenFrozenError
from jsontoken.token import JsonToken, SignedToken, TokenState
from jsontoken.utils import codec
from jsontoken.utils.clock import FixedClock, from_millis, to_millis

NOW = datetime(2024, 1, 1, 12, 0, 0, tzinfo=timezone.utc)


def _decode_segment(segment: str) -> dict:
    return json.loads(codec.decode_base64url(segment))


class JsonTokenSigningTests(unittest.TestCase):
    def setUp(self) -> None:
        self.clock = FixedClock(NOW)
        self.signer = HmacSHA256Signer(None, None, b"secret")

    def test_alice_and_bob_scenario(self) -> None:
        token = JsonToken(HmacSHA256Signer(None, "alice", b"secret"), self.clock)
        token.set_audience("bob")

        wire = token.serialize_and_sign()

        segments = wire.split(".")
        self.assertEqual(len(segments), 3)
        self.assertEqual(codec.decode_base64url(segments[0]), b'{"alg":"HS256"}')
        self.assertEqual(_decode_segment(segments[1]), {"iss": "alice", "aud": "bob"})
        self.assertNotIn("=", wire)

    def test_header_includes_key_id_when_present(self) -> None:
        token = JsonToken(HmacSHA256Signer("key-7", None, b"secret"), self.clock)

        self.assertEqual(token.header, {"alg": "HS256", "kid": "key-7"})
        header_segment = token.compute_base_string().split(".")[0]
        self.assertEqual(_decode_segment(header_segment), {"alg": "HS256", "kid": "key-7"})

    def test_signature_covers_base_string(self) -> None:
        token = JsonToken(self.signer, self.clock)
        token.set_param("sub", "user-1")

        wire = token.serialize_and_sign()

        base_string, signature_segment = wire.rsplit(".", 1)
        self.assertEqual(base_string, token.compute_base_string())
        self.assertEqual(
            codec.decode_base64url(signature_segment), self.signer.sign(base_string.encode("ascii"))
        )

    def test_base_string_and_serialization_are_idempotent(self) -> None:
        token = JsonToken(self.signer, self.clock)
        token.set_param("scope", ["read", "write"])

        first_base = token.compute_base_string()
        second_base = token.compute_base_string()
        first_wire = token.serialize_and_sign()
        second_wire = token.serialize_and_sign()

        self.assertEqual(first_base, second_base)
        self.assertEqual(first_wire, second_wire)
        self.assertIs(token.sign(), token.sign())

    def test_state_transitions(self) -> None:
        token = JsonToken(self.signer, self.clock)
        self.assertIs(token.state, TokenState.FRESH)

        token.compute_base_string()
        self.assertIs(token.state, TokenState.BASE_STRING_COMPUTED)

        token.sign()
        self.assertIs(token.state, TokenState.SIGNED)

        token.serialize_and_sign()
        self.assertIs(token.state, TokenState.SERIALIZED)

    def test_claims_are_frozen_after_base_string(self) -> None:
        token = JsonToken(self.signer, self.clock)
        token.set_audience("bob")
        base_string = token.compute_base_string()

        with self.assertRaises(TokenFrozenError):
            token.set_audience("mallory")
        with self.assertRaises(TokenFrozenError):
            token.set_issued_at()

        self.assertEqual(token.compute_base_string(), base_string)
        self.assertEqual(token.audience, "bob")

    def test_signed_returns_immutable_value(self) -> None:
        token = JsonToken(self.signer, self.clock)
        token.set_param("sub", "user-1")

        signed = token.signed()

        self.assertIsInstance(signed, SignedToken)
        self.assertEqual(signed.token, token.serialize_and_sign())
        self.assertEqual(str(signed), signed.token)
        self.assertEqual(signed.payload, {"sub": "user-1"})
        self.assertEqual(signed.header, {"alg": "HS256"})
        with self.assertRaises(Exception):
            signed.token = "other"  # type: ignore[misc]

    def test_mutating_claim_values_after_signing_changes_nothing(self) -> None:
        token = JsonToken(self.signer, self.clock)
        roles = ["read"]
        profile = {"name": "alice"}
        token.set_param("roles", roles)
        token.set_param("profile", profile)
        signed = token.signed()

        roles.append("admin")
        profile["name"] = "mallory"

        payload_segment = signed.token.split(".")[1]
        self.assertEqual(_decode_segment(payload_segment), {"roles": ["read"], "profile": {"name": "alice"}})
        self.assertEqual(token.payload, _decode_segment(payload_segment))
        self.assertEqual(signed.payload, _decode_segment(payload_segment))
        self.assertEqual(token.signed().payload, signed.payload)

    def test_signer_issuer_becomes_iss_claim(self) -> None:
        token = JsonToken(HmacSHA256Signer(None, "issuer.example", b"secret"), self.clock)

        self.assertEqual(token.issuer, "issuer.example")

    def test_signer_is_required(self) -> None:
        with self.assertRaises(TypeError):
            JsonToken(None)  # type: ignore[arg-type]


class JsonTokenTimeClaimTests(unittest.TestCase):
    def setUp(self) -> None:
        self.clock = FixedClock(NOW)
        self.token = JsonToken(HmacSHA256Signer(None, None, b"secret"), self.clock)

    def test_missing_time_claims_are_absent(self) -> None:
        self.assertIsNone(self.token.issued_at)
        self.assertIsNone(self.token.expiration)
        self.assertIsNone(self.token.audience)

    def test_issued_at_truncates_to_floor_second(self) -> None:
        self.token.set_issued_at(from_millis(1_000_500))

        self.assertEqual(to_millis(self.token.issued_at), 1_000_000)
        self.assertEqual(self.token.get_param("iat"), 1_000)

    def test_expiration_is_stored_in_seconds(self) -> None:
        instant = datetime(2030, 6, 1, 0, 0, 0, 999_000, tzinfo=timezone.utc)

        self.token.set_expiration(instant)

        self.assertEqual(self.token.get_param("exp"), int(instant.replace(microsecond=0).timestamp()))
        self.assertEqual(self.token.expiration, instant.replace(microsecond=0))

    def test_naive_instants_are_taken_as_utc(self) -> None:
        self.token.set_issued_at(datetime(2024, 1, 1, 12, 0, 0))

        self.assertEqual(self.token.issued_at, NOW)

    def test_defaults_come_from_clock(self) -> None:
        self.token.set_issued_at()
        self.token.set_expiration()

        self.assertEqual(self.token.issued_at, NOW)
        self.assertEqual(self.token.expiration, NOW + timedelta(minutes=2))

    def test_default_expiration_uses_configured_lifetime(self) -> None:
        token = JsonToken(
            HmacSHA256Signer(None, None, b"secret"), self.clock, lifetime=timedelta(hours=1)
        )

        token.set_expiration()

        self.assertEqual(token.expiration, NOW + timedelta(hours=1))


class ReadOnlyTokenTests(unittest.TestCase):
    def test_parsed_payload_cannot_be_signed(self) -> None:
        token = JsonToken.from_payload({"iss": "alice", "iat": 1_000})

        self.assertTrue(token.is_read_only)
        self.assertIs(token.state, TokenState.READ_ONLY)
        self.assertEqual(token.issuer, "alice")
        self.assertEqual(to_millis(token.issued_at), 1_000_000)
        with self.assertRaises(NotSignableError):
            token.serialize_and_sign()
        with self.assertRaises(NotSignableError):
            token.compute_base_string()
        with self.assertRaises(TokenFrozenError):
            token.set_param("aud", "bob")

    def test_parsed_token_state_is_terminal(self) -> None:
        token = JsonToken.from_payload({"iss": "alice"}, header={"alg": "HS256"})

        self.assertIs(token.state, TokenState.READ_ONLY)
        with self.assertRaises(TokenFrozenError):
            token.set_audience("bob")
        self.assertIs(token.state, TokenState.READ_ONLY)

    def test_source_payload_changes_do_not_leak_in(self) -> None:
        source = {"roles": ["read"]}
        token = JsonToken.from_payload(source)

        source["roles"].append("admin")

        self.assertEqual(token.get_param("roles"), ["read"])

    def test_non_numeric_time_claim_is_malformed(self) -> None:
        token = JsonToken.from_payload({"exp": "tomorrow"})

        with self.assertRaises(MalformedTokenError):
            token.expiration

    def test_payload_is_a_copy(self) -> None:
        source = {"nested": {"a": 1}}
        token = JsonToken.from_payload(source)

        token.payload["nested"]["a"] = 2

        self.assertEqual(token.get_param("nested"), {"a": 1})


if __name__ == "__main__":
    unittest.main()
