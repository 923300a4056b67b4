"""
Tests for JWT issuance and verification.

Tests verify that:
- Tokens are issued with the expected claims (sub, name, iat, exp)
- Tokens are accepted before their TTL and rejected after
- Forged, malformed and incomplete tokens are rejected uniformly
- A missing secret is a configuration error at construction time
"""

from datetime import datetime, timedelta, UTC

import jwt as pyjwt
import pytest

from tokengate.auth.schemas import UserIdentity
from tokengate.auth.token import TokenIssuer, TokenVerifier
from tokengate.exceptions import ConfigurationError, InvalidToken
from tokengate.utils import isodatetime

SECRET = "unit-test-secret-" + "0123456789abcdef" * 4

USER = UserIdentity(id="550e8400-e29b-41d4-a716-446655440000", name="alice")


@pytest.fixture
def issuer():
    return TokenIssuer(SECRET, ttl=timedelta(hours=1))


@pytest.fixture
def verifier():
    return TokenVerifier(SECRET)


def _encode(payload: dict, secret: str = SECRET) -> str:
    return pyjwt.encode(payload, secret, algorithm="HS256")


# ============================================================================
# Token Issuance Tests
# ============================================================================


class TestTokenIssuer:
    """Tests for TokenIssuer."""

    def test_issue_returns_compact_jwt(self, issuer):
        token = issuer.issue_for_user(USER)
        assert isinstance(token, str)
        assert token.count(".") == 2

    def test_token_contains_required_claims(self, issuer):
        """Issued token should carry the user identity and timestamps."""
        token = issuer.issue_for_user(USER)
        payload = pyjwt.decode(token, options={"verify_signature": False})

        assert payload["sub"] == USER.id
        assert payload["name"] == USER.name
        assert isinstance(payload["iat"], int)
        assert isinstance(payload["exp"], int)

    def test_expiry_uses_configured_ttl(self, issuer):
        token = issuer.issue_for_user(USER)
        payload = pyjwt.decode(token, options={"verify_signature": False})
        assert payload["exp"] - payload["iat"] == 3600

    def test_explicit_ttl_overrides_default(self, issuer):
        token = issuer.issue({"sub": USER.id, "name": USER.name}, ttl=timedelta(minutes=5))
        payload = pyjwt.decode(token, options={"verify_signature": False})
        assert payload["exp"] - payload["iat"] == 300

    def test_issued_at_is_current_time(self, issuer):
        before = isodatetime.now_unix()
        token = issuer.issue_for_user(USER)
        after = isodatetime.now_unix()

        payload = pyjwt.decode(token, options={"verify_signature": False})
        assert before - 2 <= payload["iat"] <= after + 2

    def test_issue_does_not_mutate_claims(self, issuer):
        claims = {"sub": USER.id, "name": USER.name}
        issuer.issue(claims)
        assert claims == {"sub": USER.id, "name": USER.name}

    def test_token_signed_with_configured_secret(self, issuer):
        token = issuer.issue_for_user(USER)
        payload = pyjwt.decode(token, SECRET, algorithms=["HS256"])
        assert payload["sub"] == USER.id

    @pytest.mark.parametrize("secret", ["", None])
    def test_missing_secret_is_configuration_error(self, secret):
        with pytest.raises(ConfigurationError):
            TokenIssuer(secret)


# ============================================================================
# Token Verification Tests
# ============================================================================


class TestTokenVerifier:
    """Tests for TokenVerifier."""

    def test_verify_valid_token(self, issuer, verifier):
        payload = verifier.verify(issuer.issue_for_user(USER))

        assert payload.sub == USER.id
        assert payload.name == USER.name
        assert payload.identity() == USER

    def test_token_accepted_before_ttl_rejected_after(self, verifier):
        now = isodatetime.now_unix()

        live = _encode({"sub": USER.id, "name": USER.name, "iat": now - 10, "exp": now + 60})
        assert verifier.verify(live).sub == USER.id

        expired = _encode({"sub": USER.id, "name": USER.name, "iat": now - 120, "exp": now - 60})
        with pytest.raises(InvalidToken):
            verifier.verify(expired)

    def test_negative_ttl_token_is_rejected(self, verifier):
        issuer = TokenIssuer(SECRET, ttl=timedelta(seconds=-1))
        with pytest.raises(InvalidToken):
            verifier.verify(issuer.issue_for_user(USER))

    def test_token_with_wrong_secret_rejected(self, issuer, verifier):
        """A token signed with another key is rejected regardless of expiry."""
        forged = TokenIssuer("another-secret-0123456789abcdefghijk").issue_for_user(USER)
        with pytest.raises(InvalidToken):
            verifier.verify(forged)

    def test_resigned_token_rejected(self, issuer, verifier):
        payload = pyjwt.decode(issuer.issue_for_user(USER), options={"verify_signature": False})
        with pytest.raises(InvalidToken):
            verifier.verify(_encode(payload, "wrong-secret-" + "x" * 40))

    @pytest.mark.parametrize("token", [
        "not-a-jwt",
        "invalid.token.here",
        "eyJhbGciOiJub25lIn0.eyJzdWIiOiIxMjM0NTY3ODkwIn0.",  # alg=none
        "",
    ])
    def test_malformed_token_rejected(self, verifier, token):
        with pytest.raises(InvalidToken):
            verifier.verify(token)

    def test_token_without_required_claims_rejected(self, verifier):
        incomplete = _encode({"sub": USER.id, "exp": isodatetime.now_unix() + 60})
        with pytest.raises(InvalidToken):
            verifier.verify(incomplete)

    def test_other_algorithm_rejected(self, verifier):
        now = isodatetime.now_unix()
        token = pyjwt.encode(
            {"sub": USER.id, "name": USER.name, "iat": now, "exp": now + 60},
            SECRET,
            algorithm="HS512",
        )
        with pytest.raises(InvalidToken):
            verifier.verify(token)

    def test_rejections_share_one_message(self, verifier):
        now = isodatetime.now_unix()
        expired = _encode({"sub": USER.id, "name": USER.name, "iat": now - 120, "exp": now - 60})
        forged = _encode({"sub": USER.id, "name": USER.name, "iat": now, "exp": now + 60}, "x" * 40)

        messages = set()
        for token in (expired, forged, "garbage"):
            with pytest.raises(InvalidToken) as exc_info:
                verifier.verify(token)
            messages.add(exc_info.value.message)

        assert messages == {"Invalid or expired token"}

    def test_expires_in(self, issuer, verifier):
        payload = verifier.verify(issuer.issue_for_user(USER))
        remaining = verifier.expires_in(payload)
        assert timedelta(minutes=59) < remaining <= timedelta(hours=1)

    def test_missing_secret_is_configuration_error(self):
        with pytest.raises(ConfigurationError):
            TokenVerifier("")


def test_from_unix_round_trips_token_timestamps(issuer):
    payload = pyjwt.decode(issuer.issue_for_user(USER), options={"verify_signature": False})
    issued = isodatetime.from_unix(payload["iat"])
    assert issued.tzinfo == UTC
    assert abs(issued - datetime.now(UTC)) < timedelta(seconds=5)
