"""Token codec: issuing, verifying and the distinct rejection reasons."""

from datetime import timedelta

import pytest

from models.user import AdminRole, DinerRole, FranchiseeRole, UserOut
from utils.jwt_handler import (
    TokenCodec,
    TokenExpired,
    TokenInvalid,
    TokenMalformed,
    TokenSignatureMismatch,
)


@pytest.fixture
def codec():
    return TokenCodec(secret_key="test-secret", expire_minutes=60)


@pytest.fixture
def user():
    return UserOut(
        id="665f1c2e9b1e8a0012345678",
        name="pizza franchisee",
        email="f@jwt.com",
        roles=[DinerRole(), FranchiseeRole(objectId="665f1c2e9b1e8a0087654321")],
    )


class TestTokenCodec:

    def test_issue_and_verify(self, codec, user):
        token = codec.issue(user)
        claims = codec.verify(token)

        assert claims.user_id == user.id
        assert claims.email == "f@jwt.com"
        assert claims.expires_at > claims.issued_at
        assert isinstance(claims.roles[1], FranchiseeRole)
        assert claims.roles[1].objectId == "665f1c2e9b1e8a0087654321"

    def test_tokens_issued_together_differ(self, codec, user):
        assert codec.issue(user) != codec.issue(user)

    def test_expired_token_rejected(self, codec, user):
        token = codec.issue(user, expires_delta=timedelta(seconds=-1))
        with pytest.raises(TokenExpired):
            codec.verify(token)

    def test_tampered_token_rejected(self, codec, user):
        header, payload, sig = codec.issue(user).split(".")
        tampered = ".".join([header, payload, ("A" if sig[0] != "A" else "B") + sig[1:]])
        with pytest.raises(TokenSignatureMismatch):
            codec.verify(tampered)

    def test_token_from_other_key_rejected(self, user):
        token = TokenCodec(secret_key="someone-else").issue(user)
        with pytest.raises(TokenSignatureMismatch):
            TokenCodec(secret_key="test-secret").verify(token)

    @pytest.mark.parametrize("token", ["invalid.token.here", "not-a-jwt", ""])
    def test_malformed_token_rejected(self, codec, token):
        with pytest.raises(TokenMalformed):
            codec.verify(token)

    def test_all_failures_share_a_base(self):
        for exc in (TokenMalformed, TokenSignatureMismatch, TokenExpired):
            assert issubclass(exc, TokenInvalid)

    def test_admin_role_round_trips(self, codec):
        admin = UserOut(id="665f1c2e9b1e8a0012345679", name="a", email="a@jwt.com", roles=[AdminRole()])
        claims = codec.verify(codec.issue(admin))
        assert isinstance(claims.roles[0], AdminRole)

    def test_signature_segment(self):
        assert TokenCodec.signature("a.b.c") == "c"
        assert TokenCodec.signature("nodots") == ""
