from datetime import timedelta

import pytest

from authentication.domain.exceptions import Forbidden, Unauthenticated
from authentication.domain.services.token_service import (
    TokenClaims,
    extract_bearer,
    issue_token,
    resolve_caller,
    verify_credential,
)
from authentication.jwt_serializers import RoleAccessToken
from marketplace.tests.factories import SellerFactory, UserFactory


@pytest.mark.unit
class TestExtractBearer:
    def test_missing_header(self):
        with pytest.raises(Unauthenticated):
            extract_bearer(None)
        with pytest.raises(Unauthenticated):
            extract_bearer("   ")

    def test_malformed_header(self):
        with pytest.raises(Forbidden):
            extract_bearer("Token abc")
        with pytest.raises(Forbidden):
            extract_bearer("Bearer")

    def test_bearer_keyword_is_case_insensitive(self):
        assert extract_bearer("bearer abc.def.ghi") == "abc.def.ghi"


@pytest.mark.django_db
class TestTokens:
    def test_issue_and_verify_round_trip(self):
        seller = SellerFactory()

        claims = verify_credential(issue_token(seller.email))

        assert claims == TokenClaims(email=seller.email, role="seller")
        assert resolve_caller(claims) == seller

    def test_issue_token_for_unknown_email(self):
        with pytest.raises(Forbidden):
            issue_token("nobody@example.com")

    def test_token_lifetime_is_one_day(self):
        user = UserFactory()

        token = RoleAccessToken(issue_token(user.email))

        assert token["exp"] - token["iat"] == int(timedelta(days=1).total_seconds())

    def test_expired_token_is_forbidden(self):
        token = RoleAccessToken.for_user(UserFactory())
        token.set_exp(lifetime=timedelta(seconds=-10))

        with pytest.raises(Forbidden):
            verify_credential(str(token))

    def test_tampered_token_is_forbidden(self):
        token = issue_token(UserFactory().email)

        with pytest.raises(Forbidden):
            verify_credential(token[:-2] + "xx")

    def test_empty_credential_is_unauthenticated(self):
        with pytest.raises(Unauthenticated):
            verify_credential("")

    def test_deleted_user_is_forbidden(self):
        user = UserFactory()
        claims = verify_credential(issue_token(user.email))
        user.delete()

        with pytest.raises(Forbidden):
            resolve_caller(claims)
