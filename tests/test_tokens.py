import base64
import json
from datetime import datetime, timedelta, timezone

import pytest
from jose import jwt

from app.core.errors import UnauthorizedError
from app.security.tokens import JWTSettings, TokenService, strip_bearer

SECRET = "unit-secret"


@pytest.fixture
def svc():
    return TokenService(JWTSettings(secret=SECRET))


def _future() -> int:
    return int((datetime.now(timezone.utc) + timedelta(hours=1)).timestamp())


def _b64(obj: dict) -> str:
    return base64.urlsafe_b64encode(json.dumps(obj).encode()).rstrip(b"=").decode()


class TestIssueAndValidate:
    def test_round_trip(self, svc):
        token = svc.issue(42)
        assert svc.validate(token) == 42

    def test_claims_are_typed(self, svc):
        claims = svc.decode(svc.issue(7))
        assert claims.user_id == 7
        assert claims.exp - claims.iat == 24 * 3600

    def test_user_id_travels_as_string(self, svc):
        raw = jwt.get_unverified_claims(svc.issue(5))
        assert raw["user_id"] == "5"

    def test_only_hmac_algorithms_allowed(self):
        with pytest.raises(ValueError):
            TokenService(JWTSettings(secret=SECRET, algorithm="RS256"))


class TestRejection:
    def test_wrong_secret(self, svc):
        other = TokenService(JWTSettings(secret="another-secret"))
        with pytest.raises(UnauthorizedError):
            svc.validate(other.issue(1))

    def test_expired(self, svc):
        past = TokenService(
            JWTSettings(secret=SECRET),
            now_fn=lambda: datetime.now(timezone.utc) - timedelta(days=2),
        )
        with pytest.raises(UnauthorizedError):
            svc.validate(past.issue(1))

    def test_other_hmac_algorithm(self, svc):
        token = jwt.encode({"user_id": "1", "exp": _future()}, SECRET, algorithm="HS512")
        with pytest.raises(UnauthorizedError):
            svc.validate(token)

    def test_alg_none(self, svc):
        token = f"{_b64({'alg': 'none', 'typ': 'JWT'})}.{_b64({'user_id': '1', 'exp': _future()})}."
        with pytest.raises(UnauthorizedError):
            svc.validate(token)

    def test_malformed(self, svc):
        with pytest.raises(UnauthorizedError):
            svc.validate("not-a-jwt")

    def test_empty(self, svc):
        with pytest.raises(UnauthorizedError):
            svc.validate("")

    def test_missing_user_id(self, svc):
        token = jwt.encode({"exp": _future()}, SECRET, algorithm="HS256")
        with pytest.raises(UnauthorizedError):
            svc.validate(token)

    def test_missing_exp(self, svc):
        token = jwt.encode({"user_id": "1"}, SECRET, algorithm="HS256")
        with pytest.raises(UnauthorizedError):
            svc.validate(token)

    def test_non_numeric_user_id(self, svc):
        token = jwt.encode({"user_id": "abc", "exp": _future()}, SECRET, algorithm="HS256")
        with pytest.raises(UnauthorizedError):
            svc.validate(token)

    def test_unknown_claim(self, svc):
        token = jwt.encode({"user_id": "1", "exp": _future(), "admin": True}, SECRET, algorithm="HS256")
        with pytest.raises(UnauthorizedError):
            svc.validate(token)


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("Bearer abc.def.ghi", "abc.def.ghi"),
        ("bearer abc.def.ghi", "abc.def.ghi"),
        ("abc.def.ghi", "abc.def.ghi"),
        ("  Bearer   abc  ", "abc"),
    ],
)
def test_strip_bearer(raw, expected):
    assert strip_bearer(raw) == expected
