import pytest
from jose import jwt

from dmroom.core.errors import AuthError
from dmroom.infrastructure.config import get_settings
from dmroom.infrastructure.security.jwt_provider import JoseTokenProvider


def test_token_carries_user_id():
    tokens = JoseTokenProvider()
    assert tokens.decode_user_id(tokens.create_access_token(42)) == 42


def test_tampered_token_is_rejected():
    token = JoseTokenProvider().create_access_token(42)
    with pytest.raises(AuthError):
        JoseTokenProvider().decode_user_id(token[:-2] + "xx")


def test_non_numeric_subject_is_rejected():
    token = jwt.encode({"sub": "alice"}, get_settings().JWT_SECRET, algorithm="HS256")
    with pytest.raises(AuthError):
        JoseTokenProvider().decode_user_id(token)
