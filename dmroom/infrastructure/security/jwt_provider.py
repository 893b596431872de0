from __future__ import annotations

from datetime import datetime, timedelta, timezone

from jose import JWTError, jwt

from ...core.errors import AuthError
from ...core.ports.services import TokenProvider
from ..config import get_settings


class JoseTokenProvider(TokenProvider):
    """HS256 bearer tokens whose subject is the numeric user id."""

    algorithm = "HS256"

    def __init__(self) -> None:
        self.settings = get_settings()

    def create_access_token(self, user_id: int, expires_minutes: int | None = None) -> str:  # type: ignore[override]
        now = datetime.now(tz=timezone.utc)
        ttl = timedelta(minutes=expires_minutes or self.settings.JWT_EXPIRES_MIN)
        payload = {"sub": str(user_id), "iat": int(now.timestamp()), "exp": int((now + ttl).timestamp())}
        return jwt.encode(payload, self.settings.JWT_SECRET, algorithm=self.algorithm)

    def decode_user_id(self, token: str) -> int:  # type: ignore[override]
        try:
            payload = jwt.decode(token, self.settings.JWT_SECRET, algorithms=[self.algorithm])
        except JWTError as e:
            raise AuthError("Invalid token") from e
        sub = payload.get("sub")
        if not isinstance(sub, str) or not sub.isdigit():
            raise AuthError("Invalid token subject")
        return int(sub)
