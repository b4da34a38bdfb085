import hashlib
import hmac
import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Optional

from jose import jwt, JWTError
from fastapi import Request, Response

from .config import Settings
from .errors import Unauthorized

logger = logging.getLogger(__name__)

ALGORITHM = "HS256"
TOKEN_COOKIE_NAME = "chattu-admin-token"
TOKEN_TYPE = "admin"


class AdminSessionIssuer:
    """Checks the admin shared secret and issues/revokes the session cookie."""

    def __init__(self, settings: Settings):
        self.settings = settings

    @property
    def max_age_seconds(self) -> int:
        return self.settings.admin_session_minutes * 60

    def secret_fingerprint(self) -> str:
        """Keyed digest of the configured secret; rotating the secret ends live sessions."""
        return hmac.new(
            self.settings.jwt_secret.encode("utf-8"),
            self.settings.admin_secret_key.encode("utf-8"),
            hashlib.sha256,
        ).hexdigest()

    def login(self, secret_key: Any) -> str:
        """Return a signed session token, or raise Unauthorized on a bad secret."""
        configured = self.settings.admin_secret_key
        if not configured or not isinstance(secret_key, str) or not hmac.compare_digest(
            secret_key.encode("utf-8"), configured.encode("utf-8")
        ):
            logger.warning("Admin login rejected: invalid secret key")
            raise Unauthorized("Invalid Secret Key")

        logger.info("Admin login successful")
        return self.create_token()

    def create_token(self, expires_delta: Optional[timedelta] = None) -> str:
        """Create an admin session JWT."""
        if expires_delta is None:
            expires_delta = timedelta(minutes=self.settings.admin_session_minutes)

        now = datetime.now(timezone.utc)
        to_encode = {
            "exp": now + expires_delta,
            "iat": now,
            "type": TOKEN_TYPE,
            "sec": self.secret_fingerprint(),
        }
        return jwt.encode(to_encode, self.settings.jwt_secret, algorithm=ALGORITHM)

    def verify(self, token: str) -> bool:
        """Verify a session token is valid, unexpired and issued for the current secret."""
        try:
            payload = jwt.decode(token, self.settings.jwt_secret, algorithms=[ALGORITHM])
        except JWTError:
            return False
        if payload.get("type") != TOKEN_TYPE:
            return False
        fingerprint = str(payload.get("sec", "")).encode("utf-8")
        return hmac.compare_digest(fingerprint, self.secret_fingerprint().encode("utf-8"))

    def set_cookie(self, response: Response, token: str) -> None:
        """Set the session cookie on a response."""
        self._write_cookie(response, token, self.max_age_seconds)

    def logout(self, response: Response) -> None:
        """Expire the session cookie. Safe to call without a prior login."""
        self._write_cookie(response, "", 0)
        logger.info("Admin logged out")

    def _write_cookie(self, response: Response, value: str, max_age: int) -> None:
        response.set_cookie(
            key=TOKEN_COOKIE_NAME,
            value=value,
            httponly=True,
            secure=self.settings.cookie_secure,
            samesite=self.settings.effective_samesite,
            max_age=max_age,
        )


def get_session_issuer(request: Request) -> AdminSessionIssuer:
    return request.app.state.session_issuer


async def require_admin(request: Request) -> str:
    """
    Dependency that validates the admin session from cookie.
    Raises 401 if not authenticated.
    """
    issuer = get_session_issuer(request)
    token = request.cookies.get(TOKEN_COOKIE_NAME)

    if not token or not issuer.verify(token):
        raise Unauthorized("Only Admin can access this route")

    return token
