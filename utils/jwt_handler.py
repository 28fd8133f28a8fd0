import uuid
from datetime import datetime, timedelta, timezone
from typing import List, Optional
from jose import ExpiredSignatureError, JWTError, jwt
from pydantic import BaseModel, Field, ValidationError
from models.user import RoleAssignment, UserOut
from utils.logger import get_logger

logger = get_logger("JWT_HANDLER")


class TokenInvalid(Exception):
    """Base for every reason a session token is rejected."""


class TokenMalformed(TokenInvalid):
    pass


class TokenSignatureMismatch(TokenInvalid):
    pass


class TokenExpired(TokenInvalid):
    pass


class TokenClaims(BaseModel):
    user_id: str
    name: Optional[str] = None
    email: Optional[str] = None
    roles: List[RoleAssignment] = Field(default_factory=list)
    issued_at: datetime
    expires_at: datetime
    jti: Optional[str] = None


class TokenCodec:
    """
    Creates and verifies signed, expiring session tokens.
    Never touches storage; revocation lives in the session store.
    """

    def __init__(self, secret_key: str, algorithm: str = "HS256", expire_minutes: int = 60 * 24):
        self._secret_key = secret_key
        self._algorithm = algorithm
        self._ttl = timedelta(minutes=expire_minutes)

    def issue(self, user: UserOut, expires_delta: Optional[timedelta] = None) -> str:
        """
        Creates JWT token with expiry. The user's current roles are embedded,
        so a role change only shows up after a new token is issued.
        """
        now = datetime.now(timezone.utc)
        expire = now + (expires_delta if expires_delta is not None else self._ttl)
        payload = {
            "sub": user.id,
            "name": user.name,
            "email": user.email,
            "roles": [role.model_dump() for role in user.roles],
            "iat": now,
            "exp": expire,
            "jti": uuid.uuid4().hex,
        }
        logger.debug(f"Issuing token for user {user.id}, expires at {expire}")
        return jwt.encode(payload, self._secret_key, algorithm=self._algorithm)

    def verify(self, token: str) -> TokenClaims:
        """
        Decode token and return its claims.
        Raises TokenMalformed, TokenSignatureMismatch or TokenExpired.
        """
        try:
            jwt.get_unverified_claims(token)
        except JWTError as e:
            raise TokenMalformed(str(e)) from e

        try:
            payload = jwt.decode(token, self._secret_key, algorithms=[self._algorithm])
        except ExpiredSignatureError as e:
            raise TokenExpired(str(e)) from e
        except JWTError as e:
            raise TokenSignatureMismatch(str(e)) from e

        if not payload.get("sub") or "exp" not in payload:
            raise TokenMalformed("token is missing required claims")
        try:
            return TokenClaims(
                user_id=payload["sub"],
                name=payload.get("name"),
                email=payload.get("email"),
                roles=payload.get("roles", []),
                issued_at=datetime.fromtimestamp(payload.get("iat", 0), tz=timezone.utc),
                expires_at=datetime.fromtimestamp(payload["exp"], tz=timezone.utc),
                jti=payload.get("jti"),
            )
        except (ValidationError, TypeError, ValueError) as e:
            raise TokenMalformed(str(e)) from e

    @staticmethod
    def signature(token: str) -> str:
        """The signature segment of a JWT; what the session store keys on."""
        parts = token.split(".")
        return parts[2] if len(parts) == 3 else ""
