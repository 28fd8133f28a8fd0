from typing import Optional, Tuple
from core.exceptions import BadRequestError, NotFoundError, UnauthorizedError
from models.user import CurrentUser, DinerRole, UserInDB, UserOut
from services.session_service import SessionStore
from services.user_service import UserStore
from utils.jwt_handler import TokenCodec, TokenInvalid
from utils.logger import get_logger

logger = get_logger("Auth_Service")

REQUIRED_FIELDS_MESSAGE = "name, email, and password are required"


class AuthService:
    """
    Register, login, logout and per-request authentication.

    A token is usable while its signature and expiry check out AND the session
    store still holds it. Logging out removes it from the store; expiry needs
    no action.
    """

    def __init__(self, users: UserStore, sessions: SessionStore, codec: TokenCodec):
        self.users = users
        self.sessions = sessions
        self.codec = codec

    async def reissue(self, user: UserOut) -> str:
        token = self.codec.issue(user)
        claims = self.codec.verify(token)
        await self.sessions.register(token, user.id, claims.expires_at.replace(tzinfo=None))
        return token

    async def register(self, name: Optional[str], email: Optional[str], password: Optional[str]) -> Tuple[UserOut, str]:
        if not name or not email or not password:
            raise BadRequestError(REQUIRED_FIELDS_MESSAGE)
        user = await self.users.add_user(
            UserInDB(name=name, email=email, password=password, roles=[DinerRole()])
        )
        token = await self.reissue(user)
        logger.info(f"Registered user {user.id}")
        return user, token

    async def login(self, email: Optional[str], password: Optional[str]) -> Tuple[UserOut, str]:
        logger.info(f"Login attempt for: {email}")
        user = await self.users.get_user(email, password)
        token = await self.reissue(user)
        logger.info(f"Login successful: {email}")
        return user, token

    async def logout(self, token: Optional[str]) -> None:
        # raises when the token is already unusable
        user = await self.authenticate(token)
        await self.sessions.revoke(token)
        logger.info(f"Logout for user {user.id}")

    async def authenticate(self, token: Optional[str]) -> CurrentUser:
        if not token:
            raise UnauthorizedError()
        try:
            claims = self.codec.verify(token)
        except TokenInvalid as e:
            logger.warning(f"Rejected token ({type(e).__name__}): {e}")
            raise UnauthorizedError()

        if not await self.sessions.is_valid(token):
            logger.warning(f"Rejected revoked or unknown session for user {claims.user_id}")
            raise UnauthorizedError()

        try:
            user = await self.users.get_user_by_id(claims.user_id)
        except NotFoundError:
            logger.warning(f"Token refers to missing user {claims.user_id}")
            raise UnauthorizedError()

        return CurrentUser(
            id=user.id,
            name=user.name,
            email=user.email,
            roles=claims.roles,
            token=token,
        )
