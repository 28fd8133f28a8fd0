from typing import Optional
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from motor.motor_asyncio import AsyncIOMotorDatabase
from core.exceptions import UnauthorizedError
from db.db_operation import get_db
from models.user import CurrentUser
from services.auth_service import AuthService
from services.factory_client import FactoryClient
from services.franchise_service import FranchiseStore
from services.order_service import MenuStore, OrderStore
from services.session_service import SessionStore
from services.user_service import UserStore
from settings.config import settings
from utils.jwt_handler import TokenCodec
from utils.logger import get_logger

logger = get_logger("Dependencies")

# missing or non-bearer Authorization headers resolve to None, not a 403
bearer_scheme = HTTPBearer(auto_error=False)

# signing key is fixed for the life of the process
token_codec = TokenCodec(
    secret_key=settings.SECRET_KEY,
    algorithm=settings.ALGORITHM,
    expire_minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES,
)


def get_token_codec() -> TokenCodec:
    return token_codec


def get_user_store(db: AsyncIOMotorDatabase = Depends(get_db)) -> UserStore:
    return UserStore(db)


def get_session_store(db: AsyncIOMotorDatabase = Depends(get_db)) -> SessionStore:
    return SessionStore(db)


def get_auth_service(
    users: UserStore = Depends(get_user_store),
    sessions: SessionStore = Depends(get_session_store),
    codec: TokenCodec = Depends(get_token_codec),
) -> AuthService:
    return AuthService(users, sessions, codec)


def get_franchise_store(
    db: AsyncIOMotorDatabase = Depends(get_db),
    users: UserStore = Depends(get_user_store),
) -> FranchiseStore:
    return FranchiseStore(db, users)


def get_menu_store(db: AsyncIOMotorDatabase = Depends(get_db)) -> MenuStore:
    return MenuStore(db)


def get_order_store(
    db: AsyncIOMotorDatabase = Depends(get_db),
    menu: MenuStore = Depends(get_menu_store),
) -> OrderStore:
    return OrderStore(db, menu)


def get_factory_client() -> FactoryClient:
    return FactoryClient(
        base_url=settings.FACTORY_URL,
        api_key=settings.FACTORY_API_KEY,
        timeout=settings.FACTORY_TIMEOUT_SECONDS,
    )


def get_bearer_token(credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme)) -> Optional[str]:
    return credentials.credentials if credentials else None


async def get_current_user(
    token: Optional[str] = Depends(get_bearer_token),
    auth: AuthService = Depends(get_auth_service),
) -> CurrentUser:
    """
    Resolve the bearer token to the calling user.
    Raises 401 "unauthorized" for a missing, malformed, expired or revoked token.
    """
    return await auth.authenticate(token)


async def get_optional_user(
    token: Optional[str] = Depends(get_bearer_token),
    auth: AuthService = Depends(get_auth_service),
) -> Optional[CurrentUser]:
    """
    Like get_current_user but anonymous callers come back as None.
    """
    if not token:
        return None
    try:
        return await auth.authenticate(token)
    except UnauthorizedError:
        return None
