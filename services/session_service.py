import hashlib
from datetime import datetime
from typing import Optional
from motor.motor_asyncio import AsyncIOMotorDatabase
from utils.jwt_handler import TokenCodec
from utils.logger import get_logger

logger = get_logger("Session_Service")


def _token_key(token: str) -> str:
    return hashlib.sha256(TokenCodec.signature(token).encode("utf-8")).hexdigest()


class SessionStore:
    """
    Tracks which issued tokens are still live. A token whose signature is fine
    but whose entry was removed here has been logged out.
    """

    def __init__(self, db: AsyncIOMotorDatabase):
        self.sessions = db["auth"]

    async def register(self, token: str, user_id: str, expires_at: Optional[datetime] = None):
        key = _token_key(token)
        await self.sessions.update_one(
            {"token": key},
            {"$set": {
                "token": key,
                "user_id": user_id,
                "expires_at": expires_at,
                "created_at": datetime.utcnow(),
            }},
            upsert=True,
        )
        logger.debug(f"Session registered for user {user_id}")

    async def revoke(self, token: str) -> None:
        result = await self.sessions.delete_one({"token": _token_key(token)})
        if result.deleted_count:
            logger.info("Session revoked")
        else:
            logger.debug("Revoke requested for unknown session")

    async def is_valid(self, token: str) -> bool:
        if not TokenCodec.signature(token):
            return False
        return await self.sessions.find_one({"token": _token_key(token)}) is not None

    async def purge_expired(self, now: Optional[datetime] = None) -> int:
        now = now or datetime.utcnow()
        result = await self.sessions.delete_many({"expires_at": {"$lt": now}})
        logger.info(f"Purged {result.deleted_count} expired sessions")
        return result.deleted_count
