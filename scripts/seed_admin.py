# scripts/seed_admin.py
import asyncio
from core.exceptions import ConflictError
from db.db_operation import create_indexes, mongo_conn
from models.user import AdminRole, UserInDB
from services.session_service import SessionStore
from services.user_service import UserStore
from settings.config import settings
from utils.logger import get_logger, setup_logging

logger = get_logger("Seed")

async def seed(db):
    await create_indexes(db)
    users = UserStore(db)
    try:
        admin = await users.add_user(UserInDB(
            name=settings.DEFAULT_ADMIN_NAME,
            email=settings.DEFAULT_ADMIN_EMAIL,
            password=settings.DEFAULT_ADMIN_PASSWORD,
            roles=[AdminRole()],
        ))
        logger.info(f"Created admin: {admin.email} {admin.id}")
    except ConflictError:
        logger.info("Admin already exists")
    # sessions past their expiry can never validate again
    await SessionStore(db).purge_expired()

if __name__ == "__main__":
    setup_logging(settings.LOG_LEVEL)
    asyncio.run(seed(mongo_conn.db))
