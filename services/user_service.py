from datetime import datetime
from typing import Optional
from bson import ObjectId
from bson.errors import InvalidId
from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo.errors import DuplicateKeyError
from core.exceptions import ConflictError, NotFoundError
from models.user import AdminRole, DinerRole, FranchiseeRole, UserInDB, UserOut
from utils.hash import hash_password, verify_password
from utils.logger import get_logger

logger = get_logger("USER_SERVICE")

UNKNOWN_USER = "unknown user"


def is_admin_like(user) -> bool:
    """True when the identity holds the global admin assignment."""
    if user is None:
        return False
    return any(isinstance(role, AdminRole) for role in user.roles)


def has_franchise_role(user, franchise_id: str) -> bool:
    if user is None or franchise_id is None:
        return False
    return any(
        isinstance(role, FranchiseeRole) and role.objectId == str(franchise_id)
        for role in user.roles
    )


def to_object_id(value) -> Optional[ObjectId]:
    try:
        return ObjectId(str(value))
    except (InvalidId, TypeError):
        return None


def user_out(doc: dict) -> UserOut:
    return UserOut(
        id=str(doc["_id"]),
        name=doc.get("name", ""),
        email=doc["email"],
        roles=doc.get("roles") or [DinerRole().model_dump()],
    )


class UserStore:
    """Users, their bcrypt hashes and their role assignments."""

    def __init__(self, db: AsyncIOMotorDatabase):
        self.users = db["users"]

    async def add_user(self, candidate: UserInDB) -> UserOut:
        logger.info(f"User create request received for email: {candidate.email}")
        if await self.users.find_one({"email": candidate.email}):
            raise ConflictError("email already registered")

        roles = candidate.roles or [DinerRole()]
        user_dict = {
            "name": candidate.name,
            "email": candidate.email,
            "password": hash_password(candidate.password),
            "roles": [role.model_dump() for role in roles],
            "created_at": datetime.utcnow(),
        }
        try:
            result = await self.users.insert_one(user_dict)
        except DuplicateKeyError:
            # lost a race with a concurrent registration
            raise ConflictError("email already registered")
        logger.info(f"User inserted into database with id: {result.inserted_id}")
        user_dict["_id"] = result.inserted_id
        return user_out(user_dict)

    async def get_user(self, email: Optional[str], password: Optional[str]) -> UserOut:
        """
        Resolve a credential pair. Unknown email and wrong password fail the
        same way so callers can't tell which one was wrong.
        """
        db_user = await self.users.find_one({"email": email}) if email else None
        if not db_user or not verify_password(password, db_user.get("password")):
            logger.warning(f"Credential lookup failed for {email}")
            raise NotFoundError(UNKNOWN_USER)
        return user_out(db_user)

    async def get_user_by_id(self, user_id: str) -> UserOut:
        oid = to_object_id(user_id)
        db_user = await self.users.find_one({"_id": oid}) if oid else None
        if not db_user:
            raise NotFoundError(UNKNOWN_USER)
        return user_out(db_user)

    async def get_user_by_email(self, email: str) -> UserOut:
        db_user = await self.users.find_one({"email": email})
        if not db_user:
            raise NotFoundError(UNKNOWN_USER)
        return user_out(db_user)

    async def update_user(
        self,
        user_id: str,
        name: Optional[str] = None,
        email: Optional[str] = None,
        password: Optional[str] = None,
    ) -> UserOut:
        oid = to_object_id(user_id)
        if oid is None or not await self.users.find_one({"_id": oid}):
            raise NotFoundError(UNKNOWN_USER)

        update_doc = {"updated_at": datetime.utcnow()}
        if name:
            update_doc["name"] = name
        if email:
            update_doc["email"] = email
        if password:
            update_doc["password"] = hash_password(password)

        if email:
            clash = await self.users.find_one({"email": email, "_id": {"$ne": oid}})
            if clash:
                raise ConflictError("email already registered")
        try:
            await self.users.update_one({"_id": oid}, {"$set": update_doc})
        except DuplicateKeyError:
            raise ConflictError("email already registered")
        logger.info(f"User {user_id} updated fields: {sorted(k for k in update_doc if k != 'password')}")
        return await self.get_user_by_id(user_id)

    async def add_franchise_role(self, user_id: str, franchise_id: str) -> None:
        role = FranchiseeRole(objectId=str(franchise_id)).model_dump()
        await self.users.update_one({"_id": to_object_id(user_id)}, {"$addToSet": {"roles": role}})
        logger.info(f"User {user_id} assigned franchisee role for franchise {franchise_id}")

    async def remove_franchise_role(self, franchise_id: str) -> None:
        role = FranchiseeRole(objectId=str(franchise_id)).model_dump()
        result = await self.users.update_many({"roles": role}, {"$pull": {"roles": role}})
        logger.info(f"Removed franchisee role for franchise {franchise_id} from {result.modified_count} users")
