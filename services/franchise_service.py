# services/franchise_service.py
import re
from datetime import datetime
from typing import List, Tuple
from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo.errors import DuplicateKeyError
from core.exceptions import ConflictError, NotFoundError
from models.franchise import FranchiseAdminOut, FranchiseOut, StoreOut
from services.user_service import UserStore, to_object_id
from utils.logger import get_logger

logger = get_logger("Franchise_Service")


def name_pattern(name_filter: str) -> str:
    """'*' in the filter matches anything; everything else is literal."""
    return "^" + ".*".join(re.escape(part) for part in name_filter.split("*")) + "$"


class FranchiseStore:
    def __init__(self, db: AsyncIOMotorDatabase, users: UserStore):
        self.franchises = db["franchises"]
        self.stores = db["stores"]
        self.orders = db["orders"]
        self.users_collection = db["users"]
        self.users = users

    async def _admins(self, admin_ids: List[str]) -> List[FranchiseAdminOut]:
        oids = [oid for oid in (to_object_id(a) for a in admin_ids) if oid]
        cursor = self.users_collection.find({"_id": {"$in": oids}}, {"password": 0})
        docs = await cursor.to_list(length=None)
        return [FranchiseAdminOut(id=str(d["_id"]), name=d.get("name", ""), email=d["email"]) for d in docs]

    async def _stores(self, franchise_id: str, with_revenue: bool = False) -> List[StoreOut]:
        docs = await self.stores.find({"franchise_id": franchise_id}).to_list(length=None)
        out = []
        for d in docs:
            store = StoreOut(id=str(d["_id"]), name=d["name"])
            if with_revenue:
                store.totalRevenue = await self._store_revenue(str(d["_id"]))
            out.append(store)
        return out

    async def _store_revenue(self, store_id: str) -> float:
        total = 0.0
        async for order in self.orders.find({"store_id": store_id}, {"items.price": 1}):
            total += sum(float(item.get("price", 0)) for item in order.get("items", []))
        return total

    async def list_franchises(
        self,
        page: int = 0,
        limit: int = 10,
        name_filter: str = "*",
        include_admins: bool = False,
    ) -> Tuple[List[FranchiseOut], bool]:
        query = {}
        if name_filter and name_filter != "*":
            query["name"] = {"$regex": name_pattern(name_filter)}
        cursor = self.franchises.find(query).sort("_id", 1).skip(page * limit).limit(limit + 1)
        docs = await cursor.to_list(length=limit + 1)
        more = len(docs) > limit

        franchises = []
        for d in docs[:limit]:
            fid = str(d["_id"])
            franchise = FranchiseOut(id=fid, name=d["name"], stores=await self._stores(fid))
            if include_admins:
                franchise.admins = await self._admins(d.get("admin_ids", []))
            franchises.append(franchise)
        return franchises, more

    async def get_franchise(self, franchise_id: str) -> FranchiseOut:
        oid = to_object_id(franchise_id)
        doc = await self.franchises.find_one({"_id": oid}) if oid else None
        if not doc:
            raise NotFoundError("unknown franchise")
        return FranchiseOut(
            id=str(doc["_id"]),
            name=doc["name"],
            admins=await self._admins(doc.get("admin_ids", [])),
            stores=await self._stores(str(doc["_id"]), with_revenue=True),
        )

    async def get_user_franchises(self, user_id: str) -> List[FranchiseOut]:
        docs = await self.franchises.find({"admin_ids": str(user_id)}).to_list(length=None)
        return [await self.get_franchise(str(d["_id"])) for d in docs]

    async def create_franchise(self, name: str, admin_emails: List[str]) -> FranchiseOut:
        admins = []
        for email in admin_emails:
            try:
                admins.append(await self.users.get_user_by_email(email))
            except NotFoundError:
                raise NotFoundError(f"unknown user for franchise admin {email} provided")

        doc = {
            "name": name,
            "admin_ids": [a.id for a in admins],
            "created_at": datetime.utcnow(),
        }
        try:
            result = await self.franchises.insert_one(doc)
        except DuplicateKeyError:
            raise ConflictError(f"franchise {name} already exists")
        franchise_id = str(result.inserted_id)

        for admin in admins:
            await self.users.add_franchise_role(admin.id, franchise_id)

        logger.info(f"Franchise {franchise_id} created with admins {[a.email for a in admins]}")
        return FranchiseOut(
            id=franchise_id,
            name=name,
            admins=[FranchiseAdminOut(id=a.id, name=a.name, email=a.email) for a in admins],
            stores=[],
        )

    async def delete_franchise(self, franchise_id: str) -> None:
        oid = to_object_id(franchise_id)
        if oid is None:
            return
        await self.stores.delete_many({"franchise_id": str(oid)})
        await self.users.remove_franchise_role(str(oid))
        result = await self.franchises.delete_one({"_id": oid})
        logger.info(f"Franchise {franchise_id} deleted (matched={result.deleted_count})")

    async def create_store(self, franchise_id: str, name: str) -> StoreOut:
        oid = to_object_id(franchise_id)
        if oid is None or not await self.franchises.find_one({"_id": oid}):
            raise NotFoundError("unknown franchise")
        result = await self.stores.insert_one({
            "franchise_id": str(oid),
            "name": name,
            "created_at": datetime.utcnow(),
        })
        logger.info(f"Store {result.inserted_id} created for franchise {franchise_id}")
        return StoreOut(id=str(result.inserted_id), name=name, franchiseId=str(oid))

    async def get_store(self, franchise_id: str, store_id: str) -> StoreOut:
        oid = to_object_id(store_id)
        doc = await self.stores.find_one({"_id": oid, "franchise_id": str(franchise_id)}) if oid else None
        if not doc:
            raise NotFoundError("unknown store")
        return StoreOut(id=str(doc["_id"]), name=doc["name"], franchiseId=doc["franchise_id"])

    async def delete_store(self, franchise_id: str, store_id: str) -> None:
        oid = to_object_id(store_id)
        if oid is None:
            return
        result = await self.stores.delete_one({"_id": oid, "franchise_id": str(franchise_id)})
        logger.info(f"Store {store_id} deleted from franchise {franchise_id} (matched={result.deleted_count})")
