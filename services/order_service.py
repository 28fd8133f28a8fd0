from datetime import datetime
from typing import List
from motor.motor_asyncio import AsyncIOMotorDatabase
from core.exceptions import InternalFailureError
from models.menu import MenuItemCreate, MenuItemOut
from models.order import OrderCreate, OrderHistory, OrderItem, OrderOut
from services.user_service import to_object_id
from utils.logger import get_logger

logger = get_logger("Order_Service")

ORDERS_PER_PAGE = 10


class MenuStore:
    def __init__(self, db: AsyncIOMotorDatabase):
        self.menu = db["menu"]

    async def get_menu(self) -> List[MenuItemOut]:
        docs = await self.menu.find({}).sort("_id", 1).to_list(length=None)
        return [
            MenuItemOut(
                id=str(d["_id"]),
                title=d["title"],
                description=d.get("description"),
                image=d.get("image"),
                price=d["price"],
            )
            for d in docs
        ]

    async def add_menu_item(self, item: MenuItemCreate) -> List[MenuItemOut]:
        result = await self.menu.insert_one(item.model_dump())
        logger.info(f"Menu item {result.inserted_id} added: {item.title}")
        return await self.get_menu()

    async def exists(self, menu_id: str) -> bool:
        oid = to_object_id(menu_id)
        return oid is not None and await self.menu.find_one({"_id": oid}) is not None


class OrderStore:
    """Local order records. Fulfillment happens elsewhere, after the insert."""

    def __init__(self, db: AsyncIOMotorDatabase, menu: MenuStore):
        self.orders = db["orders"]
        self.menu = menu

    async def get_orders(self, diner_id: str, page: int = 1) -> OrderHistory:
        page = max(page, 1)
        cursor = (
            self.orders.find({"diner_id": diner_id})
            .sort("_id", 1)
            .skip((page - 1) * ORDERS_PER_PAGE)
            .limit(ORDERS_PER_PAGE)
        )
        docs = await cursor.to_list(length=ORDERS_PER_PAGE)
        logger.info(f"Fetched {len(docs)} orders for diner {diner_id}")
        return OrderHistory(dinerId=diner_id, orders=[self._order_out(d) for d in docs], page=page)

    async def add_diner_order(self, diner_id: str, order: OrderCreate) -> OrderOut:
        for item in order.items:
            if not await self.menu.exists(item.menuId):
                logger.error(f"Order from {diner_id} references unknown menu item {item.menuId}")
                raise InternalFailureError(f"unknown menu item {item.menuId}")

        doc = {
            "diner_id": diner_id,
            "franchise_id": order.franchiseId,
            "store_id": order.storeId,
            "date": datetime.utcnow(),
            "items": [item.model_dump() for item in order.items],
        }
        result = await self.orders.insert_one(doc)
        doc["_id"] = result.inserted_id
        logger.info(f"New order created by {diner_id} with id {result.inserted_id}")
        return self._order_out(doc)

    @staticmethod
    def _order_out(doc: dict) -> OrderOut:
        return OrderOut(
            id=str(doc["_id"]),
            franchiseId=doc["franchise_id"],
            storeId=doc["store_id"],
            date=doc.get("date"),
            items=[OrderItem(**item) for item in doc.get("items", [])],
        )
