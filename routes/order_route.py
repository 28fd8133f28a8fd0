from typing import List
from fastapi import APIRouter, Depends, Query
from core.authorization import Action, enforce
from core.dependencies import get_current_user, get_factory_client, get_menu_store, get_order_store
from core.exceptions import InternalFailureError
from models.menu import MenuItemCreate, MenuItemOut
from models.order import OrderCreate, OrderHistory, OrderReceipt
from models.user import CurrentUser
from services.factory_client import FactoryClient, FulfillmentError
from services.order_service import MenuStore, OrderStore
from utils.logger import get_logger

logger = get_logger("Order_Route")

router = APIRouter(prefix="/api/order", tags=["Orders"])

docs = [
    {
        "method": "GET",
        "path": "/api/order/menu",
        "description": "Get the pizza menu",
        "example": "curl localhost:3000/api/order/menu",
        "response": [{"id": "<id>", "title": "Veggie", "image": "pizza1.png", "price": 0.0038, "description": "A garden of delight"}],
    },
    {
        "method": "PUT",
        "path": "/api/order/menu",
        "requiresAuth": True,
        "description": "Add an item to the menu",
        "example": 'curl -X PUT localhost:3000/api/order/menu -H \'Content-Type: application/json\' -d \'{ "title":"Student", "description": "No topping, no sauce, just carbs", "image":"pizza9.png", "price": 0.0001 }\'  -H \'Authorization: Bearer tttttt\'',
        "response": [{"id": "<id>", "title": "Student", "description": "No topping, no sauce, just carbs", "image": "pizza9.png", "price": 0.0001}],
    },
    {
        "method": "GET",
        "path": "/api/order",
        "requiresAuth": True,
        "description": "Get the orders for the authenticated user",
        "example": "curl -X GET localhost:3000/api/order  -H 'Authorization: Bearer tttttt'",
        "response": {"dinerId": "<id>", "orders": [{"id": "<id>", "franchiseId": "<id>", "storeId": "<id>", "date": "2024-06-05T05:14:40.000Z", "items": [{"menuId": "<id>", "description": "Veggie", "price": 0.05}]}], "page": 1},
    },
    {
        "method": "POST",
        "path": "/api/order",
        "requiresAuth": True,
        "description": "Create a order for the authenticated user",
        "example": 'curl -X POST localhost:3000/api/order -H \'Content-Type: application/json\' -d \'{"franchiseId": "<id>", "storeId":"<id>", "items":[{ "menuId": "<id>", "description": "Veggie", "price": 0.05 }]}\'  -H \'Authorization: Bearer tttttt\'',
        "response": {"order": {"franchiseId": "<id>", "storeId": "<id>", "items": [{"menuId": "<id>", "description": "Veggie", "price": 0.05}], "id": "<id>"}, "jwt": "1111111111", "followLinkToEndChaos": "<reportUrl>"},
    },
]


@router.get("/menu", response_model=List[MenuItemOut])
async def get_menu(menu: MenuStore = Depends(get_menu_store)):
    return await menu.get_menu()


@router.put("/menu", response_model=List[MenuItemOut])
async def add_menu_item(
    item: MenuItemCreate,
    current_user: CurrentUser = Depends(get_current_user),
    menu: MenuStore = Depends(get_menu_store),
):
    enforce(current_user, Action.UPDATE_MENU)
    return await menu.add_menu_item(item)


@router.get("", response_model=OrderHistory)
async def get_orders(
    page: int = Query(1, ge=1, description="Page number"),
    current_user: CurrentUser = Depends(get_current_user),
    orders: OrderStore = Depends(get_order_store),
):
    enforce(current_user, Action.VIEW_ORDERS)
    return await orders.get_orders(current_user.id, page)


@router.post("", response_model=OrderReceipt)
async def create_order(
    payload: OrderCreate,
    current_user: CurrentUser = Depends(get_current_user),
    orders: OrderStore = Depends(get_order_store),
    factory: FactoryClient = Depends(get_factory_client),
):
    """
    Stores the order, then asks the factory to make it. A factory failure
    leaves the stored order in place and reports the failure to the caller.
    """
    enforce(current_user, Action.PLACE_ORDER)
    order = await orders.add_diner_order(current_user.id, payload)
    try:
        receipt = await factory.fulfill(current_user, order)
    except FulfillmentError as e:
        logger.error(f"Order {order.id} stored but not fulfilled: {e}")
        raise InternalFailureError(
            "Failed to fulfill order at factory",
            extra={"followLinkToEndChaos": e.report_url},
        )
    return {"order": order, "jwt": receipt["jwt"], "followLinkToEndChaos": receipt["reportUrl"]}
