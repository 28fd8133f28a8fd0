# routes/franchise_routes.py
from typing import List, Optional
from fastapi import APIRouter, Depends, Query
from core.authorization import Action, can_see_franchise_admins, can_view_user_franchises, enforce
from core.dependencies import get_current_user, get_franchise_store, get_optional_user
from models.franchise import FranchiseCreate, FranchiseList, FranchiseOut, StoreCreate, StoreOut
from models.user import CurrentUser
from services.franchise_service import FranchiseStore
from utils.logger import get_logger

logger = get_logger("Franchise_Route")
router = APIRouter(prefix="/api/franchise", tags=["Franchises"])

docs = [
    {
        "method": "GET",
        "path": "/api/franchise?page=0&limit=10&name=*",
        "description": "List all the franchises",
        "example": "curl localhost:3000/api/franchise?page=0&limit=10&name=pizzaPocket",
        "response": {"franchises": [{"id": "<id>", "name": "pizzaPocket", "stores": [{"id": "<id>", "name": "SLC"}]}], "more": False},
    },
    {
        "method": "GET",
        "path": "/api/franchise/:userId",
        "requiresAuth": True,
        "description": "List a user's franchises",
        "example": "curl localhost:3000/api/franchise/<userId> -H 'Authorization: Bearer tttttt'",
        "response": [{"id": "<id>", "name": "pizzaPocket", "admins": [{"id": "<id>", "name": "pizza franchisee", "email": "f@jwt.com"}], "stores": [{"id": "<id>", "name": "SLC", "totalRevenue": 0}]}],
    },
    {
        "method": "POST",
        "path": "/api/franchise",
        "requiresAuth": True,
        "description": "Create a new franchise",
        "example": 'curl -X POST localhost:3000/api/franchise -H \'Content-Type: application/json\' -H \'Authorization: Bearer tttttt\' -d \'{"name": "pizzaPocket", "admins": [{"email": "f@jwt.com"}]}\'',
        "response": {"name": "pizzaPocket", "admins": [{"email": "f@jwt.com", "id": "<id>", "name": "pizza franchisee"}], "id": "<id>"},
    },
    {
        "method": "DELETE",
        "path": "/api/franchise/:franchiseId",
        "requiresAuth": True,
        "description": "Delete a franchise",
        "example": "curl -X DELETE localhost:3000/api/franchise/<id> -H 'Authorization: Bearer tttttt'",
        "response": {"message": "franchise deleted"},
    },
    {
        "method": "POST",
        "path": "/api/franchise/:franchiseId/store",
        "requiresAuth": True,
        "description": "Create a new franchise store",
        "example": 'curl -X POST localhost:3000/api/franchise/<id>/store -H \'Content-Type: application/json\' -d \'{"name":"SLC"}\' -H \'Authorization: Bearer tttttt\'',
        "response": {"id": "<id>", "name": "SLC", "franchiseId": "<id>"},
    },
    {
        "method": "DELETE",
        "path": "/api/franchise/:franchiseId/store/:storeId",
        "requiresAuth": True,
        "description": "Delete a store",
        "example": "curl -X DELETE localhost:3000/api/franchise/<id>/store/<storeId> -H 'Authorization: Bearer tttttt'",
        "response": {"message": "store deleted"},
    },
]


# Public, but admins also get each franchise's admin list
@router.get("", response_model=FranchiseList, response_model_exclude_none=True)
async def list_franchises(
    page: int = Query(0, ge=0),
    limit: int = Query(10, ge=1, le=100),
    name: str = Query("*"),
    current_user: Optional[CurrentUser] = Depends(get_optional_user),
    franchises: FranchiseStore = Depends(get_franchise_store),
):
    enforce(current_user, Action.LIST_FRANCHISES)
    items, more = await franchises.list_franchises(
        page=page,
        limit=limit,
        name_filter=name,
        include_admins=can_see_franchise_admins(current_user),
    )
    return {"franchises": items, "more": more}


@router.get("/{user_id}", response_model=List[FranchiseOut], response_model_exclude_none=True)
async def get_user_franchises(
    user_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    franchises: FranchiseStore = Depends(get_franchise_store),
):
    enforce(current_user, Action.VIEW_USER_FRANCHISES, user_id)
    if not can_view_user_franchises(current_user, user_id):
        return []
    return await franchises.get_user_franchises(user_id)


@router.post("", response_model=FranchiseOut)
async def create_franchise(
    payload: FranchiseCreate,
    current_user: CurrentUser = Depends(get_current_user),
    franchises: FranchiseStore = Depends(get_franchise_store),
):
    enforce(current_user, Action.CREATE_FRANCHISE)
    return await franchises.create_franchise(payload.name, [admin.email for admin in payload.admins])


# Known gap: no auth check here. Clients rely on it, so it stays until they are migrated.
@router.delete("/{franchise_id}")
async def delete_franchise(franchise_id: str, franchises: FranchiseStore = Depends(get_franchise_store)):
    enforce(None, Action.DELETE_FRANCHISE, franchise_id)
    await franchises.delete_franchise(franchise_id)
    return {"message": "franchise deleted"}


@router.post("/{franchise_id}/store", response_model=StoreOut, response_model_exclude_none=True)
async def create_store(
    franchise_id: str,
    payload: StoreCreate,
    current_user: CurrentUser = Depends(get_current_user),
    franchises: FranchiseStore = Depends(get_franchise_store),
):
    enforce(current_user, Action.CREATE_STORE, franchise_id)
    return await franchises.create_store(franchise_id, payload.name)


@router.delete("/{franchise_id}/store/{store_id}")
async def delete_store(
    franchise_id: str,
    store_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    franchises: FranchiseStore = Depends(get_franchise_store),
):
    enforce(current_user, Action.DELETE_STORE, franchise_id)
    await franchises.delete_store(franchise_id, store_id)
    return {"message": "store deleted"}
