from fastapi import APIRouter, Depends
from core.authorization import Action, enforce
from core.dependencies import get_auth_service, get_current_user, get_user_store
from models.user import AuthResponse, CurrentUser, UserListStub, UserOut, UserUpdate
from services.auth_service import AuthService
from services.user_service import UserStore
from utils.logger import get_logger

logger = get_logger("User_Route")

router = APIRouter(prefix="/api/user", tags=["Users"])

docs = [
    {
        "method": "GET",
        "path": "/api/user/me",
        "requiresAuth": True,
        "description": "Get authenticated user",
        "example": "curl -X GET localhost:3000/api/user/me -H 'Authorization: Bearer tttttt'",
        "response": {"id": "<id>", "name": "pizza diner", "email": "d@jwt.com", "roles": [{"role": "diner"}]},
    },
    {
        "method": "PUT",
        "path": "/api/user/:userId",
        "requiresAuth": True,
        "description": "Update user",
        "example": 'curl -X PUT localhost:3000/api/user/<id> -d \'{"name":"pizza diner", "email":"d@jwt.com", "password":"diner"}\' -H \'Content-Type: application/json\' -H \'Authorization: Bearer tttttt\'',
        "response": {"user": {"id": "<id>", "name": "pizza diner", "email": "d@jwt.com", "roles": [{"role": "diner"}]}, "token": "tttttt"},
    },
    {
        "method": "DELETE",
        "path": "/api/user/:userId",
        "requiresAuth": True,
        "description": "Delete user (not implemented)",
        "example": "curl -X DELETE localhost:3000/api/user/<id> -H 'Authorization: Bearer tttttt'",
        "response": {"message": "not implemented"},
    },
    {
        "method": "GET",
        "path": "/api/user/",
        "requiresAuth": True,
        "description": "List users (not implemented)",
        "example": "curl -X GET localhost:3000/api/user/ -H 'Authorization: Bearer tttttt'",
        "response": {"message": "not implemented", "users": [], "more": False},
    },
]


@router.get("/me", response_model=UserOut)
async def read_current_user(current_user: CurrentUser = Depends(get_current_user)):
    return current_user


@router.put("/{user_id}", response_model=AuthResponse)
async def update_user(
    user_id: str,
    payload: UserUpdate,
    current_user: CurrentUser = Depends(get_current_user),
    users: UserStore = Depends(get_user_store),
    auth: AuthService = Depends(get_auth_service),
):
    enforce(current_user, Action.UPDATE_USER, user_id)
    updated = await users.update_user(user_id, payload.name, payload.email, payload.password)
    token = await auth.reissue(updated)
    return {"user": updated, "token": token}


# stubs kept so existing clients get a well-formed answer
@router.delete("/{user_id}", response_model=UserListStub)
async def delete_user(user_id: str, current_user: CurrentUser = Depends(get_current_user)):
    enforce(current_user, Action.DELETE_USER, user_id)
    return UserListStub()


@router.get("/", response_model=UserListStub)
async def list_users(current_user: CurrentUser = Depends(get_current_user)):
    enforce(current_user, Action.LIST_USERS)
    return UserListStub()
