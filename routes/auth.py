from fastapi import APIRouter, Depends
from pymongo.errors import PyMongoError
from core.dependencies import get_auth_service, get_bearer_token
from core.exceptions import InternalFailureError
from models.user import AuthResponse, UserCreate, UserLogin
from services.auth_service import AuthService
from utils.logger import get_logger

logger = get_logger("AUTH_ROUTE")

router = APIRouter(prefix="/api/auth", tags=["Authentication"])

docs = [
    {
        "method": "POST",
        "path": "/api/auth",
        "description": "Register a new user",
        "example": 'curl -X POST localhost:3000/api/auth -d \'{"name":"pizza diner", "email":"d@jwt.com", "password":"diner"}\' -H \'Content-Type: application/json\'',
        "response": {"user": {"id": "<id>", "name": "pizza diner", "email": "d@jwt.com", "roles": [{"role": "diner"}]}, "token": "tttttt"},
    },
    {
        "method": "PUT",
        "path": "/api/auth",
        "description": "Login existing user",
        "example": 'curl -X PUT localhost:3000/api/auth -d \'{"email":"a@jwt.com", "password":"admin"}\' -H \'Content-Type: application/json\'',
        "response": {"user": {"id": "<id>", "name": "Pizza Admin", "email": "a@jwt.com", "roles": [{"role": "admin"}]}, "token": "tttttt"},
    },
    {
        "method": "DELETE",
        "path": "/api/auth",
        "requiresAuth": True,
        "description": "Logout a user",
        "example": "curl -X DELETE localhost:3000/api/auth -H 'Authorization: Bearer tttttt'",
        "response": {"message": "logout successful"},
    },
]


@router.post("", response_model=AuthResponse)
async def register(user: UserCreate, auth: AuthService = Depends(get_auth_service)):
    logger.info(f"Attempting to sign up user with email: {user.email}")
    try:
        created, token = await auth.register(user.name, user.email, user.password)
    except PyMongoError as e:
        logger.error(f"Database error during user signup: {e}")
        raise InternalFailureError("Database error")
    return {"user": created, "token": token}


@router.put("", response_model=AuthResponse)
async def login(user: UserLogin, auth: AuthService = Depends(get_auth_service)):
    found, token = await auth.login(user.email, user.password)
    return {"user": found, "token": token}


@router.delete("")
async def logout(token: str | None = Depends(get_bearer_token), auth: AuthService = Depends(get_auth_service)):
    await auth.logout(token)
    return {"message": "logout successful"}
