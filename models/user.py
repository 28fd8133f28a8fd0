from pydantic import BaseModel, Field
from typing import Annotated, List, Literal, Optional, Union


class DinerRole(BaseModel):
    role: Literal["diner"] = "diner"


class AdminRole(BaseModel):
    role: Literal["admin"] = "admin"


class FranchiseeRole(BaseModel):
    role: Literal["franchisee"] = "franchisee"
    # id of the franchise this assignment is scoped to
    objectId: str


RoleAssignment = Annotated[
    Union[DinerRole, AdminRole, FranchiseeRole],
    Field(discriminator="role"),
]


class UserCreate(BaseModel):
    # fields are optional so a missing one becomes a 400, not a 422
    name: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None


class UserInDB(BaseModel):
    name: str
    email: str
    password: str
    roles: List[RoleAssignment] = Field(default_factory=lambda: [DinerRole()])


class UserOut(BaseModel):
    id: str
    name: str
    email: str
    roles: List[RoleAssignment] = Field(default_factory=list)


class UserLogin(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None


class UserUpdate(BaseModel):
    name: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None


class AuthResponse(BaseModel):
    user: UserOut
    token: str


class UserListStub(BaseModel):
    message: str = "not implemented"
    users: List[UserOut] = Field(default_factory=list)
    more: bool = False


class CurrentUser(UserOut):
    """Authenticated caller: live user record plus the roles from its token."""
    token: str
