from pydantic import BaseModel, Field
from typing import List, Optional


class AdminEmail(BaseModel):
    email: str


class FranchiseCreate(BaseModel):
    name: str = Field(..., min_length=1)
    admins: List[AdminEmail] = Field(default_factory=list)


class StoreCreate(BaseModel):
    name: str = Field(..., min_length=1)


class FranchiseAdminOut(BaseModel):
    id: str
    name: str
    email: str


class StoreOut(BaseModel):
    id: str
    name: str
    franchiseId: Optional[str] = None
    totalRevenue: Optional[float] = None


class FranchiseOut(BaseModel):
    id: str
    name: str
    admins: Optional[List[FranchiseAdminOut]] = None
    stores: List[StoreOut] = Field(default_factory=list)


class FranchiseList(BaseModel):
    franchises: List[FranchiseOut]
    more: bool = False
