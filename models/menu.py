from pydantic import BaseModel, Field
from typing import Optional

class MenuItemCreate(BaseModel):
    title: str = Field(..., min_length=1)
    description: Optional[str] = None
    image: Optional[str] = None
    price: float = Field(..., ge=0)

class MenuItemOut(BaseModel):
    id: str
    title: str
    description: Optional[str] = None
    image: Optional[str] = None
    price: float
