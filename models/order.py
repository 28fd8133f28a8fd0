from pydantic import BaseModel, ConfigDict, Field
from typing import List, Optional
from datetime import datetime

class OrderItem(BaseModel):
    # clients sometimes send numeric ids
    model_config = ConfigDict(coerce_numbers_to_str=True)

    menuId: str
    description: Optional[str] = None
    price: float

class OrderCreate(BaseModel):
    model_config = ConfigDict(coerce_numbers_to_str=True)

    franchiseId: str
    storeId: str
    items: List[OrderItem] = Field(..., min_length=1)

class OrderOut(BaseModel):
    id: str
    franchiseId: str
    storeId: str
    date: Optional[datetime] = None
    items: List[OrderItem]

class OrderHistory(BaseModel):
    dinerId: str
    orders: List[OrderOut]
    page: int = 0

class OrderReceipt(BaseModel):
    order: OrderOut
    jwt: Optional[str] = None
    followLinkToEndChaos: Optional[str] = None
