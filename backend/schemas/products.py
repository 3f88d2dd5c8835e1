from typing import List, Optional, NewType
from datetime import datetime
from pydantic import BaseModel, ConfigDict, Field, constr

NameStr = NewType("NameStr", constr(strip_whitespace=True, min_length=1, max_length=255))

class ProductCreate(BaseModel):
    name: NameStr
    description: Optional[str] = None
    price: float = Field(ge=0)
    stock: int = Field(default=0, ge=0)

class ProductUpdate(BaseModel):
    name: Optional[NameStr] = None
    description: Optional[str] = None
    price: Optional[float] = Field(default=None, ge=0)
    stock: Optional[int] = Field(default=None, ge=0)

class ProductImageOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    product_id: int
    image_url: str
    public_id: Optional[str] = None
    is_primary: bool

class ProductOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    description: Optional[str] = None
    price: float
    stock: int
    created_at: Optional[datetime] = None
    images: List[ProductImageOut] = []

class ImageDeleteResponse(BaseModel):
    success: bool
    message: str
