from typing import Optional
from pydantic import BaseModel, EmailStr


# ---------- Schemas ----------

class IdentifierCheckPayload(BaseModel):
    identifier: Optional[str] = None   # email or phone number

class IdentifierCheckResponse(BaseModel):
    exists: bool

class EmailCheckPayload(BaseModel):
    email: Optional[EmailStr] = None
    action: Optional[str] = None       # "register" (default) / "reset"

class EmailAvailability(BaseModel):
    available: bool
    message: Optional[str] = None

class EmailResetCheck(BaseModel):
    exists: bool
    hasContactInfo: bool
    message: str
