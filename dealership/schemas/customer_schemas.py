from pydantic import BaseModel
from typing import Optional

# --- Customer Schemas ---

class CustomerRead(BaseModel):
    """Schema for reading Customer data embedded in a car."""
    id: int
    name: str
    ident_document: str
    email: Optional[str] = None
    phone: Optional[str] = None

    class Config:
        from_attributes = True
