from pydantic import BaseModel
from typing import Optional

# --- User Schemas ---

class UserReadSchema(BaseModel):
    id: int
    username: str
    email: str
    full_name: Optional[str] = None
    is_active: bool
    role: str

    class Config:
        from_attributes = True
