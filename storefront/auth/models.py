from pydantic import BaseModel, Field
from typing import List, Optional


class TokenData(BaseModel):
    """Verified caller identity extracted from an access token."""
    user_id: str
    email: Optional[str] = None
    full_name: Optional[str] = None
    roles: List[str] = Field(default_factory=list)
    is_admin: bool = False
