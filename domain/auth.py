"""Domain Entities - Auth"""
from pydantic import BaseModel, Field
from uuid import UUID, uuid4
from typing import Optional


class User(BaseModel):
    """Authenticated caller; user_id is the holder identity on reservations"""
    user_id: UUID = Field(default_factory=uuid4)
    username: str
    email: Optional[str] = None
    full_name: Optional[str] = None
    is_admin: bool = False
    disabled: bool = False

    class Config:
        from_attributes = True

    def may_act_for(self, holder_id: UUID) -> bool:
        """Front desk staff act for any guest, guests only for themselves"""
        return self.is_admin or self.user_id == holder_id


class UserInDB(User):
    hashed_password: str
