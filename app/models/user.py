from typing import Optional

from pydantic import BaseModel


class Role(BaseModel):
    role_id: int
    role_name: str
    description: Optional[str] = None

    class Config:
        frozen = True


class User(BaseModel):
    user_id: int
    user_name: str
    email: str
    role_id: int
    role_name: Optional[str] = None

    # weak reference to another user, not ownership
    manager_id: Optional[int] = None
    is_active: bool = True

    class Config:
        frozen = True
