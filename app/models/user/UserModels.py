from datetime import date, datetime
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


class NewUserModel(BaseModel):
    id: Optional[str] = Field(default=None, description="Identity-provider uid")
    name: str = Field(min_length=1)
    email: str = Field(pattern=r"^[^@\s]+@[^@\s]+$")
    photo: str
    gender: Literal["male", "female"]
    dob: date


class UserOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    email: str
    photo: str
    role: str
    gender: str
    dob: date
    age: int
    created_at: datetime
