from typing import Optional

from pydantic import Field, StrictStr

from schemas import CamelModel


class UserCreateRequest(CamelModel):
    username: StrictStr = Field(min_length=1, max_length=80)
    password: StrictStr = Field(min_length=1)
    preferred_language: Optional[StrictStr] = None
    profile_image: Optional[StrictStr] = None


class UserUpdateRequest(CamelModel):
    password: Optional[StrictStr] = Field(default=None, min_length=1)
    preferred_language: Optional[StrictStr] = None
    profile_image: Optional[StrictStr] = None


class SetLanguageRequest(CamelModel):
    language: StrictStr
    user_id: Optional[int] = Field(default=None, gt=0)
