# cropmarket/models/user_models.py

from enum import Enum
from typing import FrozenSet

from pydantic import BaseModel, Field, field_validator


class Role(str, Enum):
    FARMER = "farmer"
    BUYER = "buyer"


class Capability(str, Enum):
    CREATE_CROP = "create_crop"
    LIST_CROPS = "list_crops"
    REQUEST_CONTRACT = "request_contract"


ROLE_CAPABILITIES = {
    Role.FARMER: frozenset({Capability.CREATE_CROP, Capability.LIST_CROPS, Capability.REQUEST_CONTRACT}),
    Role.BUYER: frozenset({Capability.LIST_CROPS, Capability.REQUEST_CONTRACT}),
}


def capabilities_for(role: Role) -> FrozenSet[Capability]:
    return ROLE_CAPABILITIES.get(role, frozenset())


USERNAME_PATTERN = r"^[A-Za-z0-9._@-]+$"


class Identity(BaseModel):
    """Who is making the request, as proven by the bearer token."""
    username: str
    role: Role

    def can(self, capability: Capability) -> bool:
        return capability in capabilities_for(self.role)


class User(BaseModel):
    username: str = Field(..., min_length=1)
    passwordHash: str
    role: Role


class SignupModel(BaseModel):
    # letters, digits and . _ - @ only: the PDF core fonts must be able to print it
    username: str = Field(..., min_length=1, max_length=64, pattern=USERNAME_PATTERN)
    password: str = Field(..., min_length=1)
    role: Role

    @field_validator("username", mode="before")
    @classmethod
    def _strip_username(cls, v):
        return v.strip() if isinstance(v, str) else v

    @field_validator("role", mode="before")
    @classmethod
    def _lower_role(cls, v):
        return v.strip().lower() if isinstance(v, str) else v


class LoginModel(BaseModel):
    username: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)

    @field_validator("username", mode="before")
    @classmethod
    def _strip_username(cls, v):
        return v.strip() if isinstance(v, str) else v
