"""Login, token and password-change bodies."""

from pydantic import Field

from petly.schemas.common import CamelModel


class LoginRequest(CamelModel):
    username: str = Field(min_length=1)
    password: str = Field(min_length=1)


class TokenResponse(CamelModel):
    token: str


class PasswordUpdate(CamelModel):
    password: str = Field(min_length=5, max_length=72)
