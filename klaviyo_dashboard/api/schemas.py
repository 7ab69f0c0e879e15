"""
Request and response bodies for the REST API.
"""

from pydantic import BaseModel, Field


class LoginRequest(BaseModel):
    email: str = Field(min_length=1)
    password: str = Field(min_length=1)


class ClientCreateRequest(BaseModel):
    name: str = Field(min_length=1)
    email: str = Field(min_length=1)
    password: str = Field(min_length=1)
    klaviyo_private_key: str = Field(min_length=1)


class ClientSummary(BaseModel):
    id: int
    name: str
    email: str


class ClientListItem(ClientSummary):
    created_at: str | None = None


class LoginResponse(BaseModel):
    token: str
    client: ClientSummary


class AdminLoginResponse(BaseModel):
    token: str
    admin: dict[str, int | str]


class ClientCreatedResponse(BaseModel):
    message: str
    client: ClientSummary


class HealthResponse(BaseModel):
    status: str
    message: str
