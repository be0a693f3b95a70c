# carmarket/domain/schemas.py
import re
from datetime import datetime
from typing import Dict, Literal, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

Role = Literal["user", "moderator", "admin"]
Category = Literal["standard", "sport", "coupe", "suv", "motorcycle"]
Server = Literal["arbat", "patriki", "rublevka", "tverskoy"]
ReviewStatus = Literal["approved", "rejected"]

USERNAME_RE = re.compile(r"^[A-Za-zА-Яа-яЁё]+ [A-Za-zА-Яа-яЁё]+$")


class CamelModel(BaseModel):
    """camelCase on the wire, snake_case in Python."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


# ---------------------------------------------------------------- auth


class RegisterIn(CamelModel):
    username: str
    password: str

    @field_validator("username")
    @classmethod
    def check_username(cls, v: str) -> str:
        v = v.strip()
        if len(v) < 3:
            raise ValueError("Username must be at least 3 characters long")
        if len(v) > 50:
            raise ValueError("Username must be at most 50 characters long")
        if not USERNAME_RE.match(v):
            raise ValueError("Use the format 'First Last': letters only, separated by one space")
        return v

    @field_validator("password")
    @classmethod
    def check_password(cls, v: str) -> str:
        if len(v) < 8:
            raise ValueError("Password must be at least 8 characters long")
        if not re.search(r"[A-Z]", v):
            raise ValueError("Password must contain an uppercase letter")
        if not re.search(r"[a-z]", v):
            raise ValueError("Password must contain a lowercase letter")
        if not re.search(r"[0-9]", v):
            raise ValueError("Password must contain a digit")
        if not re.search(r"[^A-Za-z0-9]", v):
            raise ValueError("Password must contain a special character")
        return v


class LoginIn(CamelModel):
    username: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class UserOut(CamelModel):
    """Session-user projection, never carries the password hash."""

    id: int
    username: str
    role: Role
    created_at: datetime


class UserUpdate(CamelModel):
    username: str
    role: Role

    @field_validator("username")
    @classmethod
    def check_username(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Username cannot be empty")
        if len(v) > 50:
            raise ValueError("Username must be at most 50 characters long")
        return v


class RoleUpdate(CamelModel):
    role: Role


class UserStatusOut(CamelModel):
    is_online: bool
    last_seen: datetime


# ---------------------------------------------------------------- cars


class ListingIn(CamelModel):
    """Descriptive fields of a listing, as submitted by a user."""

    name: str = Field(..., min_length=1, max_length=200)
    image_url: Optional[str] = None
    price: int = Field(..., ge=0)
    max_speed: int = Field(..., ge=0)
    acceleration: str = Field(..., min_length=1)
    drive: str = Field(..., min_length=1)
    category: Category
    server: Server
    server_id: Optional[str] = None
    phone: Optional[str] = None
    telegram: Optional[str] = None
    discord: Optional[str] = None
    description: Optional[str] = None
    is_premium: bool = False


class CarCreate(ListingIn):
    pass


class CarApplicationCreate(ListingIn):
    pass


class CarUpdate(CamelModel):
    """Partial update; only fields present in the request are applied."""

    name: Optional[str] = Field(None, min_length=1, max_length=200)
    image_url: Optional[str] = None
    price: Optional[int] = Field(None, ge=0)
    max_speed: Optional[int] = Field(None, ge=0)
    acceleration: Optional[str] = None
    drive: Optional[str] = None
    category: Optional[Category] = None
    server: Optional[Server] = None
    server_id: Optional[str] = None
    phone: Optional[str] = None
    telegram: Optional[str] = None
    discord: Optional[str] = None
    description: Optional[str] = None
    is_premium: Optional[bool] = None


class ListingOut(CamelModel):
    id: int
    name: str
    image_url: Optional[str] = None
    price: int
    max_speed: int
    acceleration: str
    drive: str
    category: str
    server: str
    server_id: Optional[str] = None
    phone: Optional[str] = None
    telegram: Optional[str] = None
    discord: Optional[str] = None
    description: Optional[str] = None
    is_premium: bool
    status: str
    created_by: int
    created_at: datetime


class CarOut(ListingOut):
    pass


class CarApplicationOut(ListingOut):
    reviewed_by: Optional[int] = None
    reviewed_at: Optional[datetime] = None


class ApplicationReview(CamelModel):
    status: ReviewStatus


# ---------------------------------------------------------------- favorites


class FavoriteIn(CamelModel):
    car_id: int = Field(..., gt=0)


class FavoriteOut(CamelModel):
    id: int
    user_id: int
    car_id: int
    created_at: datetime


class FavoriteCheckOut(CamelModel):
    is_favorite: bool


class FavoriteToggleOut(CamelModel):
    action: Literal["added", "removed"]
    is_favorite: bool


# ---------------------------------------------------------------- messages


class MessageIn(CamelModel):
    car_id: int = Field(..., gt=0)
    recipient_id: int = Field(
        ...,
        gt=0,
        validation_alias=AliasChoices("recipientId", "recipient_id", "sellerId", "seller_id"),
    )
    content: str = Field(..., validation_alias=AliasChoices("content", "message"))


class MessageOut(CamelModel):
    id: int
    car_id: int
    sender_id: int
    recipient_id: int
    content: str
    is_read: bool
    created_at: datetime
    car_name: Optional[str] = None
    sender_name: Optional[str] = None
    recipient_name: Optional[str] = None


class MarkConversationIn(CamelModel):
    car_id: int = Field(..., gt=0)
    buyer_id: int = Field(..., gt=0)
    seller_id: int = Field(..., gt=0)


class MarkConversationOut(CamelModel):
    success: bool
    marked_count: int


class RemoveMessageIn(CamelModel):
    message_id: int = Field(..., gt=0)


class UnreadCountOut(CamelModel):
    count: int


# ---------------------------------------------------------------- misc


class MessageResponse(CamelModel):
    message: str


class StatsOut(CamelModel):
    total_users: int
    total_cars: int
    pending_applications: int
    total_messages: int
    unread_messages: int


UserStatusMap = Dict[int, UserStatusOut]
