"""Admin session and classification result models."""

from __future__ import annotations

from datetime import UTC, datetime

from pydantic import BaseModel, ConfigDict, Field

from smsbridge.models.enums import RoomCategory


class AdminSession(BaseModel):
    """Binds one bridge user to their private admin room with the bot."""

    model_config = ConfigDict(frozen=True)

    room_id: str
    owner: str
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

    def same_binding(self, other: AdminSession) -> bool:
        """True when both sessions point the same owner at the same room."""
        return self.room_id == other.room_id and self.owner == other.owner


class ClassificationResult(BaseModel):
    """Outcome of classifying a single room."""

    room_id: str
    category: RoomCategory
    session: AdminSession | None = None
    member_count: int = Field(default=0, ge=0)
    created: bool = False
    welcomed: bool = False

    @property
    def is_admin(self) -> bool:
        return self.category == RoomCategory.ADMIN
