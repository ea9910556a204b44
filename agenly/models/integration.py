"""Connected external services (OAuth grants)."""

from datetime import datetime
from enum import Enum

from pydantic import Field

from agenly.models.deployment import CamelModel


class GoogleService(str, Enum):
    """Google services a user can connect."""

    CALENDAR = "google-calendar"
    GMAIL = "gmail"
    DRIVE = "google-drive"
    CONTACTS = "google-contacts"


class ConnectedService(CamelModel):
    """A per-user OAuth grant for one Google service."""

    id: str
    user_id: str
    service_name: GoogleService
    access_token: str
    refresh_token: str | None = None
    expires_at: datetime | None = None
    scope: str = ""
    connected_at: datetime = Field(default_factory=datetime.utcnow)
    is_active: bool = True

    @staticmethod
    def make_id(user_id: str, service_name: str) -> str:
        return f"{user_id}_{service_name}"

    def is_expired(self) -> bool:
        return self.expires_at is not None and datetime.utcnow() >= self.expires_at
