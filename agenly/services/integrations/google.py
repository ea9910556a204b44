"""Google OAuth connections and read-only access to connected Google APIs."""

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any
from urllib.parse import urlencode

import httpx
import structlog

from agenly.core.config import Settings
from agenly.core.exceptions import (
    IntegrationError,
    NotOwner,
    ServiceNotConnected,
    UnsupportedService,
)
from agenly.models import ConnectedService, GoogleService
from agenly.storage.base import StorageBackend

logger = structlog.get_logger()

AUTH_URL = "https://accounts.google.com/o/oauth2/v2/auth"
TOKEN_URL = "https://oauth2.googleapis.com/token"

SCOPES: dict[GoogleService, list[str]] = {
    GoogleService.CALENDAR: [
        "https://www.googleapis.com/auth/calendar",
        "https://www.googleapis.com/auth/calendar.events",
    ],
    GoogleService.GMAIL: [
        "https://www.googleapis.com/auth/gmail.readonly",
        "https://www.googleapis.com/auth/gmail.send",
    ],
    GoogleService.DRIVE: [
        "https://www.googleapis.com/auth/drive.file",
        "https://www.googleapis.com/auth/drive.readonly",
    ],
    GoogleService.CONTACTS: [
        "https://www.googleapis.com/auth/contacts.readonly",
    ],
}

# (url, query params) of the read call made for each service
DATA_ENDPOINTS: dict[GoogleService, tuple[str, dict[str, Any]]] = {
    GoogleService.CALENDAR: (
        "https://www.googleapis.com/calendar/v3/users/me/calendarList",
        {},
    ),
    GoogleService.GMAIL: (
        "https://gmail.googleapis.com/gmail/v1/users/me/messages",
        {"maxResults": 10},
    ),
    GoogleService.DRIVE: (
        "https://www.googleapis.com/drive/v3/files",
        {"pageSize": 10, "fields": "nextPageToken, files(id, name, mimeType, createdTime)"},
    ),
    GoogleService.CONTACTS: (
        "https://people.googleapis.com/v1/people/me/connections",
        {"personFields": "names,emailAddresses,phoneNumbers", "pageSize": 10},
    ),
}


def parse_service(service_name: str) -> GoogleService:
    try:
        return GoogleService(service_name)
    except ValueError:
        raise UnsupportedService(service_name) from None


@dataclass
class OAuthClient:
    client_id: str
    client_secret: str


class GoogleIntegrationService:
    """Connect, query and disconnect a user's Google services."""

    def __init__(
        self,
        settings: Settings,
        storage: StorageBackend,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.settings = settings
        self.storage = storage
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            timeout=self.settings.http_timeout_seconds,
            transport=self._transport,
        )

    def oauth_client(self, service: GoogleService) -> OAuthClient:
        """Calendar has its own OAuth app; everything else shares the main one."""
        if service == GoogleService.CALENDAR and self.settings.google_calendar_client_id:
            return OAuthClient(
                self.settings.google_calendar_client_id,
                self.settings.google_calendar_client_secret or self.settings.google_client_secret,
            )
        return OAuthClient(self.settings.google_client_id, self.settings.google_client_secret)

    # ==================== OAuth ====================

    def build_auth_url(self, service_name: str, user_id: str | None = None) -> str:
        """Consent URL for ``service_name``. State carries ``userId:serviceName``."""
        service = parse_service(service_name)
        params = {
            "client_id": self.oauth_client(service).client_id,
            "redirect_uri": self.settings.oauth_redirect_uri,
            "response_type": "code",
            "scope": " ".join(SCOPES[service]),
            "access_type": "offline",
            "prompt": "consent",
            "state": f"{user_id or ''}:{service.value}",
        }
        return f"{AUTH_URL}?{urlencode(params)}"

    @staticmethod
    def parse_state(state: str) -> tuple[str, str]:
        """Split ``userId:serviceName``. User ids may contain colons."""
        user_id, _, service_name = state.rpartition(":")
        return user_id, service_name

    async def handle_callback(
        self,
        code: str | None,
        state: str | None,
        error: str | None = None,
    ) -> str:
        """Finish the OAuth dance and return the URL to redirect the browser to.

        Never raises; every failure maps to an ``?error=`` redirect.
        """
        base = self.settings.app_url
        if error:
            logger.warning("OAuth provider returned an error", error=error)
            return f"{base}/?error=oauth_error"

        if not code or not state:
            return f"{base}/?error=missing_params"

        user_id, service_name = self.parse_state(state)
        if not user_id or not service_name:
            return f"{base}/?error=missing_params"

        try:
            service = parse_service(service_name)
            tokens = await self.exchange_code(code, service)
        except (UnsupportedService, IntegrationError) as e:
            logger.error("Token exchange failed", user_id=user_id, service=service_name, error=e.message)
            return f"{base}/?error=token_exchange_failed"

        try:
            await self.store_tokens(user_id, service, tokens)
        except Exception as e:
            logger.error("OAuth callback failed", user_id=user_id, error=str(e), exc_info=True)
            return f"{base}/?error=callback_error"

        return f"{base}/?success=google_connected"

    async def exchange_code(self, code: str, service: GoogleService) -> dict[str, Any]:
        return await self._token_request(
            service,
            {
                "code": code,
                "grant_type": "authorization_code",
                "redirect_uri": self.settings.oauth_redirect_uri,
            },
            failure="Token exchange failed",
        )

    async def refresh_access_token(self, connected: ConnectedService) -> ConnectedService:
        """Trade the stored refresh token for a new access token and persist it."""
        tokens = await self._token_request(
            connected.service_name,
            {"refresh_token": connected.refresh_token, "grant_type": "refresh_token"},
            failure="Token refresh failed",
        )
        if not tokens.get("access_token"):
            raise IntegrationError("Token refresh failed", service=connected.service_name.value)

        expires_in = tokens.get("expires_in")
        connected.access_token = tokens["access_token"]
        connected.refresh_token = tokens.get("refresh_token") or connected.refresh_token
        connected.expires_at = (
            datetime.utcnow() + timedelta(seconds=int(expires_in)) if expires_in else None
        )
        await self.storage.save_connected_service(connected)
        logger.info(
            "Google access token refreshed",
            user_id=connected.user_id,
            service=connected.service_name.value,
        )
        return connected

    async def _token_request(
        self, service: GoogleService, grant: dict[str, Any], failure: str
    ) -> dict[str, Any]:
        client_config = self.oauth_client(service)
        if not client_config.client_id or not client_config.client_secret:
            raise IntegrationError("Google credentials not configured", service=service.value)

        data = {
            "client_id": client_config.client_id,
            "client_secret": client_config.client_secret,
            **grant,
        }
        try:
            async with self._client() as client:
                response = await client.post(TOKEN_URL, data=data)
        except httpx.HTTPError as e:
            raise IntegrationError(failure, service=service.value) from e

        if response.status_code != 200:
            raise IntegrationError(
                failure,
                service=service.value,
                details={"status": response.status_code, "body": response.text[:500]},
            )
        try:
            tokens = response.json()
        except ValueError as e:
            raise IntegrationError(
                failure, service=service.value, details={"body": response.text[:500]}
            ) from e
        if not isinstance(tokens, dict):
            raise IntegrationError(failure, service=service.value)
        return tokens

    async def store_tokens(
        self,
        user_id: str,
        service: GoogleService,
        tokens: dict[str, Any],
    ) -> ConnectedService:
        expires_in = tokens.get("expires_in")
        connected = ConnectedService(
            id=ConnectedService.make_id(user_id, service.value),
            user_id=user_id,
            service_name=service,
            access_token=tokens["access_token"],
            refresh_token=tokens.get("refresh_token"),
            expires_at=datetime.utcnow() + timedelta(seconds=int(expires_in)) if expires_in else None,
            scope=tokens.get("scope", ""),
        )
        await self.storage.save_connected_service(connected)
        logger.info("Google service connected", user_id=user_id, service=service.value)
        return connected

    # ==================== Services ====================

    async def fetch_service_data(self, service_name: str, user_id: str) -> dict[str, Any]:
        """Run the read call for a connected service, refreshing an expired token first."""
        service = parse_service(service_name)
        connected = await self.storage.get_connected_service(
            ConnectedService.make_id(user_id, service.value)
        )
        if not connected or not connected.is_active:
            raise ServiceNotConnected(ConnectedService.make_id(user_id, service.value))

        if connected.is_expired() and connected.refresh_token:
            connected = await self.refresh_access_token(connected)

        url, params = DATA_ENDPOINTS[service]
        try:
            async with self._client() as client:
                response = await client.get(
                    url,
                    params=params,
                    headers={"Authorization": f"Bearer {connected.access_token}"},
                )
                response.raise_for_status()
        except httpx.HTTPError as e:
            raise IntegrationError(
                "Failed to fetch Google service data",
                service=service.value,
                details={"error": str(e)},
            ) from e

        return response.json()

    async def disconnect(self, service_id: str, user_id: str) -> None:
        connected = await self.storage.get_connected_service(service_id)
        if not connected:
            raise ServiceNotConnected(service_id)
        if connected.user_id != user_id:
            raise NotOwner("connected_service", service_id)

        await self.storage.delete_connected_service(service_id)
        logger.info("Google service disconnected", service_id=service_id, user_id=user_id)

    async def integration_status(self, user_id: str) -> dict[str, Any]:
        """Per-service connection status for every supported Google service."""
        connected = {
            s.service_name: s
            for s in await self.storage.list_connected_services(user_id)
            if s.is_active
        }

        services: dict[str, dict[str, Any]] = {}
        for service in GoogleService:
            record = connected.get(service)
            services[service.value] = {
                "connected": record is not None,
                "expiresAt": record.expires_at.isoformat() if record and record.expires_at else None,
                "expired": record.is_expired() if record else False,
            }

        return {
            "services": services,
            "connected": any(s["connected"] for s in services.values()),
        }
