"""Google integration endpoints: OAuth connect/callback, data access and status."""

from typing import Annotated, Any

from fastapi import APIRouter, Query
from fastapi.responses import RedirectResponse
from pydantic import Field

from agenly.api.dependencies import GoogleDep
from agenly.api.responses import ok
from agenly.models.deployment import CamelModel

router = APIRouter(tags=["Integrations"])

UserIdQuery = Annotated[str, Query(alias="userId", min_length=1)]


class ConnectServiceRequest(CamelModel):
    service_name: str = Field(..., min_length=1)
    user_id: str | None = None


@router.post("/connect-service")
async def connect_service(body: ConnectServiceRequest, google: GoogleDep) -> dict[str, Any]:
    """Start the OAuth flow for one Google service."""
    auth_url = google.build_auth_url(body.service_name, body.user_id)
    return ok({"authUrl": auth_url, "serviceName": body.service_name})


@router.get("/auth/callback/google")
async def google_callback(
    google: GoogleDep,
    code: str | None = None,
    state: str | None = None,
    error: str | None = None,
) -> RedirectResponse:
    redirect_url = await google.handle_callback(code, state, error)
    return RedirectResponse(redirect_url, status_code=307)


@router.delete("/disconnect-service")
async def disconnect_service(
    google: GoogleDep,
    service_id: Annotated[str, Query(alias="serviceId", min_length=1)],
    user_id: UserIdQuery,
) -> dict[str, Any]:
    await google.disconnect(service_id, user_id)
    return ok(message="Service disconnected successfully")


@router.get("/google")
async def google_service_data(
    google: GoogleDep,
    service: Annotated[str, Query(min_length=1)],
    user_id: UserIdQuery,
) -> dict[str, Any]:
    """Read data from a connected Google service."""
    data = await google.fetch_service_data(service, user_id)
    return ok(data, service=service)


@router.get("/integrations/google/status")
async def google_status(google: GoogleDep, user_id: UserIdQuery) -> dict[str, Any]:
    return ok(await google.integration_status(user_id))
