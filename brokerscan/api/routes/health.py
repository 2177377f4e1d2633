"""GET /health — liveness check plus the size of the loaded broker roster."""
from __future__ import annotations

from fastapi import APIRouter, Depends

from brokerscan.api.deps import get_roster
from brokerscan.brokers.descriptor import BrokerDescriptor
from brokerscan.core.settings import Settings, get_settings

router = APIRouter(tags=["health"])


@router.get("/health", summary="Health check with roster status")
def health_check(
    settings: Settings = Depends(get_settings),
    roster: tuple[BrokerDescriptor, ...] = Depends(get_roster),
) -> dict:
    return {
        "status": "ok",
        "service": settings.app_name,
        "version": settings.app_version,
        "environment": settings.app_env,
        "brokers": len(roster),
        "integrations": {
            "skip_trace": bool(settings.apify_api_token),
            "searchbug": bool(settings.searchbug_api_key),
        },
    }
