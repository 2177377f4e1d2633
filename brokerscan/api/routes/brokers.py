"""GET /brokers — the configured broker roster."""
from __future__ import annotations

from fastapi import APIRouter, Depends

from brokerscan.api.deps import get_roster
from brokerscan.brokers.descriptor import BrokerDescriptor

router = APIRouter(prefix="/brokers", tags=["brokers"])


@router.get("", summary="List brokers in scan order")
def list_brokers(roster: tuple[BrokerDescriptor, ...] = Depends(get_roster)) -> dict:
    return {
        "total": len(roster),
        "brokers": [broker.to_dict() for broker in roster],
    }
