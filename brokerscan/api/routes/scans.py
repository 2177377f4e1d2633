"""Scan routes.

POST /scans runs a comprehensive scan across the broker roster.
POST /searches/quick runs one skip-trace lookup and normalizes it.
POST /searches/searchbug runs one Searchbug product and normalizes it.

Entitlement checks (quick search vs comprehensive scan) happen upstream;
these routes assume the caller is allowed to run them.
"""
from __future__ import annotations

import logging
from typing import Any

import httpx
from fastapi import APIRouter, Depends, HTTPException
from pydantic import AliasChoices, BaseModel, Field

from brokerscan.api.deps import get_http_client, get_orchestrator, get_skip_trace_client
from brokerscan.brokers.descriptor import SearchQuery
from brokerscan.brokers.searchbug import SearchbugStrategy, find_product
from brokerscan.brokers.skip_trace import SEARCH_METHOD, SKIP_TRACE_SOURCE, SkipTraceClient
from brokerscan.core.constants import RemovalStatus
from brokerscan.core.errors import ConfigurationError, TransportError, ValidationError
from brokerscan.core.settings import Settings, get_settings
from brokerscan.normalization.result_aggregator import normalize_one
from brokerscan.scan.exposure import RemovalRequest, exposure_report
from brokerscan.scan.orchestrator import BatchScanOrchestrator, ScanOptions
from brokerscan.scan.results import BrokerResult

logger = logging.getLogger(__name__)

router = APIRouter(tags=["scans"])


# ---------------------------------------------------------------------------
# Request models
# ---------------------------------------------------------------------------

class PersonalInfo(BaseModel):
    # Blank or missing names are rejected by SearchQuery.validate() -> 400.
    full_name: str = Field(default="", validation_alias=AliasChoices("full_name", "fullName"))
    phone: str | None = None
    email: str | None = None
    address: str | None = None

    def to_query(self) -> SearchQuery:
        return SearchQuery(
            full_name=self.full_name,
            phone=self.phone,
            email=self.email,
            address=self.address,
        )


class ScanOptionsBody(BaseModel):
    priority: int | None = None
    batch_size: int | None = Field(default=None, validation_alias=AliasChoices("batch_size", "batchSize"))


class RemovalRequestBody(BaseModel):
    broker: str
    status: RemovalStatus = RemovalStatus.PENDING
    notes: str = ""


class ScanRequest(BaseModel):
    personal_info: PersonalInfo = Field(
        default_factory=PersonalInfo,
        validation_alias=AliasChoices("personal_info", "personalInfo"),
    )
    scan_options: ScanOptionsBody = Field(
        default_factory=ScanOptionsBody,
        validation_alias=AliasChoices("scan_options", "scanOptions"),
    )
    # Earlier removal requests and the previous scan_results feed the exposure report.
    removal_requests: list[RemovalRequestBody] = Field(
        default_factory=list,
        validation_alias=AliasChoices("removal_requests", "removalRequests"),
    )
    previous_results: list[dict[str, Any]] | None = Field(
        default=None,
        validation_alias=AliasChoices("previous_results", "previousResults"),
    )


class QuickSearchRequest(BaseModel):
    search_params: PersonalInfo = Field(
        default_factory=PersonalInfo,
        validation_alias=AliasChoices("search_params", "searchParams"),
    )
    max_results: int | None = Field(default=None, validation_alias=AliasChoices("max_results", "maxResults"))


class SearchbugSearchRequest(BaseModel):
    # Roster broker name ("Searchbug People Search") or product key ("people").
    data_source: str = Field(validation_alias=AliasChoices("data_source", "dataSource"))
    search_params: PersonalInfo = Field(
        default_factory=PersonalInfo,
        validation_alias=AliasChoices("search_params", "searchParams"),
    )


# ---------------------------------------------------------------------------
# Routes
# ---------------------------------------------------------------------------

@router.post("/scans", summary="Scan the broker roster for one person")
async def create_scan(
    body: ScanRequest,
    orchestrator: BatchScanOrchestrator = Depends(get_orchestrator),
) -> dict:
    removals = [RemovalRequest(r.broker, r.status, r.notes) for r in body.removal_requests]
    try:
        previous = (
            [BrokerResult.from_dict(item) for item in body.previous_results]
            if body.previous_results is not None
            else None
        )
    except (KeyError, ValueError) as exc:
        raise HTTPException(status_code=400, detail=f"Invalid previous_results: {exc}")

    settings = get_settings()
    options = ScanOptions(
        priority=body.scan_options.priority or settings.scan_default_priority,
        batch_size=body.scan_options.batch_size or settings.scan_default_batch_size,
    )
    try:
        summary = await orchestrator.scan(body.personal_info.to_query(), options)
    except ValidationError as exc:
        raise HTTPException(status_code=400, detail=str(exc))

    return {
        "success": True,
        "message": f"Scanned {summary.total_scanned} public broker sites",
        "summary": summary.to_dict(),
        "exposure": exposure_report(summary.results, removals=removals, previous=previous),
    }


@router.post("/searches/quick", summary="Single skip-trace lookup")
async def quick_search(
    body: QuickSearchRequest,
    client: SkipTraceClient = Depends(get_skip_trace_client),
) -> dict:
    query = body.search_params.to_query()
    try:
        query.validate()
        items = await client.fetch_items(query.cleaned(), max_results=body.max_results)
    except ValidationError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    except ConfigurationError as exc:
        logger.error("Quick search unavailable: %s", exc)
        raise HTTPException(status_code=503, detail="Skip-trace search is not configured")
    except TransportError as exc:
        logger.warning("Quick search failed: %s", exc)
        raise HTTPException(status_code=502, detail=f"Skip-trace search failed: {exc}")

    result = normalize_one(
        SKIP_TRACE_SOURCE,
        items,
        searched_name=query.full_name,
        metadata={"search_method": SEARCH_METHOD},
    )
    return {"success": True, "result": result.to_dict()}


@router.post("/searches/searchbug", summary="Single Searchbug product lookup")
async def searchbug_search(
    body: SearchbugSearchRequest,
    settings: Settings = Depends(get_settings),
    client: httpx.AsyncClient = Depends(get_http_client),
) -> dict:
    product = find_product(body.data_source)
    if product is None:
        raise HTTPException(status_code=400, detail=f"Unknown Searchbug data source: {body.data_source}")

    query = body.search_params.to_query()
    strategy = SearchbugStrategy(settings, client, product)
    try:
        query.validate()
        results = await strategy.fetch_results(query.cleaned(), body.data_source)
    except ValidationError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    except ConfigurationError as exc:
        logger.error("Searchbug search unavailable: %s", exc)
        raise HTTPException(status_code=503, detail="Searchbug search is not configured")
    except TransportError as exc:
        logger.warning("Searchbug search failed: %s", exc)
        raise HTTPException(status_code=502, detail=f"Searchbug search failed: {exc}")

    result = normalize_one(
        body.data_source,
        results,
        searched_name=query.full_name,
        table=product.table,
        confidence=product.confidence,
        metadata={"search_method": product.search_method},
    )
    return {"success": True, "result": result.to_dict()}
