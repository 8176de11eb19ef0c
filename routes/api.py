import logging
import time
from typing import Any

from fastapi import APIRouter, Body, Depends, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict

from services.deals import DealService
from services.errors import StorageError

logger = logging.getLogger(__name__)

router = APIRouter()


class IngestRequest(BaseModel):
    # Fragments come from the extension and the frontend as-is, the merge decides what counts
    model_config = ConfigDict(extra="ignore")

    asin: Any = None
    title: Any = None
    price: Any = None
    code: Any = None
    discount: Any = None
    imageUrl: Any = None
    affiliateLink: Any = None


def get_deal_service(request: Request) -> DealService:
    return request.app.state.deal_service


def _failure(message: str):
    return JSONResponse(status_code=500, content={"error": message})


@router.get("/health")
async def health():
    return {
        "status": "ok",
        "timestamp": int(time.time() * 1000),
        "message": "ASIN Watcher API is running",
    }


@router.get("/deals")
async def get_deals(service: DealService = Depends(get_deal_service)):
    return {"deals": service.list_deals()}


@router.post("/ingest")
async def ingest_deal(request: IngestRequest, service: DealService = Depends(get_deal_service)):
    try:
        deal, created = service.ingest(request.model_dump(exclude_none=True))
    except StorageError:
        logger.exception("Error ingesting deal")
        return _failure("Failed to ingest deal")
    return {
        "success": True,
        "deal": deal,
        "message": f"Deal {deal['asin']} {'added' if created else 'updated'}",
    }


@router.post("/deals")
async def replace_deals(payload: dict = Body(...), service: DealService = Depends(get_deal_service)):
    try:
        count = service.replace(payload.get("deals"))
    except StorageError:
        logger.exception("Error updating deals")
        return _failure("Failed to update deals")
    return {"success": True, "count": count}


@router.delete("/deals")
async def clear_deals(service: DealService = Depends(get_deal_service)):
    try:
        service.clear()
    except StorageError:
        logger.exception("Error clearing deals")
        return _failure("Failed to clear deals")
    return {"success": True, "message": "All deals cleared"}
