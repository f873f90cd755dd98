"""Vehicle routes - Exposes reconciled vehicle positions."""

import time
import uuid
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from transit_tracker.api.deps import get_db
from transit_tracker.schemas.api import VehicleOut, VehiclesResponse
from transit_tracker.services.data_service import DataService

router = APIRouter(prefix="/vehicles", tags=["vehicles"])


@router.get("", response_model=VehiclesResponse)
def get_vehicles(
    active: Optional[bool] = Query(None, description="Only active (true) or inactive (false) vehicles"),
    route_id: Optional[str] = Query(None, description="Filter by route_id"),
    limit: int = Query(100, ge=1, le=1000, description="Number of records to return (max 1000)"),
    offset: int = Query(0, ge=0, description="Number of records to skip"),
    db: Session = Depends(get_db),
):
    """
    Get stored vehicle positions.

    Active vehicles are those present in the most recent reconciled pull.
    Includes request metadata (request_id, latency_ms).
    """
    start = time.perf_counter()
    request_id = str(uuid.uuid4())

    service = DataService(db)
    results = service.get_vehicles(active=active, route_id=route_id, limit=limit, offset=offset)
    total = service.get_vehicle_count(active=active, route_id=route_id)

    latency_ms = int((time.perf_counter() - start) * 1000)

    return VehiclesResponse(
        request_id=request_id,
        api_latency_ms=latency_ms,
        total_count=total,
        data=[VehicleOut.model_validate(r) for r in results],
    )


@router.get("/count")
def get_vehicle_count(
    active: Optional[bool] = Query(None, description="Only active (true) or inactive (false) vehicles"),
    db: Session = Depends(get_db),
):
    """Get total count of stored vehicles."""
    count = DataService(db).get_vehicle_count(active=active)
    return {"count": count, "active": active}


@router.get("/{vehicle_id}", response_model=VehicleOut)
def get_vehicle(vehicle_id: str, db: Session = Depends(get_db)):
    """Get a single vehicle by its feed vehicle_id."""
    result = DataService(db).get_vehicle(vehicle_id)

    if not result:
        raise HTTPException(status_code=404, detail=f"Vehicle '{vehicle_id}' not found")

    return VehicleOut.model_validate(result)
