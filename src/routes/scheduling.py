# src/routes/scheduling.py
from fastapi import APIRouter, Depends, Query
from typing import Any
from core.config import settings
from core.dependencies import get_current_user
from models.doctor import Doctor
from schemas.appointment_schemas import SchedulingCatalog, TimeBlockPublic
from utils.exceptions import UnprocessableEntityException
from utils.scheduling import (
    TIME_BLOCK_CATALOG,
    half_hour_slots,
    make_time_block,
    normalize_date,
)

router = APIRouter(prefix="/scheduling", tags=["scheduling"])


def _block_public(block) -> TimeBlockPublic:
    return TimeBlockPublic(
        value=block.value, start=block.start, end=block.end, label=block.label
    )


@router.get(
    "/catalog",
    response_model=SchedulingCatalog,
    summary="Scheduling catalog",
    description="Bookable one-hour blocks, half-hour start slots and appointment statuses",
)
async def scheduling_catalog(current_user: Doctor = Depends(get_current_user)) -> Any:
    return SchedulingCatalog(
        blocks=[_block_public(b) for b in TIME_BLOCK_CATALOG],
        slots=half_hour_slots(settings.BUSINESS_DAY_START, settings.BUSINESS_DAY_END),
    )


@router.get(
    "/block",
    response_model=TimeBlockPublic,
    summary="Resolve a time block",
    description="Normalize a start time (and optional end time) into a block; the end defaults to one hour later",
)
async def resolve_block(
    start: str = Query(...),
    end: str = Query(None),
    current_user: Doctor = Depends(get_current_user),
) -> Any:
    try:
        return _block_public(make_time_block(start, end))
    except ValueError as e:
        raise UnprocessableEntityException(str(e))


@router.get(
    "/date",
    summary="Canonical date",
    description="The YYYY-MM-DD form of a date, as stored and compared",
)
async def canonical_date(
    value: str = Query(...),
    current_user: Doctor = Depends(get_current_user),
) -> Any:
    try:
        return {"date": normalize_date(value)}
    except ValueError as e:
        raise UnprocessableEntityException(str(e))
