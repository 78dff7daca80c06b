"""
Time entry HTTP routes.
"""
from fastapi import APIRouter, Depends, Query, HTTPException, status
from datetime import date
from typing import Optional

from goaltracker.auth import verify_api_key
from goaltracker.constants import TIMEFRAME_MONTHLY
from goaltracker.dependencies import get_store
from goaltracker.exceptions import TimeEntryNotFoundException
from goaltracker.repositories.document_store import DocumentStore
from goaltracker.schemas import TimeEntry, TimeEntryCreate, TIMEFRAME_PATTERN
from goaltracker.services.time_entry_service import TimeEntryService

router = APIRouter(prefix="/api/time-entries", tags=["time-entries"])


@router.get("")
def get_time_entries(
    user_id: str = Query(..., alias="userId", min_length=1),
    time_frame: str = Query(TIMEFRAME_MONTHLY, alias="timeFrame", pattern=TIMEFRAME_PATTERN),
    start_date: Optional[date] = Query(None, alias="startDate"),
    end_date: Optional[date] = Query(None, alias="endDate"),
    store: DocumentStore = Depends(get_store),
    _: str = Depends(verify_api_key)
):
    """Get a user's entries for a timeframe (or explicit date range) with totals."""
    service = TimeEntryService(store)
    entries = service.get_entries(user_id, time_frame, start_date, end_date)
    return {
        "entries": entries,
        "summary": service.summarize(entries)
    }


@router.post("", response_model=TimeEntry, status_code=status.HTTP_201_CREATED)
def create_time_entry(
    entry: TimeEntryCreate,
    store: DocumentStore = Depends(get_store),
    _: str = Depends(verify_api_key)
):
    """Log time. The user's billable-hour goals are recomputed."""
    return TimeEntryService(store).create_entry(entry)


@router.delete("/{entry_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_time_entry(
    entry_id: str,
    store: DocumentStore = Depends(get_store),
    _: str = Depends(verify_api_key)
):
    try:
        TimeEntryService(store).delete_entry(entry_id)
    except TimeEntryNotFoundException as e:
        raise HTTPException(status_code=404, detail=str(e))
