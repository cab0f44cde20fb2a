from typing import Optional

from fastapi import APIRouter, Depends, Query

from sunny_auto.core.security import verify_admin_secret
from sunny_auto.models.board import ISO_DATE_PATTERN, BoardEntry, BoardEntryIn
from sunny_auto.services.board_service import board

router = APIRouter(prefix="/api/admin/appointments", dependencies=[Depends(verify_admin_secret)])


@router.get("")
async def day_view(date: Optional[str] = Query(None, pattern=ISO_DATE_PATTERN)):
    # The selected day belongs to the caller's screen, the shared board is only read
    return board.day_view(date)


@router.post("", response_model=BoardEntry, status_code=201)
async def create_entry(entry: BoardEntryIn):
    return board.create(entry)


@router.put("/{entry_id}", response_model=BoardEntry)
async def update_entry(entry_id: int, entry: BoardEntryIn):
    return board.update(entry_id, entry)


@router.delete("/{entry_id}")
async def delete_entry(entry_id: int, confirm: bool = False):
    board.delete(entry_id, confirmed=confirm)
    return {"message": "Appointment deleted"}
