from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, status

from settleup.api.deps import get_split_service
from settleup.core.exceptions import NotFoundError
from settleup.schemas.balance import SplitResponse
from settleup.services.split_service import SplitService

router = APIRouter()


@router.put("/{split_id}/settle", response_model=SplitResponse)
async def settle_split(
    split_id: str,
    service: SplitService = Depends(get_split_service)
):
    """Mark a split as settled"""
    try:
        split = await service.settle_split(split_id)
    except NotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))
    return SplitResponse.model_validate(split)


@router.put("/{split_id}/unsettle", response_model=SplitResponse)
async def unsettle_split(
    split_id: str,
    service: SplitService = Depends(get_split_service)
):
    """Mark a split as unsettled"""
    try:
        split = await service.unsettle_split(split_id)
    except NotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))
    return SplitResponse.model_validate(split)


@router.get("/user/{user_id}/unsettled", response_model=List[SplitResponse])
async def get_unsettled_splits(
    user_id: str,
    group_id: Optional[str] = None,
    service: SplitService = Depends(get_split_service)
):
    """Unsettled splits owed by a user, optionally limited to one group"""
    try:
        splits = await service.unsettled_splits_for_user(user_id, group_id)
    except NotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))
    return [SplitResponse.model_validate(s) for s in splits]
