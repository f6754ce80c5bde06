from fastapi import APIRouter, Depends, HTTPException, status

from settleup.api.deps import get_balance_service
from settleup.core.exceptions import InvariantViolationError, NotFoundError
from settleup.schemas.balance import (
    AmountResponse,
    BalanceReport,
    SettlementStatusResponse,
    UserBalance,
    UserBalanceSummaryResponse,
)
from settleup.services.balance_service import BalanceService

router = APIRouter()


def _conflict(exc: InvariantViolationError) -> HTTPException:
    return HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc))


@router.get("/group/{group_id}", response_model=BalanceReport)
async def get_group_balances(
    group_id: str,
    service: BalanceService = Depends(get_balance_service)
):
    """Balances and suggested settlements for a group"""
    try:
        return await service.group_balances(group_id)
    except NotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))
    except InvariantViolationError as exc:
        raise _conflict(exc)


@router.get("/group/{group_id}/is-settled", response_model=SettlementStatusResponse)
async def is_group_fully_settled(
    group_id: str,
    service: BalanceService = Depends(get_balance_service)
):
    """Whether any money still needs to move in a group"""
    try:
        settled = await service.is_group_fully_settled(group_id)
    except NotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))
    except InvariantViolationError as exc:
        raise _conflict(exc)
    return SettlementStatusResponse(group_id=group_id, is_fully_settled=settled)


@router.get("/group/{group_id}/user/{user_id}", response_model=UserBalance)
async def get_user_group_balance(
    group_id: str,
    user_id: str,
    service: BalanceService = Depends(get_balance_service)
):
    """Paid, owed and net figures for one member of a group"""
    try:
        balance = await service.user_group_totals(group_id, user_id)
        account = await service.ledger_repo.get_account(user_id)
    except NotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))
    except InvariantViolationError as exc:
        raise _conflict(exc)
    return UserBalance(
        user_id=user_id,
        user_name=account.name if account else "",
        total_paid=balance.total_paid,
        total_owed=balance.total_owed,
        net_balance=balance.net
    )


@router.get("/user/{user_id}/summary", response_model=UserBalanceSummaryResponse)
async def get_user_balance_summary(
    user_id: str,
    service: BalanceService = Depends(get_balance_service)
):
    """A user's net balance in each of their groups"""
    try:
        summary = await service.user_balance_summary(user_id)
    except NotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))
    except InvariantViolationError as exc:
        raise _conflict(exc)
    return UserBalanceSummaryResponse(user_id=user_id, group_balances=summary)


@router.get("/user/{user_id}/total-owed", response_model=AmountResponse)
async def get_total_owed_by_user(
    user_id: str,
    service: BalanceService = Depends(get_balance_service)
):
    """Total of a user's unsettled splits across all groups"""
    try:
        total = await service.total_owed_by_user(user_id)
    except NotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))
    return AmountResponse(amount=total)
