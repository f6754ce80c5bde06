from fastapi import Depends

from settleup.db.mongo import get_db
from settleup.repositories.ledger_repo import LedgerRepository
from settleup.services.balance_service import BalanceService
from settleup.services.split_service import SplitService


def get_ledger_repo(db = Depends(get_db)) -> LedgerRepository:
    return LedgerRepository(db)


def get_balance_service(
    ledger_repo: LedgerRepository = Depends(get_ledger_repo)
) -> BalanceService:
    return BalanceService(ledger_repo)


def get_split_service(
    ledger_repo: LedgerRepository = Depends(get_ledger_repo)
) -> SplitService:
    return SplitService(ledger_repo)
