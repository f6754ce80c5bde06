import logging
from datetime import datetime
from typing import List, Optional

from settleup.core.exceptions import NotFoundError
from settleup.models.ledger import Split
from settleup.repositories.ledger_repo import LedgerRepository

logger = logging.getLogger(__name__)


class SplitService:
    """Marks splits settled or unsettled."""

    def __init__(self, ledger_repo: LedgerRepository):
        self.ledger_repo = ledger_repo

    async def _require_split(self, split_id: str) -> Split:
        split = await self.ledger_repo.get_split(split_id)
        if split is None:
            raise NotFoundError("Expense split", split_id)
        return split

    async def settle_split(self, split_id: str, at: Optional[datetime] = None) -> Split:
        """
        Mark a split settled.

        A split that is already settled is returned as-is; its settled_at
        stamp is not moved.
        """
        split = await self._require_split(split_id)
        updated = split.mark_settled(at)
        if updated is not split:
            await self.ledger_repo.update_split_status(updated)
            logger.info("Split %s settled at %s", updated.id, updated.settled_at)
        return updated

    async def unsettle_split(self, split_id: str) -> Split:
        split = await self._require_split(split_id)
        updated = split.mark_unsettled()
        if updated is not split:
            await self.ledger_repo.update_split_status(updated)
            logger.info("Split %s marked unsettled", updated.id)
        return updated

    async def unsettled_splits_for_user(
        self, user_id: str, group_id: Optional[str] = None
    ) -> List[Split]:
        if await self.ledger_repo.get_account(user_id) is None:
            raise NotFoundError("User", user_id)
        if group_id is not None and await self.ledger_repo.get_group(group_id) is None:
            raise NotFoundError("Group", group_id)
        return await self.ledger_repo.get_unsettled_splits_for_user(user_id, group_id)
