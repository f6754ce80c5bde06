"""
LedgerRepository - Reads consistent ledger snapshots for the balance engine.

Collections:
- users:    { _id, name, email }
- groups:   { _id, name, member_ids: [ObjectId] }   (join order)
- expenses: { _id, group_id, paid_by, amount: Decimal128, description,
              expense_date, created_at,
              splits: [{ _id, owed_by, amount: Decimal128,
                         is_settled, settled_at }] }

Expenses and their splits are written together by the expense-entry side of
the application. The only write made here is toggling a split's status.
"""

from typing import List, Optional, Tuple
from motor.motor_asyncio import AsyncIOMotorDatabase
from bson import ObjectId

from settleup.models.base import _utcnow
from settleup.models.ledger import Account, Expense, Group, Split
from settleup.utils.money import to_decimal


def _oid(value: str) -> Optional[ObjectId]:
    if isinstance(value, ObjectId):
        return value
    if isinstance(value, str) and ObjectId.is_valid(value):
        return ObjectId(value)
    return None


class LedgerRepository:
    """Repository for groups, accounts, expenses and splits."""

    def __init__(self, db: AsyncIOMotorDatabase):
        self.db = db
        self.users = db.users
        self.groups = db.groups
        self.expenses = db.expenses

    # ===== ACCOUNTS =====

    async def get_account(self, account_id: str) -> Optional[Account]:
        oid = _oid(account_id)
        if oid is None:
            return None
        doc = await self.users.find_one({"_id": oid, "is_deleted": {"$ne": True}})
        if not doc:
            return None
        return self._account_from_doc(doc)

    async def get_accounts(self, account_ids: List[str]) -> List[Account]:
        """Fetch accounts, returned in the order of account_ids."""
        oids = [oid for oid in (_oid(a) for a in account_ids) if oid is not None]
        if not oids:
            return []
        docs = await self.users.find({"_id": {"$in": oids}}).to_list(None)
        by_id = {str(doc["_id"]): self._account_from_doc(doc) for doc in docs}
        return [by_id[a] for a in account_ids if a in by_id]

    # ===== GROUPS =====

    async def get_group(self, group_id: str) -> Optional[Group]:
        oid = _oid(group_id)
        if oid is None:
            return None
        doc = await self.groups.find_one({"_id": oid})
        if not doc:
            return None
        return self._group_from_doc(doc)

    async def get_groups_for_user(self, user_id: str) -> List[Group]:
        oid = _oid(user_id)
        if oid is None:
            return []
        docs = await self.groups.find({"member_ids": oid}).to_list(None)
        return [self._group_from_doc(doc) for doc in docs]

    # ===== EXPENSES / SPLITS =====

    async def get_group_ledger(self, group_id: str) -> Tuple[List[Expense], List[Split]]:
        """All expenses of a group and every split attached to them."""
        oid = _oid(group_id)
        if oid is None:
            return [], []
        docs = await self.expenses.find({"group_id": oid}).sort("expense_date", -1).to_list(None)

        expenses: List[Expense] = []
        splits: List[Split] = []
        for doc in docs:
            expenses.append(self._expense_from_doc(doc))
            splits.extend(self._split_from_doc(doc["_id"], s) for s in doc.get("splits", []))
        return expenses, splits

    async def get_unsettled_splits_for_user(
        self, user_id: str, group_id: Optional[str] = None
    ) -> List[Split]:
        """Unsettled splits owed by a user, across all groups unless group_id is given."""
        oid = _oid(user_id)
        if oid is None:
            return []
        query = {"splits": {"$elemMatch": {"owed_by": oid, "is_settled": False}}}
        if group_id is not None:
            group_oid = _oid(group_id)
            if group_oid is None:
                return []
            query["group_id"] = group_oid

        docs = await self.expenses.find(query).to_list(None)
        result = []
        for doc in docs:
            for split_doc in doc.get("splits", []):
                if split_doc["owed_by"] == oid and not split_doc.get("is_settled", False):
                    result.append(self._split_from_doc(doc["_id"], split_doc))
        return result

    async def get_split(self, split_id: str) -> Optional[Split]:
        oid = _oid(split_id)
        if oid is None:
            return None
        doc = await self.expenses.find_one({"splits._id": oid})
        if not doc:
            return None
        for split_doc in doc.get("splits", []):
            if split_doc["_id"] == oid:
                return self._split_from_doc(doc["_id"], split_doc)
        return None

    async def update_split_status(self, split: Split) -> bool:
        """Persist a split's settled flag and settled_at stamp."""
        oid = _oid(split.id)
        if oid is None:
            return False
        result = await self.expenses.update_one(
            {"splits._id": oid},
            {
                "$set": {
                    "splits.$.is_settled": split.settled,
                    "splits.$.settled_at": split.settled_at
                }
            }
        )
        return result.matched_count > 0

    # ===== PRIVATE HELPERS =====

    @staticmethod
    def _account_from_doc(doc: dict) -> Account:
        return Account(id=str(doc["_id"]), name=doc.get("name", ""))

    @staticmethod
    def _group_from_doc(doc: dict) -> Group:
        return Group(
            id=str(doc["_id"]),
            name=doc.get("name", ""),
            member_ids=tuple(str(m) for m in doc.get("member_ids", []))
        )

    @staticmethod
    def _expense_from_doc(doc: dict) -> Expense:
        return Expense(
            id=str(doc["_id"]),
            group_id=str(doc["group_id"]),
            payer_id=str(doc["paid_by"]),
            amount=to_decimal(doc["amount"]),
            description=doc.get("description", ""),
            expense_date=doc.get("expense_date"),
            created_at=doc.get("created_at") or _utcnow()
        )

    @staticmethod
    def _split_from_doc(expense_id: ObjectId, doc: dict) -> Split:
        return Split(
            id=str(doc["_id"]),
            expense_id=str(expense_id),
            debtor_id=str(doc["owed_by"]),
            amount=to_decimal(doc["amount"]),
            settled=doc.get("is_settled", False),
            settled_at=doc.get("settled_at")
        )
