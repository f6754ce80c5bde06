import pytest
from decimal import Decimal

from settleup.core.exceptions import InvariantViolationError, NotFoundError
from settleup.services.balance_service import BalanceService


@pytest.mark.asyncio
async def test_group_balances_even_split(fake_repo):
    # Alice pays 90, everyone owes 30
    fake_repo.add_expense("e1", "trip", "alice", "90.00",
                          {"alice": "30.00", "bob": "30.00", "carol": "30.00"})

    report = await BalanceService(fake_repo).group_balances("trip")

    assert report.group_id == "trip"
    assert report.group_name == "Trip"
    assert report.total_group_expenses == Decimal("90.00")
    nets = {b.user_name: b.net_balance for b in report.user_balances}
    assert nets == {"Alice": Decimal("60.00"), "Bob": Decimal("-30.00"), "Carol": Decimal("-30.00")}
    assert [(s.from_user_name, s.to_user_name, s.amount) for s in report.settlements] == [
        ("Bob", "Alice", Decimal("30.00")),
        ("Carol", "Alice", Decimal("30.00")),
    ]


@pytest.mark.asyncio
async def test_group_balances_cross_expenses_cancel(fake_repo):
    # Alice pays 60 shared with Bob; Bob pays 30 owed entirely by Alice
    fake_repo.add_group("pair", "Pair", ["alice", "bob"])
    fake_repo.add_expense("e1", "pair", "alice", "60.00", {"alice": "30.00", "bob": "30.00"})
    fake_repo.add_expense("e2", "pair", "bob", "30.00", {"alice": "30.00"})

    report = await BalanceService(fake_repo).group_balances("pair")

    nets = {b.user_id: b.net_balance for b in report.user_balances}
    assert nets == {"alice": Decimal("0.00"), "bob": Decimal("0.00")}
    assert report.settlements == []


@pytest.mark.asyncio
async def test_settled_split_leaves_payer_credit_without_transfers(fake_repo):
    fake_repo.add_group("pair", "Pair", ["alice", "bob"])
    fake_repo.add_expense("e1", "pair", "alice", "60.00",
                          {"alice": "30.00", "bob": "30.00"}, settled=("bob",))
    service = BalanceService(fake_repo)

    report = await service.group_balances("pair")

    alice = next(b for b in report.user_balances if b.user_id == "alice")
    assert alice.total_paid == Decimal("60.00")
    assert alice.net_balance == Decimal("30.00")
    assert report.settlements == []
    assert await service.is_group_fully_settled("pair") is True


@pytest.mark.asyncio
async def test_group_balances_empty_group(fake_repo):
    fake_repo.add_group("empty", "Empty", [])
    service = BalanceService(fake_repo)

    report = await service.group_balances("empty")

    assert report.user_balances == []
    assert report.settlements == []
    assert report.total_group_expenses == Decimal("0")
    assert await service.is_group_fully_settled("empty") is True


@pytest.mark.asyncio
async def test_group_balances_unknown_group(fake_repo):
    with pytest.raises(NotFoundError):
        await BalanceService(fake_repo).group_balances("nope")


@pytest.mark.asyncio
async def test_group_balances_unbalanced_expense(fake_repo):
    fake_repo.add_expense("e1", "trip", "alice", "90.00", {"bob": "30.00"})

    with pytest.raises(InvariantViolationError):
        await BalanceService(fake_repo).group_balances("trip")


@pytest.mark.asyncio
async def test_is_group_fully_settled_with_open_debt(fake_repo):
    fake_repo.add_expense("e1", "trip", "alice", "30.00", {"bob": "30.00"})
    service = BalanceService(fake_repo)

    assert await service.is_group_fully_settled("trip") is False

    with pytest.raises(NotFoundError):
        await service.is_group_fully_settled("nope")


@pytest.mark.asyncio
async def test_user_balance_summary_across_groups(fake_repo):
    fake_repo.add_group("flat", "Flat", ["bob", "alice"])
    fake_repo.add_group("club", "Club", ["carol"])
    fake_repo.add_expense("e1", "trip", "alice", "90.00",
                          {"alice": "30.00", "bob": "30.00", "carol": "30.00"})
    fake_repo.add_expense("e2", "flat", "bob", "40.00", {"alice": "25.00", "bob": "15.00"})

    summary = await BalanceService(fake_repo).user_balance_summary("alice")

    assert summary == {"trip": Decimal("60.00"), "flat": Decimal("-25.00")}


@pytest.mark.asyncio
async def test_user_balance_summary_unknown_user(fake_repo):
    with pytest.raises(NotFoundError):
        await BalanceService(fake_repo).user_balance_summary("mallory")


@pytest.mark.asyncio
async def test_total_owed_by_user_counts_unsettled_only(fake_repo):
    fake_repo.add_group("flat", "Flat", ["alice", "bob"])
    fake_repo.add_expense("e1", "trip", "alice", "90.00",
                          {"alice": "30.00", "bob": "30.00", "carol": "30.00"})
    fake_repo.add_expense("e2", "flat", "alice", "20.00", {"bob": "20.00"})
    fake_repo.add_expense("e3", "flat", "alice", "12.34", {"bob": "12.34"}, settled=("bob",))
    service = BalanceService(fake_repo)

    assert await service.total_owed_by_user("bob") == Decimal("50.00")
    assert await service.total_owed_by_user("carol") == Decimal("30.00")

    with pytest.raises(NotFoundError):
        await service.total_owed_by_user("mallory")


@pytest.mark.asyncio
async def test_user_group_totals(fake_repo):
    fake_repo.add_expense("e1", "trip", "bob", "45.00",
                          {"alice": "15.00", "bob": "15.00", "carol": "15.00"})
    service = BalanceService(fake_repo)

    balance = await service.user_group_totals("trip", "bob")

    assert balance.total_paid == Decimal("45.00")
    assert balance.total_owed == Decimal("15.00")
    assert balance.net == Decimal("30.00")

    fake_repo.add_account("dave", "Dave")
    with pytest.raises(NotFoundError):
        await service.user_group_totals("trip", "dave")
