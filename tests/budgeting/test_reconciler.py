"""Tests for budget auto-generation."""

from collections import Counter
from decimal import Decimal

import pytest

from budgeting.errors import ReconciliationError
from budgeting.events import BUDGETS_CHANGED, EventBus
from budgeting.reconciler import ReconcileResult, reconcile
from tests.helpers import InMemoryBudgetStore, budget, category, expense


def _categories():
    return [
        category(1, "Groceries"),
        category(2, "Dining"),
        category(3, "Rent"),
        category(4, "Reimbursement [G]"),
        category(5, "Transfer", type="transfer"),
        category(6, "Salary", type="income"),
    ]


def _amounts(store, period):
    return {b.category_id: b.amount for b in store.for_month(period)}


class TestCarryForward:
    @pytest.mark.asyncio
    async def test_carries_prior_budgets_into_empty_period(self):
        store = InMemoryBudgetStore(
            budgets=[budget(1, 1, 100, "2025-02", notes="weekly shop")],
            categories=[category(1, "Groceries")],
        )

        result = await reconcile("2025-03", store)

        march = store.for_month("2025-03")
        assert len(march) == 1
        assert march[0].category_id == 1
        assert march[0].amount == Decimal("100")
        assert march[0].notes == "weekly shop"
        assert result.carried_forward == 1
        # Carried budgets are not counted as created
        assert result.created == 0
        assert result.skipped == 1

    @pytest.mark.asyncio
    async def test_carry_forward_across_year_boundary(self):
        store = InMemoryBudgetStore(budgets=[budget(1, 3, 1200, "2024-12")])

        await reconcile("2025-01", store)

        assert _amounts(store, "2025-01") == {3: Decimal("1200")}

    @pytest.mark.asyncio
    async def test_does_not_overwrite_existing_budget(self):
        store = InMemoryBudgetStore(
            budgets=[budget(1, 1, 100, "2025-02"), budget(2, 1, 50, "2025-03")],
            categories=[category(1, "Groceries")],
        )

        result = await reconcile("2025-03", store)

        assert _amounts(store, "2025-03") == {1: Decimal("50")}
        assert result.carried_forward == 0
        assert result.skipped == 1
        assert "create_budget" not in store.calls

    @pytest.mark.asyncio
    async def test_empty_prior_period_is_not_an_error(self):
        store = InMemoryBudgetStore(categories=[category(1, "Groceries")])

        result = await reconcile("2025-03", store)

        assert result.carried_forward == 0
        assert result.created == 1

    @pytest.mark.asyncio
    async def test_carries_categories_outside_the_eligible_set(self):
        """Carry-forward copies every prior budget, eligible or not."""
        store = InMemoryBudgetStore(
            budgets=[budget(1, 4, 60, "2025-02")], categories=_categories()
        )

        await reconcile("2025-03", store)

        assert _amounts(store, "2025-03")[4] == Decimal("60")

    @pytest.mark.asyncio
    async def test_duplicate_prior_rows_are_written_once(self):
        store = InMemoryBudgetStore(
            budgets=[budget(1, 1, 100, "2025-02"), budget(2, 1, 120, "2025-02")]
        )

        result = await reconcile("2025-03", store)

        assert _amounts(store, "2025-03") == {1: Decimal("100")}
        assert result.carried_forward == 1


class TestSpendSeededFill:
    @pytest.mark.asyncio
    async def test_seeds_from_previous_period_spend(self):
        store = InMemoryBudgetStore(
            budgets=[budget(1, 1, 100, "2025-02")],
            transactions=[
                expense(1, "2025-02-03", -40, category_id=2),
                expense(2, "2025-02-20", -35.25, category_id=2),
                expense(3, "2025-03-02", -500, category_id=3),
                expense(4, "2025-02-10", -70, category_id=None),
                expense(5, "2025-02-12", 2000, category_id=6, type="income"),
            ],
            categories=_categories(),
        )

        result = await reconcile("2025-03", store)

        assert _amounts(store, "2025-03") == {
            1: Decimal("100"),  # carried
            2: Decimal("75.25"),  # seeded from February spend
            3: Decimal("0"),  # eligible, no February spend
        }
        assert result == ReconcileResult(
            month="2025-03", created=2, skipped=1, carried_forward=1
        )

    @pytest.mark.asyncio
    async def test_seeded_budgets_have_empty_notes(self):
        store = InMemoryBudgetStore(categories=[category(1, "Groceries")])

        await reconcile("2025-03", store)

        assert store.for_month("2025-03")[0].notes == ""

    @pytest.mark.asyncio
    async def test_excluded_and_non_expense_categories_get_no_budget(self):
        store = InMemoryBudgetStore(
            transactions=[
                expense(1, "2025-02-03", -80, category_id=4),
                expense(2, "2025-02-03", -80, category_id=5),
            ],
            categories=_categories(),
        )

        await reconcile("2025-03", store)

        assert set(_amounts(store, "2025-03")) == {1, 2, 3}

    @pytest.mark.asyncio
    async def test_custom_exclusion_list(self):
        store = InMemoryBudgetStore(categories=_categories())

        await reconcile("2025-03", store, excluded=["Rent", "Dining"])

        # Reimbursement [G] is eligible once it is not excluded
        assert set(_amounts(store, "2025-03")) == {1, 4}

    @pytest.mark.asyncio
    async def test_existing_budget_counted_as_skipped(self):
        store = InMemoryBudgetStore(
            budgets=[budget(1, 1, 50, "2025-03"), budget(2, 1, 100, "2025-02")],
            transactions=[expense(1, "2025-02-03", -300, category_id=1)],
            categories=_categories(),
        )

        result = await reconcile("2025-03", store)

        assert _amounts(store, "2025-03")[1] == Decimal("50")
        assert result.skipped == 1
        assert result.created == 2

    @pytest.mark.asyncio
    async def test_writes_follow_category_order(self):
        store = InMemoryBudgetStore(
            categories=[category(3, "Rent"), category(1, "Groceries"), category(2, "Dining")]
        )

        await reconcile("2025-03", store)

        assert [b.category_id for b in store.for_month("2025-03")] == [3, 1, 2]

    @pytest.mark.asyncio
    async def test_reads_current_period_again_after_carry_forward(self):
        store = InMemoryBudgetStore(
            budgets=[budget(1, 1, 100, "2025-02")], categories=[category(1, "Groceries")]
        )

        await reconcile("2025-03", store)

        assert store.calls == [
            "list_budgets",
            "list_budgets",
            "create_budget",
            "list_budgets",
            "list_transactions",
            "list_categories",
        ]


class TestInvariants:
    @pytest.mark.asyncio
    async def test_second_run_creates_nothing(self):
        store = InMemoryBudgetStore(
            budgets=[budget(1, 1, 100, "2025-02"), budget(2, 2, 40, "2025-02")],
            transactions=[expense(1, "2025-02-03", -12, category_id=3)],
            categories=_categories(),
        )

        await reconcile("2025-03", store)
        before = list(store.for_month("2025-03"))
        second = await reconcile("2025-03", store)

        assert second.carried_forward == 0
        assert second.created == 0
        assert second.skipped == 3
        assert store.for_month("2025-03") == before

    @pytest.mark.asyncio
    async def test_never_two_budgets_for_one_category(self):
        store = InMemoryBudgetStore(
            budgets=[
                budget(1, 1, 100, "2025-02"),
                budget(2, 2, 20, "2025-02"),
                budget(3, 2, 25, "2025-03"),
            ],
            transactions=[
                expense(1, "2025-02-03", -10, category_id=1),
                expense(2, "2025-02-04", -10, category_id=3),
            ],
            categories=_categories(),
        )

        await reconcile("2025-03", store)
        await reconcile("2025-03", store)

        counts = Counter(b.category_id for b in store.for_month("2025-03"))
        assert max(counts.values()) == 1

    @pytest.mark.asyncio
    async def test_other_periods_untouched(self):
        feb = budget(1, 1, 100, "2025-02")
        store = InMemoryBudgetStore(budgets=[feb], categories=_categories())

        await reconcile("2025-03", store)

        assert store.for_month("2025-02") == [feb]

    @pytest.mark.asyncio
    async def test_invalid_period_touches_nothing(self):
        store = InMemoryBudgetStore()

        with pytest.raises(ValueError):
            await reconcile("March", store)

        assert store.calls == []

    @pytest.mark.asyncio
    async def test_period_with_trailing_newline_touches_nothing(self):
        store = InMemoryBudgetStore(
            budgets=[budget(1, 1, 100, "2025-02")],
            categories=[category(1, "Groceries")],
        )

        with pytest.raises(ValueError):
            await reconcile("2025-03\n", store)

        assert store.calls == []
        assert len(store.budgets) == 1

    @pytest.mark.asyncio
    async def test_first_representable_period_touches_nothing(self):
        store = InMemoryBudgetStore()

        with pytest.raises(ValueError, match="0001-01"):
            await reconcile("0001-01", store)

        assert store.calls == []


class TestFailures:
    @pytest.mark.asyncio
    async def test_prior_read_failure_aborts_before_writes(self):
        store = InMemoryBudgetStore(
            budgets=[budget(1, 1, 100, "2025-02")], categories=_categories()
        )
        store.fail_on["list_budgets"] = 2

        with pytest.raises(ReconciliationError) as exc_info:
            await reconcile("2025-03", store)

        assert exc_info.value.operation == "list_budgets"
        assert "create_budget" not in store.calls
        assert store.for_month("2025-03") == []

    @pytest.mark.asyncio
    async def test_category_read_failure_keeps_carried_budgets(self):
        store = InMemoryBudgetStore(
            budgets=[budget(1, 1, 100, "2025-02")], categories=_categories()
        )
        store.fail_on["list_categories"] = 1

        with pytest.raises(ReconciliationError) as exc_info:
            await reconcile("2025-03", store)

        assert exc_info.value.operation == "list_categories"
        assert exc_info.value.result.carried_forward == 1
        assert exc_info.value.result.created == 0
        assert _amounts(store, "2025-03") == {1: Decimal("100")}

    @pytest.mark.asyncio
    async def test_transaction_read_failure(self):
        store = InMemoryBudgetStore(categories=_categories())
        store.fail_on["list_transactions"] = 1

        with pytest.raises(ReconciliationError) as exc_info:
            await reconcile("2025-03", store)

        assert exc_info.value.operation == "list_transactions"
        assert store.for_month("2025-03") == []

    @pytest.mark.asyncio
    async def test_partial_write_failure_reports_progress_without_rollback(self):
        store = InMemoryBudgetStore(categories=_categories())
        store.fail_on["create_budget"] = 3

        with pytest.raises(ReconciliationError) as exc_info:
            await reconcile("2025-03", store)

        error = exc_info.value
        assert error.operation == "create_budget"
        assert error.result.created == 2
        assert set(_amounts(store, "2025-03")) == {1, 2}
        assert isinstance(error.__cause__, Exception)


class TestEvents:
    @pytest.mark.asyncio
    async def test_publishes_budgets_changed_after_writes(self):
        events = EventBus()
        received = []
        events.subscribe(BUDGETS_CHANGED, received.append)
        store = InMemoryBudgetStore(
            budgets=[budget(1, 1, 100, "2025-02")], categories=_categories()
        )

        await reconcile("2025-03", store, events=events)

        assert len(received) == 1
        assert received[0].payload == {
            "month": "2025-03",
            "created": 2,
            "carried_forward": 1,
        }

    @pytest.mark.asyncio
    async def test_no_event_when_nothing_written(self):
        events = EventBus()
        received = []
        events.subscribe(BUDGETS_CHANGED, received.append)
        store = InMemoryBudgetStore(categories=[category(6, "Salary", type="income")])

        await reconcile("2025-03", store, events=events)

        assert received == []

    @pytest.mark.asyncio
    async def test_event_published_after_partial_failure(self):
        events = EventBus()
        received = []
        events.subscribe(BUDGETS_CHANGED, received.append)
        store = InMemoryBudgetStore(categories=_categories())
        store.fail_on["create_budget"] = 2

        with pytest.raises(ReconciliationError):
            await reconcile("2025-03", store, events=events)

        assert len(received) == 1
        assert received[0].payload["created"] == 1


class TestReconcileResult:
    def test_message_without_skips(self):
        result = ReconcileResult(month="2025-03", created=3)

        assert result.message() == "Auto-generate completed: Created 3 new budget(s)"

    def test_message_with_skips(self):
        result = ReconcileResult(month="2025-03", created=0, skipped=2)

        assert result.message() == (
            "Auto-generate completed: Created 0 new budget(s), "
            "skipped 2 existing budget(s)"
        )
