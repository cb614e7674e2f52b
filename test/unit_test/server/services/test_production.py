"""
Unit tests for the production calculator.

Tests cover tray calculation with overage, backward scheduling from the
harvest date, task planning and order numbering.
"""

from datetime import date, datetime, timezone

import pytest

from farmops.core.models.domain import OrderItemStatus, OrderStatus, TaskType
from farmops.server.services.production import (
    calculate_production_schedule,
    calculate_trays_needed,
    generate_order_number,
    generate_storefront_order_number,
    get_order_item_status_label,
    get_order_status_label,
    plan_tasks,
    start_of_day,
    task_due_dates,
    validate_product_for_production,
)


def _schedule(**overrides):
    params = {
        "quantity_oz": 40,
        "avg_yield_per_tray": 10,
        "overage_percent": 10,
        "harvest_date": date(2026, 11, 20),
        "days_soaking": 1,
        "days_germination": 3,
        "days_light": 6,
    }
    params.update(overrides)
    return calculate_production_schedule(**params)


class TestTraysNeeded:
    """Test tray calculation."""

    @pytest.mark.parametrize(
        "quantity,yield_per_tray,overage,expected",
        [
            (40, 10, 10, 5),
            (40, 10, 0, 4),
            (8, 8, 0, 1),
            (1, 10, 0, 1),
            (25, 4, 20, 8),
        ],
    )
    def test_rounds_up(self, quantity, yield_per_tray, overage, expected):
        assert calculate_trays_needed(quantity, yield_per_tray, overage) == expected

    @pytest.mark.parametrize("yield_per_tray", [0, -2])
    def test_yield_must_be_positive(self, yield_per_tray):
        with pytest.raises(ValueError, match="positive"):
            calculate_trays_needed(10, yield_per_tray, 10)


class TestProductionSchedule:
    """Test backward scheduling from the harvest date."""

    def test_dates_work_backwards(self):
        schedule = _schedule()
        assert schedule.harvest_date == datetime(2026, 11, 20)
        assert schedule.move_to_light_date == datetime(2026, 11, 14)
        assert schedule.seed_date == datetime(2026, 11, 11)
        assert schedule.soak_date == datetime(2026, 11, 10)
        assert schedule.total_growth_days == 10
        assert schedule.trays_needed == 5
        assert schedule.total_quantity_oz == pytest.approx(44)
        assert schedule.requires_soaking is True

    @pytest.mark.parametrize("days_soaking", [None, 0])
    def test_without_soaking(self, days_soaking):
        schedule = _schedule(days_soaking=days_soaking)
        assert schedule.requires_soaking is False
        assert schedule.soak_date == schedule.seed_date
        assert schedule.total_growth_days == 9

    def test_harvest_time_is_dropped(self):
        schedule = _schedule(harvest_date=datetime(2026, 11, 20, 15, 45))
        assert schedule.harvest_date == datetime(2026, 11, 20)

    def test_start_of_day_strips_timezone(self):
        value = start_of_day(datetime(2026, 3, 1, 23, 5, tzinfo=timezone.utc))
        assert value == datetime(2026, 3, 1)
        assert value.tzinfo is None


class TestPlanTasks:
    """Test the production tasks generated for a scheduled item."""

    def test_all_stages_in_order(self):
        plans = plan_tasks("Sunflower", 40, _schedule())
        assert [plan.type for plan in plans] == [
            TaskType.SOAK,
            TaskType.SEED,
            TaskType.MOVE_TO_LIGHT,
            TaskType.HARVESTING,
        ]
        assert [plan.title for plan in plans] == [
            "SOAK: Sunflower",
            "SEED: Sunflower",
            "MOVE TO LIGHT: Sunflower",
            "HARVEST: Sunflower",
        ]
        assert plans[0].description == "Soak 5 trays of Sunflower seeds"
        assert plans[-1].description == "Harvest 40oz of Sunflower (5 trays)"
        assert plans[-1].due_date == datetime(2026, 11, 20)

    def test_no_soak_task_without_soaking(self):
        plans = plan_tasks("Pea", 12.5, _schedule(days_soaking=None, quantity_oz=12.5))
        assert TaskType.SOAK not in [plan.type for plan in plans]
        assert plans[-1].description == "Harvest 12.5oz of Pea (2 trays)"

    def test_due_dates_by_type(self):
        schedule = _schedule()
        due = task_due_dates(schedule)
        assert due[TaskType.SEED] == schedule.seed_date
        assert due[TaskType.HARVESTING] == schedule.harvest_date


class TestOrderNumbers:
    def test_manual_order_number(self):
        assert generate_order_number(7, year=2026) == "ORD-2026-007"
        assert generate_order_number(1234, year=2026) == "ORD-2026-1234"

    def test_manual_order_number_uses_current_year(self):
        assert generate_order_number(1).startswith(f"ORD-{datetime.now().year}-")

    def test_storefront_order_number(self):
        assert generate_storefront_order_number(42) == "ORD-00042"


class TestValidation:
    def test_complete_product(self):
        assert validate_product_for_production(days_germination=3, days_light=6, avg_yield_per_tray=10) == []

    def test_missing_fields(self):
        missing = validate_product_for_production(days_germination=None, days_light=0, avg_yield_per_tray=None)
        assert missing == ["Days Germination", "Avg Yield per Tray"]


class TestStatusLabels:
    def test_known_labels(self):
        assert get_order_status_label(OrderStatus.IN_PROGRESS.value) == "In Progress"
        assert get_order_item_status_label(OrderItemStatus.GERMINATING.value) == "Germinating"

    def test_unknown_label_passes_through(self):
        assert get_order_status_label("ARCHIVED") == "ARCHIVED"
        assert get_order_item_status_label("ARCHIVED") == "ARCHIVED"
