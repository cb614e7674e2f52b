"""Unit tests for task completion helpers."""

import pytest

from farmops.core.models.domain import OrderItemStatus
from farmops.server.services.tasks import ITEM_STAGE_ORDER, YIELD_SMOOTHING, _stage_index, smoothed_yield


class TestSmoothedYield:
    """Test the running yield average."""

    def test_first_harvest_sets_observed_yield(self):
        assert smoothed_yield(None, 50, 5) == 10

    def test_blends_new_observation(self):
        # 0.3 * 12 + 0.7 * 10
        assert smoothed_yield(10, 60, 5) == pytest.approx(10.6)

    def test_weight_of_new_observation(self):
        assert smoothed_yield(0, 10, 1) == pytest.approx(YIELD_SMOOTHING * 10)


class TestStageOrder:
    """Test item lifecycle ordering."""

    def test_stages_are_ordered(self):
        indexes = [_stage_index(status) for status in ITEM_STAGE_ORDER]
        assert indexes == sorted(indexes)
        assert _stage_index(OrderItemStatus.PENDING) < _stage_index(OrderItemStatus.HARVESTED)

    def test_cancelled_is_outside_lifecycle(self):
        assert _stage_index(OrderItemStatus.CANCELLED) == -1

    def test_accepts_raw_values(self):
        assert _stage_index("GROWING") == ITEM_STAGE_ORDER.index(OrderItemStatus.GROWING)
