"""Unit tests for the farm role hierarchy."""

import pytest

from farmops.core.models.domain import EmployeePosition, FarmRole, ROLE_HIERARCHY, has_role_at_least, role_for_position


class TestRoleHierarchy:
    """Test role comparisons."""

    def test_order(self):
        ranked = sorted(ROLE_HIERARCHY, key=ROLE_HIERARCHY.get, reverse=True)
        assert ranked == [
            FarmRole.OWNER,
            FarmRole.ADMIN,
            FarmRole.FARM_MANAGER,
            FarmRole.SALESPERSON,
            FarmRole.FARM_OPERATOR,
        ]

    @pytest.mark.parametrize(
        "role,min_role,expected",
        [
            (FarmRole.OWNER, FarmRole.ADMIN, True),
            (FarmRole.ADMIN, FarmRole.ADMIN, True),
            (FarmRole.FARM_MANAGER, FarmRole.SALESPERSON, True),
            (FarmRole.SALESPERSON, FarmRole.FARM_MANAGER, False),
            (FarmRole.FARM_OPERATOR, FarmRole.SALESPERSON, False),
            ("ADMIN", FarmRole.FARM_MANAGER, True),
            (None, FarmRole.FARM_OPERATOR, False),
        ],
    )
    def test_has_role_at_least(self, role, min_role, expected):
        assert has_role_at_least(role, min_role) is expected


class TestRoleForPosition:
    @pytest.mark.parametrize("position", list(EmployeePosition))
    def test_position_maps_to_same_role(self, position):
        assert role_for_position(position).value == position.value

    def test_no_position(self):
        assert role_for_position(None) == FarmRole.FARM_OPERATOR
