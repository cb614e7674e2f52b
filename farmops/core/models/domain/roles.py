"""
Farm role hierarchy.

Role checks compare integer ranks: a caller passes a gate when their rank is
at least the rank of the required role.
"""

from typing import Optional

from .enums import EmployeePosition, FarmRole

ROLE_HIERARCHY: dict[FarmRole, int] = {
    FarmRole.OWNER: 5,
    FarmRole.ADMIN: 4,
    FarmRole.FARM_MANAGER: 3,
    FarmRole.SALESPERSON: 2,
    FarmRole.FARM_OPERATOR: 1,
}


def has_role_at_least(role: Optional[FarmRole], min_role: FarmRole) -> bool:
    if role is None:
        return False
    return ROLE_HIERARCHY[FarmRole(role)] >= ROLE_HIERARCHY[min_role]


def role_for_position(position: Optional[EmployeePosition]) -> FarmRole:
    """Farm role granted to an employee who accepts an invite."""
    if position is None:
        return FarmRole.FARM_OPERATOR
    return FarmRole(EmployeePosition(position).value)
