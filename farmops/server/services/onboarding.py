"""
Onboarding checklist.

A step is complete when the farm's data shows it was done, or when the user
marked it done manually (stored in their preferences).
"""

from __future__ import annotations

from dataclasses import dataclass

from sqlalchemy.ext.asyncio import AsyncSession

from farmops.core.database.entities import Customer, Employee, Order, PaymentSettings, Product, Sku
from farmops.core.database.repositories import AsyncBaseRepository, TaskRepository, UserPreferenceRepository
from farmops.core.errors import NotFoundError
from farmops.core.models.domain import TaskType
from farmops.core.models.io.farms import OnboardingChecklist, OnboardingStep


@dataclass(frozen=True)
class StepDefinition:
    id: str
    title: str
    description: str
    category: str
    route: str
    optional: bool = False


ONBOARDING_STEPS: list[StepDefinition] = [
    StepDefinition("create-farm", "Create your farm", "Set up your farm profile", "setup", "/settings"),
    StepDefinition("add-product", "Add a product", "Add your first grow variety", "catalog", "/products"),
    StepDefinition(
        "add-second-product", "Add another product", "Build out your catalog", "catalog", "/products", True
    ),
    StepDefinition("add-sku", "Add a SKU", "Create a sellable size and price", "catalog", "/products"),
    StepDefinition("add-second-sku", "Add another SKU", "Offer more sizes", "catalog", "/products", True),
    StepDefinition("add-customer", "Add a customer", "Record who you sell to", "sales", "/customers"),
    StepDefinition(
        "payment-settings", "Set up payments", "Choose how customers pay", "sales", "/settings/payments", True
    ),
    StepDefinition("add-employee", "Add a team member", "Invite your staff", "team", "/team", True),
    StepDefinition("create-order", "Create an order", "Schedule production from an order", "operations", "/orders"),
    StepDefinition("complete-seeding", "Complete a seeding", "Log your first seeding task", "operations", "/operations"),
    StepDefinition(
        "complete-transplant", "Complete a transplant", "Move trays to the lights", "operations", "/operations"
    ),
    StepDefinition("complete-harvest", "Complete a harvest", "Log your first harvest", "operations", "/operations"),
]

STEP_IDS = {step.id for step in ONBOARDING_STEPS}


async def detect_completed_steps(session: AsyncSession, farm_id: str) -> set[str]:
    """Step ids the farm's data shows as done."""

    async def count(model) -> int:
        return await AsyncBaseRepository(session, model).count({"farm_id": farm_id})

    products = await count(Product)
    skus = await count(Sku)
    tasks = TaskRepository(session)
    checks = {
        "create-farm": True,
        "add-product": products >= 1,
        "add-second-product": products >= 2,
        "add-sku": skus >= 1,
        "add-second-sku": skus >= 2,
        "add-customer": await count(Customer) >= 1,
        "payment-settings": await count(PaymentSettings) >= 1,
        "add-employee": await count(Employee) >= 1,
        "create-order": await count(Order) >= 1,
        "complete-seeding": await tasks.has_completed(farm_id, TaskType.SEED),
        "complete-transplant": await tasks.has_completed(farm_id, TaskType.MOVE_TO_LIGHT),
        "complete-harvest": await tasks.has_completed(farm_id, TaskType.HARVESTING),
    }
    return {step_id for step_id, done in checks.items() if done}


async def build_checklist(session: AsyncSession, farm_id: str, user_id: str) -> OnboardingChecklist:
    preference = await UserPreferenceRepository(session).get_or_create(user_id, farm_id)
    completed = await detect_completed_steps(session, farm_id) | set(preference.get_completed_steps())

    steps = [
        OnboardingStep(
            id=step.id,
            title=step.title,
            description=step.description,
            category=step.category,
            route=step.route,
            optional=step.optional,
            completed=step.id in completed,
        )
        for step in ONBOARDING_STEPS
    ]
    done = sum(1 for step in steps if step.completed)
    return OnboardingChecklist(
        steps=steps,
        completed_count=done,
        total_count=len(steps),
        percent_complete=round(done * 100 / len(steps)),
        dismissed=preference.tutorial_dismissed,
    )


async def mark_step_complete(session: AsyncSession, farm_id: str, user_id: str, step_id: str) -> OnboardingChecklist:
    """
    Raises:
        NotFoundError: for an unknown step id
    """
    if step_id not in STEP_IDS:
        raise NotFoundError("Onboarding step", step_id)
    repo = UserPreferenceRepository(session)
    preference = await repo.get_or_create(user_id, farm_id)
    completed = preference.get_completed_steps()
    if step_id not in completed:
        preference.set_completed_steps(completed + [step_id])
        await repo.update(preference)
    return await build_checklist(session, farm_id, user_id)
