"""Tests for profile management and diet plans."""

import asyncio
from uuid import uuid4

import pytest

from diet_tracker.domain.errors import ConflictError, NotFoundError, ValidationError
from diet_tracker.services.plans import DietPlanService, resolve_diet
from diet_tracker.services.profiles import ProfileService, parse_calorie_goal
from tests.conftest import FakeRecipeClient, InMemoryProfileStore, build_recipe_service


def test_create_profile_starts_with_empty_ledger(store: InMemoryProfileStore) -> None:
    user_id = uuid4()

    record = ProfileService(store).create_profile(user_id, " Sam ", "sam@example.com")

    assert record.id == user_id
    assert record.name == "Sam"
    assert record.calorie_goal == 0
    assert record.totals.calories == 0
    assert record.meals == []
    assert record.scanned_meals == []


@pytest.mark.parametrize(
    ("name", "email"),
    [("", "sam@example.com"), ("Sam", ""), ("Sam", "not-an-email"), ("Sam", "a@b")],
)
def test_create_profile_validates_fields(
    store: InMemoryProfileStore, name: str, email: str
) -> None:
    with pytest.raises(ValidationError):
        ProfileService(store).create_profile(uuid4(), name, email)
    assert store.records == {}


@pytest.mark.parametrize(("raw", "expected"), [(1800, 1800), ("2200", 2200), (1500.0, 1500)])
def test_parse_calorie_goal_accepts_positive_integers(raw: object, expected: int) -> None:
    assert parse_calorie_goal(raw) == expected


@pytest.mark.parametrize("raw", ["abc", "", "-5", 0, -100, 12.5, True, None])
def test_parse_calorie_goal_rejects_invalid_values(raw: object) -> None:
    with pytest.raises(ValidationError):
        parse_calorie_goal(raw)


def test_set_calorie_goal_only_touches_goal(store: InMemoryProfileStore) -> None:
    user = store.add_user(current_calorie=400.0, meals=["1"])

    ProfileService(store).set_calorie_goal(user.id, "1800")

    record = store.records[user.id]
    assert record.calorie_goal == 1800
    assert record.current_calorie == 400.0
    assert record.meals == ["1"]


def test_set_calorie_goal_for_unknown_user(store: InMemoryProfileStore) -> None:
    with pytest.raises(NotFoundError):
        ProfileService(store).set_calorie_goal(uuid4(), 1800)


def test_add_scanned_item_appends_pending_barcode(store: InMemoryProfileStore) -> None:
    user = store.add_user(scanned_meals=["111"])
    service = ProfileService(store)

    service.add_scanned_item(user.id, "111")
    service.add_scanned_item(user.id, " 222 ")

    assert store.records[user.id].scanned_meals == ["111", "111", "222"]


@pytest.mark.parametrize("barcode", ["", "   ", "12ab"])
def test_add_scanned_item_rejects_bad_barcodes(
    store: InMemoryProfileStore, barcode: str
) -> None:
    user = store.add_user()

    with pytest.raises(ValidationError):
        ProfileService(store).add_scanned_item(user.id, barcode)


def test_list_plans_uses_goal_or_default(store: InMemoryProfileStore) -> None:
    client = FakeRecipeClient(plan_payload={"week": {}})
    service = DietPlanService(repository=store, recipe_service=build_recipe_service(client))
    with_goal = store.add_user(calorie_goal=1700)
    without_goal = store.add_user()

    asyncio.run(service.list_plans(with_goal.id, "Vegan"))
    asyncio.run(service.list_plans(without_goal.id, "CBUM"))
    asyncio.run(service.list_plans(uuid4(), "Ketogenic"))

    assert client.plan_calls == [
        (1700, "vegan"),
        (2000, "Whole30"),
        (2000, "ketogenic"),
    ]


def test_list_plans_degrades_to_empty_on_failure(store: InMemoryProfileStore) -> None:
    class BrokenClient(FakeRecipeClient):
        async def generate_meal_plan(
            self, target_calories: int, diet: str, time: int
        ) -> dict[str, object]:
            raise RuntimeError("quota exceeded")

    service = DietPlanService(
        repository=store, recipe_service=build_recipe_service(BrokenClient())
    )

    assert asyncio.run(service.list_plans(store.add_user().id, "vegan")) == []


def test_assign_plan_stores_ids_once(store: InMemoryProfileStore) -> None:
    service = DietPlanService(repository=store, recipe_service=build_recipe_service())
    user = store.add_user()

    assert service.assign_plan(user.id, [11, 12, 13]) == ["11", "12", "13"]
    with pytest.raises(ConflictError):
        service.assign_plan(user.id, [21])
    assert store.records[user.id].meals == ["11", "12", "13"]


def test_assign_plan_validation(store: InMemoryProfileStore) -> None:
    service = DietPlanService(repository=store, recipe_service=build_recipe_service())

    with pytest.raises(ValidationError):
        service.assign_plan(store.add_user().id, [])
    with pytest.raises(NotFoundError):
        service.assign_plan(uuid4(), [1])


def test_resolve_diet() -> None:
    assert resolve_diet("CBUM") == "Whole30"
    assert resolve_diet("Vegetarian") == "vegetarian"
