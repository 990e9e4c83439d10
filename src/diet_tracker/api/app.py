"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from uuid import UUID

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from diet_tracker.api.admin import router as admin_router
from diet_tracker.api.models import (
    AssignPlanRequest,
    CalorieEstimateRequest,
    CalorieGoalRequest,
    CreateProfileRequest,
    ScannedItemRequest,
)
from diet_tracker.app_logging import configure_logging
from diet_tracker.containers import AppContainer
from diet_tracker.domain.calories import estimate_daily_calories
from diet_tracker.domain.errors import (
    ConflictError,
    DietTrackerError,
    NotFoundError,
    ValidationError,
)
from diet_tracker.domain.meals import MealEntry, MealKind, MealOutcome
from diet_tracker.domain.models import UserNutritionRecord
from diet_tracker.domain.nutrition import MacroProfile
from diet_tracker.domain.plans import MealPlan

_ERROR_STATUS = (
    (ValidationError, status.HTTP_422_UNPROCESSABLE_ENTITY),
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (ConflictError, status.HTTP_409_CONFLICT),
)


def create_app(container: AppContainer) -> FastAPI:  # noqa: PLR0915
    """Create a FastAPI app configured with dependencies."""
    configure_logging(container.settings.log_level)
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        state_container: AppContainer = app.state.container
        if state_container.settings.reset_scheduler_enabled:
            try:
                state_container.reset_scheduler.start()
            except Exception:
                logger.exception("Failed to start reset scheduler")
        yield
        state_container.reset_scheduler.shutdown()
        await state_container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    app.include_router(admin_router)

    @app.exception_handler(DietTrackerError)
    async def handle_domain_error(
        request: Request, exc: DietTrackerError
    ) -> JSONResponse:
        status_code = status.HTTP_400_BAD_REQUEST
        for error_type, mapped in _ERROR_STATUS:
            if isinstance(exc, error_type):
                status_code = mapped
                break
        return JSONResponse(status_code=status_code, content={"detail": str(exc)})

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.post("/users/{user_id}", status_code=status.HTTP_201_CREATED)
    async def create_profile(
        user_id: UUID, body: CreateProfileRequest, request: Request
    ) -> dict[str, object]:
        state_container: AppContainer = request.app.state.container
        record = state_container.profile_service.create_profile(
            user_id, body.name, body.email
        )
        return _format_record(record)

    @app.get("/users/{user_id}")
    async def get_profile(user_id: UUID, request: Request) -> dict[str, object]:
        state_container: AppContainer = request.app.state.container
        return _format_record(state_container.profile_service.get_profile(user_id))

    @app.put("/users/{user_id}/calorie-goal")
    async def set_calorie_goal(
        user_id: UUID, body: CalorieGoalRequest, request: Request
    ) -> dict[str, int]:
        state_container: AppContainer = request.app.state.container
        goal = state_container.profile_service.set_calorie_goal(
            user_id, body.calorie_goal
        )
        return {"calorie_goal": goal}

    @app.get("/users/{user_id}/today")
    async def today(user_id: UUID, request: Request) -> dict[str, object]:
        """Ledger totals and today's pending meals."""
        state_container: AppContainer = request.app.state.container
        view = await state_container.meal_log_service.load_today(user_id)
        return {
            "calorie_goal": view.calorie_goal,
            "totals": _format_totals(view.totals),
            "meals": [_format_entry(entry) for entry in view.entries],
        }

    @app.post("/users/{user_id}/meals/{kind}/{entry_id}/eat")
    async def eat_meal(
        user_id: UUID, kind: MealKind, entry_id: str, request: Request
    ) -> dict[str, object]:
        state_container: AppContainer = request.app.state.container
        outcome = await state_container.meal_log_service.eat(user_id, kind, entry_id)
        return _format_outcome(outcome)

    @app.delete("/users/{user_id}/meals/{kind}/{entry_id}")
    async def remove_meal(
        user_id: UUID, kind: MealKind, entry_id: str, request: Request
    ) -> dict[str, object]:
        state_container: AppContainer = request.app.state.container
        outcome = state_container.meal_log_service.remove(user_id, kind, entry_id)
        return _format_outcome(outcome)

    @app.get("/users/{user_id}/plans")
    async def list_plans(
        user_id: UUID, request: Request, diet: str = "vegetarian"
    ) -> dict[str, object]:
        state_container: AppContainer = request.app.state.container
        plans = await state_container.diet_plan_service.list_plans(user_id, diet)
        return {"plans": [_format_plan(plan) for plan in plans]}

    @app.post("/users/{user_id}/plans")
    async def assign_plan(
        user_id: UUID, body: AssignPlanRequest, request: Request
    ) -> dict[str, object]:
        state_container: AppContainer = request.app.state.container
        meals = state_container.diet_plan_service.assign_plan(user_id, body.meal_ids)
        return {"meals": meals}

    @app.post("/users/{user_id}/scanned", status_code=status.HTTP_201_CREATED)
    async def add_scanned_item(
        user_id: UUID, body: ScannedItemRequest, request: Request
    ) -> dict[str, str]:
        state_container: AppContainer = request.app.state.container
        state_container.profile_service.add_scanned_item(user_id, body.barcode)
        return {"status": "ok"}

    @app.get("/products/{barcode}")
    async def get_product(barcode: str, request: Request) -> dict[str, object]:
        state_container: AppContainer = request.app.state.container
        try:
            product = await state_container.product_service.get_product(barcode)
        except Exception:
            logger.exception("Product lookup failed", extra={"barcode": barcode})
            product = None
        if product is None:
            raise NotFoundError(f"No product found for barcode {barcode}")
        return {
            "barcode": product.barcode,
            "name": product.name,
            "image_url": product.image_url,
            "per_100g": _format_totals(product.per_100g),
            "per_serving": _format_totals(product.per_serving),
        }

    @app.get("/recipes/{recipe_id}")
    async def get_recipe(recipe_id: int, request: Request) -> dict[str, object]:
        state_container: AppContainer = request.app.state.container
        try:
            details = await state_container.recipe_service.get_recipe(recipe_id)
        except Exception as exc:
            logger.exception("Recipe lookup failed", extra={"recipe_id": recipe_id})
            raise NotFoundError(f"Recipe {recipe_id} unavailable") from exc
        return {
            "id": details.id,
            "title": details.title,
            "image": details.image,
            "ready_in_minutes": details.ready_in_minutes,
            "servings": details.servings,
            "ingredients": details.ingredients,
            "instructions": details.instructions,
        }

    @app.post("/calories/estimate")
    async def estimate_calories(body: CalorieEstimateRequest) -> dict[str, float]:
        calories = estimate_daily_calories(
            body.weight_kg,
            body.height_cm,
            body.age,
            body.sex,
            body.activity_level,
        )
        return {"calories": round(calories, 1)}

    return app


def _format_totals(totals: MacroProfile) -> dict[str, float]:
    return {
        "calories": totals.calories,
        "protein_g": totals.protein_g,
        "carbs_g": totals.carbs_g,
        "fat_g": totals.fat_g,
    }


def _format_record(record: UserNutritionRecord) -> dict[str, object]:
    return {
        "id": str(record.id),
        "name": record.name,
        "email": record.email,
        "calorie_goal": record.calorie_goal,
        "current_calorie": record.current_calorie,
        "nutrition": {
            "protein_g": record.protein_g,
            "carbs_g": record.carbs_g,
            "fat_g": record.fat_g,
        },
        "meals": record.meals,
        "scanned_meals": record.scanned_meals,
    }


def _format_entry(entry: MealEntry) -> dict[str, object]:
    return {
        "kind": entry.kind.value,
        "id": entry.id,
        "name": entry.name,
        "calories": entry.calories,
        "protein_g": entry.protein_g,
        "carbs_g": entry.carbs_g,
        "fat_g": entry.fat_g,
        "image": entry.image,
    }


def _format_outcome(outcome: MealOutcome) -> dict[str, object]:
    return {
        "kind": outcome.kind.value,
        "id": outcome.entry_id,
        "state": outcome.state.value,
        "totals": _format_totals(outcome.totals),
    }


def _format_plan(plan: MealPlan) -> dict[str, object]:
    return {
        "label": plan.label,
        "meals": [{"id": meal.id, "title": meal.title} for meal in plan.meals],
        "nutrients": {
            "calories": plan.nutrients.calories,
            "carbohydrates": plan.nutrients.carbohydrates,
            "protein": plan.nutrients.protein,
            "fat": plan.nutrients.fat,
        },
    }
