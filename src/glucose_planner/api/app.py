"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import asdict
from datetime import UTC, date, datetime
from uuid import UUID

from fastapi import FastAPI, HTTPException, Query, Request, status
from fastapi.responses import JSONResponse

from glucose_planner.api.models import (
    AssignMealRequest,
    ClassifyRequest,
    LogReadingRequest,
    TrendRequest,
)
from glucose_planner.app_logging import configure_logging
from glucose_planner.containers import AppContainer
from glucose_planner.domain.errors import GlucosePlannerError, InvalidReadingError
from glucose_planner.domain.glucose import (
    GlucoseReading,
    GlucoseStatus,
    TrendSummary,
)
from glucose_planner.domain.plans import MealPlan
from glucose_planner.domain.recipes import MealSlot, Recipe
from glucose_planner.services.carbs import carb_badge
from glucose_planner.services.classifier import classify
from glucose_planner.services.recommendations import meal_slot_for_hour
from glucose_planner.services.targets import describe_targets
from glucose_planner.services.trends import analyze, trend_insights


def create_app(container: AppContainer) -> FastAPI:  # noqa: PLR0915
    """Create a FastAPI app configured with dependencies."""
    configure_logging()
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    @app.exception_handler(GlucosePlannerError)
    async def planner_error_handler(
        request: Request, exc: GlucosePlannerError
    ) -> JSONResponse:
        if isinstance(exc, InvalidReadingError):
            status_code = status.HTTP_422_UNPROCESSABLE_ENTITY
        elif exc.retryable:
            status_code = status.HTTP_503_SERVICE_UNAVAILABLE
            logger.warning("Retryable failure on %s: %s", request.url.path, exc)
        else:
            status_code = status.HTTP_404_NOT_FOUND
        return JSONResponse(
            status_code=status_code,
            content={"detail": str(exc), "retryable": exc.retryable},
        )

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.get("/targets/{category}")
    async def targets(category: str) -> dict[str, object]:
        """Return display strings for a category's targets."""
        return {"category": category, "targets": describe_targets(category)}

    @app.post("/glucose/classify")
    async def classify_reading(payload: ClassifyRequest) -> dict[str, object]:
        """Classify a single value for a category and context."""
        return _serialize_status(
            classify(payload.value, payload.category, payload.context)
        )

    @app.post("/glucose/trend")
    async def analyze_trend(
        payload: TrendRequest, category: str | None = None
    ) -> dict[str, object]:
        """Summarize inline readings ordered most recent first."""
        now = datetime.now(tz=UTC)
        readings = [
            GlucoseReading(
                value=reading.value,
                measured_at=reading.measured_at or now,
                context=reading.context,
            )
            for reading in payload.readings
        ]
        summary = analyze(readings)
        return {
            "summary": _serialize_summary(summary),
            "insights": trend_insights(summary, category, len(readings)),
        }

    @app.post("/users/{user_id}/glucose", status_code=status.HTTP_201_CREATED)
    async def log_reading(
        user_id: UUID, payload: LogReadingRequest, request: Request
    ) -> dict[str, object]:
        """Store a new reading and return it with its classification."""
        state_container: AppContainer = request.app.state.container
        reading, glucose_status = state_container.glucose_service.log_reading(
            user_id, payload.value, payload.context, payload.note
        )
        return {
            "reading": _serialize_reading(reading),
            "status": _serialize_status(glucose_status),
        }

    @app.get("/users/{user_id}/glucose/trend")
    async def user_trend(
        user_id: UUID,
        request: Request,
        days: int | None = Query(default=None, ge=1, le=90),
    ) -> dict[str, object]:
        """Return the user's trend summary and insights."""
        state_container: AppContainer = request.app.state.container
        report = state_container.glucose_service.trend_for_user(user_id, days)
        return {
            "summary": _serialize_summary(report.summary),
            "insights": report.insights,
            "reading_count": report.reading_count,
        }

    @app.get("/users/{user_id}/recommendations")
    async def recommendations(
        user_id: UUID,
        request: Request,
        meal_slot: MealSlot | None = None,
        count: int | None = Query(default=None, ge=1, le=20),
        hour: int | None = Query(default=None, ge=0, le=23),
    ) -> dict[str, object]:
        """Recommend recipes for a meal slot, defaulting to the current one."""
        state_container: AppContainer = request.app.state.container
        slot = meal_slot or meal_slot_for_hour(
            datetime.now().hour if hour is None else hour  # noqa: DTZ005
        )
        result = await state_container.recommendation_service.recommend_meals(
            user_id, slot, count
        )
        return {
            "meal_slot": str(slot),
            "max_carbs": result.ceiling,
            "source": str(result.source),
            "recipes": [_serialize_recipe(recipe) for recipe in result.recipes],
        }

    @app.get("/users/{user_id}/meal-plans/{plan_date}")
    async def get_meal_plan(
        user_id: UUID, plan_date: date, request: Request
    ) -> dict[str, object]:
        """Return the plan for a date."""
        state_container: AppContainer = request.app.state.container
        plan = state_container.meal_plan_service.get_plan(user_id, plan_date)
        if plan is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="No meal plan for this date",
            )
        return _serialize_plan(plan)

    @app.put("/users/{user_id}/meal-plans/{plan_date}/{slot}")
    async def assign_meal(
        user_id: UUID,
        plan_date: date,
        slot: str,
        payload: AssignMealRequest,
        request: Request,
    ) -> dict[str, object]:
        """Assign or clear one slot of a day plan."""
        state_container: AppContainer = request.app.state.container
        try:
            plan = state_container.meal_plan_service.assign_meal(
                user_id, plan_date, slot, payload.recipe_id
            )
        except ValueError as exc:
            raise HTTPException(
                status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc)
            ) from exc
        return _serialize_plan(plan)

    @app.post("/users/{user_id}/meal-plans/{plan_date}/generate")
    async def generate_meal_plan(
        user_id: UUID, plan_date: date, request: Request
    ) -> dict[str, object]:
        """Generate a full day plan from recommendations."""
        state_container: AppContainer = request.app.state.container
        plan = await state_container.meal_plan_service.generate_day_plan(
            user_id, plan_date
        )
        return _serialize_plan(plan)

    return app


def _serialize_status(glucose_status: GlucoseStatus) -> dict[str, object]:
    return {
        "tier": str(glucose_status.tier),
        "message": glucose_status.message,
        "advice": glucose_status.advice,
    }


def _serialize_summary(summary: TrendSummary) -> dict[str, object]:
    return {
        "average": summary.average,
        "time_in_range_percent": summary.time_in_range_percent,
        "trend": str(summary.trend),
        "outlook": summary.trend.outlook,
        "recent_spike_count": summary.recent_spike_count,
    }


def _serialize_reading(reading: GlucoseReading) -> dict[str, object]:
    return {
        "id": str(reading.id) if reading.id else None,
        "value": reading.value,
        "measured_at": reading.measured_at.isoformat(),
        "context": str(reading.context) if reading.context else None,
        "note": reading.note,
    }


def _serialize_recipe(recipe: Recipe) -> dict[str, object]:
    data = asdict(recipe)
    data["category"] = str(recipe.category)
    data["badge"] = carb_badge(recipe.carbs)
    return data


def _serialize_plan(plan: MealPlan) -> dict[str, object]:
    return {
        "user_id": str(plan.user_id),
        "plan_date": plan.plan_date.isoformat(),
        "breakfast": _serialize_recipe(plan.breakfast) if plan.breakfast else None,
        "lunch": _serialize_recipe(plan.lunch) if plan.lunch else None,
        "dinner": _serialize_recipe(plan.dinner) if plan.dinner else None,
        "snacks": plan.snacks,
        "reminders": plan.reminders,
        "total_calories": plan.totals.calories,
        "total_carbs": plan.totals.carbs,
        "total_protein": plan.totals.protein,
    }
