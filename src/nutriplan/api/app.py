"""FastAPI application factory."""

import base64
import binascii
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException, Request, status

from nutriplan.api.schemas import AnalyzeRequest, ManualLogRequest, MealSlot, SwapRequest
from nutriplan.app_logging import configure_logging
from nutriplan.containers import AppContainer
from nutriplan.domain.errors import (
    FoodAnalysisFailure,
    GenerationFailure,
    PlanStateError,
    SwapFailure,
)
from nutriplan.domain.food_log import DailyIntake, FoodLogEntry
from nutriplan.domain.plan import MealItem, NutritionPlan
from nutriplan.domain.profile import UserProfile
from nutriplan.services.energy import compute_energy_targets
from nutriplan.services.plan_views import (
    absolute_day_index,
    filter_shopping_list,
    group_into_weeks,
    macro_calorie_shares,
)
from nutriplan.services.sessions import GENERATION_FAILURE_MESSAGE

_SWAP_FAILURE_MESSAGE = "Couldn't find an alternative for this meal. Please try again."
_ANALYSIS_FAILURE_MESSAGE = "Could not analyze food. Please try again."


def create_app(container: AppContainer) -> FastAPI:  # noqa: PLR0915
    """Create a FastAPI app configured with dependencies."""
    configure_logging(container.settings.log_level)
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        try:
            if app.state.container.plan_session.restore():
                logger.info("Restored saved plan session")
        except Exception:
            logger.exception("Failed to restore saved plan session")
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.post("/energy")
    async def energy(profile: UserProfile) -> dict[str, float]:
        """Compute BMR, TDEE and target calories without generating a plan."""
        targets = compute_energy_targets(profile)
        return {
            "bmr": targets.bmr,
            "tdee": targets.tdee,
            "targetCalories": targets.target_calories,
        }

    @app.post("/plan")
    async def generate_plan(profile: UserProfile, request: Request) -> dict[str, object]:
        """Generate a new plan, replacing any current one."""
        state_container: AppContainer = request.app.state.container
        session = state_container.plan_session
        try:
            plan = await session.generate_plan(profile)
        except PlanStateError as exc:
            raise HTTPException(status.HTTP_409_CONFLICT, str(exc)) from exc
        except GenerationFailure as exc:
            logger.warning("Plan generation failed: %s", exc)
            raise HTTPException(
                status.HTTP_502_BAD_GATEWAY,
                _format_error(state_container, exc, GENERATION_FAILURE_MESSAGE),
            ) from exc
        if plan is None:
            return {"status": "stale", "state": session.state}
        return _session_payload(state_container)

    @app.get("/plan")
    async def current_plan(request: Request) -> dict[str, object]:
        """Return the session state and current plan."""
        return _session_payload(request.app.state.container)

    @app.delete("/plan")
    async def reset_plan(request: Request) -> dict[str, object]:
        """Discard the current plan and profile."""
        state_container: AppContainer = request.app.state.container
        state_container.plan_session.reset()
        return _session_payload(state_container)

    @app.post("/plan/dismiss")
    async def dismiss_failure(request: Request) -> dict[str, object]:
        """Acknowledge a failed generation."""
        state_container: AppContainer = request.app.state.container
        try:
            state_container.plan_session.dismiss_failure()
        except PlanStateError as exc:
            raise HTTPException(status.HTTP_409_CONFLICT, str(exc)) from exc
        return _session_payload(state_container)

    @app.get("/plan/weeks/{week_index}")
    async def plan_week(week_index: int, request: Request) -> dict[str, object]:
        """Return one week of the plan with absolute day indices."""
        plan = _require_plan(request.app.state.container)
        weeks = group_into_weeks(plan.days)
        if not 0 <= week_index < len(weeks):
            raise HTTPException(status.HTTP_404_NOT_FOUND, "No such week")
        return {
            "week": week_index,
            "days": [
                {"index": absolute_day_index(week_index, position), "plan": day}
                for position, day in enumerate(weeks[week_index])
            ],
        }

    @app.get("/plan/days/{day_index}/macro-shares")
    async def day_macro_shares(day_index: int, request: Request) -> dict[str, object]:
        """Return the percent of a day's calories from each macronutrient."""
        plan = _require_plan(request.app.state.container)
        if not 0 <= day_index < len(plan.days):
            raise HTTPException(status.HTTP_404_NOT_FOUND, "No such day")
        return {"shares": macro_calorie_shares(plan.days[day_index])}

    @app.get("/plan/shopping-list")
    async def shopping_list(
        request: Request, q: str | None = None
    ) -> dict[str, object]:
        """Return the shopping list, filtered by an optional search term."""
        plan = _require_plan(request.app.state.container)
        return {"shoppingList": filter_shopping_list(plan.shopping_list, q)}

    @app.post("/plan/swap")
    async def swap_meal(body: SwapRequest, request: Request) -> dict[str, object]:
        """Swap one meal item for an alternative."""
        state_container: AppContainer = request.app.state.container
        try:
            day = await state_container.plan_session.swap_meal(
                body.day_index,
                body.group_index,
                body.item_index,
                current_item=body.current_item,
                meal_type=body.meal_type,
            )
        except IndexError as exc:
            raise HTTPException(status.HTTP_404_NOT_FOUND, str(exc)) from exc
        except PlanStateError as exc:
            raise HTTPException(status.HTTP_409_CONFLICT, str(exc)) from exc
        except SwapFailure as exc:
            logger.warning("Meal swap failed: %s", exc)
            raise HTTPException(
                status.HTTP_502_BAD_GATEWAY,
                _format_error(state_container, exc, _SWAP_FAILURE_MESSAGE),
            ) from exc
        if day is None:
            return {"status": "stale"}
        return {"status": "ok", "dayIndex": body.day_index, "day": day}

    @app.get("/log")
    async def food_log(request: Request, day: int = 1) -> dict[str, object]:
        """Return a day's log entries and intake against the daily goal."""
        state_container: AppContainer = request.app.state.container
        service = state_container.food_log_service
        intake = service.daily_intake(day, _daily_goal(state_container))
        return {
            "entries": [_entry_payload(entry) for entry in service.list_entries(day)],
            "intake": _intake_payload(intake),
        }

    @app.post("/log", status_code=status.HTTP_201_CREATED)
    async def add_log_entry(
        body: ManualLogRequest, request: Request
    ) -> dict[str, object]:
        """Log a food manually."""
        state_container: AppContainer = request.app.state.container
        try:
            entry = state_container.food_log_service.add_entry(
                body.name, body.calories, body.macros, body.day_number
            )
        except ValueError as exc:
            raise HTTPException(status.HTTP_400_BAD_REQUEST, str(exc)) from exc
        return _entry_payload(entry)

    @app.post("/log/plan-item", status_code=status.HTTP_201_CREATED)
    async def log_plan_item(body: MealSlot, request: Request) -> dict[str, object]:
        """Log a meal from the current plan as eaten on its plan day."""
        state_container: AppContainer = request.app.state.container
        plan = _require_plan(state_container)
        try:
            item = plan.meal_item(body.day_index, body.group_index, body.item_index)
        except IndexError as exc:
            raise HTTPException(status.HTTP_404_NOT_FOUND, str(exc)) from exc
        entry = state_container.food_log_service.log_meal_item(
            item, day_number=body.day_index + 1
        )
        return _entry_payload(entry)

    @app.post("/log/analyze")
    async def analyze_food(body: AnalyzeRequest, request: Request) -> dict[str, object]:
        """Estimate calories and macros from a description and/or photo."""
        state_container: AppContainer = request.app.state.container
        image_bytes = _decode_image(body.image_base64)
        try:
            analysis = await state_container.food_log_service.analyze(
                body.description, image_bytes
            )
        except ValueError as exc:
            raise HTTPException(status.HTTP_400_BAD_REQUEST, str(exc)) from exc
        except FoodAnalysisFailure as exc:
            logger.warning("Food analysis failed: %s", exc)
            raise HTTPException(
                status.HTTP_502_BAD_GATEWAY,
                _format_error(state_container, exc, _ANALYSIS_FAILURE_MESSAGE),
            ) from exc
        return {"analysis": analysis}

    @app.delete("/log/{entry_id}")
    async def remove_log_entry(entry_id: str, request: Request) -> dict[str, str]:
        """Delete a log entry."""
        state_container: AppContainer = request.app.state.container
        if not state_container.food_log_service.remove_entry(entry_id):
            raise HTTPException(status.HTTP_404_NOT_FOUND, "No such log entry")
        return {"status": "ok"}

    @app.get("/favorites")
    async def favorites(request: Request) -> dict[str, object]:
        """Return saved favorite meals."""
        state_container: AppContainer = request.app.state.container
        return {"favorites": state_container.favorites_service.list_favorites()}

    @app.post("/favorites/toggle")
    async def toggle_favorite(item: MealItem, request: Request) -> dict[str, bool]:
        """Add a meal to favorites or remove it when already saved."""
        state_container: AppContainer = request.app.state.container
        return {"favorite": state_container.favorites_service.toggle(item)}

    @app.delete("/favorites/{name}")
    async def remove_favorite(name: str, request: Request) -> dict[str, str]:
        """Remove a favorite meal by name."""
        state_container: AppContainer = request.app.state.container
        if not state_container.favorites_service.remove(name):
            raise HTTPException(status.HTTP_404_NOT_FOUND, "No such favorite")
        return {"status": "ok"}

    return app


def _format_error(state_container: AppContainer, exc: Exception, fallback: str) -> str:
    """Return a user-facing error message with local debug info."""
    if state_container.settings.environment == "local":
        detail = f"{type(exc).__name__}: {exc}".strip()
        if detail:
            return f"{fallback} (debug: {detail})"
    return fallback


def _require_plan(state_container: AppContainer) -> NutritionPlan:
    plan = state_container.plan_session.plan
    if plan is None:
        raise HTTPException(status.HTTP_404_NOT_FOUND, "No plan has been generated")
    return plan


def _session_payload(state_container: AppContainer) -> dict[str, object]:
    session = state_container.plan_session
    payload: dict[str, object] = {"state": session.state}
    if session.failure_message:
        payload["error"] = session.failure_message
    if session.plan is not None:
        payload["profile"] = session.profile
        payload["plan"] = session.plan
        payload["weeks"] = len(group_into_weeks(session.plan.days))
        payload["pendingSwaps"] = sorted(session.pending_swaps)
    return payload


def _daily_goal(state_container: AppContainer) -> float:
    profile = state_container.plan_session.profile
    if profile is not None and profile.target_calories:
        return profile.target_calories
    return state_container.settings.default_daily_goal


def _decode_image(raw: str | None) -> bytes | None:
    """Decode base64 image data, accepting a data URL prefix."""
    if not raw:
        return None
    data = raw.split(",", maxsplit=1)[1] if "," in raw else raw
    try:
        return base64.b64decode(data, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise HTTPException(
            status.HTTP_400_BAD_REQUEST, "Image must be base64 encoded"
        ) from exc


def _entry_payload(entry: FoodLogEntry) -> dict[str, object]:
    return {
        "id": entry.id,
        "name": entry.name,
        "calories": entry.calories,
        "macros": entry.macros.model_dump(),
        "timestamp": entry.timestamp,
        "dayNumber": entry.day_number,
    }


def _intake_payload(intake: DailyIntake) -> dict[str, object]:
    return {
        "dayNumber": intake.day_number,
        "calories": intake.calories,
        "protein": intake.protein,
        "carbs": intake.carbs,
        "fats": intake.fats,
        "goal": intake.goal,
        "remaining": intake.remaining,
        "progressPct": intake.progress_pct,
    }
