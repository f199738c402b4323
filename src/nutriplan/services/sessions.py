"""Plan session: owns the current profile and plan."""

import logging
from dataclasses import dataclass, field
from enum import StrEnum

from pydantic import ValidationError

from nutriplan.domain.errors import GenerationFailure, PlanStateError, SwapFailure
from nutriplan.domain.plan import DayPlan, MealItem, NutritionPlan
from nutriplan.domain.profile import UserProfile
from nutriplan.services.aggregator import recompute_plan_totals, replace_meal_item
from nutriplan.services.energy import compute_energy_targets
from nutriplan.services.gateway import ContentGateway
from nutriplan.services.storage import PLAN_KEY, PROFILE_KEY, StateStore

GENERATION_FAILURE_MESSAGE = (
    "We encountered an issue connecting to our nutritionist AI. "
    "Please try again in a moment."
)

_logger = logging.getLogger(__name__)

SwapSlot = tuple[int, int, int]


class SessionState(StrEnum):
    """Lifecycle of a plan session."""

    IDLE = "idle"
    GENERATING = "generating"
    READY = "ready"
    FAILED = "failed"


@dataclass
class PlanSessionController:
    """Generates plans, swaps meals and keeps the plan consistent.

    Every change replaces the plan object; a plan that has been handed out
    is never modified. Each generation or reset bumps ``version`` so that
    results of requests issued against an older plan can be recognised and
    dropped.
    """

    gateway: ContentGateway
    store: StateStore
    _state: SessionState = field(default=SessionState.IDLE, init=False)
    _profile: UserProfile | None = field(default=None, init=False)
    _plan: NutritionPlan | None = field(default=None, init=False)
    _failure_message: str | None = field(default=None, init=False)
    _version: int = field(default=0, init=False)
    _pending: set[tuple[int, SwapSlot]] = field(default_factory=set, init=False)

    @property
    def state(self) -> SessionState:
        """Current session state."""
        return self._state

    @property
    def profile(self) -> UserProfile | None:
        """Profile the current plan was generated for."""
        return self._profile

    @property
    def plan(self) -> NutritionPlan | None:
        """Current plan, if any."""
        return self._plan

    @property
    def failure_message(self) -> str | None:
        """User-facing message for the last failed generation."""
        return self._failure_message

    @property
    def version(self) -> int:
        """Token identifying the current plan generation."""
        return self._version

    @property
    def pending_swaps(self) -> set[SwapSlot]:
        """Meal slots with a swap in flight for the current plan."""
        return {slot for version, slot in self._pending if version == self._version}

    async def generate_plan(self, profile: UserProfile) -> NutritionPlan | None:
        """Generate and store a new plan for the profile.

        Returns None when the session was reset while the request was in
        flight.
        """
        if self._state == SessionState.GENERATING:
            raise PlanStateError("A plan is already being generated")
        previous = (self._state, self._failure_message)
        self._version += 1
        version = self._version
        self._state = SessionState.GENERATING
        self._failure_message = None

        enriched = profile.with_energy_targets(compute_energy_targets(profile))
        try:
            result = await self.gateway.generate_plan(enriched)
        except BaseException:
            if version == self._version:
                _logger.warning("Plan generation interrupted; keeping previous plan")
                self._state, self._failure_message = previous
            raise

        if version != self._version:
            _logger.info("Discarding plan generated for a reset session")
            return None
        if not result.ok:
            self._profile = None
            self._plan = None
            self._state = SessionState.FAILED
            self._failure_message = GENERATION_FAILURE_MESSAGE
            self._forget()
            raise GenerationFailure(result.error)

        plan = recompute_plan_totals(result.value)
        self._commit(enriched, plan)
        self._state = SessionState.READY
        return plan

    async def swap_meal(  # noqa: PLR0913
        self,
        day_index: int,
        group_index: int,
        item_index: int,
        current_item: MealItem | None = None,
        meal_type: str | None = None,
    ) -> DayPlan | None:
        """Replace one meal item with an alternative and return its day.

        Returns None when the plan was regenerated or reset before the
        alternative arrived. A ``current_item`` sent by the caller must match
        the item at the slot.
        """
        if (
            self._state != SessionState.READY
            or self._plan is None
            or self._profile is None
        ):
            raise PlanStateError("No plan is ready for swapping")
        plan_item = self._plan.meal_item(day_index, group_index, item_index)
        if current_item is not None and (
            current_item.name != plan_item.name
            or current_item.calories != plan_item.calories
        ):
            raise PlanStateError("The meal at this slot has changed")
        version = self._version
        pending_key = (version, (day_index, group_index, item_index))
        if pending_key in self._pending:
            raise SwapFailure("A swap is already in progress for this meal")

        meal_type = meal_type or self._plan.days[day_index].meals[group_index].type
        self._pending.add(pending_key)
        try:
            result = await self.gateway.generate_alternative_meal(
                self._profile, plan_item, meal_type
            )
        finally:
            self._pending.discard(pending_key)

        # No await between the version check and the commit.
        if version != self._version or self._plan is None:
            _logger.info(
                "Discarding stale swap for day=%s group=%s item=%s",
                day_index,
                group_index,
                item_index,
            )
            return None
        if not result.ok:
            raise SwapFailure(result.error)
        updated = replace_meal_item(
            self._plan, day_index, group_index, item_index, result.value
        )
        self._commit(self._profile, updated)
        return updated.days[day_index]

    def dismiss_failure(self) -> None:
        """Acknowledge a failed generation and return to idle."""
        if self._state != SessionState.FAILED:
            raise PlanStateError("There is no failed generation to dismiss")
        self._state = SessionState.IDLE
        self._failure_message = None

    def reset(self) -> None:
        """Drop the current profile and plan."""
        self._version += 1
        self._profile = None
        self._plan = None
        self._failure_message = None
        self._state = SessionState.IDLE
        self._forget()

    def restore(self) -> bool:
        """Load a persisted session; return True when a plan was restored."""
        raw_profile = self.store.load(PROFILE_KEY)
        raw_plan = self.store.load(PLAN_KEY)
        if raw_profile is None or raw_plan is None:
            return False
        try:
            profile = UserProfile.model_validate(raw_profile)
            plan = NutritionPlan.model_validate(raw_plan)
        except ValidationError:
            _logger.warning("Discarding persisted plan session that failed validation")
            self._forget()
            return False
        self._version += 1
        self._profile = profile
        self._plan = plan
        self._failure_message = None
        self._state = SessionState.READY
        return True

    def _commit(self, profile: UserProfile, plan: NutritionPlan) -> None:
        self._profile = profile
        self._plan = plan
        try:
            self.store.save(
                PROFILE_KEY, profile.model_dump(mode="json", by_alias=True)
            )
            self.store.save(PLAN_KEY, plan.model_dump(mode="json", by_alias=True))
        except Exception:
            _logger.exception("Failed to persist plan session")

    def _forget(self) -> None:
        try:
            self.store.delete(PROFILE_KEY)
            self.store.delete(PLAN_KEY)
        except Exception:
            _logger.exception("Failed to clear persisted plan session")
