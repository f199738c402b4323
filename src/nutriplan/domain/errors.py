"""Error types raised by the planning services."""


class NutriPlanError(Exception):
    """Base class for application errors."""


class GenerationFailure(NutriPlanError):
    """Full plan generation failed; no partial plan was kept."""


class SwapFailure(NutriPlanError):
    """A single meal swap failed; the current plan is unchanged."""


class FoodAnalysisFailure(NutriPlanError):
    """Food analysis from a description or photo failed."""


class PlanStateError(NutriPlanError):
    """The session is not in a state that allows the requested operation."""
