"""Prompt text sent to the content provider."""

from nutriplan.domain.plan import MealItem
from nutriplan.domain.profile import Cuisine, PlanGoal, UserProfile

LONG_PLAN_DAYS = 28
MAX_EXACT_DAYS = 7

PLAN_SYSTEM_PROMPT = (
    "You are a professional nutritionist AI. You generate realistic, balanced "
    "meal plans. You ALWAYS provide specific quantities for ingredients."
)
SWAP_SYSTEM_PROMPT = (
    "You are a helpful nutritionist finding a meal alternative. "
    "You ALWAYS provide specific quantities for ingredients."
)
ANALYSIS_SYSTEM_PROMPT = (
    "You are a nutritionist estimating the energy and macronutrients of food."
)

_FUSION_NOTE = (
    "The user requested a Southeast Asian focus. Include a diverse variety of "
    "authentic dishes from Chinese, Indian, Thai, Indonesian, Vietnamese and "
    "Malay cuisines. Do not repeat the same cuisine for every meal."
)


def planned_day_count(duration: int) -> int:
    """Number of days to request for a plan duration.

    Anything longer than a week is planned as four full weeks.
    """
    if duration > MAX_EXACT_DAYS:
        return LONG_PLAN_DAYS
    return duration


def duration_instruction(duration: int) -> str:
    """Day-count instruction for the plan prompt."""
    days = planned_day_count(duration)
    if days != duration:
        return (
            f"The user requested a {duration}-day plan. Generate a full "
            f"{days // MAX_EXACT_DAYS}-week plan ({days} days). "
            f"Label days strictly as 'Day 1' through 'Day {days}'."
        )
    return (
        f"Create a {days}-day meal plan. "
        f"Label days strictly as 'Day 1' through 'Day {days}'."
    )


def build_plan_prompt(profile: UserProfile) -> str:
    """Build the full plan prompt from a profile with energy targets."""
    goal_label = (
        "Safe Deficit" if profile.plan_goal == PlanGoal.DEFICIT else "Maintenance"
    )
    snacks = (
        str(profile.snacks_per_day) if profile.include_snacks else "0 (No snacks)"
    )
    structure = f"exactly {profile.meals_per_day} main meals"
    if profile.include_snacks:
        structure += f" and {profile.snacks_per_day} snacks"
    cuisine_note = (
        _FUSION_NOTE
        if profile.cuisine_preference == Cuisine.SOUTHEAST_ASIAN_FUSION
        else ""
    )
    lines = [
        "You are a professional nutritionist validating a meal plan.",
        "User Profile:",
        f"- Age: {profile.age}, Sex: {profile.sex.value}",
        f"- Height: {profile.height_cm:g} cm, Weight: {profile.weight_kg:g} kg",
        f"- Activity: {profile.activity_level.value}",
        f"- Calculated BMR: {_kcal(profile.calculated_bmr)}",
        f"- Calculated Maintenance (TDEE): {_kcal(profile.calculated_tdee)}",
        f"- Target Calorie Goal: {_kcal(profile.target_calories)} ({goal_label})",
        f"- Diet: {profile.dietary_preference}",
        f"- Allergies: {profile.allergies or 'None'}",
        f"- Main Meals per day: {profile.meals_per_day}",
        f"- Snacks per day: {snacks}",
        f"- Cuisine Preference: {profile.cuisine_preference.value}",
        "",
        "INSTRUCTIONS:",
        duration_instruction(profile.duration),
        cuisine_note,
        "",
        "SAFETY GUIDELINES:",
        "1. Adhere strictly to the Target Calorie Goal of approx "
        f"{_kcal(profile.target_calories)}/day.",
        "2. Do not promote starvation. If the target is below 1200 kcal, "
        "use 1200 and warn the user in the summary.",
        "3. Ensure adequate protein (>0.8g/kg bodyweight) and balanced "
        "macronutrients.",
        "4. Provide specific recipes matching the cuisine preference.",
        f"5. Meal structure: generate {structure} for each day. "
        "Label them clearly (Breakfast, Lunch, Dinner, Snack 1, ...).",
        "",
        "RECIPE DETAILS:",
        "- Every ingredient MUST carry a quantity, formatted "
        "'Quantity Unit Ingredient' (e.g. '150g Chicken Breast', "
        "'1/2 tsp Salt'). Never list an ingredient without an amount.",
        "- Give 3-4 short cooking steps per dish.",
        "- Give a 4-6 sentence chef's tip with a technique, a flavor variation "
        "and a substitution idea.",
        "",
        "Output the result as a JSON object matching the schema.",
    ]
    return "\n".join(lines)


def build_swap_prompt(
    profile: UserProfile, current_item: MealItem, meal_type: str
) -> str:
    """Build the prompt asking for one alternative meal item."""
    lines = [
        "The user wants to SWAP a specific meal in their plan.",
        "User Profile:",
        f"- Target Calories: {_kcal(profile.target_calories)}",
        f"- Diet: {profile.dietary_preference}",
        f"- Cuisine: {profile.cuisine_preference.value}",
        f"- Allergies: {profile.allergies or 'None'}",
        "",
        f'Current Meal to Replace: "{current_item.name}" '
        f"({current_item.calories:g} kcal).",
        f"Meal Type: {meal_type}",
        "",
        "Generate ONE alternative meal item that:",
        f'1. Is a distinctly different dish from "{current_item.name}".',
        "2. Has similar calories (within +/- 10%) and balanced macros.",
        f"3. Matches the cuisine preference: {profile.cuisine_preference.value}.",
        "4. Respects the diet and allergies above and is safe and healthy.",
        "5. Gives a quantity for every ingredient (e.g. '100g Tofu').",
        "6. Includes a 4-6 sentence chef's tip with cooking advice and variations.",
        "",
        "Output JSON matching the meal item schema.",
    ]
    return "\n".join(lines)


def build_analysis_prompt(description: str | None, has_image: bool) -> str:
    """Build the prompt for food analysis from text and/or a photo."""
    subject = "the provided food image" if has_image else "the food"
    if description:
        subject += f' described as: "{description}"'
    return (
        f"Analyze the nutritional content of {subject}. "
        "Estimate the total calories and macronutrients. "
        "Return a short display-friendly name (e.g. 'Grilled Chicken Salad'), "
        "total kcal, and protein, carbs and fats in grams."
    )


def _kcal(value: float | None) -> str:
    if value is None:
        return "N/A"
    return f"{value:g} kcal"
