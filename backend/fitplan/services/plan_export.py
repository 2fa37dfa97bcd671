import logging
import os

from fitplan.schemas.plan import Exercise, NutritionPlan, WorkoutPlan

logger = logging.getLogger(__name__)

WORKOUT_EXPORT_FILENAME = "AI_Workout_Plan.txt"
NUTRITION_EXPORT_FILENAME = "AI_Nutrition_Plan.txt"

SEPARATOR = "-" * 30


def _indented_lines(text: str, indent: str = "      ") -> str:
    return "\n".join(f"{indent}{line.strip()}" for line in text.split("\n"))


def _has_detail(value) -> bool:
    return bool(value) and value.strip().lower() != "n/a"


def format_exercise(ex: Exercise) -> str:
    details = f"  - {ex.name} (Sets: {ex.sets}, Reps: {ex.reps}, Rest: {ex.rest})\n"
    if ex.notes:
        details += f"    Notes: {ex.notes}\n"
    if _has_detail(ex.instructions):
        details += f"    Instructions:\n{_indented_lines(ex.instructions)}\n"
    if _has_detail(ex.common_mistakes):
        details += f"    Common Mistakes:\n{_indented_lines(ex.common_mistakes)}\n"
    return details


def format_workout_plan(plan: WorkoutPlan) -> str:
    content = "AI Fitness - Workout Plan\n=========================\n\n"
    content += f"Title: {plan.title}\nIntroduction: {plan.introduction}\n\n"
    for day in plan.schedule:
        content += f"{SEPARATOR}\n{day.day} - Focus: {day.focus}\n{SEPARATOR}\n"
        content += f"Warm-up: {day.warm_up}\n\n"
        content += "Exercises:\n"
        for ex in day.exercises:
            content += format_exercise(ex)
        content += f"\nCool-down: {day.cool_down}\n\n\n"
    return content


def format_nutrition_plan(plan: NutritionPlan) -> str:
    totals = plan.daily_totals
    content = "AI Fitness - Nutrition Plan\n===========================\n\n"
    content += f"Title: {plan.title}\nIntroduction: {plan.introduction}\n\n"
    content += (
        "Approximate Daily Totals:\n"
        f"  Calories: {totals.calories}\n"
        f"  Protein: {totals.protein}\n"
        f"  Carbs: {totals.carbs}\n"
        f"  Fat: {totals.fat}\n\n"
    )

    for day in plan.meal_suggestions:
        content += f"{SEPARATOR}\n{day.day}\n{SEPARATOR}\n"
        for meal in day.meals:
            time_part = f" ({meal.time})" if meal.time else ""
            content += f"  {meal.name}{time_part}: {meal.description}\n"
        if day.hydration_notes:
            content += f"  Hydration: {day.hydration_notes}\n"
        content += "\n"

    if plan.general_tips:
        content += "General Tips:\n"
        for tip in plan.general_tips:
            content += f"  - {tip}\n"
    return content


def write_text_file(content: str, filename: str, directory: str = ".") -> str:
    """Writes UTF-8 text and returns the full path."""
    os.makedirs(directory, exist_ok=True)
    path = os.path.join(directory, filename)
    with open(path, "w", encoding="utf-8") as f:
        f.write(content)
    logger.info(f"Exported {path}")
    return path
