from typing import List

from fitplan.schemas.plan import (
    DietFilters,
    ExerciseSwapParams,
    MealSwapParams,
    NutritionPlan,
    PlanGenerationParams,
    UserProfile,
    WorkoutFilters,
)

SYSTEM_PROMPT = "You are an expert fitness and nutrition coach. Return strictly valid JSON."

JSON_ONLY = "Output ONLY a valid JSON object with the exact following structure. Do not add any text before or after the JSON object:"

FULL_PLAN_JSON_SHAPE = """{
  "workoutPlan": {
    "title": "string (e.g., 'Personalized 7-Day Shred Plan')",
    "introduction": "string (a brief inspiring intro to the plan, 2-3 sentences)",
    "schedule": [
      {
        "day": "string (e.g., 'Day 1 - Monday')",
        "focus": "string (e.g., 'Full Body Strength' or 'Rest')",
        "warmUp": "string (description of warm-up, 2-3 exercises or general routine)",
        "exercises": [
          {
            "name": "string",
            "sets": "string (e.g., '3-4')",
            "reps": "string (e.g., '8-12' or 'AMRAP')",
            "rest": "string (e.g., '60-90s')",
            "notes": "string (optional, e.g., 'Focus on form')",
            "instructions": "string (step-by-step instructions, one step per line, e.g., '1. First step.\\n2. Second step.')",
            "commonMistakes": "string (mistakes to avoid, one per line, e.g., '1. Mistake one.\\n2. Mistake two.')"
          }
        ],
        "coolDown": "string (description of cool-down, 2-3 stretches or general routine)"
      }
    ]
  },
  "nutritionPlan": {
    "title": "string (e.g., 'Tailored Fat Loss Diet')",
    "introduction": "string (a brief inspiring intro to the diet, 2-3 sentences)",
    "dailyTotals": { "calories": "string (e.g., 'Approx. 2000 kcal')", "protein": "string (e.g., '150g')", "carbs": "string (e.g., '200g')", "fat": "string (e.g., '60g')" },
    "mealSuggestions": [
      {
        "day": "string (e.g., 'Day 1 - Monday')",
        "meals": [
          { "name": "string (e.g., 'Breakfast')", "description": "string (ingredients with quantities for one person and short numbered preparation steps)", "time": "string (optional, e.g., '8:00 AM')" },
          { "name": "string (e.g., 'Snack 1')", "description": "string (same level of detail)", "time": "string (optional)" },
          { "name": "string (e.g., 'Lunch')", "description": "string (same level of detail)", "time": "string (optional)" },
          { "name": "string (e.g., 'Snack 2')", "description": "string (same level of detail)", "time": "string (optional)" },
          { "name": "string (e.g., 'Dinner')", "description": "string (same level of detail)", "time": "string (optional)" }
        ],
        "hydrationNotes": "string (e.g., 'Drink at least 2.5-3 liters of water throughout the day.')"
      }
    ],
    "generalTips": ["string (tip 1: short, actionable)", "string (tip 2)"]
  }
}"""

FULL_PLAN_RULES = """IMPORTANT: Every meal object in 'meals' (breakfast, lunch, dinner and all snacks) MUST look like {"name": "Meal Name", "description": "...", "time": "optional"}. A snack entry looks like {"name": "Snack 1", "description": "Apple slices (1 medium apple) with 2 tbsp peanut butter. 1. Slice apple. 2. Spread with peanut butter."} and NEVER like {"Snack 1": "An apple"}.
For exercises, keep 'instructions' and 'commonMistakes' concise. For trivial entries (e.g., 'Rest' or 'Light Walk') these may be brief or 'N/A'.

Ensure the JSON is valid. Provide diverse exercises and meal ideas for all 7 days.
If the goal is 'Get Shredded (Fat Loss + Muscle Definition)', focus on fat loss and muscle definition.
If 'Gain Muscle (Hypertrophy)', focus on hypertrophy and a caloric surplus.
If 'Lose Body Fat', focus on a caloric deficit while preserving muscle.
Adjust intensity and complexity to the experience level.
The workout schedule MUST include at least 2-3 rest or active recovery days.
Provide specific meal examples for all 7 days of the nutrition plan."""

GROCERY_LIST_JSON_SHAPE = """{
  "groceryList": [
    {
      "category": "string (e.g., 'Fresh Produce (Fruits & Vegetables)', 'Proteins (Meat, Poultry, Fish, Plant-Based)', 'Dairy & Alternatives', 'Grains, Legumes & Carbs', 'Pantry Staples & Condiments', 'Beverages', 'Frozen Goods')",
      "items": [
        { "name": "string (e.g., 'Chicken Breast')", "quantity": "string (e.g., '500g' or '2 large pieces' or '1 bunch')" }
      ]
    }
  ]
}"""

ARTICLE_JSON_SHAPE = """{
  "title": "string (compelling article title related to the topic)",
  "content": "string (article body in Markdown: paragraphs, '## Subheading' headings and '- Point' bullet lists)"
}"""

EXERCISE_JSON_SHAPE = """{
  "name": "string (new exercise name)",
  "sets": "string (e.g., '3-4', similar to the original or appropriate for the new exercise)",
  "reps": "string (e.g., '8-12' or 'AMRAP')",
  "rest": "string (e.g., '60-90s')",
  "notes": "string (optional, e.g., 'Focus on form')",
  "instructions": "string (step-by-step instructions, one step per line)",
  "commonMistakes": "string (mistakes to avoid, one per line)"
}"""


def _join_or(values: List[str], fallback: str) -> str:
    return ", ".join(v for v in values if v) or fallback


def _profile_block(profile: UserProfile) -> str:
    return f"""User Profile:
- Age: {profile.age}
- Gender: {profile.gender}
- Height: {profile.height} cm
- Weight: {profile.weight} kg
- Fitness Goal: {profile.fitness_goal.value}
- Experience Level: {profile.experience_level.value}"""


def _workout_block(filters: WorkoutFilters) -> str:
    return f"""Workout Preferences:
- Available Equipment: {_join_or(filters.equipment, 'Bodyweight only')}
- Session Duration: {filters.duration}
- Training Style: {filters.training_style.value}
- Workout Location: {filters.location.value}"""


def _diet_block(filters: DietFilters) -> str:
    return f"""Dietary Preferences:
- Dietary Restrictions: {_join_or(filters.dietary_restrictions, 'None')}
- Allergies: {_join_or(filters.allergies, 'None')}
- Favorite Cuisines: {_join_or(filters.favorite_cuisines, 'Any')}"""


def plan_request_context(params: PlanGenerationParams) -> str:
    """
    Picks the opening instruction:
    - summary + feedback: revise the existing plan as a whole around the feedback
    - summary only: profile/preferences may have changed, produce a fresh but consistent plan
    - neither: brand new plan
    """
    summary = params.previous_plan_summary
    feedback = params.feedback

    if summary and feedback:
        return (
            f'You previously generated a plan summarized as: "{summary}". '
            f'The user now has the following feedback/refinement request: "{feedback}". '
            "Update the *entire* 7-day workout and nutrition plan based on this feedback, keeping the user's "
            "original profile and preferences (listed below) in mind. If the feedback targets a specific part "
            "(e.g., 'Day 3 workout is too hard', 'replace chicken with fish on Day 1'), make that adjustment and "
            "keep the rest of the plan coherent and balanced. If the feedback is general (e.g., 'make it easier'), "
            "adjust the overall plan accordingly."
        )
    if summary:
        return (
            f'You previously generated a plan summarized as: "{summary}". '
            "The user may have updated their profile or preferences. Generate an updated 7-day plan considering "
            "these, or if nothing significant changed, a similar but fresh plan."
        )
    return "Generate a new personalized 7-day workout and nutrition plan"


def build_full_plan_prompt(params: PlanGenerationParams) -> str:
    initial_requests = ""
    if params.feedback and not params.previous_plan_summary:
        initial_requests = f"\nUser Feedback/Initial Requests: {params.feedback}"

    return f"""
You are an expert fitness and nutrition AI. {plan_request_context(params)} based on the following user profile and preferences.

{_profile_block(params.profile)}{initial_requests}

{_workout_block(params.workout_filters)}

{_diet_block(params.diet_filters)}

{JSON_ONLY}
{FULL_PLAN_JSON_SHAPE}
{FULL_PLAN_RULES}
"""


def build_grocery_list_prompt(nutrition_plan: NutritionPlan) -> str:
    days_text = "\n\n".join(
        f"Day: {day.day}\n" + "\n".join(f"{meal.name}: {meal.description}" for meal in day.meals)
        for day in nutrition_plan.meal_suggestions
    )
    return f"""
Based on the following 7-day nutrition plan, generate a categorized grocery list.
Nutrition Plan Details:
---
{days_text}
---
{JSON_ONLY}
{GROCERY_LIST_JSON_SHAPE}
Ensure the JSON is valid. Consolidate items where possible (e.g., if apples appear several times, list 'Apples' once with the total quantity). Be specific with quantities for a 7-day plan for one person. Categorize logically.
"""


def build_article_prompt(topic: str) -> str:
    return f"""
Generate a concise and informative educational article (around 300-400 words) on the topic: "{topic}".
The article should be easy to understand for someone with general fitness knowledge.
Focus on practical tips, benefits, and actionable advice. Use clear language.
{JSON_ONLY}
{ARTICLE_JSON_SHAPE}
Ensure the JSON is valid.
"""


def build_exercise_swap_prompt(params: ExerciseSwapParams) -> str:
    exercise = params.exercise_to_swap
    day = params.workout_day
    equipment = _join_or(params.workout_filters.equipment, "Bodyweight only")
    day_exercises = "\n".join(f"- {ex.name}" for ex in day.exercises)

    return f"""
You are an expert fitness AI. The user wants to swap out one exercise from their current workout day.
{_profile_block(params.profile)}

{_workout_block(params.workout_filters)}

Current Workout Day Focus: "{day.focus}"
Current Workout Day Exercises (for variety):
{day_exercises}

Exercise to Swap:
- Name: {exercise.name}
- Sets: {exercise.sets}
- Reps: {exercise.reps}
- Original Notes: {exercise.notes or 'N/A'}
- Original Instructions: {exercise.instructions or 'N/A'}
- Original Common Mistakes: {exercise.common_mistakes or 'N/A'}

Provide a suitable alternative exercise. The replacement MUST:
1. Target similar muscle groups or serve a similar purpose as "{exercise.name}".
2. Be appropriate for the user's experience level ("{params.profile.experience_level.value}").
3. Use only the available equipment: "{equipment}". If "Bodyweight Only" is specified, do not suggest equipment.
4. Fit the workout day's focus: "{day.focus}".
5. Be a DIFFERENT exercise than "{exercise.name}" and ideally different from the other exercises of the day.
6. Come with its own instructions and common mistakes.

Output ONLY a single valid JSON object representing the new exercise, with the exact following structure. Do not add any text before or after the JSON object:
{EXERCISE_JSON_SHAPE}
Ensure the JSON is valid and provides all fields for the new exercise.
"""


def build_meal_swap_prompt(params: MealSwapParams) -> str:
    meal = params.meal_to_swap
    diet = params.diet_filters
    restrictions = _join_or(diet.dietary_restrictions, "None")
    allergies = _join_or(diet.allergies, "None")
    cuisines = _join_or(diet.favorite_cuisines, "Any")
    day_meals = "\n".join(f"- {m.name}: {m.description[:50]}..." for m in params.nutrition_day.meals)
    time_hint = meal.time or "Any appropriate time"

    meal_shape = (
        "{\n"
        f'  "name": "string (MUST be the same name as the meal being swapped: \'{meal.name}\')",\n'
        '  "description": "string (new meal: key ingredients with quantities for one person and short numbered preparation steps)",\n'
        f'  "time": "string (optional, e.g., \'{time_hint}\'; keep it close to the original if relevant)"\n'
        "}"
    )

    return f"""
You are an expert nutrition AI. The user wants to swap out one meal from their nutrition plan for a specific day.
{_profile_block(params.profile)}

{_diet_block(diet)}

Current Nutrition Day Meals (for variety):
{day_meals}

Original Meal to Swap:
- Name: {meal.name}
- Original Description: {meal.description}
- Original Time: {meal.time or 'N/A'}

Provide a suitable alternative meal. The replacement MUST:
1. Be nutritionally appropriate for the meal type ("{meal.name}").
2. Strictly respect the dietary restrictions ("{restrictions}") and allergies ("{allergies}").
3. If possible, match the favorite cuisines ("{cuisines}"); restrictions and allergies come first.
4. Be a DIFFERENT meal than the original.
5. Keep a similar caloric/macro profile where inferable, or be balanced for the goal ("{params.profile.fitness_goal.value}").
6. Describe key ingredients, quantities for one person and simple preparation steps.

Output ONLY a single valid JSON object representing the new meal, with the exact following structure. Do not add any text before or after the JSON object:
{meal_shape}
Ensure the JSON is valid and keep the 'name' field identical to the meal being replaced.
"""
