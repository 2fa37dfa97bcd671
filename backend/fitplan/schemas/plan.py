from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """JSON uses camelCase keys (model output and persisted state); Python uses snake_case."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        coerce_numbers_to_str=True,
    )

    def to_json_dict(self) -> dict:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class FitnessGoal(str, Enum):
    GET_SHREDDED = "Get Shredded (Fat Loss + Muscle Definition)"
    GAIN_MUSCLE = "Gain Muscle (Hypertrophy)"
    LOSE_BODY_FAT = "Lose Body Fat"
    IMPROVE_ENDURANCE = "Improve Endurance"
    GENERAL_FITNESS = "Maintain General Fitness"


class ExperienceLevel(str, Enum):
    BEGINNER = "Beginner"
    INTERMEDIATE = "Intermediate"
    ADVANCED = "Advanced"


class TrainingStyle(str, Enum):
    HIIT = "HIIT (High-Intensity Interval Training)"
    STRENGTH = "Strength Training"
    YOGA_PILATES = "Yoga/Pilates"
    BODYWEIGHT = "Bodyweight Only"
    CARDIO_FOCUSED = "Cardio Focused"


class WorkoutLocation(str, Enum):
    HOME = "Home"
    GYM = "Gym"
    OUTDOORS = "Outdoors"


# --- User input ---

class UserProfile(CamelModel):
    age: str = "30"
    gender: str = "Male"
    height: str = "175"  # cm
    weight: str = "70"  # kg
    fitness_goal: FitnessGoal = FitnessGoal.GENERAL_FITNESS
    experience_level: ExperienceLevel = ExperienceLevel.BEGINNER
    feedback: str = ""  # Free text used to adapt / refine the plan

    def missing_fields(self) -> List[str]:
        required = ("age", "gender", "height", "weight")
        return [name for name in required if not str(getattr(self, name) or "").strip()]


class WorkoutFilters(CamelModel):
    equipment: List[str] = Field(default_factory=lambda: ["Bodyweight Only"])
    duration: str = "45 minutes"
    training_style: TrainingStyle = TrainingStyle.BODYWEIGHT
    location: WorkoutLocation = WorkoutLocation.HOME


class DietFilters(CamelModel):
    dietary_restrictions: List[str] = Field(default_factory=lambda: ["None"])
    allergies: List[str] = Field(default_factory=lambda: ["None"])
    favorite_cuisines: List[str] = Field(default_factory=lambda: ["Any"])


# --- Workout plan ---

class Exercise(CamelModel):
    name: str
    sets: str
    reps: str
    rest: str
    notes: Optional[str] = None
    instructions: Optional[str] = None  # Newline separated steps
    common_mistakes: Optional[str] = None  # Newline separated points


class WorkoutDay(CamelModel):
    day: str
    focus: str
    warm_up: str
    exercises: List[Exercise] = Field(default_factory=list)
    cool_down: str


class WorkoutPlan(CamelModel):
    title: str
    introduction: str
    schedule: List[WorkoutDay]


# --- Nutrition plan ---

class Meal(CamelModel):
    name: str  # Breakfast, Lunch, Dinner, Snack 1...
    description: str
    time: Optional[str] = None


class NutritionDay(CamelModel):
    day: str
    meals: List[Meal]
    hydration_notes: Optional[str] = None


class DailyTotals(CamelModel):
    calories: str
    protein: str
    carbs: str
    fat: str


class NutritionPlan(CamelModel):
    title: str
    introduction: str
    daily_totals: DailyTotals
    meal_suggestions: List[NutritionDay]
    general_tips: List[str] = Field(default_factory=list)


class CombinedPlan(CamelModel):
    workout_plan: WorkoutPlan
    nutrition_plan: NutritionPlan


# --- Grocery list & articles ---

class GroceryItem(CamelModel):
    name: str
    quantity: str


class GroceryCategory(CamelModel):
    category: str
    items: List[GroceryItem]


class GroceryList(CamelModel):
    grocery_list: List[GroceryCategory]

    def is_empty(self) -> bool:
        return not any(category.items for category in self.grocery_list)


class EducationalArticle(CamelModel):
    title: str
    content: str  # Markdown


# --- Generation requests ---

class PlanGenerationParams(CamelModel):
    profile: UserProfile
    workout_filters: WorkoutFilters
    diet_filters: DietFilters
    feedback: Optional[str] = None
    previous_plan_summary: Optional[str] = None


class ExerciseSwapParams(PlanGenerationParams):
    exercise_to_swap: Exercise
    workout_day: WorkoutDay  # Gives the day focus and the other exercises


class MealSwapParams(PlanGenerationParams):
    meal_to_swap: Meal
    nutrition_day: NutritionDay  # Gives the other meals of the day
