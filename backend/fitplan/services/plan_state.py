"""
Planner state and the actions that change it.

AppState is immutable; every transition goes through ``reduce(state, action)``.
Swaps use index-addressed updates that copy only the path from the plan root
to the replaced item, leaving every other day/item object shared.
"""

import time
from dataclasses import dataclass, field, replace
from typing import Optional, Sequence, TypeVar

from fitplan.schemas.plan import (
    CombinedPlan,
    DietFilters,
    Exercise,
    GroceryList,
    Meal,
    UserProfile,
    WorkoutFilters,
)

TABS = ("profile", "workout", "nutrition", "grocery", "education")

T = TypeVar("T")


@dataclass(frozen=True)
class Notification:
    kind: str  # "success" | "error"
    message: str
    duration: float
    posted_at: float = field(default_factory=time.monotonic)

    def is_expired(self, now: Optional[float] = None) -> bool:
        now = time.monotonic() if now is None else now
        return now - self.posted_at >= self.duration


@dataclass(frozen=True)
class AppState:
    profile: UserProfile = field(default_factory=UserProfile)
    workout_filters: WorkoutFilters = field(default_factory=WorkoutFilters)
    diet_filters: DietFilters = field(default_factory=DietFilters)
    plan: Optional[CombinedPlan] = None
    grocery_list: Optional[GroceryList] = None
    previous_plan_summary: Optional[str] = None
    active_tab: str = "profile"
    api_key_set: bool = False
    is_loading: bool = False
    is_swapping_item: bool = False
    swapping_item_id: Optional[str] = None
    notification: Optional[Notification] = None


# --- Actions ---

@dataclass(frozen=True)
class ProfileUpdated:
    profile: UserProfile


@dataclass(frozen=True)
class WorkoutFiltersUpdated:
    workout_filters: WorkoutFilters


@dataclass(frozen=True)
class DietFiltersUpdated:
    diet_filters: DietFilters


@dataclass(frozen=True)
class StateRestored:
    plan: Optional[CombinedPlan]
    grocery_list: Optional[GroceryList]
    previous_plan_summary: Optional[str]


@dataclass(frozen=True)
class ApiKeyStatusChanged:
    is_set: bool


@dataclass(frozen=True)
class RequestStarted:
    pass


@dataclass(frozen=True)
class RequestFinished:
    pass


@dataclass(frozen=True)
class PlanGenerated:
    plan: CombinedPlan
    summary: str


@dataclass(frozen=True)
class GroceryListGenerated:
    grocery_list: GroceryList


@dataclass(frozen=True)
class SwapStarted:
    item_id: str


@dataclass(frozen=True)
class SwapFinished:
    pass


@dataclass(frozen=True)
class ExerciseReplaced:
    day_index: int
    exercise_index: int
    exercise: Exercise


@dataclass(frozen=True)
class MealReplaced:
    day_index: int
    meal_index: int
    meal: Meal


@dataclass(frozen=True)
class NotificationPosted:
    notification: Notification


@dataclass(frozen=True)
class NotificationDismissed:
    pass


@dataclass(frozen=True)
class TabChanged:
    tab: str


# --- Pure plan updates ---

def _item_at(items: Sequence[T], index: int, what: str) -> T:
    if not 0 <= index < len(items):
        raise IndexError(f"{what} index {index} out of range (0..{len(items) - 1})")
    return items[index]


def _replaced(items: Sequence[T], index: int, value: T) -> list:
    updated = list(items)
    updated[index] = value
    return updated


def exercise_item_id(day_index: int, exercise_index: int) -> str:
    return f"exercise-{day_index}-{exercise_index}"


def meal_item_id(day_index: int, meal_index: int) -> str:
    return f"meal-{day_index}-{meal_index}"


def get_exercise(plan: CombinedPlan, day_index: int, exercise_index: int) -> Exercise:
    day = _item_at(plan.workout_plan.schedule, day_index, "Workout day")
    return _item_at(day.exercises, exercise_index, "Exercise")


def get_meal(plan: CombinedPlan, day_index: int, meal_index: int) -> Meal:
    day = _item_at(plan.nutrition_plan.meal_suggestions, day_index, "Nutrition day")
    return _item_at(day.meals, meal_index, "Meal")


def replace_exercise(plan: CombinedPlan, day_index: int, exercise_index: int, exercise: Exercise) -> CombinedPlan:
    workout = plan.workout_plan
    day = _item_at(workout.schedule, day_index, "Workout day")
    _item_at(day.exercises, exercise_index, "Exercise")

    new_day = day.model_copy(update={"exercises": _replaced(day.exercises, exercise_index, exercise)})
    new_workout = workout.model_copy(update={"schedule": _replaced(workout.schedule, day_index, new_day)})
    return plan.model_copy(update={"workout_plan": new_workout})


def replace_meal(plan: CombinedPlan, day_index: int, meal_index: int, meal: Meal) -> CombinedPlan:
    nutrition = plan.nutrition_plan
    day = _item_at(nutrition.meal_suggestions, day_index, "Nutrition day")
    _item_at(day.meals, meal_index, "Meal")

    new_day = day.model_copy(update={"meals": _replaced(day.meals, meal_index, meal)})
    new_nutrition = nutrition.model_copy(
        update={"meal_suggestions": _replaced(nutrition.meal_suggestions, day_index, new_day)}
    )
    return plan.model_copy(update={"nutrition_plan": new_nutrition})


def plan_summary(plan: CombinedPlan, profile: UserProfile) -> str:
    return (
        f"Workout: {plan.workout_plan.title}. "
        f"Nutrition: {plan.nutrition_plan.title}. "
        f"Goal: {profile.fitness_goal.value}. "
        f"Feedback context: {profile.feedback or 'None'}"
    )


# --- Reducer ---

def reduce(state: AppState, action) -> AppState:
    if isinstance(action, ProfileUpdated):
        return replace(state, profile=action.profile)
    if isinstance(action, WorkoutFiltersUpdated):
        return replace(state, workout_filters=action.workout_filters)
    if isinstance(action, DietFiltersUpdated):
        return replace(state, diet_filters=action.diet_filters)
    if isinstance(action, StateRestored):
        return replace(
            state,
            plan=action.plan,
            grocery_list=action.grocery_list,
            previous_plan_summary=action.previous_plan_summary,
        )
    if isinstance(action, ApiKeyStatusChanged):
        return replace(state, api_key_set=action.is_set)
    if isinstance(action, RequestStarted):
        return replace(state, is_loading=True, notification=None)
    if isinstance(action, RequestFinished):
        return replace(state, is_loading=False)
    if isinstance(action, PlanGenerated):
        return replace(state, plan=action.plan, previous_plan_summary=action.summary)
    if isinstance(action, GroceryListGenerated):
        return replace(state, grocery_list=action.grocery_list)
    if isinstance(action, SwapStarted):
        return replace(state, is_swapping_item=True, swapping_item_id=action.item_id, notification=None)
    if isinstance(action, SwapFinished):
        return replace(state, is_swapping_item=False, swapping_item_id=None)
    if isinstance(action, ExerciseReplaced):
        plan = replace_exercise(state.plan, action.day_index, action.exercise_index, action.exercise)
        return replace(state, plan=plan)
    if isinstance(action, MealReplaced):
        plan = replace_meal(state.plan, action.day_index, action.meal_index, action.meal)
        return replace(state, plan=plan)
    if isinstance(action, NotificationPosted):
        return replace(state, notification=action.notification)
    if isinstance(action, NotificationDismissed):
        return replace(state, notification=None)
    if isinstance(action, TabChanged):
        if action.tab not in TABS:
            raise ValueError(f"Unknown tab '{action.tab}'")
        return replace(state, active_tab=action.tab)
    raise TypeError(f"Unknown action {type(action).__name__}")
