import logging
import threading
from typing import Callable, List, Optional, Type, TypeVar

from pydantic import BaseModel, ValidationError

import config
from fitplan.schemas.plan import (
    CombinedPlan,
    DietFilters,
    EducationalArticle,
    Exercise,
    ExerciseSwapParams,
    GroceryList,
    Meal,
    MealSwapParams,
    PlanGenerationParams,
    UserProfile,
    WorkoutFilters,
)
from fitplan.services import plan_export
from fitplan.services import plan_state as ps
from fitplan.services.generation_client import GenerationClient
from fitplan.services.storage import PersistentStore, StorageKey

logger = logging.getLogger(__name__)

"""
Plan Orchestrator
-----------------
Owns the planner state and sequences generation calls:
1. Guards (API key set, required profile fields, plan present).
2. Marks the operation class as in flight (is_loading / is_swapping_item).
3. Calls the generation client.
4. On success commits the result, persists it and posts a success message.
5. On failure keeps the previous state and posts an error message.
Messages expire after a fixed duration. Nothing is retried here.
"""

M = TypeVar("M", bound=BaseModel)

API_KEY_REQUIRED = "Please set your API Key first in the settings below."


class PlanOrchestrator:

    def __init__(
        self,
        client: GenerationClient,
        store: PersistentStore,
        notification_duration: Optional[float] = None,
        export_dir: Optional[str] = None,
    ):
        self.client = client
        self.store = store
        self.notification_duration = (
            config.NOTIFICATION_DURATION_SECONDS if notification_duration is None else notification_duration
        )
        self.export_dir = export_dir or config.EXPORT_DIR
        self.state = ps.AppState()
        self._listeners: List[Callable[[ps.AppState], None]] = []
        self._swap_lock = threading.Lock()

    # --- State plumbing ---

    def subscribe(self, listener: Callable[[ps.AppState], None]):
        self._listeners.append(listener)

    def dispatch(self, action) -> ps.AppState:
        self.state = ps.reduce(self.state, action)
        for listener in self._listeners:
            listener(self.state)
        return self.state

    def _post(self, kind: str, message: str):
        self.dispatch(ps.NotificationPosted(ps.Notification(kind, message, self.notification_duration)))

    def _success(self, message: str):
        logger.info(message)
        self._post("success", message)

    def _error(self, message: str):
        logger.warning(message)
        self._post("error", message)

    def current_notification(self, now: Optional[float] = None) -> Optional[ps.Notification]:
        """Returns the visible message, dismissing it once its display time is over."""
        notification = self.state.notification
        if notification is not None and notification.is_expired(now):
            self.dispatch(ps.NotificationDismissed())
            return None
        return notification

    def set_active_tab(self, tab: str):
        self.dispatch(ps.TabChanged(tab))

    # --- Loading & persistence ---

    def _load_model(self, key: str, model: Type[M]) -> Optional[M]:
        data = self.store.get_item(key)
        if data is None:
            return None
        try:
            return model.model_validate(data)
        except ValidationError as e:
            logger.error(f"Ignoring unreadable saved value for {key}: {e}")
            return None

    def load(self) -> ps.AppState:
        """Restores saved state and re-initializes the client with the saved API key."""
        stored_key = self.store.get_item(StorageKey.API_KEY)
        if stored_key:
            self.dispatch(ps.ApiKeyStatusChanged(self.client.initialize(stored_key)))

        profile = self._load_model(StorageKey.USER_PROFILE, UserProfile) or UserProfile()
        workout_filters = self._load_model(StorageKey.WORKOUT_FILTERS, WorkoutFilters) or WorkoutFilters()
        diet_filters = self._load_model(StorageKey.DIET_FILTERS, DietFilters) or DietFilters()
        self.update_profile(profile)
        self.update_workout_filters(workout_filters)
        self.update_diet_filters(diet_filters)

        summary = self.store.get_item(StorageKey.PREVIOUS_PLAN_SUMMARY)
        self.dispatch(ps.StateRestored(
            plan=self._load_model(StorageKey.COMBINED_PLAN, CombinedPlan),
            grocery_list=self._load_model(StorageKey.GROCERY_LIST, GroceryList),
            previous_plan_summary=summary if isinstance(summary, str) else None,
        ))
        return self.state

    def update_profile(self, profile: UserProfile):
        self.dispatch(ps.ProfileUpdated(profile))
        self.store.store_item(StorageKey.USER_PROFILE, profile)

    def update_workout_filters(self, workout_filters: WorkoutFilters):
        self.dispatch(ps.WorkoutFiltersUpdated(workout_filters))
        self.store.store_item(StorageKey.WORKOUT_FILTERS, workout_filters)

    def update_diet_filters(self, diet_filters: DietFilters):
        self.dispatch(ps.DietFiltersUpdated(diet_filters))
        self.store.store_item(StorageKey.DIET_FILTERS, diet_filters)

    def save_api_key(self, api_key: str) -> bool:
        if not api_key or not api_key.strip():
            self.store.remove_item(StorageKey.API_KEY)
            self.client.initialize("")
            self.dispatch(ps.ApiKeyStatusChanged(False))
            self._error("API Key cannot be empty.")
            return False

        if self.client.initialize(api_key):
            self.store.store_item(StorageKey.API_KEY, api_key)
            self.dispatch(ps.ApiKeyStatusChanged(True))
            self._success("API Key saved and initialized!")
            return True

        self.store.remove_item(StorageKey.API_KEY)
        self.dispatch(ps.ApiKeyStatusChanged(False))
        self._error("Failed to initialize with API Key. It might be invalid.")
        return False

    # --- Generation ---

    def _base_params(self) -> dict:
        return {
            "profile": self.state.profile,
            "workout_filters": self.state.workout_filters,
            "diet_filters": self.state.diet_filters,
        }

    def generate_plan(self) -> Optional[CombinedPlan]:
        if not self.client.is_initialized():
            self._error(API_KEY_REQUIRED)
            return None
        profile = self.state.profile
        if profile.missing_fields():
            self._error("Please fill in all required profile fields.")
            return None

        feedback = profile.feedback if profile.feedback.strip() else None
        previous_summary = self.state.previous_plan_summary if self.state.plan else None
        params = PlanGenerationParams(**self._base_params(), feedback=feedback, previous_plan_summary=previous_summary)

        self.dispatch(ps.RequestStarted())
        try:
            plan = self.client.generate_full_plan(params)
        except Exception as e:
            logger.exception("Plan generation failed")
            self._error(f"Error: {e}")
            return None
        finally:
            self.dispatch(ps.RequestFinished())

        if plan is None:
            self._error(
                "Failed to generate/refine plan. The AI model might have returned an unexpected response. "
                "Please try again or adjust your inputs."
            )
            return None

        summary = ps.plan_summary(plan, profile)
        self.dispatch(ps.PlanGenerated(plan, summary))
        self.store.store_item(StorageKey.COMBINED_PLAN, plan)
        self.store.store_item(StorageKey.PREVIOUS_PLAN_SUMMARY, summary)
        if params.previous_plan_summary and params.feedback:
            self._success("Successfully refined your plan!")
        else:
            self._success("Successfully generated your new plan! Check Workout & Nutrition tabs.")
        self.dispatch(ps.TabChanged("workout"))
        return plan

    def generate_grocery_list(self) -> Optional[GroceryList]:
        if not self.client.is_initialized():
            self._error(API_KEY_REQUIRED)
            return None
        if self.state.plan is None or self.state.plan.nutrition_plan is None:
            self._error("Please generate a nutrition plan first.")
            return None

        self.dispatch(ps.RequestStarted())
        try:
            grocery_list = self.client.generate_grocery_list(self.state.plan.nutrition_plan)
        except Exception as e:
            logger.exception("Grocery list generation failed")
            self._error(f"Error generating grocery list. {e}")
            return None
        finally:
            self.dispatch(ps.RequestFinished())

        if grocery_list is None or grocery_list.is_empty():
            self._error("Failed to generate grocery list. Please try again.")
            return None

        self.dispatch(ps.GroceryListGenerated(grocery_list))
        self.store.store_item(StorageKey.GROCERY_LIST, grocery_list)
        self._success("Grocery list generated!")
        return grocery_list

    def generate_article(self, topic: str) -> Optional[EducationalArticle]:
        """Articles are shown once and never persisted."""
        if not self.client.is_initialized():
            self._error(API_KEY_REQUIRED)
            return None

        self.dispatch(ps.RequestStarted())
        try:
            article = self.client.generate_educational_article(topic)
        except Exception as e:
            logger.exception("Article generation failed")
            self._error(f"Error generating article. {e}")
            return None
        finally:
            self.dispatch(ps.RequestFinished())

        if article is None:
            self._error("Failed to generate article.")
            return None
        self._success("Article generated!")
        return article

    # --- Swaps ---

    def _begin_swap(self, item_id: str) -> bool:
        with self._swap_lock:
            if self.state.is_swapping_item:
                return False
            self.dispatch(ps.SwapStarted(item_id))
            return True

    def swap_exercise(self, day_index: int, exercise_index: int) -> Optional[Exercise]:
        plan = self.state.plan
        if not self.client.is_initialized() or plan is None:
            self._error("Cannot swap exercise: API key not set or no plan loaded.")
            return None
        try:
            workout_day = plan.workout_plan.schedule[day_index] if day_index >= 0 else None
            exercise_to_swap = ps.get_exercise(plan, day_index, exercise_index)
        except IndexError:
            self._error(f"Cannot swap exercise: there is no exercise {exercise_index + 1} on day {day_index + 1}.")
            return None

        if not self._begin_swap(ps.exercise_item_id(day_index, exercise_index)):
            self._error("Another item is already being swapped. Please wait for it to finish.")
            return None

        params = ExerciseSwapParams(**self._base_params(), exercise_to_swap=exercise_to_swap, workout_day=workout_day)
        try:
            new_exercise = self.client.generate_exercise_swap(params)
            if new_exercise is None:
                self._error(
                    f'Failed to swap "{exercise_to_swap.name}". The AI might not have found a suitable '
                    "alternative or returned an unexpected response."
                )
                return None

            self.dispatch(ps.ExerciseReplaced(day_index, exercise_index, new_exercise))
            self.store.store_item(StorageKey.COMBINED_PLAN, self.state.plan)
            self._success(f'Swapped "{exercise_to_swap.name}" for "{new_exercise.name}"!')
            return new_exercise
        except Exception as e:
            logger.exception("Exercise swap failed")
            self._error(f"Error swapping exercise: {e}")
            return None
        finally:
            self.dispatch(ps.SwapFinished())

    def swap_meal(self, day_index: int, meal_index: int) -> Optional[Meal]:
        plan = self.state.plan
        if not self.client.is_initialized() or plan is None:
            self._error("Cannot swap meal: API key not set or no plan loaded.")
            return None
        try:
            nutrition_day = plan.nutrition_plan.meal_suggestions[day_index] if day_index >= 0 else None
            meal_to_swap = ps.get_meal(plan, day_index, meal_index)
        except IndexError:
            self._error(f"Cannot swap meal: there is no meal {meal_index + 1} on day {day_index + 1}.")
            return None

        if not self._begin_swap(ps.meal_item_id(day_index, meal_index)):
            self._error("Another item is already being swapped. Please wait for it to finish.")
            return None

        params = MealSwapParams(**self._base_params(), meal_to_swap=meal_to_swap, nutrition_day=nutrition_day)
        try:
            new_meal = self.client.generate_meal_swap(params)
            if new_meal is None:
                self._error(
                    f'Failed to swap "{meal_to_swap.name}". The AI might not have found a suitable '
                    "alternative or returned an unexpected response."
                )
                return None

            self.dispatch(ps.MealReplaced(day_index, meal_index, new_meal))
            self.store.store_item(StorageKey.COMBINED_PLAN, self.state.plan)
            if self.state.grocery_list is not None:
                self._success(f"Successfully swapped {meal_to_swap.name}! Consider regenerating your grocery list.")
            else:
                self._success(f"Successfully swapped {meal_to_swap.name} for Day {day_index + 1}!")
            return new_meal
        except Exception as e:
            logger.exception("Meal swap failed")
            self._error(f"Error swapping meal: {e}")
            return None
        finally:
            self.dispatch(ps.SwapFinished())

    # --- Export ---

    def export_workout_plan(self) -> Optional[str]:
        if self.state.plan is None:
            self._error("No workout plan available to export.")
            return None
        content = plan_export.format_workout_plan(self.state.plan.workout_plan)
        return self._export(content, plan_export.WORKOUT_EXPORT_FILENAME)

    def export_nutrition_plan(self) -> Optional[str]:
        if self.state.plan is None:
            self._error("No nutrition plan available to export.")
            return None
        content = plan_export.format_nutrition_plan(self.state.plan.nutrition_plan)
        return self._export(content, plan_export.NUTRITION_EXPORT_FILENAME)

    def _export(self, content: str, filename: str) -> Optional[str]:
        try:
            path = plan_export.write_text_file(content, filename, self.export_dir)
        except OSError as e:
            logger.error(f"Export of {filename} failed: {e}")
            self._error(f"Could not export {filename}: {e}")
            return None
        self._success(f"{filename} exported successfully!")
        return path
