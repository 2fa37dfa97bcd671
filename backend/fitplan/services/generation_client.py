import logging
from typing import Optional, Type, TypeVar

from pydantic import BaseModel, ValidationError

from fitplan.schemas.plan import (
    CombinedPlan,
    EducationalArticle,
    Exercise,
    ExerciseSwapParams,
    GroceryList,
    Meal,
    MealSwapParams,
    NutritionPlan,
    PlanGenerationParams,
)
from fitplan.services import llm_service
from fitplan.utils.errors import ClientNotInitializedError
from fitplan.utils.llm_prompts import plan_prompts

logger = logging.getLogger(__name__)

"""
Generation Client
-----------------
Turns structured planner requests into prompts, calls the model and
recovers typed results.
- Not initialized (no accepted API key): raises ClientNotInitializedError, no network call.
- Transport failure: GenerationTransportError propagates to the caller.
- Unparseable / wrongly shaped output: returns None.
"""

T = TypeVar("T", bound=BaseModel)


class GenerationClient:

    def __init__(self, provider: Optional[str] = None):
        self.provider = provider
        self._api_key: Optional[str] = None
        self._ready = False

    def initialize(self, api_key: str) -> bool:
        """Accepts a new API key. Returns False (and resets) for blank or rejected keys."""
        if not api_key or not api_key.strip():
            logger.warning("Attempted to initialize the AI client with an empty API key.")
            self.reset()
            return False

        # Same key already accepted
        if self._ready and self._api_key == api_key:
            return True

        try:
            llm_service.get_llm(api_key=api_key, provider=self.provider)
        except Exception as e:
            logger.error(f"Failed to initialize the AI client with the given API key: {e}")
            self.reset()
            return False

        self._api_key = api_key
        self._ready = True
        logger.info("AI client initialized/updated with API key.")
        return True

    def reset(self):
        self._api_key = None
        self._ready = False

    def is_initialized(self) -> bool:
        return self._ready

    def api_key_status(self) -> dict:
        return {"is_set": self._ready and bool(self._api_key), "api_key": self._api_key}

    def _generate(self, user_prompt: str, result_type: Type[T], temperature: float) -> Optional[T]:
        if not self.is_initialized():
            raise ClientNotInitializedError()

        llm = llm_service.get_llm(
            api_key=self._api_key,
            temperature=temperature,
            json_mode=True,
            provider=self.provider,
        )
        text = llm_service.call_llm(llm, plan_prompts.SYSTEM_PROMPT, user_prompt)

        data = llm_service.parse_json_response(text)
        if data is None:
            return None
        try:
            return result_type.model_validate(data)
        except ValidationError as e:
            logger.error(f"Model output does not match {result_type.__name__}: {e}")
            return None

    def generate_full_plan(self, params: PlanGenerationParams) -> Optional[CombinedPlan]:
        return self._generate(plan_prompts.build_full_plan_prompt(params), CombinedPlan, temperature=0.7)

    def generate_grocery_list(self, nutrition_plan: NutritionPlan) -> Optional[GroceryList]:
        return self._generate(plan_prompts.build_grocery_list_prompt(nutrition_plan), GroceryList, temperature=0.5)

    def generate_educational_article(self, topic: str) -> Optional[EducationalArticle]:
        return self._generate(plan_prompts.build_article_prompt(topic), EducationalArticle, temperature=0.6)

    def generate_exercise_swap(self, params: ExerciseSwapParams) -> Optional[Exercise]:
        return self._generate(plan_prompts.build_exercise_swap_prompt(params), Exercise, temperature=0.7)

    def generate_meal_swap(self, params: MealSwapParams) -> Optional[Meal]:
        return self._generate(plan_prompts.build_meal_swap_prompt(params), Meal, temperature=0.7)
