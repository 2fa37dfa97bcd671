import json
from unittest.mock import MagicMock, patch

import pytest

from fitplan.schemas.plan import (
    DietFilters,
    ExerciseSwapParams,
    MealSwapParams,
    PlanGenerationParams,
    UserProfile,
    WorkoutFilters,
)
from fitplan.services import llm_service
from fitplan.services.generation_client import GenerationClient
from fitplan.utils.errors import ClientNotInitializedError, GenerationTransportError
from fitplan.utils.llm_prompts import plan_prompts


@pytest.fixture()
def get_llm():
    with patch.object(llm_service, "get_llm", return_value=MagicMock()) as mock:
        yield mock


@pytest.fixture()
def ready_client(get_llm):
    client = GenerationClient(provider="openrouter")
    assert client.initialize("sk-test")
    return client


def base_params(**extra):
    return dict(profile=UserProfile(), workout_filters=WorkoutFilters(), diet_filters=DietFilters(), **extra)


def test_initialize_with_blank_key(get_llm):
    client = GenerationClient()
    assert client.initialize("   ") is False
    assert not client.is_initialized()
    get_llm.assert_not_called()


def test_initialize_same_key_is_a_no_op(get_llm):
    client = GenerationClient()
    assert client.initialize("sk-test")
    assert client.initialize("sk-test")
    assert get_llm.call_count == 1
    assert client.api_key_status() == {"is_set": True, "api_key": "sk-test"}


def test_initialize_failure_resets(get_llm):
    client = GenerationClient()
    client.initialize("sk-good")
    get_llm.side_effect = ValueError("bad provider")
    assert client.initialize("sk-other") is False
    assert client.api_key_status() == {"is_set": False, "api_key": None}


def test_generation_requires_initialization():
    client = GenerationClient()
    with patch.object(llm_service, "call_llm") as call_llm:
        with pytest.raises(ClientNotInitializedError):
            client.generate_educational_article("Importance of Hydration")
        call_llm.assert_not_called()


def test_full_plan_is_parsed(ready_client, get_llm, plan):
    payload = "```json\n" + json.dumps(plan.to_json_dict()) + "\n```"
    with patch.object(llm_service, "call_llm", return_value=payload) as call_llm:
        result = ready_client.generate_full_plan(PlanGenerationParams(**base_params()))

    assert result == plan
    assert get_llm.call_args.kwargs["temperature"] == 0.7
    assert get_llm.call_args.kwargs["json_mode"] is True
    system_prompt, user_prompt = call_llm.call_args.args[1:]
    assert system_prompt == plan_prompts.SYSTEM_PROMPT
    assert "Generate a new personalized 7-day workout and nutrition plan" in user_prompt


def test_unparseable_output_is_empty_result(ready_client):
    with patch.object(llm_service, "call_llm", return_value="I cannot help with that."):
        assert ready_client.generate_educational_article("Importance of Hydration") is None


def test_wrong_shape_is_empty_result(ready_client):
    with patch.object(llm_service, "call_llm", return_value='{"title": "Only a title"}'):
        assert ready_client.generate_educational_article("Importance of Hydration") is None


def test_transport_errors_propagate(ready_client):
    with patch.object(llm_service, "call_llm", side_effect=GenerationTransportError("timeout")):
        with pytest.raises(GenerationTransportError):
            ready_client.generate_educational_article("Importance of Hydration")


def test_grocery_list_temperature_and_prompt(ready_client, get_llm, plan):
    reply = '{"groceryList": [{"category": "Proteins", "items": [{"name": "Salmon", "quantity": "300g"}]}]}'
    with patch.object(llm_service, "call_llm", return_value=reply) as call_llm:
        result = ready_client.generate_grocery_list(plan.nutrition_plan)

    assert result.grocery_list[0].items[0].name == "Salmon"
    assert get_llm.call_args.kwargs["temperature"] == 0.5
    assert "Breakfast: Oats with berries" in call_llm.call_args.args[2]


def test_article_temperature(ready_client, get_llm):
    with patch.object(llm_service, "call_llm", return_value='{"title": "Water", "content": "## Why\\nDrink."}'):
        article = ready_client.generate_educational_article("Importance of Hydration")
    assert article.title == "Water"
    assert get_llm.call_args.kwargs["temperature"] == 0.6


def test_exercise_swap(ready_client, plan):
    day = plan.workout_plan.schedule[0]
    params = ExerciseSwapParams(**base_params(), exercise_to_swap=day.exercises[0], workout_day=day)
    reply = '{"name": "Goblet Squat", "sets": 3, "reps": "10", "rest": "60s"}'
    with patch.object(llm_service, "call_llm", return_value=reply) as call_llm:
        exercise = ready_client.generate_exercise_swap(params)

    assert exercise.name == "Goblet Squat"
    assert exercise.sets == "3"
    prompt = call_llm.call_args.args[2]
    assert '"Squat"' in prompt
    assert "- Push-up" in prompt


def test_meal_swap(ready_client, plan):
    day = plan.nutrition_plan.meal_suggestions[0]
    params = MealSwapParams(**base_params(), meal_to_swap=day.meals[1], nutrition_day=day)
    with patch.object(llm_service, "call_llm", return_value='{"name": "Lunch", "description": "Tofu bowl"}') as call_llm:
        meal = ready_client.generate_meal_swap(params)

    assert meal.name == "Lunch"
    assert meal.description == "Tofu bowl"
    assert "MUST be the same name as the meal being swapped: 'Lunch'" in call_llm.call_args.args[2]
