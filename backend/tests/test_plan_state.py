import pytest

from fitplan.schemas.plan import Exercise, FitnessGoal, GroceryList, Meal, UserProfile
from fitplan.services import plan_state as ps


def test_replace_exercise_copies_only_the_path(plan):
    new_exercise = Exercise(name="Goblet Squat", sets="3", reps="10", rest="60s")
    updated = ps.replace_exercise(plan, 0, 0, new_exercise)

    assert updated is not plan
    assert updated.workout_plan.schedule[0].exercises[0] is new_exercise
    # Untouched siblings are shared, not copied
    assert updated.workout_plan.schedule[0].exercises[1] is plan.workout_plan.schedule[0].exercises[1]
    assert updated.workout_plan.schedule[1] is plan.workout_plan.schedule[1]
    assert updated.nutrition_plan is plan.nutrition_plan
    # Original is unchanged
    assert plan.workout_plan.schedule[0].exercises[0].name == "Squat"


def test_replace_meal_copies_only_the_path(plan):
    new_meal = Meal(name="Lunch", description="Tofu bowl")
    updated = ps.replace_meal(plan, 0, 1, new_meal)

    assert updated.nutrition_plan.meal_suggestions[0].meals[1] is new_meal
    assert updated.nutrition_plan.meal_suggestions[0].meals[0] is plan.nutrition_plan.meal_suggestions[0].meals[0]
    assert updated.nutrition_plan.meal_suggestions[1] is plan.nutrition_plan.meal_suggestions[1]
    assert updated.nutrition_plan.daily_totals is plan.nutrition_plan.daily_totals
    assert updated.workout_plan is plan.workout_plan
    assert plan.nutrition_plan.meal_suggestions[0].meals[1].description == "Chicken salad"


@pytest.mark.parametrize("day, index", [(5, 0), (0, 9), (-1, 0), (0, -1)])
def test_out_of_range_addresses_raise(plan, day, index):
    exercise = Exercise(name="X", sets="1", reps="1", rest="0")
    meal = Meal(name="X", description="X")
    with pytest.raises(IndexError):
        ps.replace_exercise(plan, day, index, exercise)
    with pytest.raises(IndexError):
        ps.replace_meal(plan, day, index, meal)
    with pytest.raises(IndexError):
        ps.get_exercise(plan, day, index)


def test_plan_summary(plan):
    profile = UserProfile(fitness_goal=FitnessGoal.LOSE_BODY_FAT)
    assert ps.plan_summary(plan, profile) == (
        "Workout: Starter Strength. Nutrition: Balanced Eating. Goal: Lose Body Fat. Feedback context: None"
    )
    profile = UserProfile(feedback="more protein")
    assert ps.plan_summary(plan, profile).endswith("Feedback context: more protein")


def test_reducer_is_pure(plan):
    state = ps.AppState()
    generated = ps.reduce(state, ps.PlanGenerated(plan, "summary"))
    assert state.plan is None
    assert generated.plan is plan
    assert generated.previous_plan_summary == "summary"


def test_request_and_swap_flags():
    state = ps.reduce(ps.AppState(), ps.NotificationPosted(ps.Notification("error", "old", 5)))
    state = ps.reduce(state, ps.RequestStarted())
    assert state.is_loading and state.notification is None
    state = ps.reduce(state, ps.RequestFinished())
    assert not state.is_loading

    state = ps.reduce(state, ps.SwapStarted(ps.exercise_item_id(1, 2)))
    assert state.is_swapping_item and state.swapping_item_id == "exercise-1-2"
    state = ps.reduce(state, ps.SwapFinished())
    assert not state.is_swapping_item and state.swapping_item_id is None


def test_swap_actions_update_plan(plan):
    state = ps.reduce(ps.AppState(), ps.StateRestored(plan, GroceryList(grocery_list=[]), "s"))
    state = ps.reduce(state, ps.MealReplaced(1, 0, Meal(name="Dinner", description="Steak")))
    assert state.plan.nutrition_plan.meal_suggestions[1].meals[0].description == "Steak"
    assert state.grocery_list is not None


def test_tabs_and_unknown_actions():
    assert ps.reduce(ps.AppState(), ps.TabChanged("grocery")).active_tab == "grocery"
    with pytest.raises(ValueError):
        ps.reduce(ps.AppState(), ps.TabChanged("settings"))
    with pytest.raises(TypeError):
        ps.reduce(ps.AppState(), object())


def test_notification_expiry():
    notification = ps.Notification("success", "Done", duration=5, posted_at=100.0)
    assert not notification.is_expired(now=104.9)
    assert notification.is_expired(now=105.0)
