"""Shared fixtures. Environment is set before `config` is first imported."""

import os
import tempfile

_TMP_DIR = tempfile.mkdtemp(prefix="fitplan-tests-")
os.environ["SQLALCHEMY_DATABASE_URL"] = "sqlite:///" + os.path.join(_TMP_DIR, "app.db")
os.environ["STORAGE_PATH"] = os.path.join(_TMP_DIR, "storage.json")
os.environ.setdefault("JWT_SECRET", "test-secret-key")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from fitplan.database import Base, get_db
from fitplan.main import app
from fitplan.schemas.plan import (
    CombinedPlan,
    DailyTotals,
    Exercise,
    Meal,
    NutritionDay,
    NutritionPlan,
    WorkoutDay,
    WorkoutPlan,
)


@pytest.fixture()
def db_session():
    """Fresh in-memory database per test."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture()
def client(db_session):
    def _override():
        yield db_session

    app.dependency_overrides[get_db] = _override
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


def make_plan() -> CombinedPlan:
    """Two-day plan with enough items to address by index."""
    workout = WorkoutPlan(
        title="Starter Strength",
        introduction="Build a base.",
        schedule=[
            WorkoutDay(
                day="Day 1 - Monday",
                focus="Full Body",
                warm_up="5 min jog",
                exercises=[
                    Exercise(name="Squat", sets="3", reps="10", rest="60s",
                             instructions="1. Stand tall.\n2. Sit back.", common_mistakes="1. Knees caving."),
                    Exercise(name="Push-up", sets="3", reps="12", rest="60s", notes="Keep core tight"),
                ],
                cool_down="Stretch",
            ),
            WorkoutDay(
                day="Day 2 - Tuesday",
                focus="Rest",
                warm_up="N/A",
                exercises=[Exercise(name="Light Walk", sets="1", reps="20 min", rest="N/A", instructions="N/A")],
                cool_down="N/A",
            ),
        ],
    )
    nutrition = NutritionPlan(
        title="Balanced Eating",
        introduction="Eat well.",
        daily_totals=DailyTotals(calories="2000 kcal", protein="150g", carbs="200g", fat="60g"),
        meal_suggestions=[
            NutritionDay(
                day="Day 1 - Monday",
                meals=[
                    Meal(name="Breakfast", description="Oats with berries", time="8:00 AM"),
                    Meal(name="Lunch", description="Chicken salad"),
                ],
                hydration_notes="Drink 3 liters of water.",
            ),
            NutritionDay(day="Day 2 - Tuesday", meals=[Meal(name="Dinner", description="Salmon and rice")]),
        ],
        general_tips=["Sleep 8 hours", "Prep meals ahead"],
    )
    return CombinedPlan(workout_plan=workout, nutrition_plan=nutrition)


@pytest.fixture()
def plan() -> CombinedPlan:
    return make_plan()
