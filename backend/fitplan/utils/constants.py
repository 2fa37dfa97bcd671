from fitplan.schemas.plan import ExperienceLevel, FitnessGoal, TrainingStyle, WorkoutLocation

GENDER_OPTIONS = ["Male", "Female", "Non-binary", "Prefer not to say"]
FITNESS_GOAL_OPTIONS = [g.value for g in FitnessGoal]
EXPERIENCE_LEVEL_OPTIONS = [e.value for e in ExperienceLevel]

EQUIPMENT_OPTIONS = ["Full Gym Access", "Dumbbells", "Kettlebells", "Resistance Bands", "Bodyweight Only", "Barbell", "Yoga Mat"]
DURATION_OPTIONS = ["30 minutes", "45 minutes", "60 minutes", "75 minutes", "90 minutes"]
TRAINING_STYLE_OPTIONS = [t.value for t in TrainingStyle]
WORKOUT_LOCATION_OPTIONS = [loc.value for loc in WorkoutLocation]

DIETARY_RESTRICTION_OPTIONS = ["None", "Vegetarian", "Vegan", "Pescatarian", "Gluten-Free", "Dairy-Free", "Paleo", "Keto"]
ALLERGY_OPTIONS = ["None", "Peanuts", "Tree Nuts", "Milk", "Eggs", "Wheat", "Soy", "Fish", "Shellfish"]
CUISINE_OPTIONS = ["Any", "Italian", "Mexican", "Indian", "Chinese", "Japanese", "Mediterranean", "American", "Korean"]

EDUCATIONAL_TOPICS = [
    "Understanding Macronutrients",
    "Benefits of Strength Training",
    "Effective Fat Loss Strategies",
    "Importance of Hydration",
    "Mindful Eating Techniques",
    "HIIT vs. LISS Cardio",
    "Active Recovery Methods",
    "Building a Sustainable Fitness Routine",
]
