import argparse
import getpass
import logging
import sys

import config
from fitplan.schemas.plan import GroceryList
from fitplan.services import plan_export
from fitplan.services.auth_client import AuthSession
from fitplan.services.generation_client import GenerationClient
from fitplan.services.plan_orchestrator import PlanOrchestrator
from fitplan.services.storage import build_store
from fitplan.utils import constants
from fitplan.utils.errors import AuthServiceError
from fitplan.utils.markdown import render_text


def format_grocery_list(grocery_list: GroceryList) -> str:
    lines = []
    for category in grocery_list.grocery_list:
        lines.append(f"{category.category}:")
        for item in category.items:
            lines.append(f"  - {item.name} ({item.quantity})")
    return "\n".join(lines)


def _report(orchestrator: PlanOrchestrator) -> int:
    """Prints the latest message. Exit code 1 for errors."""
    notification = orchestrator.state.notification
    if notification is None:
        return 0
    stream = sys.stderr if notification.kind == "error" else sys.stdout
    print(notification.message, file=stream)
    return 1 if notification.kind == "error" else 0


def _updated(model, updates: dict):
    updates = {k: v for k, v in updates.items() if v is not None}
    return type(model).model_validate({**model.model_dump(), **updates})


# --- Planner commands ---

def cmd_set_key(orchestrator, args):
    orchestrator.save_api_key(args.api_key)
    return _report(orchestrator)


def cmd_profile(orchestrator, args):
    profile = _updated(orchestrator.state.profile, {
        "age": args.age,
        "gender": args.gender,
        "height": args.height,
        "weight": args.weight,
        "fitness_goal": args.goal,
        "experience_level": args.experience,
        "feedback": args.feedback,
    })
    orchestrator.update_profile(profile)
    print(profile.model_dump_json(by_alias=True, indent=2))
    return 0


def cmd_workout_filters(orchestrator, args):
    filters = _updated(orchestrator.state.workout_filters, {
        "equipment": args.equipment,
        "duration": args.duration,
        "training_style": args.style,
        "location": args.location,
    })
    orchestrator.update_workout_filters(filters)
    print(filters.model_dump_json(by_alias=True, indent=2))
    return 0


def cmd_diet_filters(orchestrator, args):
    filters = _updated(orchestrator.state.diet_filters, {
        "dietary_restrictions": args.restrictions,
        "allergies": args.allergies,
        "favorite_cuisines": args.cuisines,
    })
    orchestrator.update_diet_filters(filters)
    print(filters.model_dump_json(by_alias=True, indent=2))
    return 0


def cmd_generate(orchestrator, args):
    if args.feedback is not None:
        orchestrator.update_profile(_updated(orchestrator.state.profile, {"feedback": args.feedback}))
    orchestrator.generate_plan()
    return _report(orchestrator)


def cmd_grocery(orchestrator, args):
    grocery_list = orchestrator.generate_grocery_list()
    code = _report(orchestrator)
    if grocery_list is not None:
        print(format_grocery_list(grocery_list))
    return code


def cmd_topics(orchestrator, args):
    for i, topic in enumerate(constants.EDUCATIONAL_TOPICS, start=1):
        print(f"{i}. {topic}")
    return 0


def cmd_learn(orchestrator, args):
    topic = args.topic
    if topic.isdigit() and 1 <= int(topic) <= len(constants.EDUCATIONAL_TOPICS):
        topic = constants.EDUCATIONAL_TOPICS[int(topic) - 1]
    article = orchestrator.generate_article(topic)
    code = _report(orchestrator)
    if article is not None:
        print(render_text(f"# {article.title}\n{article.content}"))
    return code


def cmd_swap_exercise(orchestrator, args):
    orchestrator.swap_exercise(args.day - 1, args.index - 1)
    return _report(orchestrator)


def cmd_swap_meal(orchestrator, args):
    orchestrator.swap_meal(args.day - 1, args.index - 1)
    return _report(orchestrator)


def cmd_show(orchestrator, args):
    state = orchestrator.state
    if args.what == "profile":
        print(state.profile.model_dump_json(by_alias=True, indent=2))
        return 0
    if args.what == "grocery":
        if state.grocery_list is None:
            print("No grocery list yet. Run 'fitplan grocery' first.", file=sys.stderr)
            return 1
        print(format_grocery_list(state.grocery_list))
        return 0
    if state.plan is None:
        print("No plan yet. Run 'fitplan generate' first.", file=sys.stderr)
        return 1
    if args.what == "workout":
        print(plan_export.format_workout_plan(state.plan.workout_plan))
    else:
        print(plan_export.format_nutrition_plan(state.plan.nutrition_plan))
    return 0


def cmd_export(orchestrator, args):
    if args.dir:
        orchestrator.export_dir = args.dir
    code = 0
    if args.what in ("workout", "all"):
        orchestrator.export_workout_plan()
        code |= _report(orchestrator)
    if args.what in ("nutrition", "all"):
        orchestrator.export_nutrition_plan()
        code |= _report(orchestrator)
    return code


# --- Account commands ---

def _password(args) -> str:
    return args.password or getpass.getpass("Password: ")


def _print_user(user: dict):
    print(f"{user.get('email')} (id: {user.get('id')})")


def cmd_register(session, args):
    data = session.register(args.email, _password(args))
    print(data.get("message", "Registered."))
    _print_user(data.get("user", {}))
    return 0


def cmd_login(session, args):
    data = session.login(args.email, _password(args))
    print(data.get("message", "Logged in."))
    _print_user(data.get("user", {}))
    return 0


def cmd_logout(session, args):
    session.logout()
    print("Logged out.")
    return 0


def cmd_me(session, args):
    data = session.get_my_profile()
    _print_user(data.get("user", {}))
    return 0


def cmd_checkout(session, args):
    print(session.create_checkout_session())
    return 0


def cmd_serve(args):
    import uvicorn

    uvicorn.run("fitplan.main:app", host=args.host, port=args.port, reload=args.reload)
    return 0


PLANNER_COMMANDS = {
    "set-key": cmd_set_key,
    "profile": cmd_profile,
    "workout-filters": cmd_workout_filters,
    "diet-filters": cmd_diet_filters,
    "generate": cmd_generate,
    "grocery": cmd_grocery,
    "topics": cmd_topics,
    "learn": cmd_learn,
    "swap-exercise": cmd_swap_exercise,
    "swap-meal": cmd_swap_meal,
    "show": cmd_show,
    "export": cmd_export,
}

ACCOUNT_COMMANDS = {
    "register": cmd_register,
    "login": cmd_login,
    "logout": cmd_logout,
    "me": cmd_me,
    "checkout": cmd_checkout,
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="fitplan", description="AI fitness and nutrition planner")
    parser.add_argument("--verbose", "-v", action="store_true", help="Show debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("set-key", help="Save and validate the AI provider API key")
    p.add_argument("api_key")

    p = sub.add_parser("profile", help="Update your profile")
    p.add_argument("--age")
    p.add_argument("--gender", choices=constants.GENDER_OPTIONS)
    p.add_argument("--height", help="cm")
    p.add_argument("--weight", help="kg")
    p.add_argument("--goal", choices=constants.FITNESS_GOAL_OPTIONS)
    p.add_argument("--experience", choices=constants.EXPERIENCE_LEVEL_OPTIONS)
    p.add_argument("--feedback", help="What to change in the next plan")

    p = sub.add_parser("workout-filters", help="Update workout preferences")
    p.add_argument("--equipment", nargs="+", choices=constants.EQUIPMENT_OPTIONS)
    p.add_argument("--duration", choices=constants.DURATION_OPTIONS)
    p.add_argument("--style", choices=constants.TRAINING_STYLE_OPTIONS)
    p.add_argument("--location", choices=constants.WORKOUT_LOCATION_OPTIONS)

    p = sub.add_parser("diet-filters", help="Update diet preferences")
    p.add_argument("--restrictions", nargs="+", choices=constants.DIETARY_RESTRICTION_OPTIONS)
    p.add_argument("--allergies", nargs="+", choices=constants.ALLERGY_OPTIONS)
    p.add_argument("--cuisines", nargs="+", choices=constants.CUISINE_OPTIONS)

    p = sub.add_parser("generate", help="Generate or refine your plan")
    p.add_argument("--feedback", help="Feedback used to refine the current plan")

    sub.add_parser("grocery", help="Generate a grocery list from the nutrition plan")
    sub.add_parser("topics", help="List educational topics")

    p = sub.add_parser("learn", help="Generate an educational article")
    p.add_argument("topic", help="Topic text or its number from 'fitplan topics'")

    p = sub.add_parser("swap-exercise", help="Replace one exercise")
    p.add_argument("day", type=int, help="Day number (1-based)")
    p.add_argument("index", type=int, help="Exercise number within the day (1-based)")

    p = sub.add_parser("swap-meal", help="Replace one meal")
    p.add_argument("day", type=int, help="Day number (1-based)")
    p.add_argument("index", type=int, help="Meal number within the day (1-based)")

    p = sub.add_parser("show", help="Print saved state")
    p.add_argument("what", choices=["profile", "workout", "nutrition", "grocery"])

    p = sub.add_parser("export", help="Write the plan to text files")
    p.add_argument("what", choices=["workout", "nutrition", "all"], nargs="?", default="all")
    p.add_argument("--dir", help=f"Output directory (default: {config.EXPORT_DIR})")

    for name in ("register", "login"):
        p = sub.add_parser(name, help=f"{name.capitalize()} an account")
        p.add_argument("email")
        p.add_argument("--password", help="Prompted for when omitted")
    sub.add_parser("logout", help="Forget the saved session token")
    sub.add_parser("me", help="Show the logged in account")
    sub.add_parser("checkout", help="Start a subscription checkout and print its URL")

    p = sub.add_parser("serve", help="Run the API server")
    p.add_argument("--host", default="0.0.0.0")
    p.add_argument("--port", type=int, default=4242)
    p.add_argument("--reload", action="store_true")
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    if args.command == "serve":
        return cmd_serve(args)

    store = build_store()
    if args.command in ACCOUNT_COMMANDS:
        session = AuthSession(store)
        try:
            return ACCOUNT_COMMANDS[args.command](session, args)
        except AuthServiceError as e:
            print(f"Error: {e}", file=sys.stderr)
            return 1
        finally:
            session.close()

    orchestrator = PlanOrchestrator(GenerationClient(), store)
    orchestrator.load()
    return PLANNER_COMMANDS[args.command](orchestrator, args)


if __name__ == "__main__":
    sys.exit(main())
