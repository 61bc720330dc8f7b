"""Entry point: roll catalog actions from the terminal."""

import sys

from actionroll.config import settings
from actionroll.core import RollService, initialize_roll_service
from actionroll.exceptions import RequestValidationError
from actionroll.utils.logging import setup_logging

HELP_TEXT = """Commands:
  <action name> <WR> <MR> [bonus]   roll an action, e.g.  Sneak Attack B S 10
  json <action name> <WR> <MR> [bonus]   same, printing the full audit record
  list                              show the action catalog
  help                              show this message
  quit                              exit"""


# ─────────────────────────────────────────────────────────────────────────────
# Command handling
# ─────────────────────────────────────────────────────────────────────────────
def parse_roll_command(text: str) -> tuple[str, str, str, str | None]:
    """Split '<action name> <WR> <MR> [bonus]'; action names may contain spaces."""
    tokens = text.split()
    bonus = None
    if tokens and tokens[-1].lstrip("+-").isdigit():
        bonus = tokens.pop()
    if len(tokens) < 3:
        raise ValueError("expected: <action name> <WR> <MR> [bonus]")
    return " ".join(tokens[:-2]), tokens[-2], tokens[-1], bonus


def format_catalog(service: RollService) -> str:
    lines = []
    for category in service.catalog.categories:
        lines.append(f"{category}:")
        for action in service.catalog.by_category(category):
            lines.append(f"  {action.name:<24} {action.roll_formula.splitlines()[0] if action.roll_formula else ''}")
    bonuses = ", ".join(f"{rank}={bonus}" for rank, bonus in service.catalog.rank_bonuses().items())
    lines.append(f"Rank bonuses: {bonuses}")
    return "\n".join(lines)


def handle_command(service: RollService, text: str) -> str:
    """Run one command line and return what to print."""
    command = text.strip()
    lowered = command.lower()

    if lowered == "list":
        return format_catalog(service)
    if lowered == "help":
        return HELP_TEXT

    as_json = False
    if lowered.startswith("json "):
        as_json = True
        command = command[5:]

    try:
        name, weapon_rank, mastery_rank, bonus = parse_roll_command(command)
    except ValueError as e:
        return f"[ERROR] {e}"

    try:
        roll = service.roll(name, weapon_rank, mastery_rank, bonus)
    except RequestValidationError as e:
        return f"[ERROR] {e}"

    if as_json:
        return roll.model_dump_json(indent=2)
    return f"{roll.action_name}: {roll.result.rendered_expression} = {roll.final_result}"


# ─────────────────────────────────────────────────────────────────────────────
# Roll Loop
# ─────────────────────────────────────────────────────────────────────────────
def get_player_input() -> str | None:
    """Get input from the player, handling EOF and interrupts."""
    try:
        text = input("\n> ").strip()
        return text if text else None
    except (EOFError, KeyboardInterrupt):
        return "quit"


def roll_loop(service: RollService) -> None:
    """Process commands until quit."""
    while True:
        player_input = get_player_input()

        if player_input is None:
            print("(Type 'help' for commands)")
            continue

        if player_input.lower() in ("quit", "exit", "q"):
            print("Goodbye!")
            break

        print(handle_command(service, player_input))


def main(argv: list[str] | None = None) -> None:
    """Main entry point. With arguments, runs them as a single command."""
    argv = sys.argv[1:] if argv is None else argv

    logger = setup_logging(
        level=settings.log_level,
        log_file=settings.log_file,
        enable_color=settings.enable_color,
    )
    logger.debug("Configuration: %s", settings)

    service = initialize_roll_service(settings)
    logger.info("Loaded %d actions", len(service.catalog))

    if argv:
        print(handle_command(service, " ".join(argv)))
        return

    print("Action roller. Type 'help' for commands.")
    roll_loop(service)


if __name__ == "__main__":
    main()
