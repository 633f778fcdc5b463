"""Main entry point for CalmCompanion"""
import argparse

from .common_imports import *
from . import config
from .core.chat_manager import ChatManager
from .core.safety import format_crisis_panel
from .models import REDACTED_KEY, Tone, Depth
from .utils.file_manager import get_app_data_dir
from .utils.helpers import format_ts

logger = logging.getLogger("calmcompanion")

DISCLAIMER = (
    "CalmCompanion offers general support and coping strategies. It is not a licensed "
    "clinician and does not give medical advice or diagnoses."
)

HELP_TEXT = """Commands:
  /mood N          set mood (1-10) for the next message
  /reset           delete all conversations
  /export [DIR]    write an export file (default: data directory)
  /import FILE     load an export file
  /insights        show session insights
  /journal TEXT    save a journal entry
  /theme           toggle light/dark theme
  /profile [FIELD VALUE]  show the profile, or set name/age/pronouns
  /goals TEXT      set goals (comma-separated)
  /tone TONE       Warm, Neutral or Direct
  /depth DEPTH     Brief, Balanced or In-depth
  /set [KEY VALUE] show settings, or set proxy/key/model/temperature/top_p/max_tokens
  /help            show this help
  /quit            leave"""

PROFILE_FIELDS = ("name", "age", "pronouns")

# /set keys -> APIConfig fields
SETTING_KEYS = {
    "proxy": "use_proxy",
    "key": "api_key",
    "model": "model",
    "temperature": "temperature",
    "top_p": "top_p",
    "max_tokens": "max_tokens",
}
NUMERIC_SETTINGS = ("temperature", "top_p", "max_tokens")


def setup_logging(level: str = config.LOG_LEVEL):
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def setup_global_error_handling():
    """Log anything that escapes the command handlers"""
    def exception_hook(exc_type, exc_value, exc_traceback):
        if issubclass(exc_type, KeyboardInterrupt):
            sys.__excepthook__(exc_type, exc_value, exc_traceback)
            return
        logger.critical("💥 Unhandled exception", exc_info=(exc_type, exc_value, exc_traceback))

    sys.excepthook = exception_hook


def ask_confirmation(prompt: str = "Delete all conversations? This cannot be undone. [y/N] ") -> bool:
    try:
        return input(prompt).strip().lower() in ("y", "yes")
    except EOFError:
        return False


def print_insights(manager: ChatManager):
    stats = manager.insights()
    print(f"Messages stored: {stats.message_count}")
    print(f"First interaction: {format_ts(stats.first_ts)}")
    print(f"Most recent: {format_ts(stats.last_ts)}")
    print(f"Current mood: {stats.mood}")
    print(f"Profile name: {stats.profile_name or '—'}")


def print_profile(manager: ChatManager):
    profile = manager.profile
    print(f"Name: {profile.name or '—'}")
    print(f"Age: {profile.age or '—'}")
    print(f"Pronouns: {profile.pronouns or '—'}")
    print(f"Goals: {', '.join(profile.goals) or '—'}")
    print(f"Tone: {profile.preferences.tone.value} | Depth: {profile.preferences.depth.value}")


def print_settings(manager: ChatManager):
    settings = manager.settings
    print(f"Connection: {settings.mode_label}")
    print(f"API key: {REDACTED_KEY if settings.api_key else 'not set'}")
    print(f"Model: {settings.model}")
    print(f"temperature={settings.temperature} top_p={settings.top_p} max_tokens={settings.max_tokens}")


def _match_choice(enum_cls, value: str):
    """Case-insensitive lookup of an enum member by its value"""
    for member in enum_cls:
        if member.value.lower() == value.lower():
            return member
    return None


def _is_number(value: str) -> bool:
    try:
        return math.isfinite(float(value))
    except ValueError:
        return False


def handle_profile(manager: ChatManager, arg: str):
    if not arg:
        print_profile(manager)
        return
    name, _, value = arg.partition(" ")
    name = name.lower()
    if name not in PROFILE_FIELDS:
        print(f"Usage: /profile [{'|'.join(PROFILE_FIELDS)} VALUE]")
        return
    manager.update_profile(**{name: value.strip()})
    print(f"Profile {name} updated.")


def handle_preference(manager: ChatManager, name: str, enum_cls, arg: str):
    choice = _match_choice(enum_cls, arg)
    if choice is None:
        print(f"Usage: /{name} {'|'.join(m.value for m in enum_cls)}")
        return
    manager.update_profile(**{name: choice})
    print(f"{name.capitalize()}: {choice.value}")


def handle_setting(manager: ChatManager, arg: str):
    if not arg:
        print_settings(manager)
        return
    key, _, value = arg.partition(" ")
    key, value = key.lower(), value.strip()
    if key not in SETTING_KEYS or (key != "key" and not value):
        print(f"Usage: /set {'|'.join(SETTING_KEYS)} VALUE")
        return
    if key in NUMERIC_SETTINGS and not _is_number(value):
        print(f"{key} must be a number.")
        return
    manager.update_settings(**{SETTING_KEYS[key]: value})
    print_settings(manager)


def handle_command(manager: ChatManager, line: str) -> bool:
    """Run one slash command; returns False when the loop should stop"""
    command, _, arg = line[1:].partition(" ")
    arg = arg.strip()

    if command in ("quit", "exit"):
        return False
    elif command == "help":
        print(HELP_TEXT)
    elif command == "mood":
        try:
            print(f"Mood: {manager.set_mood(int(arg))}")
        except ValueError:
            print("Usage: /mood N (1-10)")
    elif command == "reset":
        if manager.reset_history(ask_confirmation):
            print(manager.messages[0].content)
    elif command == "export":
        path = manager.export_to_file(arg or get_app_data_dir())
        print(f"Exported to {path}")
    elif command == "import":
        if not arg:
            print("Usage: /import FILE")
        else:
            print(manager.import_file(arg).message)
    elif command == "insights":
        print_insights(manager)
    elif command == "journal":
        manager.save_journal(arg)
        print("Journal saved.")
    elif command == "theme":
        print(f"Theme: {manager.toggle_theme()}")
    elif command == "profile":
        handle_profile(manager, arg)
    elif command == "goals":
        manager.set_goals_from_text(arg)
        print(f"Goals: {', '.join(manager.profile.goals) or '—'}")
    elif command == "tone":
        handle_preference(manager, "tone", Tone, arg)
    elif command == "depth":
        handle_preference(manager, "depth", Depth, arg)
    elif command == "set":
        handle_setting(manager, arg)
    else:
        print(f"Unknown command /{command}. Type /help.")
    return True


def run_chat(manager: ChatManager):
    print(DISCLAIMER)
    print(f"Connection: {manager.settings.mode_label} | model {manager.settings.model}")
    print("Type /help for commands.\n")
    for message in manager.messages:
        if message.role != "system":
            print(f"{message.role}: {message.content}")

    while True:
        try:
            line = input(f"\n[mood {manager.mood}] you: ").strip()
        except (EOFError, KeyboardInterrupt):
            print("\n👋 Goodbye!")
            return
        if not line:
            continue
        if line.startswith("/"):
            if not handle_command(manager, line):
                print("👋 Goodbye!")
                return
            continue

        print("Assistant is thinking…")
        reply = manager.send_message(line)
        if manager.show_crisis:
            print(format_crisis_panel())
        if reply is not None:
            print(f"\nassistant: {reply.content}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="calmcompanion", description="Personalized support chat companion")
    parser.add_argument("--log-level", default=config.LOG_LEVEL, help="logging level (default: %(default)s)")
    sub = parser.add_subparsers(dest="command")

    sub.add_parser("chat", help="interactive chat (default)")

    export_parser = sub.add_parser("export", help="write an export file")
    export_parser.add_argument("directory", nargs="?", help="target directory (default: data directory)")

    import_parser = sub.add_parser("import", help="load an export file")
    import_parser.add_argument("file")

    reset_parser = sub.add_parser("reset", help="delete all conversations")
    reset_parser.add_argument("--yes", action="store_true", help="skip the confirmation prompt")

    relay_parser = sub.add_parser("relay", help="run the proxy relay server")
    relay_parser.add_argument("--host", default=config.RELAY_HOST)
    relay_parser.add_argument("--port", type=int, default=config.RELAY_PORT)
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main application entry point"""
    args = build_parser().parse_args(argv)
    setup_logging(args.log_level.upper())
    setup_global_error_handling()

    if args.command == "relay":
        from .proxy.relay import run_relay
        run_relay(args.host, args.port)
        return 0

    manager = ChatManager()

    if args.command == "export":
        path = manager.export_to_file(args.directory or get_app_data_dir())
        print(f"Exported to {path}")
    elif args.command == "import":
        result = manager.import_file(args.file)
        print(result.message)
        return 0 if result.ok else 1
    elif args.command == "reset":
        confirm = (lambda: True) if args.yes else ask_confirmation
        if not manager.reset_history(confirm):
            print("Reset cancelled.")
            return 1
        print("History reset.")
    else:
        run_chat(manager)
    return 0


if __name__ == "__main__":
    sys.exit(main())
