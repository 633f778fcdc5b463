"""Chat Management Core Logic"""
from ..common_imports import *
from ..models.api_config import APIConfig
from ..models.chat_models import ChatMessage, DEFAULT_MOOD, clamp_mood
from ..models.user_profile import UserProfile, Preferences, parse_goals
from ..utils.file_manager import (
    LocalStore, SLOT_MESSAGES, SLOT_PROFILE, SLOT_SETTINGS, SLOT_THEME, SLOT_JOURNAL,
)
from ..utils.helpers import export_filename, journal_entry
from .ai_interface import CompletionClient
from .errors import ImportDataError
from .prompt_formatter import build_system_prompt
from .safety import is_crisis, CRISIS_RESPONSE

logger = logging.getLogger(__name__)

THEMES = ("light", "dark")


@dataclass
class ImportResult:
    ok: bool
    message: str


@dataclass
class SessionInsights:
    """Local-only summary shown on the insights page"""
    message_count: int
    first_ts: Optional[int]
    last_ts: Optional[int]
    mood: int
    profile_name: str


class ChatManager:
    """Owns profile, settings and history; persists after every mutation"""

    def __init__(self, store: Optional[LocalStore] = None, client: Optional[CompletionClient] = None,
                 on_change: Optional[Callable[[str], None]] = None):
        self.store = store or LocalStore()
        self.client = client or CompletionClient()
        self.on_change = on_change

        self.profile = self._load_profile()
        self.settings = self._load_settings()
        self.messages = self._load_messages()

        self.mood = DEFAULT_MOOD
        self.show_crisis = False
        self.loading = False

    # ---------- loading ----------

    def _load_profile(self) -> UserProfile:
        data = self.store.load(SLOT_PROFILE)
        if data is None:
            return UserProfile()
        try:
            return UserProfile.from_dict(data)
        except (ValueError, TypeError, OverflowError) as e:
            logger.warning("⚠️ Stored profile is invalid (%s), using defaults", e)
            return UserProfile()

    def _load_settings(self) -> APIConfig:
        data = self.store.load(SLOT_SETTINGS)
        if data is None:
            return APIConfig()
        try:
            return APIConfig.from_dict(data)
        except (ValueError, TypeError, OverflowError) as e:
            logger.warning("⚠️ Stored settings are invalid (%s), using defaults", e)
            return APIConfig()

    def _load_messages(self) -> List[ChatMessage]:
        data = self.store.load(SLOT_MESSAGES)
        if data is None:
            return [ChatMessage.greeting()]
        try:
            return _parse_messages(data)
        except (ValueError, TypeError, OverflowError) as e:
            logger.warning("⚠️ Stored history is invalid (%s), starting fresh", e)
            return [ChatMessage.greeting()]

    # ---------- persistence ----------

    def _changed(self, slot: str):
        """Persist ``slot`` and notify the on-change hook"""
        if slot == SLOT_MESSAGES:
            self.store.save(slot, [m.to_dict() for m in self.messages])
        elif slot == SLOT_PROFILE:
            self.store.save(slot, self.profile.to_dict())
        elif slot == SLOT_SETTINGS:
            self.store.save(slot, self.settings.to_dict())

        if self.on_change:
            self.on_change(slot)

    # ---------- conversation ----------

    def send_message(self, text: str, mood: Optional[int] = None) -> Optional[ChatMessage]:
        """Send one user turn and append the reply; returns the assistant message"""
        text = (text or "").strip()
        if not text:
            return None
        if self.loading:
            logger.warning("⚠️ A message is already being sent")
            return None

        if mood is not None:
            self.set_mood(mood)

        user_message = ChatMessage(role="user", content=text, mood_at_send=self.mood)
        self.messages.append(user_message)
        self._changed(SLOT_MESSAGES)

        self.loading = True
        try:
            self.show_crisis = is_crisis(text)
            if self.show_crisis:
                logger.info("🛟 Crisis language detected, skipping completion call")
                reply = CRISIS_RESPONSE
            else:
                result = self.client.complete(
                    self.messages, build_system_prompt(self.profile), self.settings
                )
                reply = result.display_text()
        finally:
            self.loading = False

        assistant_message = ChatMessage(role="assistant", content=reply)
        self.messages.append(assistant_message)
        self._changed(SLOT_MESSAGES)
        return assistant_message

    def reset_history(self, confirm: Callable[[], bool]) -> bool:
        """Replace history with the greeting; irreversible, so ``confirm`` must agree"""
        if not confirm():
            return False
        self.messages = [ChatMessage.greeting()]
        self.show_crisis = False
        self._changed(SLOT_MESSAGES)
        logger.info("🗑️ Conversation history cleared")
        return True

    def set_mood(self, value: int) -> int:
        self.mood = clamp_mood(value)
        return self.mood

    # ---------- profile & settings ----------

    def update_profile(self, **changes) -> UserProfile:
        """Overwrite profile fields; tone/depth may be passed directly"""
        preferences = self.profile.preferences
        tone = changes.pop("tone", preferences.tone)
        depth = changes.pop("depth", preferences.depth)
        if "goals" in changes and isinstance(changes["goals"], str):
            changes["goals"] = parse_goals(changes["goals"])

        self.profile = replace(self.profile, preferences=Preferences(tone=tone, depth=depth), **changes)
        self._changed(SLOT_PROFILE)
        return self.profile

    def set_goals_from_text(self, text: str) -> UserProfile:
        return self.update_profile(goals=parse_goals(text))

    def update_settings(self, **changes) -> APIConfig:
        """Overwrite settings fields; values are clamped into range"""
        self.settings = replace(self.settings, **changes)
        self._changed(SLOT_SETTINGS)
        return self.settings

    # ---------- export / import ----------

    def export_all(self) -> Dict[str, Any]:
        return {
            "profile": self.profile.to_dict(),
            "settings": self.settings.to_export_dict(),
            "messages": [m.to_dict() for m in self.messages],
        }

    def export_json(self) -> str:
        return json.dumps(self.export_all(), indent=2, ensure_ascii=False)

    def export_to_file(self, directory: Union[str, Path]) -> Path:
        directory = Path(directory)
        directory.mkdir(parents=True, exist_ok=True)
        path = directory / export_filename()
        path.write_text(self.export_json(), encoding="utf-8")
        logger.info("✅ Exported data to %s", path)
        return path

    def import_all(self, blob: Union[str, bytes]) -> ImportResult:
        """Load an export; on any problem nothing is changed"""
        try:
            profile, settings, messages = self._parse_import(blob)
        except ImportDataError as e:
            logger.error("❌ Failed to import data: %s", e)
            return ImportResult(ok=False, message=f"Failed to import data: {e}")

        if profile is not None:
            self.profile = profile
            self._changed(SLOT_PROFILE)
        if settings is not None:
            self.settings = settings
            self._changed(SLOT_SETTINGS)
        if messages is not None:
            self.messages = messages
            self._changed(SLOT_MESSAGES)

        logger.info("✅ Imported data")
        return ImportResult(ok=True, message="Data imported")

    def import_file(self, path: Union[str, Path]) -> ImportResult:
        try:
            blob = Path(path).read_bytes()
        except OSError as e:
            return ImportResult(ok=False, message=f"Failed to import data: {e}")
        return self.import_all(blob)

    def _parse_import(self, blob: Union[str, bytes]):
        try:
            data = json.loads(blob)
        except (TypeError, ValueError) as e:
            raise ImportDataError("invalid file") from e
        if not isinstance(data, dict):
            raise ImportDataError("invalid file")

        try:
            profile = UserProfile.from_dict(data["profile"]) if data.get("profile") else None
            settings = None
            if data.get("settings"):
                # Imported files never carry a usable key
                settings = replace(APIConfig.from_dict(data["settings"]), api_key="")
            messages = None
            if isinstance(data.get("messages"), list):
                messages = _parse_messages(data["messages"])
        except (ValueError, TypeError, OverflowError) as e:
            raise ImportDataError(str(e)) from e

        return profile, settings, messages

    # ---------- extras: insights, journal, theme ----------

    def insights(self) -> SessionInsights:
        return SessionInsights(
            message_count=len(self.messages),
            first_ts=self.messages[0].ts if self.messages else None,
            last_ts=self.messages[-1].ts if self.messages else None,
            mood=self.mood,
            profile_name=self.profile.name,
        )

    def save_journal(self, text: str) -> str:
        content = journal_entry(text)
        self.store.save(SLOT_JOURNAL, content)
        if self.on_change:
            self.on_change(SLOT_JOURNAL)
        return content

    def load_journal(self) -> str:
        return self.store.load(SLOT_JOURNAL, "") or ""

    @property
    def theme(self) -> str:
        theme = self.store.load(SLOT_THEME, "light")
        return theme if theme in THEMES else "light"

    def toggle_theme(self) -> str:
        theme = "light" if self.theme == "dark" else "dark"
        self.store.save(SLOT_THEME, theme)
        if self.on_change:
            self.on_change(SLOT_THEME)
        return theme


def _parse_messages(data: Any) -> List[ChatMessage]:
    if not isinstance(data, list):
        raise ValueError("messages must be a list")
    return [ChatMessage.from_dict(item) for item in data]
