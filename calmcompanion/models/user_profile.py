"""User Profile Models"""
from ..common_imports import *


class Tone(str, Enum):
    WARM = "Warm"
    NEUTRAL = "Neutral"
    DIRECT = "Direct"


class Depth(str, Enum):
    BRIEF = "Brief"
    BALANCED = "Balanced"
    IN_DEPTH = "In-depth"


def _coerce_enum(enum_cls, value, default):
    try:
        return enum_cls(value)
    except ValueError:
        return default


@dataclass
class Preferences:
    """How the companion should talk to the user"""
    tone: Tone = Tone.WARM
    depth: Depth = Depth.BALANCED

    def __post_init__(self):
        self.tone = _coerce_enum(Tone, self.tone, Tone.WARM)
        self.depth = _coerce_enum(Depth, self.depth, Depth.BALANCED)

    def to_dict(self) -> Dict[str, str]:
        return {"tone": self.tone.value, "depth": self.depth.value}

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "Preferences":
        data = data or {}
        return cls(tone=data.get("tone", Tone.WARM), depth=data.get("depth", Depth.BALANCED))


@dataclass
class UserProfile:
    """Intake profile used to personalize the system prompt"""
    name: str = ""
    age: str = ""  # Free text, as typed into the intake form
    pronouns: str = ""
    goals: List[str] = field(default_factory=lambda: ["Reduce stress"])
    preferences: Preferences = field(default_factory=Preferences)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "age": self.age,
            "pronouns": self.pronouns,
            "goals": list(self.goals),
            "preferences": self.preferences.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "UserProfile":
        """Build a profile from stored/imported JSON, tolerating missing fields"""
        if not isinstance(data, dict):
            raise ValueError("profile must be an object")

        goals = data.get("goals", ["Reduce stress"])
        if isinstance(goals, str):
            goals = parse_goals(goals)
        elif not isinstance(goals, list):
            raise ValueError("profile.goals must be a list")

        preferences = data.get("preferences")
        if preferences is not None and not isinstance(preferences, dict):
            raise ValueError("profile.preferences must be an object")

        return cls(
            name=str(data.get("name") or ""),
            age=str(data.get("age") or ""),
            pronouns=str(data.get("pronouns") or ""),
            goals=[str(g) for g in goals],
            preferences=Preferences.from_dict(preferences),
        )


def parse_goals(text: str) -> List[str]:
    """Split the comma-separated goals field the way the intake form does"""
    return [part.strip() for part in (text or "").split(",") if part.strip()]
