"""Chat-related Models"""
from ..common_imports import *

VALID_ROLES = ("system", "user", "assistant")
MOOD_RANGE = (1, 10)
DEFAULT_MOOD = 5

GREETING = "Hi! I’m your supportive companion. How are you feeling right now?"


def clamp_mood(value) -> int:
    """Mood forced into 1-10; non-numeric or non-finite values raise ValueError"""
    try:
        number = float(value)
    except TypeError as e:
        raise ValueError(f"invalid mood: {value!r}") from e
    if not math.isfinite(number):
        raise ValueError(f"invalid mood: {value!r}")
    low, high = MOOD_RANGE
    return max(low, min(high, int(number)))


def _coerce_ts(value) -> int:
    """Stored timestamp, or now when it is missing or unusable"""
    try:
        number = float(value)
    except (TypeError, ValueError):
        return get_timestamp()
    if not math.isfinite(number) or number <= 0:
        return get_timestamp()
    return int(number)


@dataclass
class ChatMessage:
    role: str  # 'system', 'user' or 'assistant'
    content: str
    ts: int = field(default_factory=get_timestamp)  # epoch ms
    mood_at_send: Optional[int] = None  # Only set on user messages

    def to_api(self) -> Dict[str, str]:
        return {"role": self.role, "content": self.content}

    def to_dict(self) -> Dict[str, Any]:
        data = {"role": self.role, "content": self.content, "ts": self.ts}
        if self.mood_at_send is not None:
            data["moodAtSend"] = self.mood_at_send
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ChatMessage":
        if not isinstance(data, dict):
            raise ValueError("message must be an object")
        role = data.get("role")
        if role not in VALID_ROLES:
            raise ValueError(f"invalid message role: {role!r}")
        content = data.get("content")
        if not isinstance(content, str):
            raise ValueError("message content must be a string")
        mood = data.get("moodAtSend")
        return cls(
            role=role,
            content=content,
            ts=_coerce_ts(data.get("ts")),
            mood_at_send=clamp_mood(mood) if mood is not None else None,
        )

    @classmethod
    def greeting(cls) -> "ChatMessage":
        return cls(role="assistant", content=GREETING)
