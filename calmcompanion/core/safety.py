"""Crisis keyword interception and static crisis resources"""
from ..common_imports import *

CRISIS_TERMS = [
    "suicide", "suicidal", "kill myself", "want to die", "end my life", "self-harm",
    "hurt myself", "not worth living", "overdose", "jump off", "cut myself", "hang myself",
]

CRISIS_RESPONSE = (
    "I’m really sorry you’re feeling this way. I can’t provide emergency support, "
    "but I care about your safety. If you might hurt yourself or someone else, please "
    "consider contacting emergency services or a local crisis line right now. I can also "
    "stay with you here and help you find immediate steps to feel safer."
)

CRISIS_HEADLINE = (
    "You’re not alone. If you’re in immediate danger, please seek urgent help now."
)

CRISIS_RESOURCES = [
    "India: Call 112 (emergency) or reach AASRA: 91-9820466726",
    "Global: Find local crisis lines via https://findahelpline.com/",
    "Consider contacting a trusted person near you to stay with you.",
]


def is_crisis(text: Optional[str]) -> bool:
    """Plain substring match, no word boundaries; false positives are accepted"""
    lowered = (text or "").lower()
    return any(term in lowered for term in CRISIS_TERMS)


def format_crisis_panel() -> str:
    lines = [f"⚠️ {CRISIS_HEADLINE}"]
    lines.extend(f"  - {item}" for item in CRISIS_RESOURCES)
    return "\n".join(lines)
