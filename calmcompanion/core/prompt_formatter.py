"""Prompt formatting utilities"""
from ..common_imports import *
from ..models.user_profile import UserProfile
from ..models.chat_models import ChatMessage

SYSTEM_PROMPT_TEMPLATE = """You are a supportive, non‑judgmental therapeutic assistant.

IMPORTANT SAFETY & SCOPE
- You are NOT a doctor and do NOT provide diagnoses or medical instructions.
- Encourage seeking licensed professionals for medical or psychiatric concerns.
- If the user shows crisis signals (self‑harm, harm to others), respond calmly with empathy, suggest immediate help, and provide resources.

STYLE
- Tone: {tone}, respectful, and validating.
- Depth: {depth}.
- Personalize using known profile: name={name}, age={age}, pronouns={pronouns}, goals={goals}.
- Ask brief follow‑ups, avoid long monologues.
- Offer practical, evidence‑informed strategies (CBT-style reframing, grounding, journaling prompts), but keep general.

BOUNDARIES
- No diagnosis, prescriptions, or claims of being a therapist/doctor.
- Suggest contacting a professional for persistent or severe symptoms.
- Respect user autonomy and preferences."""


def build_system_prompt(profile: Optional[UserProfile]) -> str:
    """Render the system instruction for ``profile``; recomputed on every call"""
    profile = profile or UserProfile()
    return SYSTEM_PROMPT_TEMPLATE.format(
        tone=profile.preferences.tone.value.lower(),
        depth=profile.preferences.depth.value,
        name=profile.name,
        age=profile.age,
        pronouns=profile.pronouns,
        goals=", ".join(profile.goals),
    )


def format_messages_for_api(messages: List[ChatMessage], system_prompt: str) -> List[Dict[str, str]]:
    """System message first, then role/content only for each history entry"""
    formatted_messages = [{"role": "system", "content": system_prompt}]
    for message in messages:
        formatted_messages.append(message.to_api())
    return formatted_messages
