"""Data Models Package

This package contains the data models for the companion: the intake profile,
connection/generation settings and chat messages.
"""

from .api_config import APIConfig, DEFAULT_MODEL, REDACTED_KEY
from .user_profile import UserProfile, Preferences, Tone, Depth, parse_goals
from .chat_models import ChatMessage, GREETING, DEFAULT_MOOD, clamp_mood

__all__ = [
    # API Configuration Models
    'APIConfig',
    'DEFAULT_MODEL',
    'REDACTED_KEY',

    # User Profile Models
    'UserProfile',
    'Preferences',
    'Tone',
    'Depth',
    'parse_goals',

    # Chat Models
    'ChatMessage',
    'GREETING',
    'DEFAULT_MOOD',
    'clamp_mood',
]
