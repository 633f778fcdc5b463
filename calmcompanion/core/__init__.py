"""Core Business Logic Package

This package contains the core business logic for the companion: crisis
interception, prompt composition, the completion client and the
conversation controller that ties them together.
"""

# Conversation Controller
from .chat_manager import ChatManager, ImportResult, SessionInsights

# Completion Client
from .ai_interface import CompletionClient, CompletionResult, extract_reply

# Prompt Composer
from .prompt_formatter import build_system_prompt, format_messages_for_api

# Safety Filter
from .safety import is_crisis, CRISIS_TERMS, CRISIS_RESPONSE, CRISIS_RESOURCES, format_crisis_panel

# Errors
from .errors import (
    CompanionError,
    TransportError,
    MissingCredentialError,
    MalformedResponseError,
    ImportDataError,
)

__all__ = [
    # Chat Management
    'ChatManager',
    'ImportResult',
    'SessionInsights',

    # AI Interface
    'CompletionClient',
    'CompletionResult',
    'extract_reply',

    # Prompt Formatting
    'build_system_prompt',
    'format_messages_for_api',

    # Safety
    'is_crisis',
    'CRISIS_TERMS',
    'CRISIS_RESPONSE',
    'CRISIS_RESOURCES',
    'format_crisis_panel',

    # Errors
    'CompanionError',
    'TransportError',
    'MissingCredentialError',
    'MalformedResponseError',
    'ImportDataError',
]
