"""Configuration module for the Cognitive Edge Protocol service"""

from .prompts import (
    FORCE_EXAMPLE_INSTRUCTIONS,
    PHASE_GUIDANCE,
    SYSTEM_PROMPT,
    TurnPromptTemplate,
    build_system_prompt,
)
from .settings import Settings, get_settings

__all__ = [
    "Settings",
    "get_settings",
    "TurnPromptTemplate",
    "SYSTEM_PROMPT",
    "PHASE_GUIDANCE",
    "FORCE_EXAMPLE_INSTRUCTIONS",
    "build_system_prompt",
]
