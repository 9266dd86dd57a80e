"""Initializes the prompts module and aggregates prompts from all submodules."""

from .system import build_assistant_prompt
from .system import get_prompts as get_system_prompts


def get_prompts() -> dict[str, str]:
    """
    Returns a dictionary of all available prompts from all prompt files.
    """
    prompts = {}
    prompts.update(get_system_prompts())
    prompts["assistant-system-prompt"] = build_assistant_prompt()
    return prompts


__all__ = ["build_assistant_prompt", "get_prompts"]
