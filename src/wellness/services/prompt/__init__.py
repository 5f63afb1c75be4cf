"""Prompt construction for LLM providers."""

from wellness.services.prompt.prompt_builder import BuiltPrompt, PromptBuilder

__all__ = ["BuiltPrompt", "PromptBuilder"]
