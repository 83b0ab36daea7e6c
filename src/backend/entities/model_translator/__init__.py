"""Model Translator package for LLM-backed query generation."""

from .translator import load_prompt, translate_with_model

__all__ = ["load_prompt", "translate_with_model"]
