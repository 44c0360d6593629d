"""Prompt templates and persona for the panels."""
from .prompts import Prompts

__all__ = ["Prompts"]
