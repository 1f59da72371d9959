"""
OpenAI dialect package.

Exports:
- OpenAIProvider: client for the public OpenAI REST API
- openai_dialect: builder for its :class:`DialectConfig`
"""

from .client import OpenAIProvider
from .dialect import openai_dialect

__all__ = ["OpenAIProvider", "openai_dialect"]
