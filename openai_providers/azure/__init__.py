"""
Azure OpenAI dialect package.

Exports:
- AzureOpenAIProvider: client for an Azure OpenAI resource
- azure_dialect: builder for its :class:`DialectConfig`
"""

from .client import AzureOpenAIProvider
from .dialect import azure_dialect

__all__ = ["AzureOpenAIProvider", "azure_dialect"]
