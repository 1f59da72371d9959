"""Data transfer objects shared by the factory and the CLI."""

from .client_params import ClientParams

__all__ = ["ClientParams"]
