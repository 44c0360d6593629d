"""Authorization skill - billable key gate for video generation."""
from .authorization import (
    AuthorizationProvider,
    SelectedKeyAuthorizationProvider,
    StaticAuthorizationProvider,
)

__all__ = [
    "AuthorizationProvider",
    "SelectedKeyAuthorizationProvider",
    "StaticAuthorizationProvider",
]
