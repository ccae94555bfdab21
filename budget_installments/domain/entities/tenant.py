"""Caller identity threaded through every use case."""

from dataclasses import dataclass


@dataclass(frozen=True)
class TenantContext:
    """The authenticated user on whose behalf an operation runs."""

    user_id: str
