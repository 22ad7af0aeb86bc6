"""SQLAlchemy models."""

from bienes_raices.models.account import Account

__all__ = [
    "Account",
]
