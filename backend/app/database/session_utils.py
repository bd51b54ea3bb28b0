"""
Helpers for working with SQLAlchemy sessions in a dialect-agnostic way.
"""

from __future__ import annotations

from sqlalchemy.orm import Session


def get_dialect_name(session: Session) -> str:
    """Name of the dialect the session is bound to ("postgresql", "sqlite", ...)."""
    return session.get_bind().dialect.name
