# backend/app/models/base_enum.py
"""
Safe enum helpers for SQLAlchemy.

SQLAlchemy's ``Enum`` persists member NAMES by default ("MONDAY"). Rows
written by hand or by bulk SQL use the VALUES ("monday"), so every enum
column goes through ``create_safe_enum`` to store values consistently.

Usage:
    weekday = Column(create_safe_enum(Weekday, "weekday_enum"), nullable=False)
"""

from enum import Enum
from typing import Sequence, Type

from sqlalchemy import Enum as SAEnum


def create_safe_enum(
    enum_class: Type[Enum],
    name: str,
    *,
    native_enum: bool = False,
    validate_strings: bool = True,
) -> SAEnum:
    """
    Create a SQLAlchemy Enum that stores enum values (not names).

    ``native_enum`` defaults to False so the column is a plain VARCHAR on
    every backend and ``metadata.create_all`` needs no separate type DDL.
    """
    return SAEnum(
        enum_class,
        name=name,
        native_enum=native_enum,
        validate_strings=validate_strings,
        values_callable=_get_enum_values,
    )


def _get_enum_values(enum_class: Type[Enum]) -> Sequence[str]:
    return [member.value for member in enum_class]
