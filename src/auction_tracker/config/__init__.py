"""Configuration helpers for column synonyms and runtime settings."""

from .columns import (
    CANONICAL_FIELDS,
    COLUMN_SYNONYMS,
    PRIORITY_OPTIONS,
    ROLE_OPTIONS,
    build_synonym_table,
    get_synonyms,
    iter_fields,
)
from .settings import DEFAULT_STATE_KEY, Settings, load_settings

__all__ = [
    "CANONICAL_FIELDS",
    "COLUMN_SYNONYMS",
    "DEFAULT_STATE_KEY",
    "PRIORITY_OPTIONS",
    "ROLE_OPTIONS",
    "Settings",
    "build_synonym_table",
    "get_synonyms",
    "iter_fields",
    "load_settings",
]
