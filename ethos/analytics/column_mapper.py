"""
Ethos Column Mapping Engine

Deterministic alias library for record-export header normalization.

RULES:
- Deterministic string matching only. No fuzzy matching.
- Case-insensitive. Whitespace stripped before comparison.
- Same input always produces same output.
- No column renamed without being logged.
- No column silently dropped: unmatched headers are returned to the caller.

Public API:
  resolve_columns(df, file_label) -> dict[str, str]
  get_unmatched_columns(df, resolved_map) -> list[str]
"""

from __future__ import annotations

import logging

import pandas as pd

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Ethos normalized field names (record schema)
# ---------------------------------------------------------------------------

NORMALIZED_FIELDS: frozenset[str] = frozenset({
    "id",
    "category",
    "priority",
    "status",
    "is_anonymous",
    "created_at",
    "closed_at",
})

# ---------------------------------------------------------------------------
# Export alias libraries
# ---------------------------------------------------------------------------
# Keys are written in their natural casing; comparison is always
# case-insensitive + whitespace-stripped at lookup time. The same variant may
# appear in several sections only if it maps to the same target.
# ---------------------------------------------------------------------------

# ── Database table export (snake_case) ─────────────────────────────────────
_TABLE_EXPORT_VARIANTS: dict[str, str] = {
    "id":                   "id",
    "report_id":            "id",
    "protocol_number":      "id",
    "category":             "category",
    "report_category":      "category",
    "priority":             "priority",
    "severity":             "priority",
    "status":               "status",
    "report_status":        "status",
    "is_anonymous":         "is_anonymous",
    "anonymous":            "is_anonymous",
    "created_at":           "created_at",
    "submitted_at":         "created_at",
    "closed_at":            "closed_at",
    "resolved_at":          "closed_at",
}

# ── Ethics channel spreadsheet (Portuguese headers) ────────────────────────
_ETHICS_CHANNEL_PT_VARIANTS: dict[str, str] = {
    "Protocolo":            "id",
    "Número do Protocolo":  "id",
    "Categoria":            "category",
    "Prioridade":           "priority",
    "Status":               "status",
    "Situação":             "status",
    "Anônima":              "is_anonymous",
    "Anônimo":              "is_anonymous",
    "Data de Criação":      "created_at",
    "Data de Abertura":     "created_at",
    "Data de Fechamento":   "closed_at",
    "Data de Encerramento": "closed_at",
}

# ── Generic spreadsheet headers ────────────────────────────────────────────
_GENERIC_VARIANTS: dict[str, str] = {
    "ID":                   "id",
    "Report ID":            "id",
    "Report Number":        "id",
    "Case ID":              "id",
    "Case Number":          "id",
    "Category":             "category",
    "Report Category":      "category",
    "Type":                 "category",
    "Priority":             "priority",
    "Severity":             "priority",
    "Status":               "status",
    "Anonymous":            "is_anonymous",
    "Is Anonymous":         "is_anonymous",
    "Created":              "created_at",
    "Created At":           "created_at",
    "Date Created":         "created_at",
    "Submitted":            "created_at",
    "Submitted At":         "created_at",
    "Closed":               "closed_at",
    "Closed At":            "closed_at",
    "Date Closed":          "closed_at",
    "Resolved At":          "closed_at",
}

_ALL_SOURCES: list[tuple[str, dict[str, str]]] = [
    ("Table export",        _TABLE_EXPORT_VARIANTS),
    ("Ethics channel (PT)", _ETHICS_CHANNEL_PT_VARIANTS),
    ("Generic",             _GENERIC_VARIANTS),
]


def _build_alias_lookup() -> dict[str, str]:
    """
    Merge all variant dicts into a single flat lookup keyed by the
    normalized (lowercase + stripped) variant.

    Raises ValueError if one normalized variant maps to different targets.
    """
    lookup: dict[str, str] = {}
    for source_name, variants in _ALL_SOURCES:
        for raw_variant, normalized_key in variants.items():
            normalized_variant = raw_variant.strip().lower()
            if normalized_variant in lookup:
                existing = lookup[normalized_variant]
                if existing != normalized_key:
                    raise ValueError(
                        f"Alias library conflict detected in '{source_name}': "
                        f"variant '{raw_variant}' (normalized: '{normalized_variant}') "
                        f"maps to '{normalized_key}' but was already mapped to '{existing}'."
                    )
                continue
            lookup[normalized_variant] = normalized_key
    return lookup


# Built once, never mutated.
_ALIAS_LOOKUP: dict[str, str] = _build_alias_lookup()


def resolve_columns(df: pd.DataFrame, file_label: str) -> dict[str, str]:
    """
    Map raw headers to normalized field names.

    Returns {raw_header: normalized_key} for every column that matched a
    known variant. Unmatched columns are not included.
    """
    resolved: dict[str, str] = {}
    for col in df.columns:
        normalized_variant = str(col).strip().lower()
        if normalized_variant in _ALIAS_LOOKUP:
            normalized_key = _ALIAS_LOOKUP[normalized_variant]
            resolved[col] = normalized_key
            logger.info(
                "[column_mapper] %s: '%s' → '%s'",
                file_label, col, normalized_key,
            )
    return resolved


def get_unmatched_columns(df: pd.DataFrame, resolved_map: dict[str, str]) -> list[str]:
    """Raw headers with no alias match, surfaced to the operator."""
    return [col for col in df.columns if col not in resolved_map]
