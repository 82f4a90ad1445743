from __future__ import annotations

from typing import Any, Iterable, List, Optional


def _field(species: Any, name: str) -> Optional[str]:
    if isinstance(species, dict):
        value = species.get(name)
    else:
        value = getattr(species, name, None)
    return value if isinstance(value, str) else None


def species_matches_query(species: Any, query: Optional[str]) -> bool:
    """Return True if `query` is a substring of the scientific name, common name or description.

    Matching is case-insensitive on the trimmed query; an empty query matches
    every record. Works on ``Species`` objects and raw row dicts alike.
    """

    needle = (query or "").strip().lower()
    if not needle:
        return True

    for name in ("scientific_name", "common_name", "description"):
        value = _field(species, name)
        if value and needle in value.lower():
            return True
    return False


def filter_species(species: Iterable[Any], query: Optional[str]) -> List[Any]:
    """Linear scan keeping the records that match, in their original order."""
    return [s for s in species if species_matches_query(s, query)]
