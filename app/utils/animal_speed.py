from __future__ import annotations

import csv
from dataclasses import dataclass
from typing import List


@dataclass
class AnimalSpeed:
    name: str
    speed: float
    diet: str


def _to_number(value) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0.0
    # NaN and infinities chart as zero
    if number != number or number in (float('inf'), float('-inf')):
        return 0.0
    return number


def parse_animal_rows(rows) -> List[AnimalSpeed]:
    """Map CSV rows (dicts with name/speed/diet) to chart data."""
    return [
        AnimalSpeed(
            name=row.get('name') or "",
            speed=_to_number(row.get('speed')),
            diet=(row.get('diet') or "").strip().lower(),
        )
        for row in rows
    ]


def load_animal_speeds(path: str) -> List[AnimalSpeed]:
    with open(path, newline='', encoding='utf-8') as f:
        return parse_animal_rows(csv.DictReader(f))
