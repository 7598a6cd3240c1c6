"""
Season Field Mappings

Declarative links between official-record metrics and scouting field
paths. Loaded from YAML so a new season is a config change, not code.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from functools import lru_cache
from typing import Any, Dict, List, Mapping, Optional, Tuple

import yaml

from app.core.config import settings

logger = logging.getLogger(__name__)

TRUTHY_STRINGS = {"yes", "true", "1"}


class AggregationMethod(str, Enum):
    SUM = "sum"
    BOOLEAN_COUNT = "boolean_count"


@dataclass(frozen=True)
class FieldMapping:
    """One official metric and the scouting paths that add up to it."""
    official_field: str
    observation_paths: Tuple[str, ...]
    aggregation: AggregationMethod = AggregationMethod.SUM
    derived_from: Tuple[str, ...] = ()

    @property
    def field_path(self) -> str:
        """Result field path: the scouting path itself, or tba.<metric> for multi-path totals."""
        if len(self.observation_paths) == 1:
            return self.observation_paths[0]
        return f"tba.{self.official_field}"

    def official_value(self, breakdown: Mapping[str, Any]) -> Any:
        """
        Read this metric from one alliance's breakdown.

        Derived metrics count truthy indicators (e.g. autoLineRobot1..3 == "Yes").
        """
        if self.derived_from:
            return sum(1 for key in self.derived_from if is_truthy_indicator(breakdown.get(key)))
        return breakdown.get(self.official_field)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "FieldMapping":
        return cls(
            official_field=data["official_field"],
            observation_paths=tuple(data.get("observation_paths", [])),
            aggregation=AggregationMethod(data.get("aggregation", AggregationMethod.SUM.value)),
            derived_from=tuple(data.get("derived_from", []) or []),
        )


def is_truthy_indicator(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in TRUTHY_STRINGS
    return bool(value)


@lru_cache(maxsize=8)
def _load_all(path: str) -> Dict[int, Tuple[FieldMapping, ...]]:
    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    return {
        int(year): tuple(FieldMapping.from_dict(entry) for entry in entries or [])
        for year, entries in data.items()
    }


def load_field_mappings(season_year: Optional[int] = None, path: Optional[str] = None) -> List[FieldMapping]:
    """
    Load the field mappings for a season.

    Args:
        season_year: Season to load. Unknown seasons fall back to the default season.
        path: YAML file. Defaults to settings.field_mappings_path.

    Returns:
        List of FieldMapping (empty if neither season is configured)
    """
    seasons = _load_all(path or settings.field_mappings_path)
    year = season_year or settings.default_season_year

    if year not in seasons:
        logger.warning(f"No field mappings for season {year}, using {settings.default_season_year}")
        year = settings.default_season_year

    return list(seasons.get(year, ()))
