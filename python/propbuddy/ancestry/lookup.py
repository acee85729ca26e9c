"""Static suburb ancestry dataset and name-based lookup.

The dataset is a JSON object keyed by suburb name::

    {
        "Fitzroy": {
            "total_population": 10445,
            "ancestries": [{"group": "English", "percent": 28.1}, ...]
        },
        ...
    }

Ancestry lists are expected to be stored largest share first; they are kept
in stored order and cut to the first ``MAX_ANCESTRIES`` entries on lookup.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, ValidationError

from propbuddy.errors import MalformedAncestryData
from propbuddy.models import AncestryEntry, AncestryRecord

logger = logging.getLogger(__name__)

MAX_ANCESTRIES = 5


class _SuburbAncestry(BaseModel):
    model_config = ConfigDict(extra="ignore")

    total_population: int
    ancestries: list[AncestryEntry]


class AncestryDataset:
    """Read-only mapping of suburb name -> ancestry profile, in file order."""

    def __init__(self, records: dict[str, _SuburbAncestry] | None = None) -> None:
        self._records: dict[str, _SuburbAncestry] = dict(records or {})

    def __len__(self) -> int:
        return len(self._records)

    def keys(self) -> list[str]:
        return list(self._records)

    def get(self, key: str) -> Optional[_SuburbAncestry]:
        return self._records.get(key)

    @classmethod
    def from_mapping(cls, document: Any, source: str = "<memory>") -> "AncestryDataset":
        """Validate a decoded dataset; invalid suburbs are skipped with a warning.

        Raises:
            MalformedAncestryData: *document* is not a JSON object.
        """
        if not isinstance(document, dict):
            raise MalformedAncestryData(source, "expected a JSON object keyed by suburb")

        records: dict[str, _SuburbAncestry] = {}
        for suburb, raw in document.items():
            try:
                records[suburb] = _SuburbAncestry.model_validate(raw)
            except ValidationError as exc:
                logger.warning("%s: skipping suburb %r: %s", source, suburb, exc.errors()[0]["msg"])
        return cls(records)

    @classmethod
    def load(cls, path: str | Path) -> "AncestryDataset":
        """Read the dataset file; a missing or malformed file yields an empty dataset."""
        path = Path(path)
        try:
            document = json.loads(path.read_text(encoding="utf-8"))
            dataset = cls.from_mapping(document, source=str(path))
        except (OSError, ValueError, MalformedAncestryData) as exc:
            logger.error("Failed to load ancestry dataset from %s: %s", path, exc)
            return cls()
        logger.info("Loaded ancestry data for %d suburbs from %s", len(dataset), path)
        return dataset


class AncestryLookup:
    """Case-insensitive suburb lookup over an AncestryDataset."""

    def __init__(self, dataset: AncestryDataset) -> None:
        self._dataset = dataset

    def find_key(self, suburb_name: str) -> Optional[str]:
        """Exact case-insensitive key first, else the first key containing it.

        The substring fallback depends on dataset order when several keys
        contain the query ("Richmond" also matches "North Richmond").
        """
        normalized = suburb_name.strip().lower()
        if not normalized:
            return None

        keys = self._dataset.keys()
        for key in keys:
            if key.lower() == normalized:
                return key
        for key in keys:
            if normalized in key.lower():
                return key
        return None

    def lookup(self, suburb_name: Optional[str]) -> Optional[AncestryRecord]:
        """Return the ancestry profile for *suburb_name*, or None if unknown."""
        if not suburb_name:
            return None
        key = self.find_key(suburb_name)
        if key is None:
            logger.debug("No ancestry data for suburb %r", suburb_name)
            return None

        raw = self._dataset.get(key)
        return AncestryRecord(
            suburb_key=key,
            total_population=raw.total_population,
            ancestries=tuple(raw.ancestries[:MAX_ANCESTRIES]),
        )
