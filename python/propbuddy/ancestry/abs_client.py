"""AbsAncestryClient: live ancestry counts from the ABS SDMX data API.

Queries the 2021 Census ancestry dataflow (``ABS,ANCP,1.0.0``) for one
Suburbs and Localities (SAL) code and aggregates observation counts by
ancestry name. Complements the static ``AncestryDataset`` for suburbs the
dataset does not cover.

Any failure (transport, non-2xx, unexpected SDMX-JSON shape) is logged and
yields an empty list. Nothing is retried.
"""
from __future__ import annotations

import logging
from typing import Any

import httpx

from propbuddy.config import Settings
from propbuddy.models import AncestryCount

logger = logging.getLogger(__name__)

DATAFLOW = "ABS,ANCP,1.0.0"
ANCESTRY_DIMENSION = "ANCESTRY"
START_PERIOD = "2021"


def aggregate_ancestry_counts(payload: dict[str, Any]) -> dict[str, float]:
    """Sum SDMX-JSON observation values per ancestry name.

    Observation keys are colon-separated dimension indices; the component at
    the ANCESTRY dimension's position indexes that dimension's values.

    Raises:
        KeyError, IndexError, TypeError, ValueError: *payload* is not the
            expected SDMX-JSON shape.
    """
    # SDMX-JSON 2.0 wraps everything in "data"; 1.0 does not.
    body = payload.get("data", payload)
    dimensions = body["structure"]["dimensions"]["observation"]
    ids = [dim["id"] for dim in dimensions]
    if ANCESTRY_DIMENSION not in ids:
        raise KeyError(ANCESTRY_DIMENSION)
    position = ids.index(ANCESTRY_DIMENSION)
    values = dimensions[position]["values"]

    data_sets = body.get("dataSets") or []
    observations = data_sets[0].get("observations") if data_sets else None
    if not observations:
        return {}

    counts: dict[str, float] = {}
    for key, observation in observations.items():
        index = int(key.split(":")[position])
        name = values[index].get("name") if index < len(values) else None
        if not name:
            continue
        counts[name] = counts.get(name, 0) + (observation[0] or 0)
    return counts


class AbsAncestryClient:
    """Async client for ``{abs_base_url}/data/ABS,ANCP,1.0.0/...``."""

    def __init__(self, settings: Settings) -> None:
        self._client = httpx.AsyncClient(
            base_url=settings.abs_base_url,
            headers={"Accept": "application/json"},
            timeout=httpx.Timeout(settings.http_timeout_seconds, connect=10.0),
        )

    async def __aenter__(self) -> "AbsAncestryClient":
        return self

    async def __aexit__(self, *args: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def top_ancestries(self, sal_code: str, limit: int = 3) -> list[AncestryCount]:
        """Return the *limit* most common ancestries for *sal_code*, largest first.

        Args:
            sal_code: ABS Suburbs and Localities code, e.g. "SAL20830".
            limit: Number of ancestries to return.

        Returns:
            AncestryCount list; empty on any failure.
        """
        path = f"/data/{DATAFLOW}/{ANCESTRY_DIMENSION}.ALL.{sal_code}"
        try:
            response = await self._client.get(
                path, params={"startPeriod": START_PERIOD, "format": "jsondata"}
            )
            response.raise_for_status()
            counts = aggregate_ancestry_counts(response.json())
        except httpx.HTTPError as exc:
            logger.warning("ABS ancestry request failed for %s: %s", sal_code, exc)
            return []
        except (KeyError, IndexError, TypeError, ValueError, AttributeError) as exc:
            logger.warning("Unexpected ABS ancestry payload for %s: %r", sal_code, exc)
            return []

        ranked = sorted(counts.items(), key=lambda item: item[1], reverse=True)
        return [AncestryCount(ancestry=name, count=count) for name, count in ranked[:limit]]
