"""Command-line entry point: look up school zones, nearest station and ancestry.

Usage:
    cd python
    python main.py "Flinders Street Station, Melbourne"
    python main.py --suggest "12 Brunswick St"
"""
import argparse
import asyncio
import logging
import sys

from propbuddy.config import get_settings
from propbuddy.errors import NotFound
from propbuddy.orchestrator import QueryOrchestrator

logger = logging.getLogger(__name__)


async def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("address", help="free-text address to look up")
    parser.add_argument(
        "--suggest", action="store_true", help="print address suggestions instead"
    )
    args = parser.parse_args(argv)

    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    async with QueryOrchestrator.from_settings(settings) as engine:
        if args.suggest:
            for suggestion in await engine.suggest(args.address):
                print(suggestion.model_dump_json())
            return 0

        try:
            result = await engine.search(args.address)
        except NotFound as exc:
            logger.error("%s", exc)
            return 1

    # Catchment outlines are large; the school names are what gets printed.
    without_geometry = {"primary": {"geometry"}, "secondary": {"geometry"}}
    print(result.model_dump_json(indent=2, exclude={"zone_match_result": without_geometry}))
    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
