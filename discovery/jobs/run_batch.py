"""CLI job that runs business discovery for several industries in one location."""

import argparse
import json
import logging
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

from discovery.core.config import get_settings
from discovery.jobs.discover import discover_businesses

logger = logging.getLogger(__name__)

DEFAULT_INDUSTRIES = (
    "Plumber",
    "Electrician",
    "HVAC Contractor",
    "Roofer",
    "General Contractor",
    "Landscaper",
    "Pest Control",
    "House Cleaner",
)


@dataclass
class BatchResults:
    total_found: int = 0
    total_enriched: int = 0
    total_saved: int = 0
    industry_results: Dict[str, Any] = field(default_factory=dict)
    errors: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "totalBusinessesFound": self.total_found,
            "totalBusinessesEnriched": self.total_enriched,
            "totalSavedToAirtable": self.total_saved,
            "industryResults": self.industry_results,
            "errors": self.errors,
        }


def run_batch_discovery(
    *,
    industries: Sequence[str],
    location: str,
    radius: Optional[float],
    max_results: Optional[int],
    delay: float,
) -> BatchResults:
    settings = get_settings()
    missing = settings.missing_credentials()
    if missing:
        raise RuntimeError(f"Missing environment variables: {', '.join(missing)}")

    results = BatchResults()
    for index, industry in enumerate(industries, start=1):
        logger.info("[%d/%d] Discovering %s businesses in %s", index, len(industries), industry, location)
        try:
            discovery = discover_businesses(
                industry, location, radius=radius, max_results=max_results, settings=settings
            )
        except Exception as exc:  # noqa: BLE001
            message = f"Failed to process {industry}: {exc}"
            logger.error(message)
            results.errors.append(message)
        else:
            results.industry_results[industry] = discovery.to_dict()
            results.total_found += discovery.total_found
            results.total_enriched += len(discovery.businesses)
            results.total_saved += discovery.saved_to_crm
            logger.info(
                "%s: found %d, enriched %d, saved %d",
                industry,
                discovery.total_found,
                len(discovery.businesses),
                discovery.saved_to_crm,
            )

        if index < len(industries) and delay > 0:
            time.sleep(delay)

    return results


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Run business discovery for several industries")
    parser.add_argument(
        "--industry",
        dest="industries",
        action="append",
        help="Industry to search (repeatable, defaults to common home-service trades)",
    )
    parser.add_argument("--location", required=True, help='Location to search, e.g. "Amarillo, TX"')
    parser.add_argument("--radius", type=float, help="Search radius in miles")
    parser.add_argument("--max-results", dest="max_results", type=int, default=5, help="Maximum results per industry")
    parser.add_argument("--delay", type=float, default=2.0, help="Seconds to wait between industries")
    parser.add_argument("--output", type=Path, default=Path("discovery-results.json"), help="Where to write the JSON summary")
    return parser


def main(argv: Optional[Sequence[str]] = None) -> None:
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s - %(message)s")
    args = build_parser().parse_args(argv)

    started = time.monotonic()
    results = run_batch_discovery(
        industries=args.industries or list(DEFAULT_INDUSTRIES),
        location=args.location,
        radius=args.radius,
        max_results=args.max_results,
        delay=args.delay,
    )
    logger.info(
        "Batch complete in %.1fs: found=%d enriched=%d saved=%d errors=%d",
        time.monotonic() - started,
        results.total_found,
        results.total_enriched,
        results.total_saved,
        len(results.errors),
    )

    args.output.write_text(json.dumps(results.to_dict(), indent=2), encoding="utf-8")
    logger.info("Detailed results saved to %s", args.output)


if __name__ == "__main__":
    main()
