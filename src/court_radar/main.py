# main.py
"""Court Radar command-line entry point.

Commands:
    serve   Run the HTTP API with uvicorn.
    scan    Scan a map region and print the prospects found, either as
            a complete plan or live, in radar-sweep order.

Example:
    python -m court_radar scan --south-west 33.50,-112.00 --north-east 33.56,-111.92 --live
"""

import argparse
import asyncio
import json
import sys
from typing import List, Optional, Sequence, Tuple

from .config import config
from .geo import ring_from_geojson
from .logging_utils import get_logger, setup_logging
from .models import BoundingBox, ScheduledReveal
from .scanner import ProspectGenerator, ScanError
from .session import ScanSession, ScanState


def _lat_lng(value: str) -> Tuple[float, float]:
    try:
        lat, lng = (float(part) for part in value.split(","))
    except ValueError:
        raise argparse.ArgumentTypeError(f"Expected LAT,LNG, got {value!r}")
    return lat, lng


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="court-radar", description=__doc__.splitlines()[0])
    subparsers = parser.add_subparsers(dest="command", required=True)

    serve = subparsers.add_parser("serve", help="Run the HTTP API")
    serve.add_argument("--host", default=config.API_HOST)
    serve.add_argument("--port", type=int, default=config.API_PORT)
    serve.add_argument("--reload", action="store_true")

    scan = subparsers.add_parser("scan", help="Scan a map region for residential courts")
    scan.add_argument("--south-west", type=_lat_lng, help="South-west corner as LAT,LNG")
    scan.add_argument("--north-east", type=_lat_lng, help="North-east corner as LAT,LNG")
    scan.add_argument("--area", help="GeoJSON file with the Polygon to scan")
    scan.add_argument("--seed", type=int, help="Seed for a repeatable scan")
    scan.add_argument(
        "--live",
        action="store_true",
        help="Print prospects as the sweep reveals them",
    )
    return parser


def _resolve_region(args: argparse.Namespace) -> Tuple[BoundingBox, Optional[List[Tuple[float, float]]]]:
    polygon = None
    if args.area:
        with open(args.area, encoding="utf-8") as f:
            polygon = ring_from_geojson(json.load(f))
    if args.south_west and args.north_east:
        return BoundingBox.from_corners(args.south_west, args.north_east), polygon
    if polygon:
        return BoundingBox.from_ring(polygon), polygon
    raise ValueError("Give --south-west and --north-east, or --area")


def _print_reveal(reveal: ScheduledReveal) -> None:
    print(json.dumps({
        "bearing": round(reveal.bearing, 2),
        "delay_ms": round(reveal.delay_ms),
        "prospect": reveal.prospect.model_dump(mode="json"),
    }), flush=True)


async def _run_live_scan(
    generator: ProspectGenerator,
    region: BoundingBox,
    polygon: Optional[Sequence[Sequence[float]]],
) -> ScanState:
    session = ScanSession(generator, overlap_policy=config.SCAN_OVERLAP_POLICY)
    await session.start(region, polygon, sink=_print_reveal)
    return await session.wait_complete()


def run_scan(args: argparse.Namespace) -> int:
    logger = get_logger("main")
    region, polygon = _resolve_region(args)
    generator = ProspectGenerator(policy=config.scan_policy(), seed=args.seed)

    if args.live:
        state = asyncio.run(_run_live_scan(generator, region, polygon))
        logger.info("Live scan finished", extra={"state": state.value})
        return 0 if state == ScanState.COMPLETE else 1

    plan = generator.plan(region, polygon)
    print(plan.model_dump_json(indent=2))
    return 0


def run_server(args: argparse.Namespace) -> int:
    import uvicorn

    get_logger("main").info(
        "Starting Court Radar API", extra={"host": args.host, "port": args.port}
    )
    uvicorn.run(
        "court_radar.api:create_app",
        factory=True,
        host=args.host,
        port=args.port,
        reload=args.reload,
        log_config=None,
    )
    return 0


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Main entry point for Court Radar.

    Returns:
        Exit code (0 for success, 1 for failure).
    """
    args = build_parser().parse_args(argv)
    logger = setup_logging(level=config.LOG_LEVEL, service_name="court-radar")

    logger.info(
        "Court Radar starting",
        extra={"app_env": config.APP_ENV, "command": args.command},
    )

    try:
        if args.command == "serve":
            return run_server(args)
        return run_scan(args)
    except (ScanError, ValueError, OSError) as e:
        logger.error(f"Court Radar failed: {e}")
        return 1
    except Exception as e:
        logger.exception(f"Court Radar failed: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
