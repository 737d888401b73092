import argparse
import json
import logging
import sys

from hexworld import ConfigurationError, WorldSettings, generate_world
from pathing import NoPathFound, find_path

logger = logging.getLogger("hexciv")


def main() -> None:
    parser = argparse.ArgumentParser(
        description="Generate a hex world map and optionally preview it."
    )
    parser.add_argument("--seed", type=int, default=0, help="Map seed shared by every peer")
    parser.add_argument("--width", type=int, default=40, help="Map width in columns")
    parser.add_argument("--height", type=int, default=24, help="Map height in rows")
    parser.add_argument("--wrap", action="store_true", help="Join the east and west edges")
    parser.add_argument("--land-ratio", type=float, default=None, help="Approximate share of land (0-1)")
    parser.add_argument(
        "--no-preview",
        action="store_true",
        help="Skip the preview window and only log a summary",
    )
    parser.add_argument("--json", metavar="PATH", help="Write the generated tiles to a JSON file")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log each generation stage")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(name)s %(levelname)s: %(message)s",
    )

    try:
        world_map = generate_world(
            args.seed,
            args.width,
            args.height,
            wrap=args.wrap,
            settings=WorldSettings(land_ratio=args.land_ratio),
        )
    except ConfigurationError as exc:
        parser.error(str(exc))
        return

    for terrain, count in world_map.terrain_counts().items():
        if count:
            logger.info("%-10s %5d", terrain.value, count)
    logger.info("River edges: %d", world_map.river_edge_count())

    starts = world_map.starting_positions()
    if len(starts) >= 2:
        result = find_path(world_map, starts[0], starts[-1])
        if isinstance(result, NoPathFound):
            logger.info("No land route between %s and %s", starts[0], starts[-1])
        else:
            logger.info("Land route %s -> %s: %d steps, cost %.1f", result.start, result.goal, result.steps, result.cost)

    if args.json:
        with open(args.json, "w", encoding="utf-8") as fh:
            json.dump(world_map.to_json(), fh)
        logger.info("Wrote %s", args.json)

    if args.no_preview:
        return

    from ui.map_view import MapView

    view = MapView(world_map)
    selected = view.run()
    if selected is not None:
        print(f"Last selected tile: {world_map.get(selected)!r}")


if __name__ == "__main__":
    sys.exit(main())
