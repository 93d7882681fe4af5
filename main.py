import argparse
import logging

from meat_inventory.activity import ALL
from meat_inventory.logger import setup_logger
from meat_inventory.pipelines.activity import ActivityReportPipeline
from meat_inventory.pipelines.alerts import InventoryAlertsPipeline
from meat_inventory.schemas import ActivityType, EntityType


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Meat inventory reports")
    parser.add_argument(
        "report",
        choices=["inventory", "activity", "all"],
        nargs="?",
        default="all",
        help="Which report to run (default: all)",
    )
    parser.add_argument(
        "--test", action="store_true", help="Write files but skip the webhook post"
    )
    parser.add_argument(
        "--activity-type",
        default=ALL,
        choices=[ALL] + [a.value for a in ActivityType],
    )
    parser.add_argument(
        "--entity-type",
        default=ALL,
        choices=[ALL] + [e.value for e in EntityType],
    )
    parser.add_argument("--debug", action="store_true")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logger = setup_logger(log_level=logging.DEBUG if args.debug else None)

    pipelines = []
    if args.report in ("inventory", "all"):
        pipelines.append(InventoryAlertsPipeline(test_mode=args.test))
    if args.report in ("activity", "all"):
        pipelines.append(
            ActivityReportPipeline(
                activity_type=args.activity_type,
                entity_type=args.entity_type,
                test_mode=args.test,
            )
        )

    failures = 0
    for pipeline in pipelines:
        if pipeline.run() is None:
            failures += 1

    if failures:
        logger.warning(f"⚠️ {failures} report(s) produced no output.")
    return 1 if failures else 0


if __name__ == "__main__":
    raise SystemExit(main())
