"""Command-line entry point: build an example graph, lay it out, print the report."""

from __future__ import annotations

import argparse
import logging
import sys

from sugiyama_trace import config
from sugiyama_trace.examples import EXAMPLES, get_example
from sugiyama_trace.layout import Direction, LayoutError, OrderTrace, layout
from sugiyama_trace.layout import order_trace
from sugiyama_trace.renderers import RENDERERS

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="sugiyama-trace",
        description="Lay out a fixed example graph and print node ranks and per-rank order.",
    )
    parser.add_argument("--example", default="complex", choices=sorted(EXAMPLES), help="Example graph to lay out")
    parser.add_argument("--rankdir", default="TB", choices=[d.value for d in Direction], help="Layout direction")
    parser.add_argument("--format", default="text", choices=sorted(RENDERERS), help="Report format")
    parser.add_argument(
        "--debug-order",
        action="store_true",
        help=f"Log the initial order and every sweep to stderr (or set {config.DEBUG_ORDER_ENV}=true)",
    )
    parser.add_argument("--log-level", choices=config.LOG_LEVELS, help="Log level (default from environment)")
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        settings = config.get_settings()
    except ValueError as exc:
        parser.error(str(exc))
    level = args.log_level or settings["log_level"]
    debug_order = args.debug_order or settings["debug_order"]

    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s", stream=sys.stderr)
    if debug_order:
        logging.getLogger(order_trace.__name__).setLevel(logging.DEBUG)

    graph = get_example(args.example, rankdir=args.rankdir)
    logger.info("laying out example %r (rankdir=%s)", args.example, args.rankdir)

    try:
        layout(graph, trace=OrderTrace(log_steps=debug_order))
    except LayoutError as exc:
        logger.error("layout failed: %s", exc)
        return 1

    print(RENDERERS[args.format]().render(graph))
    return 0


if __name__ == "__main__":
    sys.exit(main())
