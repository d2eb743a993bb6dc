"""
SongScout command line.

Examples::

    songscout search clip.mp3
    songscout search clip.wav --rank text
    songscout record --seconds 8 --save data/downloads
"""

import argparse
import asyncio
import logging
import sys

from songscout.core.config import get_settings
from songscout.core.models import Notification, RankingDimension, Severity
from songscout.services.notifications import BaseNotifier
from songscout.services.orchestrator import SearchOrchestrator, create_orchestrator
from songscout.services.search.ranking import display_score, rank_label, score_label

logger = logging.getLogger(__name__)


class ConsoleNotifier(BaseNotifier):
    """Prints notifications to stderr and remembers whether any was destructive."""

    def __init__(self) -> None:
        self.failed = False

    def notify(self, notification: Notification) -> None:
        if notification.severity == Severity.destructive:
            self.failed = True
        print(f"{notification.title} {notification.description}", file=sys.stderr)


def print_results(orchestrator: SearchOrchestrator) -> None:
    """Print the ranked results, one line per candidate."""
    results = orchestrator.results
    if not results:
        print("No matching songs found.")
        return

    dimension = orchestrator.dimension
    label = score_label(dimension)
    for index, candidate in enumerate(results):
        print(
            f"{rank_label(index):>4}  {label}: {display_score(candidate, dimension)}  "
            f"{candidate.title}  {candidate.url or ''}".rstrip()
        )


async def _search(orchestrator: SearchOrchestrator, args: argparse.Namespace) -> None:
    if args.command == "record":
        if not await orchestrator.start_capture():
            return
        print(f"Recording for {args.seconds:g}s...", file=sys.stderr)
        await asyncio.sleep(args.seconds)
        if await orchestrator.stop_capture() is None:
            return
        if args.save:
            print(f"Saved {orchestrator.download(args.save)}", file=sys.stderr)
    elif not orchestrator.upload_path(args.file):
        return

    await orchestrator.submit()
    orchestrator.set_ranking_dimension(args.rank)
    print_results(orchestrator)


async def run(args: argparse.Namespace) -> int:
    """Execute one CLI command. Returns the process exit code."""
    notifier = ConsoleNotifier()
    orchestrator = create_orchestrator(notifier=notifier, api_url=args.api_url)
    try:
        await _search(orchestrator, args)
    finally:
        await orchestrator.aclose()
    return 1 if notifier.failed else 0


def _add_search_options(parser: argparse.ArgumentParser, default=None) -> None:
    """Options accepted both before and after the subcommand name."""
    parser.add_argument(
        "--api-url",
        default=default,
        help="Retrieval service URL (default: settings)",
    )
    parser.add_argument(
        "--rank",
        choices=[d.value for d in RankingDimension],
        default=default or RankingDimension.final.value,
        help="Score used to order the results (default: final)",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="songscout",
        description="Find songs matching a short audio clip.",
    )
    _add_search_options(parser)

    # SUPPRESS keeps a subcommand from overwriting values given before it
    common = argparse.ArgumentParser(add_help=False)
    _add_search_options(common, default=argparse.SUPPRESS)

    sub = parser.add_subparsers(dest="command", required=True)

    search = sub.add_parser("search", parents=[common], help="Search with an audio file")
    search.add_argument("file", help="Path to an audio file")

    record = sub.add_parser(
        "record", parents=[common], help="Record from the microphone, then search"
    )
    record.add_argument("--seconds", type=float, default=8.0, help="Recording length")
    record.add_argument("--save", default=None, help="Also save the recording to this folder")

    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=get_settings().log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    return asyncio.run(run(args))


if __name__ == "__main__":
    sys.exit(main())
