"""Command line entry point for syncing and inspecting the dashboard data."""

import argparse
import logging
import sys
from typing import List, Optional

from .aggregation import CodeReviewSyncer
from .api_client import GitHubAPIClient
from .config import Settings, load_settings
from .errors import ReviewDashboardError
from .exclusions import ExclusionStore
from .output import OutputFormatter
from .snapshot import SnapshotStore
from .storage import JsonFileStore


def configure_logging(level: str):
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format='%(asctime)s %(levelname)s: %(message)s',
        datefmt='%m/%d/%Y %I:%M:%S %p'
    )


def build_syncer(settings: Settings) -> CodeReviewSyncer:
    """Wire the client and stores described by settings into a syncer."""
    store = JsonFileStore(settings.data_dir)
    client = GitHubAPIClient(settings.owner, settings.repo, settings.token, settings.api_url)
    return CodeReviewSyncer(
        client,
        SnapshotStore(store, settings.snapshot_file),
        ExclusionStore(store, settings.exclusions_file),
    )


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog='review-dashboard',
        description='Sync pull request review statistics for a GitHub repository.',
    )
    sub = p.add_subparsers(dest='command')

    sub.add_parser('sync', help='Fetch the last 14 days from GitHub and rebuild the snapshot.')
    show = sub.add_parser('show', help='Print the current snapshot (default).')
    show.add_argument('--comments', action='store_true', help='Also list review comments.')
    show.add_argument('--days', type=int, default=7, help='Days shown in the review table.')
    sub.add_parser('recalculate', help='Re-apply exclusions to the stored PRs without fetching.')
    sub.add_parser('exclusions', help='List excluded PR numbers.')
    toggle = sub.add_parser('toggle', help='Exclude a PR, or include it again if already excluded.')
    toggle.add_argument('pr_number', type=int, help='Number of the PR to toggle.')
    return p


def main(argv: Optional[List[str]] = None) -> int:
    args = _build_parser().parse_args(sys.argv[1:] if argv is None else argv)
    command = args.command or 'show'

    try:
        settings = load_settings()
        configure_logging(settings.log_level)
        syncer = build_syncer(settings)

        if command == 'sync':
            snapshot = syncer.sync()
            OutputFormatter(syncer.exclusions.get_excluded_set()).print_summary(snapshot)
        elif command == 'recalculate':
            snapshot = syncer.recalculate_with_exclusions()
            OutputFormatter(syncer.exclusions.get_excluded_set()).print_summary(snapshot)
        elif command == 'exclusions':
            exclusions = syncer.exclusions.get()
            if exclusions.excluded:
                print("Excluded PRs: " + ', '.join(f"#{n}" for n in sorted(exclusions.excluded)))
            else:
                print("No PRs are excluded.")
            print(f"Last modified: {exclusions.last_modified or 'never'}")
        elif command == 'toggle':
            exclusions = syncer.toggle_exclusion(args.pr_number)
            state = 'excluded' if exclusions.contains(args.pr_number) else 'included'
            print(f"PR #{args.pr_number} is now {state}")
        else:
            formatter = OutputFormatter(
                syncer.exclusions.get_excluded_set(),
                show_comments=getattr(args, 'comments', False),
                recent_days=getattr(args, 'days', 7),
            )
            formatter.print_summary(syncer.get_synced_data())
    except ReviewDashboardError as e:
        logging.error(str(e))
        return 1

    return 0
