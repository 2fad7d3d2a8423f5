"""Sync pipeline: pulls PR history from GitHub and folds it into the snapshot."""

import logging
from dataclasses import replace
from datetime import datetime, timezone
from threading import Lock
from typing import Callable, List

from ..exclusions import ExclusionStore, utc_now
from ..models import ExclusionSet, PullRequestRecord, Snapshot, SnapshotState
from ..snapshot import SnapshotStore
from .stats import (
    calculate_contributor_stats,
    calculate_pr_size_stats,
    calculate_review_counts,
    calculate_reviewer_stats,
    pr_author_map,
)
from .windows import WINDOW_DAYS, date_window, window_start


class CodeReviewSyncer:
    """Runs syncs and exclusion recalculations against the snapshot."""

    def __init__(self, client, snapshots: SnapshotStore, exclusions: ExclusionStore,
                 clock: Callable[[], datetime] = None):
        """Initialize the syncer.

        Args:
            client: GitHubAPIClient (or compatible) for the configured repository
            snapshots: Store holding the aggregated snapshot
            exclusions: Store holding the excluded PR numbers
            clock: Returns the current aware datetime; defaults to UTC now
        """
        self.client = client
        self.snapshots = snapshots
        self.exclusions = exclusions
        self.clock = clock or utc_now

        # Only one sync per process; the persisted status covers other callers
        self._sync_lock = Lock()

    def get_synced_data(self) -> Snapshot:
        return self.snapshots.read()

    def _date_range(self, now: datetime) -> List[str]:
        return date_window(now.astimezone(timezone.utc).date(), WINDOW_DAYS)

    def sync(self) -> Snapshot:
        """Fetch the trailing window from GitHub and rebuild every view.

        Returns the current snapshot untouched when a sync is already running.
        On failure the previous data is kept with status ``error`` and the
        exception is re-raised.

        Returns:
            The new snapshot
        """
        if not self._sync_lock.acquire(blocking=False):
            logging.info("Sync already running in this process, returning current snapshot")
            return self.snapshots.read()

        try:
            previous = self.snapshots.read()
            if previous.status == SnapshotState.SYNCING:
                logging.info("Snapshot is already syncing, skipping")
                return previous

            self.snapshots.write(replace(previous, status=SnapshotState.SYNCING))

            try:
                snapshot = self._build_snapshot()
            except Exception as e:
                logging.error(f"Sync of {self.client.full_name} failed: {e}", exc_info=True)
                self.snapshots.write(replace(self.snapshots.read(), status=SnapshotState.ERROR))
                raise

            self.snapshots.write(snapshot)
            logging.info(f"Sync complete: {len(snapshot.pull_requests)} PRs, "
                         f"{len(snapshot.review_counts)} reviewers")
            return snapshot
        finally:
            self._sync_lock.release()

    def _build_snapshot(self) -> Snapshot:
        now = self.clock()
        dates = self._date_range(now)

        print(f"Syncing {self.client.full_name} for {dates[0]} to {dates[-1]}...")
        self.client.verify_access()

        recent_prs = self.client.list_recent_pull_requests(window_start(dates))
        details = self.client.fetch_details(recent_prs)
        comment_counts, review_comments = self.client.fetch_review_comments(details)
        reviews = self.client.fetch_reviews(details)

        excluded = self.exclusions.get_excluded_set()

        pull_requests = [
            PullRequestRecord.from_api(pr, comment_counts.get(pr['number'], 0))
            for pr in details
        ]
        pr_authors = pr_author_map(pull_requests)

        return Snapshot(
            status=SnapshotState.SYNCED,
            last_synced=now.isoformat(),
            review_counts=calculate_review_counts(reviews, pr_authors, dates),
            pr_size_stats=calculate_pr_size_stats(pull_requests, excluded),
            pull_requests=pull_requests,
            pr_contributor_stats=calculate_contributor_stats(pull_requests, excluded, dates, now),
            reviewer_stats=calculate_reviewer_stats(reviews, review_comments, pr_authors),
            review_comments=review_comments,
        )

    def recalculate_with_exclusions(self) -> Snapshot:
        """Re-derive the author-keyed views from the stored PRs with current exclusions.

        Makes no remote calls. Review counts are day-keyed without a link back
        to PRs, so they keep their last synced values.

        Returns:
            The updated snapshot, or the stored one if no PRs were synced yet
        """
        snapshot = self.snapshots.read()
        if not snapshot.pull_requests:
            logging.info("No synced PRs to recalculate")
            return snapshot

        now = self.clock()
        dates = self._date_range(now)
        excluded = self.exclusions.get_excluded_set()

        snapshot = replace(
            snapshot,
            pr_size_stats=calculate_pr_size_stats(snapshot.pull_requests, excluded),
            pr_contributor_stats=calculate_contributor_stats(
                snapshot.pull_requests, excluded, dates, now
            ),
        )
        self.snapshots.write(snapshot)
        logging.info(f"Recalculated stats with {len(excluded)} excluded PRs")
        return snapshot

    def toggle_exclusion(self, pr_number: int) -> ExclusionSet:
        """Flip a PR's exclusion and refresh the affected views."""
        exclusions = self.exclusions.toggle(pr_number)
        self.recalculate_with_exclusions()
        return exclusions
