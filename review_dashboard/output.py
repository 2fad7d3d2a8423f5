"""Terminal report for the synced snapshot."""

from typing import Dict, List, Set

from .models import UNKNOWN_AUTHOR, ContributorStats, ReviewerStats, SizeStats, Snapshot, SnapshotState


# ANSI color codes
GREEN = '\033[92m'
YELLOW = '\033[93m'
RED = '\033[91m'
CYAN = '\033[96m'
BOLD = '\033[1m'
RESET = '\033[0m'

STATUS_COLORS = {
    SnapshotState.SYNCED: GREEN,
    SnapshotState.SYNCING: YELLOW,
    SnapshotState.ERROR: RED,
    SnapshotState.NOT_SYNCED: YELLOW,
}


class OutputFormatter:
    """Formats and prints the snapshot views."""

    def __init__(self, excluded: Set[int] = None, show_comments: bool = False, recent_days: int = 7):
        """Initialize the output formatter.

        Args:
            excluded: PR numbers currently excluded, marked in the PR listing
            show_comments: Whether to print the review comment listing
            recent_days: How many of the most recent days to show in the review table
        """
        self.excluded = excluded or set()
        self.show_comments = show_comments
        self.recent_days = recent_days

    def print_summary(self, snapshot: Snapshot):
        """Print every section of the snapshot."""
        print("\n" + "="*80)
        color = STATUS_COLORS.get(snapshot.status, '')
        print(f"CODE REVIEW DASHBOARD  status: {color}{snapshot.status.value}{RESET}"
              f"  last synced: {snapshot.last_synced or 'never'}")
        print("="*80)

        if snapshot.status == SnapshotState.NOT_SYNCED and not snapshot.pull_requests:
            print("\nNo data yet. Run a sync first.")
            return

        self._print_review_counts(snapshot.review_counts)
        self._print_pr_sizes(snapshot.pr_size_stats)
        self._print_contributors(snapshot.pr_contributor_stats)
        self._print_reviewers(snapshot.reviewer_stats)
        self._print_pull_requests(snapshot)

        if self.show_comments:
            self._print_review_comments(snapshot)

    def _print_review_counts(self, review_counts: Dict[str, Dict[str, int]]):
        print(f"\n{BOLD}Reviews per day{RESET}")
        if not review_counts:
            print("  No reviews in the window.")
            return

        dates = sorted(next(iter(review_counts.values())).keys())[-self.recent_days:]
        header = ''.join(f"{day[5:]:>7}" for day in dates)
        print(f"{'Reviewer':<20}{header}{'Total':>8}")
        print(f"{'-'*(28 + 7 * len(dates))}")

        rows = sorted(review_counts.items(), key=lambda item: sum(item[1].values()), reverse=True)
        for reviewer, counts in rows:
            cells = ''.join(f"{counts.get(day, 0):>7}" for day in dates)
            print(f"{reviewer:<20}{cells}{sum(counts.values()):>8}")

    def _print_pr_sizes(self, size_stats: Dict[str, SizeStats]):
        print(f"\n{BOLD}PR sizes (lines changed){RESET}")
        if not size_stats:
            print("  No PRs.")
            return

        print(f"{'Author':<20} {'PRs':>5} {'Min':>8} {'Avg':>8} {'Max':>8}")
        print(f"{'-'*52}")
        for author, stats in sorted(size_stats.items(), key=lambda item: item[1].avg, reverse=True):
            avg_color = RED if stats.avg > 500 else YELLOW if stats.avg > 200 else GREEN
            print(f"{author:<20} {stats.count:>5} {stats.min:>8} "
                  f"{avg_color}{stats.avg:>8}{RESET} {stats.max:>8}")

    def _print_contributors(self, contributors: List[ContributorStats]):
        print(f"\n{BOLD}Contributors{RESET}")
        if not contributors:
            print("  No PRs opened in the window.")
            return

        print(f"{'Author':<20} {'PRs':>5} {'Avg days to merge':>18} {'Avg comments':>13}")
        print(f"{'-'*59}")
        for stats in contributors:
            avg_days = '-' if stats.avg_days_to_merge is None else f"{stats.avg_days_to_merge:.1f}"
            print(f"{stats.author:<20} {stats.total_prs:>5} {avg_days:>18} {stats.avg_review_comments:>13.1f}")

    def _print_reviewers(self, reviewer_stats: Dict[str, ReviewerStats]):
        print(f"\n{BOLD}Reviewers{RESET}")
        if not reviewer_stats:
            print("  No reviews.")
            return

        print(f"{'Reviewer':<20} {'PRs reviewed':>13} {'Comments':>9} {'Per PR':>7}")
        print(f"{'-'*52}")
        rows = sorted(reviewer_stats.values(), key=lambda stats: stats.total_prs_reviewed, reverse=True)
        for stats in rows:
            print(f"{stats.reviewer:<20} {stats.total_prs_reviewed:>13} "
                  f"{stats.total_review_comments:>9} {stats.avg_comments_per_pr:>7.1f}")

    def _print_pull_requests(self, snapshot: Snapshot):
        print(f"\n{BOLD}Pull requests ({len(snapshot.pull_requests)}){RESET}")
        for pr in sorted(snapshot.pull_requests, key=lambda pr: pr.number, reverse=True):
            marker = f"{RED}[excluded]{RESET} " if pr.number in self.excluded else ''
            state = 'merged' if pr.merged_at else pr.state
            print(f"  {marker}#{pr.number} {pr.title} ({pr.author or UNKNOWN_AUTHOR}, "
                  f"+{pr.additions}/-{pr.deletions}, {state})")

    def _print_review_comments(self, snapshot: Snapshot):
        print(f"\n{BOLD}Review comments ({len(snapshot.review_comments)}){RESET}")
        for comment in sorted(snapshot.review_comments, key=lambda c: c.created_at, reverse=True):
            location = f"{comment.path}:{comment.line}" if comment.line is not None else (comment.path or '')
            body = comment.body.strip().splitlines()[0] if comment.body.strip() else ''
            print(f"  {CYAN}{comment.author or UNKNOWN_AUTHOR}{RESET} on #{comment.pr_number} {location}")
            print(f"    {body[:100]}")
