"""Derived statistics computed from synced pull request data.

Every function here is pure: it takes records and the exclusion set and
returns a fresh view.
"""

import logging
import math
from collections import defaultdict
from datetime import datetime
from typing import Dict, Iterable, List, Optional, Set

from ..models import (
    ContributorPR,
    ContributorStats,
    PullRequestRecord,
    ReviewComment,
    ReviewerStats,
    ReviewEvent,
    SizeStats,
)
from .windows import parse_timestamp, seeded_counts

SECONDS_PER_DAY = 24 * 60 * 60


def round_half_up(value: float, digits: int = 0):
    """Round halves away from zero (2.5 -> 3, 0.25 -> 0.3 at one digit).

    Returns an int when digits is 0.
    """
    factor = 10 ** digits
    rounded = math.floor(abs(value) * factor + 0.5) / factor
    rounded = math.copysign(rounded, value)
    if digits == 0:
        return int(rounded)
    return rounded


def pr_author_map(pull_requests: Iterable[PullRequestRecord]) -> Dict[int, str]:
    """Map PR number to author login for PRs that have an author."""
    return {pr.number: pr.author for pr in pull_requests if pr.author}


def calculate_pr_size_stats(pull_requests: List[PullRequestRecord],
                            excluded: Set[int]) -> Dict[str, SizeStats]:
    """Summarize the size (additions + deletions) of each author's PRs.

    Args:
        pull_requests: PRs from the last sync
        excluded: PR numbers to leave out

    Returns:
        Dictionary mapping author to their size stats
    """
    sizes_by_author: Dict[str, List[int]] = defaultdict(list)

    for pr in pull_requests:
        if not pr.author:
            logging.debug(f"Skipping PR #{pr.number} with no author")
            continue

        if pr.number in excluded:
            logging.debug(f"Skipping excluded PR #{pr.number} by {pr.author}")
            continue

        sizes_by_author[pr.author].append(pr.size)

    return {
        author: SizeStats(
            min=min(sizes),
            max=max(sizes),
            avg=round_half_up(sum(sizes) / len(sizes)),
            count=len(sizes),
        )
        for author, sizes in sizes_by_author.items()
    }


def calculate_days_to_merge(pr: PullRequestRecord, now: datetime) -> Optional[int]:
    """Days from creation to merge, age in days for open PRs, None for closed unmerged PRs."""
    created = parse_timestamp(pr.created_at)
    if pr.merged_at:
        end = parse_timestamp(pr.merged_at)
    elif pr.state == 'open':
        end = now
    else:
        return None

    return math.ceil((end - created).total_seconds() / SECONDS_PER_DAY)


def calculate_contributor_stats(pull_requests: List[PullRequestRecord], excluded: Set[int],
                                dates: List[str], now: datetime) -> List[ContributorStats]:
    """Build per-author PR activity for PRs created within the window.

    Args:
        pull_requests: PRs from the last sync
        excluded: PR numbers to leave out
        dates: ISO dates of the window, oldest first
        now: Current time, used for the age of open PRs

    Returns:
        Contributor stats sorted by total PRs, most active first
    """
    stats_by_author: Dict[str, ContributorStats] = {}
    first_date, last_date = dates[0], dates[-1]

    for pr in pull_requests:
        if not pr.author or pr.number in excluded:
            continue

        created_date = pr.created_at[:10]
        if created_date < first_date or created_date > last_date:
            continue

        stats = stats_by_author.get(pr.author)
        if stats is None:
            stats = ContributorStats(author=pr.author, prs_by_date=seeded_counts(dates))
            stats_by_author[pr.author] = stats

        stats.prs_by_date[created_date] += 1
        stats.prs.append(ContributorPR(
            number=pr.number,
            title=pr.title,
            url=pr.url,
            created_at=pr.created_at,
            merged_at=pr.merged_at,
            state=pr.state,
            days_to_merge=calculate_days_to_merge(pr, now),
            review_comment_count=pr.review_comment_count,
        ))
        stats.total_prs += 1

    for stats in stats_by_author.values():
        merge_times = [pr.days_to_merge for pr in stats.prs if pr.days_to_merge is not None]
        if merge_times:
            stats.avg_days_to_merge = round_half_up(sum(merge_times) / len(merge_times), 1)

        comment_counts = [pr.review_comment_count for pr in stats.prs]
        stats.avg_review_comments = (
            round_half_up(sum(comment_counts) / len(comment_counts), 1) if comment_counts else 0
        )

    return sorted(stats_by_author.values(), key=lambda stats: stats.total_prs, reverse=True)


def calculate_review_counts(reviews: List[ReviewEvent], pr_authors: Dict[int, str],
                            dates: List[str]) -> Dict[str, Dict[str, int]]:
    """Count reviews per reviewer and submission day, ignoring self-reviews.

    Args:
        reviews: Review events from the last sync
        pr_authors: PR number to author login
        dates: ISO dates of the window, oldest first

    Returns:
        Dictionary mapping reviewer to {date: review count}
    """
    counts: Dict[str, Dict[str, int]] = {}
    window = set(dates)

    for review in reviews:
        review_date = review.submitted_date
        if review_date not in window:
            continue

        if pr_authors.get(review.pr_number) == review.reviewer:
            logging.debug(f"Skipping self-review by {review.reviewer} on their own PR #{review.pr_number}")
            continue

        if review.reviewer not in counts:
            counts[review.reviewer] = seeded_counts(dates)
        counts[review.reviewer][review_date] += 1

    return counts


def calculate_reviewer_stats(reviews: List[ReviewEvent], comments: List[ReviewComment],
                             pr_authors: Dict[int, str]) -> Dict[str, ReviewerStats]:
    """Summarize how many PRs each reviewer reviewed and how much they commented.

    Comments are expected to already exclude the PR author's own comments.
    """
    prs_by_reviewer: Dict[str, Set[int]] = defaultdict(set)
    for review in reviews:
        if pr_authors.get(review.pr_number) == review.reviewer:
            continue
        prs_by_reviewer[review.reviewer].add(review.pr_number)

    comments_by_reviewer: Dict[str, int] = defaultdict(int)
    for comment in comments:
        if not comment.author or pr_authors.get(comment.pr_number) == comment.author:
            continue
        comments_by_reviewer[comment.author] += 1

    result = {}
    for reviewer in sorted(set(prs_by_reviewer) | set(comments_by_reviewer)):
        prs_reviewed = len(prs_by_reviewer.get(reviewer, ()))
        total_comments = comments_by_reviewer.get(reviewer, 0)
        result[reviewer] = ReviewerStats(
            reviewer=reviewer,
            total_prs_reviewed=prs_reviewed,
            total_review_comments=total_comments,
            avg_comments_per_pr=round_half_up(total_comments / prs_reviewed, 1) if prs_reviewed else 0,
        )

    return result
