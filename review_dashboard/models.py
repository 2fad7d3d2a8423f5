"""Data models for pull request sync and review statistics."""

from dataclasses import dataclass, field, asdict
from enum import Enum
from typing import Dict, List, Optional, Set

UNKNOWN_AUTHOR = 'unknown'


class SnapshotState(Enum):
    NOT_SYNCED = 'not-synced'
    SYNCING = 'syncing'
    SYNCED = 'synced'
    ERROR = 'error'

    @classmethod
    def parse(cls, value: Optional[str]) -> 'SnapshotState':
        """Parse a stored status, treating unknown or missing values as not synced."""
        try:
            return cls(value)
        except ValueError:
            return cls.NOT_SYNCED


@dataclass
class PullRequestRecord:
    """A pull request touched within the sync window."""
    number: int
    title: str
    url: str
    author: Optional[str]
    additions: int = 0
    deletions: int = 0
    created_at: str = ''
    merged_at: Optional[str] = None
    state: str = 'open'
    review_comment_count: int = 0

    @property
    def size(self) -> int:
        return self.additions + self.deletions

    @classmethod
    def from_api(cls, pr: Dict, review_comment_count: int = 0) -> 'PullRequestRecord':
        """Build a record from a GitHub pull request detail payload.

        Args:
            pr: PR data from the GitHub ``pulls/{number}`` endpoint
            review_comment_count: Number of review comments by people other than the author

        Returns:
            PullRequestRecord for the PR
        """
        user = pr.get('user') or {}
        return cls(
            number=pr['number'],
            title=pr.get('title', ''),
            url=pr.get('html_url', ''),
            author=user.get('login'),
            additions=pr.get('additions') or 0,
            deletions=pr.get('deletions') or 0,
            created_at=pr.get('created_at', ''),
            merged_at=pr.get('merged_at'),
            state=pr.get('state', 'open'),
            review_comment_count=review_comment_count,
        )

    @classmethod
    def from_dict(cls, data: Dict) -> 'PullRequestRecord':
        return cls(
            number=data['number'],
            title=data.get('title', ''),
            url=data.get('url', data.get('html_url', '')),
            # Older documents stored authorless PRs as 'unknown'
            author=None if data.get('author') == UNKNOWN_AUTHOR else data.get('author'),
            additions=data.get('additions') or 0,
            deletions=data.get('deletions') or 0,
            created_at=data.get('created_at', ''),
            merged_at=data.get('merged_at'),
            state=data.get('state', 'open'),
            review_comment_count=data.get('review_comment_count', data.get('review_comments_count', 0)),
        )

    def to_dict(self) -> Dict:
        return asdict(self)


@dataclass(frozen=True)
class ReviewEvent:
    """A submitted review on a pull request."""
    reviewer: str
    pr_number: int
    submitted_at: str

    @property
    def submitted_date(self) -> str:
        return self.submitted_at[:10]


@dataclass
class ReviewComment:
    """A review comment left on someone else's pull request."""
    id: int
    pr_number: int
    pr_title: str
    pr_url: str
    author: Optional[str]
    body: str
    path: Optional[str]
    line: Optional[int]
    created_at: str
    url: str

    @classmethod
    def from_api(cls, comment: Dict, pr: Dict) -> 'ReviewComment':
        user = comment.get('user') or {}
        line = comment.get('line')
        if line is None:
            line = comment.get('original_line')
        return cls(
            id=comment['id'],
            pr_number=pr['number'],
            pr_title=pr.get('title', ''),
            pr_url=pr.get('html_url', ''),
            author=user.get('login'),
            body=comment.get('body') or '',
            path=comment.get('path'),
            line=line,
            created_at=comment.get('created_at', ''),
            url=comment.get('html_url', ''),
        )

    @classmethod
    def from_dict(cls, data: Dict) -> 'ReviewComment':
        return cls(
            id=data['id'],
            pr_number=data['pr_number'],
            pr_title=data.get('pr_title', ''),
            pr_url=data.get('pr_url', ''),
            author=data.get('author'),
            body=data.get('body') or '',
            path=data.get('path'),
            line=data.get('line'),
            created_at=data.get('created_at', ''),
            url=data.get('url', data.get('html_url', '')),
        )

    def to_dict(self) -> Dict:
        return asdict(self)


@dataclass
class ExclusionSet:
    """PR numbers left out of the author-keyed statistics."""
    excluded: List[int] = field(default_factory=list)
    last_modified: Optional[str] = None

    def contains(self, pr_number: int) -> bool:
        return pr_number in self.excluded

    def as_set(self) -> Set[int]:
        return set(self.excluded)

    @classmethod
    def from_dict(cls, data: Dict) -> 'ExclusionSet':
        excluded = []
        for value in data.get('excluded') or []:
            pr_number = int(value)
            if pr_number not in excluded:
                excluded.append(pr_number)
        return cls(excluded=excluded, last_modified=data.get('last_modified'))

    def to_dict(self) -> Dict:
        return {'excluded': list(self.excluded), 'last_modified': self.last_modified}


@dataclass
class SizeStats:
    """Size distribution of one author's PRs (additions + deletions)."""
    min: int = 0
    max: int = 0
    avg: int = 0
    count: int = 0

    @classmethod
    def from_dict(cls, data: Dict) -> 'SizeStats':
        return cls(
            min=data.get('min', 0),
            max=data.get('max', 0),
            avg=data.get('avg', 0),
            count=data.get('count', data.get('pr_count', 0)),
        )


@dataclass
class ContributorPR:
    """A PR as listed under its author's contributor stats."""
    number: int
    title: str
    url: str
    created_at: str
    merged_at: Optional[str]
    state: str
    days_to_merge: Optional[int]
    review_comment_count: int = 0

    @classmethod
    def from_dict(cls, data: Dict) -> 'ContributorPR':
        return cls(
            number=data['number'],
            title=data.get('title', ''),
            url=data.get('url', data.get('html_url', '')),
            created_at=data.get('created_at', ''),
            merged_at=data.get('merged_at'),
            state=data.get('state', 'open'),
            days_to_merge=data.get('days_to_merge'),
            review_comment_count=data.get('review_comment_count', data.get('review_comments_count', 0)),
        )


@dataclass
class ContributorStats:
    """PR activity of one author over the sync window."""
    author: str
    prs_by_date: Dict[str, int] = field(default_factory=dict)
    prs: List[ContributorPR] = field(default_factory=list)
    avg_days_to_merge: Optional[float] = None
    avg_review_comments: float = 0
    total_prs: int = 0

    @classmethod
    def from_dict(cls, data: Dict) -> 'ContributorStats':
        return cls(
            author=data['author'],
            prs_by_date=dict(data.get('prs_by_date') or {}),
            prs=[ContributorPR.from_dict(pr) for pr in data.get('prs') or []],
            avg_days_to_merge=data.get('avg_days_to_merge'),
            avg_review_comments=data.get('avg_review_comments', 0),
            total_prs=data.get('total_prs', 0),
        )


@dataclass
class ReviewerStats:
    """Review activity of one reviewer on other people's PRs."""
    reviewer: str
    total_prs_reviewed: int = 0
    total_review_comments: int = 0
    avg_comments_per_pr: float = 0

    @classmethod
    def from_dict(cls, data: Dict) -> 'ReviewerStats':
        return cls(
            reviewer=data['reviewer'],
            total_prs_reviewed=data.get('total_prs_reviewed', 0),
            total_review_comments=data.get('total_review_comments', 0),
            avg_comments_per_pr=data.get('avg_comments_per_pr', 0),
        )


@dataclass
class Snapshot:
    """The persisted result of the last sync."""
    status: SnapshotState = SnapshotState.NOT_SYNCED
    last_synced: Optional[str] = None
    review_counts: Dict[str, Dict[str, int]] = field(default_factory=dict)
    pr_size_stats: Dict[str, SizeStats] = field(default_factory=dict)
    pull_requests: List[PullRequestRecord] = field(default_factory=list)
    pr_contributor_stats: List[ContributorStats] = field(default_factory=list)
    reviewer_stats: Dict[str, ReviewerStats] = field(default_factory=dict)
    review_comments: List[ReviewComment] = field(default_factory=list)

    @classmethod
    def empty(cls) -> 'Snapshot':
        return cls()

    @classmethod
    def from_dict(cls, data: Dict) -> 'Snapshot':
        """Load a snapshot document, filling in fields older documents lack.

        Older documents stored review counts under ``data`` and size stats
        under ``pr_sizes``; both names are still read.
        """
        review_counts = data.get('review_counts')
        if review_counts is None:
            review_counts = data.get('data') or {}
        size_stats = data.get('pr_size_stats')
        if size_stats is None:
            size_stats = data.get('pr_sizes') or {}

        return cls(
            status=SnapshotState.parse(data.get('status')),
            last_synced=data.get('last_synced'),
            review_counts={
                reviewer: dict(counts) for reviewer, counts in review_counts.items()
            },
            pr_size_stats={
                author: SizeStats.from_dict(stats) for author, stats in size_stats.items()
            },
            pull_requests=[
                PullRequestRecord.from_dict(pr) for pr in data.get('pull_requests') or []
            ],
            pr_contributor_stats=[
                ContributorStats.from_dict(stats) for stats in data.get('pr_contributor_stats') or []
            ],
            reviewer_stats={
                reviewer: ReviewerStats.from_dict(stats)
                for reviewer, stats in (data.get('reviewer_stats') or {}).items()
            },
            review_comments=[
                ReviewComment.from_dict(comment) for comment in data.get('review_comments') or []
            ],
        )

    def to_dict(self) -> Dict:
        data = asdict(self)
        data['status'] = self.status.value
        return data
