"""
Unit tests for the snapshot and record models
"""

import pytest

from review_dashboard.models import (
    ExclusionSet,
    PullRequestRecord,
    ReviewComment,
    Snapshot,
    SnapshotState,
    SizeStats,
)
from tests.factories import make_pr_payload


class TestPullRequestRecord:
    """Test cases for building PR records."""

    def test_from_api(self):
        """Test that a detail payload maps onto a record."""
        payload = make_pr_payload(42, author='alice', additions=30, deletions=20,
                                  merged_at='2026-10-19T10:00:00Z', state='closed')

        record = PullRequestRecord.from_api(payload, review_comment_count=3)

        assert record.number == 42
        assert record.author == 'alice'
        assert record.url == 'https://github.com/acme/widgets/pull/42'
        assert record.size == 50
        assert record.merged_at == '2026-10-19T10:00:00Z'
        assert record.state == 'closed'
        assert record.review_comment_count == 3

    def test_from_api_without_user(self):
        """Test that a PR from a deleted account has no author."""
        payload = make_pr_payload(7, author=None)
        payload['additions'] = None

        record = PullRequestRecord.from_api(payload)

        assert record.author is None
        assert record.additions == 0

    def test_from_dict_accepts_old_key_names(self):
        """Test that records written with html_url/review_comments_count still load."""
        record = PullRequestRecord.from_dict({
            'number': 1,
            'title': 'Old',
            'html_url': 'https://github.com/acme/widgets/pull/1',
            'author': 'bob',
            'additions': 1,
            'deletions': 2,
            'created_at': '2026-10-10T00:00:00Z',
            'merged_at': None,
            'state': 'open',
            'review_comments_count': 4,
        })

        assert record.url == 'https://github.com/acme/widgets/pull/1'
        assert record.review_comment_count == 4

    def test_from_dict_maps_unknown_author_to_none(self):
        """Test that the older 'unknown' author placeholder reads as no author."""
        record = PullRequestRecord.from_dict({'number': 3, 'author': 'unknown'})

        assert record.author is None


class TestReviewComment:
    """Test cases for review comment mapping."""

    def test_line_falls_back_to_original_line(self):
        """Test that outdated comments keep their original line."""
        pr = make_pr_payload(5)
        comment = {
            'id': 99,
            'user': {'login': 'bob'},
            'body': 'nit',
            'path': 'app.py',
            'line': None,
            'original_line': 12,
            'created_at': '2026-10-18T10:00:00Z',
            'html_url': 'https://github.com/acme/widgets/pull/5#discussion_r99',
        }

        result = ReviewComment.from_api(comment, pr)

        assert result.line == 12
        assert result.pr_number == 5
        assert result.pr_title == 'PR 5'
        assert result.url.endswith('discussion_r99')


class TestExclusionSet:
    """Test cases for the exclusion set document."""

    def test_from_dict_deduplicates(self):
        """Test that duplicate and string PR numbers are normalized."""
        exclusions = ExclusionSet.from_dict({'excluded': [3, 3, 4], 'last_modified': None})

        assert exclusions.excluded == [3, 4]
        assert exclusions.as_set() == {3, 4}

    def test_round_trip_document(self):
        """Test writing and reading a full snapshot document."""
        exclusions = ExclusionSet(excluded=[1, 2], last_modified='2026-10-19T12:00:00+00:00')

        assert ExclusionSet.from_dict(exclusions.to_dict()) == exclusions


class TestSnapshotDefaults:
    """Test cases for reading older snapshot documents."""

    def test_empty_snapshot(self):
        """Test the empty snapshot defaults."""
        snapshot = Snapshot.empty()

        assert snapshot.status == SnapshotState.NOT_SYNCED
        assert snapshot.last_synced is None
        assert snapshot.review_counts == {}
        assert snapshot.pull_requests == []

    def test_missing_optional_fields_default_to_empty(self):
        """Test that a document with only status and counts loads."""
        snapshot = Snapshot.from_dict({
            'last_synced': '2026-10-01T00:00:00Z',
            'status': 'synced',
            'data': {'bob': {'2026-10-01': 2}},
        })

        assert snapshot.status == SnapshotState.SYNCED
        assert snapshot.review_counts == {'bob': {'2026-10-01': 2}}
        assert snapshot.pr_size_stats == {}
        assert snapshot.pull_requests == []
        assert snapshot.pr_contributor_stats == []
        assert snapshot.reviewer_stats == {}
        assert snapshot.review_comments == []

    def test_legacy_pr_sizes_key(self):
        """Test reading size stats stored under pr_sizes."""
        snapshot = Snapshot.from_dict({
            'status': 'synced',
            'pr_sizes': {'alice': {'min': 1, 'max': 9, 'avg': 5, 'pr_count': 2}},
        })

        assert snapshot.pr_size_stats == {'alice': SizeStats(min=1, max=9, avg=5, count=2)}

    @pytest.mark.parametrize('status', [None, 'unknown'])
    def test_unknown_status_is_not_synced(self, status):
        """Test that an unrecognized status reads as not synced."""
        assert Snapshot.from_dict({'status': status}).status == SnapshotState.NOT_SYNCED

    def test_to_dict_writes_status_value(self):
        """Test that the status is written as its string value."""
        document = Snapshot(status=SnapshotState.SYNCING).to_dict()

        assert document['status'] == 'syncing'
        assert Snapshot.from_dict(document).status == SnapshotState.SYNCING
