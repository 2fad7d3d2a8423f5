"""Builders for GitHub API payloads used across the tests."""

from datetime import datetime, timezone

# Fixed "now" so the 14-day window is 2026-10-06 .. 2026-10-19
NOW = datetime(2026, 10, 19, 12, 0, 0, tzinfo=timezone.utc)


def make_pr_payload(number, author='alice', additions=10, deletions=5,
                    created_at='2026-10-18T09:00:00Z', updated_at=None,
                    merged_at=None, state='open', title=None):
    """Build a GitHub pull request payload as returned by the REST API."""
    return {
        'number': number,
        'title': title or f'PR {number}',
        'html_url': f'https://github.com/acme/widgets/pull/{number}',
        'user': {'login': author} if author else None,
        'additions': additions,
        'deletions': deletions,
        'created_at': created_at,
        'updated_at': updated_at or created_at,
        'merged_at': merged_at,
        'state': state,
    }


def make_review_payload(review_id, reviewer, submitted_at='2026-10-18T12:00:00Z'):
    return {
        'id': review_id,
        'user': {'login': reviewer} if reviewer else None,
        'state': 'APPROVED',
        'submitted_at': submitted_at,
    }


def make_comment_payload(comment_id, author, body='Looks good', path='app.py', line=10):
    return {
        'id': comment_id,
        'user': {'login': author} if author else None,
        'body': body,
        'path': path,
        'line': line,
        'original_line': line,
        'created_at': '2026-10-18T12:30:00Z',
        'html_url': f'https://github.com/acme/widgets/pull/1#discussion_r{comment_id}',
    }
