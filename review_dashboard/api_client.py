"""GitHub API client for the configured repository."""

import logging
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime
from typing import Callable, Dict, Iterator, List, Tuple, TypeVar

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from .aggregation.windows import parse_timestamp
from .errors import RemoteAccessError
from .models import ReviewComment, ReviewEvent

DEFAULT_API_URL = 'https://api.github.com'
PER_PAGE = 100
# Number of PRs fetched concurrently; batches run one after another
BATCH_SIZE = 10

T = TypeVar('T')
R = TypeVar('R')


class GitHubAPIClient:
    """Reads pull requests, reviews and review comments of one repository."""

    def __init__(self, owner: str, repo: str, token: str, base_url: str = DEFAULT_API_URL):
        """Initialize the GitHub API client.

        Args:
            owner: Repository owner (user or organization)
            repo: Repository name
            token: GitHub personal access token for authentication
            base_url: API root, overridable for GitHub Enterprise
        """
        self.owner = owner
        self.repo = repo
        self.token = token
        self.base_url = base_url.rstrip('/')
        self.session = requests.Session()

        # Pool sized for one batch of concurrent requests plus headroom
        adapter = HTTPAdapter(
            pool_connections=BATCH_SIZE * 2,
            pool_maxsize=BATCH_SIZE * 2,
            max_retries=Retry(
                total=3,
                backoff_factor=0.3,
                status_forcelist=[500, 502, 503, 504]
            )
        )
        self.session.mount('https://', adapter)
        self.session.mount('http://', adapter)

        self.session.headers.update({
            'Authorization': f'token {self.token}',
            'Accept': 'application/vnd.github.v3+json'
        })
        logging.info(f"Initialized GitHub API client for {self.full_name}")

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.repo}"

    @property
    def repo_path(self) -> str:
        return f"/repos/{self.owner}/{self.repo}"

    def _get(self, path: str, params: Dict = None):
        """GET a single API path and return the decoded JSON body.

        Raises:
            RemoteAccessError: If the request fails or returns an error status
        """
        url = f"{self.base_url}{path}"
        try:
            response = self.session.get(url, params=params)
        except requests.exceptions.RequestException as e:
            logging.error(f"Request to {url} failed: {e}")
            raise RemoteAccessError(str(e)) from e

        if response.status_code >= 400:
            message = self._error_message(response)
            logging.error(f"GitHub API returned {response.status_code} for {url}: {message}")
            raise RemoteAccessError.from_status(response.status_code, message)

        try:
            return response.json()
        except ValueError as e:
            logging.error(f"GitHub API returned a non-JSON body for {url}: {e}")
            raise RemoteAccessError(f"Invalid JSON response from {url}") from e

    @staticmethod
    def _error_message(response) -> str:
        try:
            return response.json().get('message') or response.reason or 'Unknown error'
        except ValueError:
            return response.reason or 'Unknown error'

    def iter_pages(self, path: str, params: Dict = None) -> Iterator[List[Dict]]:
        """Lazily yield pages of a paginated endpoint.

        Pages are requested only as the caller consumes them, so a caller
        that stops iterating stops paginating.

        Args:
            path: API path relative to the base URL
            params: Query parameters

        Yields:
            Lists of items, one per page
        """
        page = 1
        params = dict(params or {})
        params['per_page'] = PER_PAGE

        while True:
            params['page'] = page
            logging.debug(f"Fetching page {page} from {path}")
            data = self._get(path, params=dict(params))

            if not data:
                return

            yield data

            if len(data) < PER_PAGE:
                return

            page += 1

    def get_paginated(self, path: str, params: Dict = None) -> List[Dict]:
        """Fetch all pages of a paginated endpoint."""
        results = []
        for page in self.iter_pages(path, params):
            results.extend(page)

        logging.debug(f"Fetched {len(results)} total items from {path}")
        return results

    def verify_access(self) -> Dict:
        """Check that the repository exists and the token can read it.

        Returns:
            Repository metadata

        Raises:
            RemoteAccessError: With a user-actionable message when access fails
        """
        repository = self._get(self.repo_path)
        logging.info(f"Verified access to {self.full_name}")
        return repository

    def list_recent_pull_requests(self, start_date: datetime) -> List[Dict]:
        """List PRs updated on or after start_date, newest update first.

        PRs come back sorted by update time descending, so paging stops at the
        first PR older than start_date.

        Args:
            start_date: Timezone-aware start of the sync window

        Returns:
            PR summaries from the list endpoint
        """
        recent_prs = []
        pages = self.iter_pages(f"{self.repo_path}/pulls", {
            'state': 'all',
            'sort': 'updated',
            'direction': 'desc'
        })

        for page in pages:
            reached_older = False
            for pr in page:
                if parse_timestamp(pr['updated_at']) < start_date:
                    reached_older = True
                    break
                recent_prs.append(pr)

            if reached_older:
                logging.debug("Reached PRs older than the sync window, stopping pagination")
                break

        logging.info(f"Found {len(recent_prs)} PRs updated since {start_date.date().isoformat()}")
        return recent_prs

    def _in_batches(self, items: List[T], fetch: Callable[[T], R]) -> List[R]:
        """Apply fetch to every item, BATCH_SIZE items at a time in parallel.

        Results keep the order of items. The first failure propagates.
        """
        results: List[R] = []
        if not items:
            return results

        with ThreadPoolExecutor(max_workers=min(BATCH_SIZE, len(items))) as executor:
            for start in range(0, len(items), BATCH_SIZE):
                batch = items[start:start + BATCH_SIZE]
                results.extend(executor.map(fetch, batch))

                done = start + len(batch)
                if done % 50 == 0 or done == len(items):
                    print(f"  Progress: {done}/{len(items)} PRs", flush=True)

        return results

    def fetch_details(self, prs: List[Dict]) -> List[Dict]:
        """Fetch the full PR payload (additions, deletions, merge time) for each PR."""
        print(f"Fetching details for {len(prs)} PRs...")
        return self._in_batches(
            prs, lambda pr: self._get(f"{self.repo_path}/pulls/{pr['number']}")
        )

    def fetch_reviews(self, prs: List[Dict]) -> List[ReviewEvent]:
        """Fetch every submitted review of each PR.

        Reviews without a user or still pending (no submission time) are dropped.
        """
        print(f"Fetching reviews for {len(prs)} PRs...")

        def fetch(pr: Dict) -> List[ReviewEvent]:
            events = []
            for review in self.get_paginated(f"{self.repo_path}/pulls/{pr['number']}/reviews"):
                user = review.get('user') or {}
                if not user.get('login') or not review.get('submitted_at'):
                    continue
                events.append(ReviewEvent(
                    reviewer=user['login'],
                    pr_number=pr['number'],
                    submitted_at=review['submitted_at'],
                ))
            return events

        return [event for events in self._in_batches(prs, fetch) for event in events]

    def fetch_review_comments(self, prs: List[Dict]) -> Tuple[Dict[int, int], List[ReviewComment]]:
        """Fetch review comments of each PR, leaving out the PR author's own.

        Args:
            prs: PR detail payloads

        Returns:
            Tuple of (comment count by PR number, comments)
        """
        print(f"Fetching review comments for {len(prs)} PRs...")

        def fetch(pr: Dict) -> List[ReviewComment]:
            pr_author = (pr.get('user') or {}).get('login')
            comments = self.get_paginated(f"{self.repo_path}/pulls/{pr['number']}/comments")
            return [
                ReviewComment.from_api(comment, pr)
                for comment in comments
                if (comment.get('user') or {}).get('login') != pr_author
            ]

        counts: Dict[int, int] = {}
        all_comments: List[ReviewComment] = []
        for pr, comments in zip(prs, self._in_batches(prs, fetch)):
            counts[pr['number']] = len(comments)
            all_comments.extend(comments)

        return counts, all_comments
