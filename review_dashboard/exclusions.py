"""User-curated set of PRs excluded from the statistics."""

import logging
from datetime import datetime, timezone
from typing import Callable, Set

from .models import ExclusionSet
from .storage import DocumentStore

DEFAULT_EXCLUSIONS_FILE = 'excluded-prs.json'


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class ExclusionStore:
    """Manages the persisted exclusion set."""

    def __init__(self, store: DocumentStore, document_name: str = DEFAULT_EXCLUSIONS_FILE,
                 clock: Callable[[], datetime] = utc_now):
        """Initialize the exclusion store.

        Args:
            store: Document backend the exclusions are persisted in
            document_name: Name of the exclusion document
            clock: Returns the current time, used for last_modified
        """
        self.store = store
        self.document_name = document_name
        self.clock = clock

    def get(self) -> ExclusionSet:
        """Return the current exclusions, persisting an empty set on first access."""
        document = self.store.load(self.document_name)
        if document is None:
            exclusions = ExclusionSet()
            self._save(exclusions)
            return exclusions

        return ExclusionSet.from_dict(document)

    def toggle(self, pr_number: int) -> ExclusionSet:
        """Exclude the PR if it is included, include it again if it is excluded.

        Args:
            pr_number: Number of the PR to flip

        Returns:
            The updated exclusion set
        """
        exclusions = self.get()

        if exclusions.contains(pr_number):
            exclusions.excluded.remove(pr_number)
            logging.info(f"PR #{pr_number} is no longer excluded")
        else:
            exclusions.excluded.append(pr_number)
            logging.info(f"PR #{pr_number} is now excluded")

        exclusions.last_modified = self.clock().isoformat()
        self._save(exclusions)
        return exclusions

    def is_excluded(self, pr_number: int) -> bool:
        return self.get().contains(pr_number)

    def get_excluded_set(self) -> Set[int]:
        return self.get().as_set()

    def _save(self, exclusions: ExclusionSet):
        self.store.save(self.document_name, exclusions.to_dict())
