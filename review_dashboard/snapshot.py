"""Persistence of the aggregated sync snapshot."""

import logging

from .models import Snapshot
from .storage import DocumentStore

DEFAULT_SNAPSHOT_FILE = 'data.json'


class SnapshotStore:
    """Reads and writes the single snapshot document."""

    def __init__(self, store: DocumentStore, document_name: str = DEFAULT_SNAPSHOT_FILE):
        """Initialize the snapshot store.

        Args:
            store: Document backend the snapshot is persisted in
            document_name: Name of the snapshot document
        """
        self.store = store
        self.document_name = document_name

    def read(self) -> Snapshot:
        """Return the persisted snapshot, creating an empty one on first access."""
        document = self.store.load(self.document_name)
        if document is None:
            logging.info(f"No snapshot found at {self.document_name}, initializing empty snapshot")
            snapshot = Snapshot.empty()
            self.write(snapshot)
            return snapshot

        return Snapshot.from_dict(document)

    def write(self, snapshot: Snapshot):
        """Overwrite the persisted snapshot."""
        self.store.save(self.document_name, snapshot.to_dict())
        logging.debug(f"Wrote snapshot with status '{snapshot.status.value}'")
