"""Document persistence for the snapshot and exclusion files."""

import copy
import json
import logging
import os
import tempfile
from typing import Dict, Optional


class DocumentStore:
    """Loads and saves whole JSON documents by name."""

    def load(self, name: str) -> Optional[Dict]:
        """Return the stored document, or None if it does not exist."""
        raise NotImplementedError

    def save(self, name: str, document: Dict):
        """Replace the stored document."""
        raise NotImplementedError


class JsonFileStore(DocumentStore):
    """Stores each document as a JSON file inside one directory."""

    def __init__(self, directory: str = '.'):
        """Initialize the file store.

        Args:
            directory: Directory holding the JSON documents
        """
        self.directory = directory

    def path_for(self, name: str) -> str:
        return os.path.join(self.directory, name)

    def load(self, name: str) -> Optional[Dict]:
        path = self.path_for(name)
        if not os.path.exists(path):
            return None

        try:
            with open(path, 'r', encoding='utf-8') as f:
                document = json.load(f)
        except (json.JSONDecodeError, OSError) as e:
            logging.error(f"Could not load {path}: {e}")
            raise

        logging.debug(f"Loaded {path}")
        return document

    def save(self, name: str, document: Dict):
        path = self.path_for(name)
        os.makedirs(self.directory or '.', exist_ok=True)

        # Write next to the target and swap it in so readers never see a partial file
        fd, tmp_path = tempfile.mkstemp(dir=self.directory or '.', prefix=f".{name}.", suffix='.tmp')
        try:
            with os.fdopen(fd, 'w', encoding='utf-8') as f:
                json.dump(document, f, indent=2, ensure_ascii=False)
            os.replace(tmp_path, path)
        except OSError as e:
            logging.error(f"Could not save {path}: {e}")
            if os.path.exists(tmp_path):
                os.remove(tmp_path)
            raise

        logging.debug(f"Saved {path}")


class MemoryDocumentStore(DocumentStore):
    """Keeps documents in memory; used by tests and embedded callers."""

    def __init__(self, documents: Dict[str, Dict] = None):
        self.documents: Dict[str, Dict] = copy.deepcopy(documents) if documents else {}

    def load(self, name: str) -> Optional[Dict]:
        if name not in self.documents:
            return None
        return copy.deepcopy(self.documents[name])

    def save(self, name: str, document: Dict):
        self.documents[name] = copy.deepcopy(document)

    def __contains__(self, name: str) -> bool:
        return name in self.documents
