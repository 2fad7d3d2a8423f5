"""Shared fixtures for the review dashboard tests."""

import pytest

from review_dashboard.exclusions import ExclusionStore
from review_dashboard.snapshot import SnapshotStore
from review_dashboard.storage import MemoryDocumentStore
from tests.factories import NOW


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def document_store():
    return MemoryDocumentStore()


@pytest.fixture
def snapshot_store(document_store):
    return SnapshotStore(document_store)


@pytest.fixture
def exclusion_store(document_store):
    return ExclusionStore(document_store, clock=lambda: NOW)
