"""Code review dashboard - syncs and aggregates PR review statistics."""

from .models import Snapshot, SnapshotState, ExclusionSet, PullRequestRecord
from .api_client import GitHubAPIClient
from .storage import JsonFileStore, MemoryDocumentStore
from .snapshot import SnapshotStore
from .exclusions import ExclusionStore
from .aggregation import CodeReviewSyncer
from .errors import ConfigurationError, RemoteAccessError, RemoteErrorKind
from .output import OutputFormatter

__all__ = [
    'Snapshot',
    'SnapshotState',
    'ExclusionSet',
    'PullRequestRecord',
    'GitHubAPIClient',
    'JsonFileStore',
    'MemoryDocumentStore',
    'SnapshotStore',
    'ExclusionStore',
    'CodeReviewSyncer',
    'ConfigurationError',
    'RemoteAccessError',
    'RemoteErrorKind',
    'OutputFormatter',
]
