"""
Test doubles for setup-bindiff collaborators.

These implement the collaborator interfaces in memory (or in a temporary
directory) and record every call so tests can assert on call counts and
ordering without network or subprocess access.
"""

from .collaborators import CallLog, RecordingArchives, RecordingCache, RecordingRunner
from .release import make_release_tree

__all__ = [
    "CallLog",
    "RecordingArchives",
    "RecordingCache",
    "RecordingRunner",
    "make_release_tree",
]
