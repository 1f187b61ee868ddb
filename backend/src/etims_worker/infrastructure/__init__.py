"""
Infrastructure package - Local artifact storage.
"""

from .storage import ArtifactKind, ArtifactStore

__all__ = ["ArtifactKind", "ArtifactStore"]
