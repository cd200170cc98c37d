"""Custom exceptions for targeting context with story/bullet references."""

from pathlib import Path
from typing import Optional


class SelectionError(ValueError):
    """
    Exception raised when selection input is malformed.

    Signals caller misconfiguration (empty story list, non-positive budgets,
    mismatched value tables). A budget that simply fits nothing is NOT an error.

    Attributes:
        message: Error description
        story_id: Story the problem was found in, if any
        bullet_id: Bullet the problem was found in, if any
    """

    def __init__(
        self,
        message: str,
        story_id: Optional[str] = None,
        bullet_id: Optional[str] = None,
    ):
        self.message = message
        self.story_id = story_id
        self.bullet_id = bullet_id

        parts = [message]
        if story_id is not None:
            parts.append(f"story_id: {story_id}")
        if bullet_id is not None:
            parts.append(f"bullet_id: {bullet_id}")

        if len(parts) == 1:
            super().__init__(message)
        else:
            super().__init__(f"{parts[0]} ({', '.join(parts[1:])})")


class MaterializationError(SelectionError):
    """Raised when a resume plan references stories or bullets missing from the experience bank."""

    pass


class ArtifactLoadError(SelectionError):
    """
    Exception raised when an input artifact is missing required fields.

    Attributes:
        path: File the artifact was loaded from, if any
    """

    def __init__(self, message: str, path: Optional[Path] = None):
        self.path = path
        if path is not None:
            message = f"{message}\nArtifact: {path}"
        super().__init__(message)
