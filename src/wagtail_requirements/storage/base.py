from __future__ import annotations

from abc import ABC, abstractmethod


class BaseRequirementStorage(ABC):
    """Abstract base class for combined file storage backends.

    Storage backends persist the bundles written by a combiner, return URLs
    for them and wipe the combined files folder on request.
    """

    @abstractmethod
    def save(self, path: str, content: str) -> str:
        """Save combined file content to storage.

        Args:
            path: The storage path (e.g., "_combinedfiles/site-a1b2c3d4.css")
            content: The file content to save

        Returns:
            The full URL to access the saved file
        """
        ...

    @abstractmethod
    def url(self, path: str) -> str:
        """Return the URL of a stored file."""
        ...

    @abstractmethod
    def exists(self, path: str) -> bool:
        """Check if a file exists in storage.

        Args:
            path: The storage path to check

        Returns:
            True if the file exists
        """
        ...

    @abstractmethod
    def delete_folder(self, path: str) -> None:
        """Delete a folder and everything below it.

        Args:
            path: The storage path of the folder, e.g. "_combinedfiles"
        """
        ...
