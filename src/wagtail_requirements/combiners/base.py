"""Base class for requirement combiners."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ..backend import RequirementsBackend


class BaseCombiner(ABC):
    """Abstract base class for combiners.

    A combiner runs once per injection pass, right before tags are rendered,
    and may rewrite ``backend.css`` and ``backend.javascript`` in place
    (for example to replace several files with a single bundle).
    """

    @abstractmethod
    def process(self, backend: RequirementsBackend) -> None:
        """Rewrite the backend's CSS and JS registries.

        Args:
            backend: The request's requirements backend.
        """
        ...
