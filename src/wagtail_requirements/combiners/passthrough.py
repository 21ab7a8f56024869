"""Combiner that leaves every requirement as registered."""

from __future__ import annotations

from typing import TYPE_CHECKING

from .base import BaseCombiner

if TYPE_CHECKING:
    from ..backend import RequirementsBackend


class PassthroughCombiner(BaseCombiner):
    def process(self, backend: RequirementsBackend) -> None:
        return None
