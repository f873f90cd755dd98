"""Abstract feed source interface."""

from __future__ import annotations

from abc import ABC, abstractmethod


class BaseSource(ABC):
    """Abstract base class for feed sources."""

    name: str

    @abstractmethod
    async def fetch(self) -> bytes:
        """Fetch the raw feed payload (empty bytes when the body is empty)."""
