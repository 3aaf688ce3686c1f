from __future__ import annotations

from abc import ABC, abstractmethod


class DocumentSource(ABC):
    """Supply the raw bytes of a route document (file read, network fetch)."""

    @abstractmethod
    def read_bytes(self) -> bytes:
        raise NotImplementedError

    @property
    @abstractmethod
    def label(self) -> str:
        """Human-readable origin used in log lines and CLI output."""
        raise NotImplementedError
