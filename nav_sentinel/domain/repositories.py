"""Collaborator interfaces anchoring the domain layer."""
from __future__ import annotations

from typing import Protocol


class DocumentSource(Protocol):
    """Provides the plain text of one uploaded NAV document."""

    name: str

    def read_bytes(self) -> bytes:
        ...

    def read_text(self) -> str:
        ...


class ReasoningService(Protocol):
    """Text-in, text-out access to the hosted language model."""

    model: str

    def complete(self, prompt: str, system: str | None = None) -> str:
        ...
