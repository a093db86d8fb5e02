"""Archive entities for keeping a copy of each analysed document."""
from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping, Sequence


@dataclass(frozen=True)
class ArchiveFile:
    name: str
    content: bytes

    @classmethod
    def from_json(cls, name: str, payload: Mapping[str, Any]) -> "ArchiveFile":
        text = json.dumps(payload, indent=2, ensure_ascii=False, default=str)
        return cls(name=name, content=text.encode("utf-8"))


@dataclass(frozen=True)
class DocumentRun:
    """Uploaded document plus the artefacts produced while analysing it."""

    document_id: str
    document: ArchiveFile
    outputs: Sequence[ArchiveFile] = field(default_factory=tuple)
    metadata: Mapping[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class ArchiveReceipt:
    run_id: str
    location: Path
