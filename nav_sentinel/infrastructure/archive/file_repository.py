"""Filesystem repository keeping a copy of each analysed document."""
from __future__ import annotations

import json
import logging
import re
import shutil
from pathlib import Path

from nav_sentinel.domain.archive.entities import (
    ArchiveFile,
    ArchiveReceipt,
    DocumentRun,
)

logger = logging.getLogger(__name__)

DOCUMENT_DIR = "input"


def _normalize_run_id(run_id: str) -> str:
    sanitized = re.sub(r"[^0-9A-Za-z_-]+", "", (run_id or "").strip())
    return sanitized or "run"


def _safe_name(name: str) -> str:
    base = Path(name).name.strip()
    return re.sub(r"[^0-9A-Za-z._-]+", "_", base) or "document"


class FileSystemArchiveRepository:
    def __init__(self, root: Path) -> None:
        self._root = Path(root)

    def save_run(self, run: DocumentRun) -> ArchiveReceipt:
        run_id = _normalize_run_id(run.document_id)
        run_dir = self._root / run_id
        run_dir.mkdir(parents=True, exist_ok=True)

        self._write_file(run_dir / DOCUMENT_DIR, run.document)
        for file in run.outputs:
            self._write_file(run_dir, file)

        manifest = {
            "run_id": run_id,
            "document": self._manifest_entry(run.document, DOCUMENT_DIR),
            "outputs": [self._manifest_entry(file) for file in run.outputs],
            "metadata": dict(run.metadata),
        }
        (run_dir / "manifest.json").write_text(json.dumps(manifest, indent=2, default=str), encoding="utf-8")
        logger.info("Archived document run %s to %s", run_id, run_dir)

        return ArchiveReceipt(run_id=run_id, location=run_dir)

    def list_runs(self) -> list[str]:
        if not self._root.is_dir():
            return []
        return sorted(path.name for path in self._root.iterdir() if (path / "manifest.json").is_file())

    def load_manifest(self, run_id: str) -> dict[str, object] | None:
        manifest_path = self._root / _normalize_run_id(run_id) / "manifest.json"
        if not manifest_path.is_file():
            return None
        return json.loads(manifest_path.read_text(encoding="utf-8"))

    def delete_run(self, run_id: str) -> bool:
        run_dir = self._root / _normalize_run_id(run_id)
        if not run_dir.is_dir():
            return False
        shutil.rmtree(run_dir)
        logger.info("Deleted document run %s", run_dir.name)
        return True

    @staticmethod
    def _write_file(directory: Path, archive_file: ArchiveFile) -> None:
        directory.mkdir(parents=True, exist_ok=True)
        target = directory / _safe_name(archive_file.name)
        target.write_bytes(archive_file.content)

    @staticmethod
    def _manifest_entry(archive_file: ArchiveFile, folder: str | None = None) -> dict[str, object]:
        name = _safe_name(archive_file.name)
        path = f"{folder}/{name}" if folder else name
        return {"name": name, "path": path, "bytes": len(archive_file.content)}
