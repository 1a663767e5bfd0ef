"""
Pluggable storage for telemetry exports.

One exported document per episode, keyed by an opaque session identifier.
Persistence is optional: an episode runs fine with no store at all, and a
failed save never invalidates the in-memory telemetry.

Two included implementations:
1. InMemoryTelemetryStore - dict-based, data lost on exit (tests, notebooks)
2. JsonTelemetryStore - one pretty-printed JSON file per session

Usage pattern:
    store = JsonTelemetryStore("logs")
    await store.initialize()
    export, saved = await persist_telemetry(store, telemetry, session_id)
    await store.close()
"""

import asyncio
import json
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, Optional, Tuple

from .logging_utils import log_warning
from .schemas import TelemetryExport
from .telemetry import DecisionTelemetry


class TelemetryStore(ABC):
    """Abstract base class for telemetry export storage.

    All methods are async so file or network backends never block the
    episode loop; the in-memory store simply returns immediately.
    """

    @abstractmethod
    async def initialize(self) -> None:
        """Prepare the backend (create directories, open connections)."""
        pass

    @abstractmethod
    async def close(self) -> None:
        """Release backend resources."""
        pass

    @abstractmethod
    async def save_export(self, export: TelemetryExport) -> None:
        """
        Store an export under ``export.session_id``, replacing any earlier one.

        Raises:
            OSError: If the backend cannot write the document
        """
        pass

    @abstractmethod
    async def load_export(self, session_id: str) -> Optional[TelemetryExport]:
        """Return the stored export for ``session_id``, or None."""
        pass

    @abstractmethod
    async def delete_export(self, session_id: str) -> None:
        """Remove the export for ``session_id`` if present."""
        pass


class InMemoryTelemetryStore(TelemetryStore):
    """Dict-backed store. Keeps deep copies so callers cannot mutate stored data."""

    def __init__(self):
        self.exports: Dict[str, TelemetryExport] = {}

    async def initialize(self) -> None:
        pass

    async def close(self) -> None:
        pass

    async def save_export(self, export: TelemetryExport) -> None:
        self.exports[export.session_id] = export.model_copy(deep=True)

    async def load_export(self, session_id: str) -> Optional[TelemetryExport]:
        export = self.exports.get(session_id)
        return export.model_copy(deep=True) if export else None

    async def delete_export(self, session_id: str) -> None:
        self.exports.pop(session_id, None)


class JsonTelemetryStore(TelemetryStore):
    """File-based store writing ``{base_path}/telemetry-{session_id}.json``.

    Documents use camelCase field names and are pretty-printed (indent=2).
    File I/O runs in a worker thread via ``asyncio.to_thread``.
    """

    def __init__(self, base_path: Path | str = "logs"):
        self.base_path = Path(base_path)

    async def initialize(self) -> None:
        await asyncio.to_thread(self.base_path.mkdir, parents=True, exist_ok=True)

    async def close(self) -> None:
        # Nothing to clean up for JSON files
        return None

    async def save_export(self, export: TelemetryExport) -> None:
        path = self._path_for(export.session_id)
        payload = export.model_dump(mode="json", by_alias=True)
        await asyncio.to_thread(path.parent.mkdir, parents=True, exist_ok=True)
        await asyncio.to_thread(
            path.write_text, json.dumps(payload, indent=2), "utf-8"
        )

    async def load_export(self, session_id: str) -> Optional[TelemetryExport]:
        path = self._path_for(session_id)
        if not path.exists():
            return None

        raw = await asyncio.to_thread(path.read_text, "utf-8")
        return TelemetryExport.model_validate_json(raw)

    async def delete_export(self, session_id: str) -> None:
        path = self._path_for(session_id)
        if path.exists():
            await asyncio.to_thread(path.unlink)

    def _path_for(self, session_id: str) -> Path:
        return self.base_path / f"telemetry-{session_id}.json"


async def persist_telemetry(
    store: TelemetryStore,
    telemetry: DecisionTelemetry,
    session_id: str,
) -> Tuple[TelemetryExport, bool]:
    """Export ``telemetry`` and hand it to ``store``.

    Returns the export together with whether it was stored. Storage errors are
    reported as warnings; the export and the live telemetry stay usable.
    """

    export = telemetry.export(session_id)
    try:
        await store.save_export(export)
    except OSError as exc:
        log_warning(f"Could not save telemetry for session {session_id}: {exc}")
        return export, False
    return export, True
