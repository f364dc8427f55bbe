import json
import logging
from datetime import datetime, timezone
from typing import Callable, List, Optional, Sequence, Tuple

from pydantic import TypeAdapter, ValidationError
from sqlalchemy.orm import Session

from app.models.storage import StorageSlot
from app.schemas.quiz import HistoryEntry

logger = logging.getLogger(__name__)

_entries_adapter = TypeAdapter(List[HistoryEntry])


class HistoryLog:
    """
    Append-only log of completed quizzes.

    The whole log is read from its storage slot once, when the log is
    created, and written back in full after every append. A missing or
    unreadable slot starts an empty log.
    """

    def __init__(self, session_factory: Callable[[], Session], storage_key: str):
        self.session_factory = session_factory
        self.storage_key = storage_key
        self._entries: List[HistoryEntry] = self._load()

    @property
    def entries(self) -> Tuple[HistoryEntry, ...]:
        return tuple(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def append(
        self,
        scores: Sequence[int],
        match_name: str,
        when: Optional[datetime] = None,
    ) -> HistoryEntry:
        entry = HistoryEntry(
            date=when or datetime.now(timezone.utc),
            scores=list(scores),
            match_name=match_name,
        )
        entries = self._entries + [entry]
        self._flush(entries)
        # only keep the entry once it is stored
        self._entries = entries

        logger.info(
            "History entry %d saved: %s", len(self._entries), entry.match_name
        )
        return entry

    def _load(self) -> List[HistoryEntry]:
        db = self.session_factory()
        try:
            slot = db.get(StorageSlot, self.storage_key)
            raw = slot.value if slot else None
        finally:
            db.close()

        if raw is None:
            return []

        try:
            return _entries_adapter.validate_python(json.loads(raw))
        except (ValueError, ValidationError) as exc:
            logger.warning(
                "Ignoring unreadable history in slot '%s': %s", self.storage_key, exc
            )
            return []

    def _flush(self, entries: List[HistoryEntry]) -> None:
        payload = json.dumps(
            _entries_adapter.dump_python(entries, mode="json", by_alias=True)
        )

        db = self.session_factory()
        try:
            slot = db.get(StorageSlot, self.storage_key)
            if slot is None:
                db.add(StorageSlot(key=self.storage_key, value=payload))
            else:
                slot.value = payload
            db.commit()
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()
