"""
Save slot stores.

The session hands these an opaque JSON payload per slot; they know nothing
about its contents.
"""
import logging
from pathlib import Path
from typing import Dict, Optional, Protocol

from .config import DEFAULT_SLOT

logger = logging.getLogger(__name__)

SAVE_SUFFIX = ".save"


class SaveStore(Protocol):
    def save(self, payload: str, slot: str = DEFAULT_SLOT) -> bool: ...

    def load(self, slot: str = DEFAULT_SLOT) -> Optional[str]: ...

    def has_save(self, slot: str = DEFAULT_SLOT) -> bool: ...


class MemorySaveStore:
    def __init__(self):
        self.slots: Dict[str, str] = {}

    def save(self, payload, slot=DEFAULT_SLOT):
        if not payload:
            logger.warning("Refusing to save an empty payload")
            return False
        self.slots[slot or DEFAULT_SLOT] = payload
        return True

    def load(self, slot=DEFAULT_SLOT):
        return self.slots.get(slot or DEFAULT_SLOT)

    def has_save(self, slot=DEFAULT_SLOT):
        return bool(self.slots.get(slot or DEFAULT_SLOT))


class FileSaveStore:
    """One `<slot>.save` file per slot under `directory`."""

    def __init__(self, directory):
        self.directory = Path(directory)

    def _path(self, slot) -> Optional[Path]:
        slot = slot or DEFAULT_SLOT
        if Path(slot).name != slot or slot in (".", ".."):
            logger.warning(f"Invalid save slot name: {slot!r}")
            return None
        return self.directory / f"{slot}{SAVE_SUFFIX}"

    def save(self, payload, slot=DEFAULT_SLOT):
        if not payload:
            logger.warning("Refusing to save an empty payload")
            return False
        path = self._path(slot)
        if path is None:
            return False
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            path.write_text(payload, encoding="utf-8")
        except OSError as e:
            logger.error(f"Writing save file {path} failed: {e}")
            return False
        logger.info(f"Saved slot {slot!r} to {path}")
        return True

    def load(self, slot=DEFAULT_SLOT):
        path = self._path(slot)
        if path is None:
            return None
        if not path.is_file():
            logger.warning(f"No save file for slot {slot!r} at {path}")
            return None
        try:
            return path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            logger.error(f"Reading save file {path} failed: {e}")
            return None

    def has_save(self, slot=DEFAULT_SLOT):
        path = self._path(slot)
        return path is not None and path.is_file() and path.stat().st_size > 0
