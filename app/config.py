import os

from app.store import FileSlot, MemorySlot, RecordStore

# Unset → in-memory store, lost on restart
STORE_PATH = os.getenv("MUSICMATE_STORE_PATH")
SEED_ON_STARTUP = os.getenv("MUSICMATE_SEED_ON_STARTUP", "true").lower() in ("1", "true", "yes")
LOG_LEVEL = os.getenv("MUSICMATE_LOG_LEVEL", "INFO").upper()


def build_store() -> RecordStore:
    slot = FileSlot(STORE_PATH) if STORE_PATH else MemorySlot()
    return RecordStore(slot)
