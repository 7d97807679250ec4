from privacyweave.config import Settings
from privacyweave.storage.base import Storage, StorageError


def create_storage(config: Settings) -> Storage:
    """Build the storage backend named by ``config.storage_backend``."""
    backend = config.storage_backend.lower()
    if backend == "database":
        from privacyweave.database import get_engine
        from privacyweave.storage.sql import DatabaseStorage

        return DatabaseStorage(get_engine(config.database_url))
    if backend == "memory":
        from privacyweave.storage.memory import MemoryStorage

        return MemoryStorage()
    raise ValueError(f"Unknown storage backend {config.storage_backend!r}. Use 'database' or 'memory'.")


__all__ = ["Storage", "StorageError", "create_storage"]
