# Persistent key/value storage backends

import logging
from typing import Optional

from .kv_store import PersistentKeyValueStore, InMemoryKeyValueStore
from .filesystem import JsonFileKeyValueStore
from .database import SqliteKeyValueStore


def create_store(config, profile: Optional[str] = None) -> PersistentKeyValueStore:
    """
    Create the store selected by ``config.storage.backend``

    Args:
        config: Configuration object
        profile: Profile name, defaults to ``config.storage.profile``

    Returns:
        PersistentKeyValueStore: Store instance for the profile
    """
    profile = profile or config.storage.profile
    backend = config.storage.backend

    if backend == 'memory':
        store = InMemoryKeyValueStore()
    elif backend == 'sqlite':
        store = SqliteKeyValueStore(config.get_database_path(), profile=profile)
    else:
        store = JsonFileKeyValueStore(config.get_profiles_dir(), profile=profile)

    logging.getLogger('haloguide.storage').debug(
        f"Using {backend} store for profile '{profile}'"
    )
    return store


__all__ = [
    'PersistentKeyValueStore',
    'InMemoryKeyValueStore',
    'JsonFileKeyValueStore',
    'SqliteKeyValueStore',
    'create_store'
]
