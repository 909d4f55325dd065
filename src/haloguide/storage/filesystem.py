#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
File system storage module
Keeps one JSON document per guidance profile on local disk
"""

import os
import json
import logging
import tempfile
from pathlib import Path
from typing import Dict, List, Optional, Union

from .kv_store import PersistentKeyValueStore
from ..errors import StorageUnavailableError
from ..utils.helpers import ensure_directory


class JsonFileKeyValueStore(PersistentKeyValueStore):
    """JSON file backed key/value store"""

    def __init__(self, profiles_dir: Union[str, Path], profile: str = "default"):
        """
        Initialize JSON file store

        Args:
            profiles_dir: Directory holding profile files
            profile: Profile name, used as the file stem
        """
        self.logger = logging.getLogger('haloguide.storage.filesystem')
        self.profiles_dir = Path(profiles_dir).expanduser()
        self.profile = profile
        self.file_path = self.profiles_dir / f"{profile}.json"

        # Loaded lazily, then kept in sync with every write
        self._cache: Optional[Dict[str, str]] = None

    def _load(self) -> Dict[str, str]:
        """Load profile document from disk"""
        if self._cache is not None:
            return self._cache

        if not self.file_path.exists():
            self._cache = {}
            return self._cache

        try:
            with open(self.file_path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except OSError as e:
            raise StorageUnavailableError(f"Failed to read profile {self.file_path}: {e}")
        except json.JSONDecodeError as e:
            # A corrupt profile is treated as an empty one and overwritten on next write
            self.logger.warning(f"Corrupt profile file {self.file_path}, starting empty: {e}")
            data = {}

        if not isinstance(data, dict):
            self.logger.warning(f"Profile file {self.file_path} is not an object, starting empty")
            data = {}

        self._cache = {str(k): str(v) for k, v in data.items()}
        return self._cache

    def _flush(self, key: str):
        """Write the profile document atomically"""
        try:
            ensure_directory(self.profiles_dir)
            fd, tmp_path = tempfile.mkstemp(
                prefix=f".{self.profile}.", suffix=".tmp", dir=str(self.profiles_dir)
            )
            try:
                with os.fdopen(fd, 'w', encoding='utf-8') as f:
                    json.dump(self._cache, f, indent=2, ensure_ascii=False)
                os.replace(tmp_path, self.file_path)
            except BaseException:
                if os.path.exists(tmp_path):
                    os.unlink(tmp_path)
                raise
        except OSError as e:
            raise StorageUnavailableError(f"Failed to write profile {self.file_path}: {e}", key=key)

    def get(self, key: str) -> Optional[str]:
        return self._load().get(key)

    def set(self, key: str, value: str) -> None:
        data = self._load()
        data[key] = str(value)
        self._flush(key)
        self.logger.debug(f"Stored {key} in profile {self.profile}")

    def remove(self, key: str) -> None:
        data = self._load()
        if key not in data:
            return
        del data[key]
        self._flush(key)

    def keys(self) -> List[str]:
        return list(self._load().keys())

    def clear(self) -> None:
        """Delete the profile file entirely"""
        self._cache = {}
        try:
            if self.file_path.exists():
                self.file_path.unlink()
                self.logger.info(f"Removed profile file: {self.file_path}")
        except OSError as e:
            raise StorageUnavailableError(f"Failed to remove profile {self.file_path}: {e}")
