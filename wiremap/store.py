"""
ClassMapStore

Handles all cache artifact I/O. The artifact is a JSON object mapping
class identifiers to ``{path, mtime, dependencies}``. Factories are never
persisted; the container rebuilds autowiring factories from identifiers.

Caching is optional: every write failure (read-only filesystem, disk
full, permissions) is logged and reported through the return value, never
raised.
"""

import json
import logging
import os
import tempfile
from typing import Any, Dict, Optional

from .class_map import ClassMap, serialize_class_map

logger = logging.getLogger(__name__)

DEFAULT_CACHE_DIR = "cache"
DEFAULT_CACHE_FILE = "wiremap-container.json"


class ClassMapStore:
    """Key-value store for the persisted class map.

    Example::

        store = ClassMapStore("/srv/app")
        store.cache_file        # "/srv/app/cache/wiremap-container.json"
        if store.save(class_map):
            assert store.exists()
    """

    def __init__(
        self,
        base_path: str,
        cache_dir: str = DEFAULT_CACHE_DIR,
        cache_file: str = DEFAULT_CACHE_FILE,
    ):
        self.cache_dir = os.path.join(base_path, cache_dir)
        self.cache_file = os.path.join(self.cache_dir, cache_file)

    def exists(self) -> bool:
        return os.path.isfile(self.cache_file)

    def mtime(self) -> Optional[float]:
        """Modification time of the artifact, None if it does not exist."""
        try:
            return os.path.getmtime(self.cache_file)
        except OSError:
            return None

    def load(self) -> Dict[str, Any]:
        """Load the raw persisted payload.

        Returns:
            The decoded JSON object. Empty when the artifact is missing,
            unreadable, or does not hold a JSON object.
        """
        try:
            with open(self.cache_file, encoding="utf-8") as f:
                payload = json.load(f)
        except FileNotFoundError:
            return {}
        except (OSError, ValueError) as e:
            logger.warning("Ignoring unreadable cache %s: %s", self.cache_file, e)
            return {}

        if not isinstance(payload, dict):
            logger.warning("Ignoring cache %s: expected a JSON object", self.cache_file)
            return {}
        return payload

    def save(self, class_map: ClassMap) -> bool:
        """Write the class map, replacing the artifact atomically.

        Returns:
            True on success, False on any filesystem failure
        """
        if not self.ensure_dir():
            logger.warning("Cache directory %s is not writable; cache not saved", self.cache_dir)
            return False

        content = json.dumps(serialize_class_map(class_map), indent=2) + "\n"
        tmp_path = None
        try:
            fd, tmp_path = tempfile.mkstemp(
                dir=self.cache_dir, prefix=".wiremap-", suffix=".tmp"
            )
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(content)
            os.replace(tmp_path, self.cache_file)
            tmp_path = None
        except OSError as e:
            logger.warning("Cannot write cache %s: %s", self.cache_file, e)
            return False
        finally:
            if tmp_path is not None:
                self._remove(tmp_path)

        logger.debug("Wrote %d classes to %s", len(class_map), self.cache_file)
        return True

    def delete(self) -> None:
        """Delete the artifact. Missing files and read-only filesystems are ignored."""
        self._remove(self.cache_file)

    def ensure_dir(self) -> bool:
        """Create the cache directory if needed.

        Returns:
            True when the directory exists and is writable
        """
        try:
            os.makedirs(self.cache_dir, exist_ok=True)
        except OSError as e:
            logger.debug("Cannot create cache directory %s: %s", self.cache_dir, e)
            return False
        return os.access(self.cache_dir, os.W_OK)

    @staticmethod
    def _remove(path: str) -> None:
        try:
            os.remove(path)
        except FileNotFoundError:
            pass
        except OSError as e:
            logger.debug("Cannot remove %s: %s", path, e)
