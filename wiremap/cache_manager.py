"""
CacheManager

This module keeps the persisted class map consistent with the source tree
without rescanning it on every start. It decides between three outcomes:

- **Full rebuild**: no cache yet, the cache is empty or malformed, or a
  structural file (the anchor file or the configuration file) changed.
- **Cache hit**: stability mode (production) trusts the cache verbatim.
- **Incremental update**: drop classes whose file is gone, re-parse only
  files modified since they were recorded, then pull in any dependency the
  map does not know yet, breadth-first, until nothing new appears.

The cache artifact is rewritten only when something changed.
"""

import logging
import os
from typing import Callable, Dict, List, Optional, Set, Union

from .class_map import ClassMap, ClassMetadata, parse_class_map
from .discovery import AutoDiscovery
from .settings import WiremapSettings
from .store import ClassMapStore

logger = logging.getLogger(__name__)


class CacheManager:
    """Owns the class map and its on-disk artifact.

    Attributes:
        base_path: Project directory holding ``src/``, ``cache/`` and the
            configuration file
        src_path: Source root handed to discovery
        config_file: Configuration file whose changes force a rebuild
        store: The ClassMapStore persisting the map

    Example::

        manager = CacheManager("/srv/app")
        class_map = manager.get_class_map(anchor_file="/srv/app/app.py")
    """

    def __init__(
        self,
        base_path: str,
        *,
        settings: Optional[WiremapSettings] = None,
        store: Optional[ClassMapStore] = None,
        discovery: Optional[AutoDiscovery] = None,
        stable: Union[bool, Callable[[], bool], None] = None,
    ):
        """Initialize the manager for a project directory.

        Args:
            base_path: Project directory
            settings: Host options (defaults to WiremapSettings())
            store: Cache store (defaults to one under ``base_path``)
            discovery: Discovery engine (defaults to AutoDiscovery())
            stable: Stability mode flag or a callable returning it. When
                omitted, ``settings.is_production`` is used.
        """
        self.settings = settings or WiremapSettings()
        self.base_path = base_path
        self.src_path = os.path.join(base_path, self.settings.source_dir)
        self.config_file = os.path.join(base_path, self.settings.config_file)
        self.store = store or ClassMapStore(
            base_path, self.settings.cache_dir, self.settings.cache_file
        )
        self.discovery = discovery or AutoDiscovery()
        self._stable = stable

    def is_stable(self) -> bool:
        if self._stable is None:
            return self.settings.is_production
        if callable(self._stable):
            return bool(self._stable())
        return bool(self._stable)

    def get_class_map(self, anchor_file: Optional[str] = None) -> ClassMap:
        """Return the class map, refreshing the cache as needed.

        Args:
            anchor_file: The file defining the caller's composition root.
                If it changed after the cache was written, the cache is
                rebuilt from scratch.

        Returns:
            The current class map (identifier -> ClassMetadata)
        """
        if not self.store.exists():
            logger.debug("No cache at %s; running full discovery", self.store.cache_file)
            return self.rebuild()

        raw = self.store.load()

        if self.is_stable():
            logger.debug("Stability mode; using cache %s as is", self.store.cache_file)
            return parse_class_map(raw, strict=False) or {}

        return self._update_if_stale(raw, anchor_file)

    def rebuild(self) -> ClassMap:
        """Discover the whole source tree and persist the result."""
        class_map = self.discovery.discover(self.src_path)
        self.discover_new_dependencies(class_map)
        self.store.save(class_map)
        return class_map

    def _full_rebuild(self, reason: str) -> ClassMap:
        logger.debug("Rebuilding cache: %s", reason)
        self.store.delete()
        return self.rebuild()

    def _update_if_stale(self, raw: Dict, anchor_file: Optional[str]) -> ClassMap:
        cached_map = parse_class_map(raw)
        if not cached_map:
            return self._full_rebuild("cache is empty or malformed")

        cache_time = self.store.mtime()
        if cache_time is None:
            return self._full_rebuild("cache disappeared")

        for structural_file in (anchor_file, self.config_file):
            if structural_file and os.path.isfile(structural_file):
                if os.path.getmtime(structural_file) > cache_time:
                    return self._full_rebuild(f"{structural_file} changed")

        return self._incremental_update(cached_map)

    def _incremental_update(self, cached_map: ClassMap) -> ClassMap:
        changed = False
        updated_map: ClassMap = {}
        reparsed: Set[str] = set()

        for identifier, metadata in cached_map.items():
            if not os.path.isfile(metadata.path):
                # Deleted or renamed; a class that moved is found again by re-parse
                logger.debug("Dropping %s: %s no longer exists", identifier, metadata.path)
                changed = True
                continue

            if os.path.getmtime(metadata.path) > metadata.mtime:
                changed = True
                if metadata.path not in reparsed:
                    reparsed.add(metadata.path)
                    logger.debug("Re-parsing %s", metadata.path)
                    updated_map.update(self.discovery.parse_file(metadata.path, self.src_path))
                continue

            updated_map[identifier] = metadata

        if self.discover_new_dependencies(updated_map):
            changed = True

        if changed or len(updated_map) != len(cached_map):
            self.store.save(updated_map)
        else:
            logger.debug("Cache %s is up to date", self.store.cache_file)

        return updated_map

    def discover_new_dependencies(self, class_map: ClassMap) -> List[str]:
        """Close the map over constructor dependencies, in place.

        Each pass only looks at the records added by the previous pass.

        Returns:
            Identifiers added to the map
        """
        added: List[str] = []
        rejected: Set[str] = set()
        frontier: List[ClassMetadata] = list(class_map.values())

        while frontier:
            new_records: List[ClassMetadata] = []
            for metadata in frontier:
                for dependency in metadata.dependencies:
                    if dependency in class_map or dependency in rejected:
                        continue

                    dep_metadata = self.discovery.discover_class(dependency)
                    if dep_metadata is None:
                        rejected.add(dependency)
                        continue

                    logger.debug("Discovered new dependency %s in %s", dependency, dep_metadata.path)
                    class_map[dependency] = dep_metadata
                    new_records.append(dep_metadata)
                    added.append(dependency)
            frontier = new_records

        return added
