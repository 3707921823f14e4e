"""
AutoDiscovery

Finds the concrete classes under a source root and records, for each,
where it lives, when that file last changed, and what its constructor
depends on. The result is the class map the CacheManager persists.
"""

import logging
import os
import sys
from typing import Iterator, Optional

from .class_map import ClassMap, ClassMetadata
from .scanner import TypeScanner, module_name_for
from .type_descriptor import TypeDescriptor
from .type_registry import ModuleLoader, add_source_root, load_type, type_id

logger = logging.getLogger(__name__)


class AutoDiscovery:
    """Discovers concrete classes for auto-registration.

    Modules are named after their path relative to the source root, and the
    root is put on ``sys.path`` so discovered modules can import each other.

    Example::

        discovery = AutoDiscovery()
        class_map = discovery.discover("/srv/app/src")
        class_map["services.mailer.Mailer"].dependencies
        # ["services.transport.SmtpTransport"]
    """

    def __init__(
        self,
        scanner: Optional[TypeScanner] = None,
        loader: Optional[ModuleLoader] = None,
    ):
        self.scanner = scanner or TypeScanner()
        self.loader = loader or ModuleLoader()
        self.root: Optional[str] = None

    def discover(self, root_dir: str) -> ClassMap:
        """Discover concrete classes in a directory tree.

        Args:
            root_dir: The source root to walk

        Returns:
            Class map for every instantiable class declared under the root.
            Empty when the root does not exist or is not a directory.
        """
        if not os.path.isdir(root_dir):
            logger.debug("Source directory %s does not exist; nothing to discover", root_dir)
            return {}

        self.root = os.path.realpath(root_dir)
        add_source_root(self.root)
        class_map: ClassMap = {}
        for path in self._iter_source_files(self.root):
            class_map.update(self._parse(path, reload=False))

        logger.debug("Discovered %d classes under %s", len(class_map), root_dir)
        return class_map

    def parse_file(self, path: str, root_dir: Optional[str] = None) -> ClassMap:
        """Re-parse a single file.

        The module is reloaded so that edits made since it was imported are
        visible. A file may yield zero, one or several classes.

        Args:
            path: The file to parse
            root_dir: Source root used to name the module (defaults to the
                root of the last discover() call)
        """
        if root_dir is not None:
            self.root = os.path.realpath(root_dir)
            add_source_root(self.root)
        return self._parse(os.path.realpath(path), reload=True)

    def discover_class(self, identifier: str) -> Optional[ClassMetadata]:
        """Discover a single class by introspection alone.

        Returns:
            Metadata for the class, or None when it is unknown, not
            instantiable, or has no source file of its own
        """
        cls = load_type(identifier)
        if cls is None:
            return None

        descriptor = TypeDescriptor(cls)
        if not descriptor.is_instantiable():
            return None

        path = descriptor.source_file()
        if path is None or not os.path.isfile(path):
            return None

        return ClassMetadata(
            path=path,
            mtime=os.path.getmtime(path),
            dependencies=descriptor.dependencies(),
        )

    def _parse(self, path: str, reload: bool) -> ClassMap:
        module_name = self._module_name(path)
        if module_name is None:
            logger.debug("No module name for %s; skipping", path)
            return {}

        scanned = self.scanner.scan_file(path, module_name)
        if not scanned:
            return {}

        module = self.loader.load(module_name, path, reload=reload)
        if module is None:
            return {}

        mtime = os.path.getmtime(path)
        class_map: ClassMap = {}
        for declared in scanned:
            cls = getattr(module, declared.name, None)
            if cls is None or getattr(cls, "__module__", None) != module.__name__:
                continue

            descriptor = TypeDescriptor(cls)
            if not descriptor.is_instantiable():
                continue

            class_map[type_id(cls)] = ClassMetadata(
                path=path,
                mtime=mtime,
                dependencies=descriptor.dependencies(),
            )
        return class_map

    def _module_name(self, path: str) -> Optional[str]:
        if self.root is not None:
            module_name = module_name_for(path, self.root)
            if module_name is not None:
                return module_name

        # Files outside the source root were found by introspection; use the
        # name they were imported under.
        real_path = os.path.realpath(path)
        for name, module in list(sys.modules.items()):
            module_file = getattr(module, "__file__", None)
            if module_file and os.path.realpath(module_file) == real_path:
                return name
        return None

    @staticmethod
    def _iter_source_files(root: str) -> Iterator[str]:
        for dirpath, dirnames, filenames in os.walk(root):
            dirnames[:] = sorted(
                d for d in dirnames if d != "__pycache__" and not d.startswith(".")
            )
            for filename in sorted(filenames):
                if filename.endswith(".py"):
                    yield os.path.join(dirpath, filename)
