"""
Type registry

Maps between classes and the dotted identifiers stored in the class map,
and imports the modules that discovery finds on disk.
"""

import builtins
import importlib
import importlib.util
import inspect
import logging
import os
import sys
from types import ModuleType
from typing import Any, Optional, Type

from .exceptions import InvalidIdentifierError

logger = logging.getLogger(__name__)


def type_id(cls: Any) -> str:
    """Return the identifier of a class: ``"<module>.<qualname>"``.

    Non-class values fall back to ``str()`` so error messages can render
    whatever the caller passed.
    """
    if inspect.isclass(cls):
        if cls.__module__ == "builtins":
            return cls.__qualname__
        return f"{cls.__module__}.{cls.__qualname__}"
    return str(cls)


def load_type(identifier: str) -> Optional[Type]:
    """Find the class named by a dotted identifier.

    The longest importable module prefix is imported, then the remaining
    segments are looked up as attributes (nested classes are supported).

    Returns:
        The class, or None when the identifier does not name a class
    """
    if not isinstance(identifier, str) or not identifier:
        return None

    parts = identifier.split(".")
    if len(parts) == 1:
        obj = getattr(builtins, identifier, None)
        return obj if inspect.isclass(obj) else None

    for split in range(len(parts) - 1, 0, -1):
        module_name = ".".join(parts[:split])
        module = sys.modules.get(module_name)
        if module is None:
            try:
                module = importlib.import_module(module_name)
            except ImportError:
                continue
            except Exception as e:
                logger.warning("Importing %s failed: %s", module_name, e)
                return None

        obj: Any = module
        for attr in parts[split:]:
            obj = getattr(obj, attr, None)
            if obj is None:
                return None
        return obj if inspect.isclass(obj) else None

    return None


def to_type(abstract: Any) -> Type:
    """Normalize a class or identifier string to a class.

    Raises:
        InvalidIdentifierError: When ``abstract`` does not name a known class
    """
    if inspect.isclass(abstract):
        return abstract

    if isinstance(abstract, str):
        cls = load_type(abstract)
        if cls is not None:
            return cls

    raise InvalidIdentifierError(
        f"'{type_id(abstract)}' must be a valid class or interface"
    )


def add_source_root(root: str) -> None:
    """Put a source root on ``sys.path`` so its modules import by name.

    Discovered modules import each other by their names relative to the
    root (``from mailer import Mailer``), which only works when the root
    is importable.
    """
    root = os.path.realpath(root)
    if os.path.isdir(root) and root not in sys.path:
        sys.path.insert(0, root)
        importlib.invalidate_caches()


def is_internal(cls: Type) -> bool:
    """True for builtin and standard library classes."""
    top_level = cls.__module__.split(".")[0]
    return top_level == "builtins" or top_level in sys.stdlib_module_names


class ModuleLoader:
    """Imports modules found by discovery.

    Modules are imported by name so they share identity with the rest of
    the application. When the source root is not on ``sys.path`` the module
    is loaded from its file location instead and registered under its
    dotted name, so ``load_type()`` can find it later.
    """

    def load(self, module_name: str, path: str, reload: bool = False) -> Optional[ModuleType]:
        """Import ``module_name`` from ``path``.

        Args:
            module_name: Dotted module name derived from the file path
            path: The file that must back the module
            reload: Re-execute an already imported module so edits on disk
                become visible

        Returns:
            The module, or None when it cannot be imported from ``path``
        """
        importlib.invalidate_caches()
        try:
            module = sys.modules.get(module_name)
            if module is None:
                module = self._import(module_name, path)
            elif reload and self._same_file(module, path):
                module = self._reload(module, path)

            if not self._same_file(module, path):
                logger.warning(
                    "Module %s resolves to %s, not %s; skipping",
                    module_name, getattr(module, "__file__", None), path,
                )
                return None
            return module
        except Exception as e:
            logger.warning("Cannot import %s from %s: %s", module_name, path, e)
            return None

    def _import(self, module_name: str, path: str) -> ModuleType:
        try:
            return importlib.import_module(module_name)
        except ModuleNotFoundError:
            return self._load_from_location(module_name, path)

    def _reload(self, module: ModuleType, path: str) -> ModuleType:
        try:
            return importlib.reload(module)
        except ModuleNotFoundError:
            return self._load_from_location(module.__name__, path)

    @staticmethod
    def _load_from_location(module_name: str, path: str) -> ModuleType:
        spec = importlib.util.spec_from_file_location(module_name, path)
        if spec is None or spec.loader is None:
            raise ImportError(f"No loader for {path}")

        module = importlib.util.module_from_spec(spec)
        sys.modules[module_name] = module
        try:
            spec.loader.exec_module(module)
        except BaseException:
            sys.modules.pop(module_name, None)
            raise
        return module

    @staticmethod
    def _same_file(module: ModuleType, path: str) -> bool:
        module_file = getattr(module, "__file__", None)
        if not module_file:
            return False
        return os.path.realpath(module_file) == os.path.realpath(path)
