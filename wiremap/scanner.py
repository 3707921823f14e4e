"""
TypeScanner

Lexical pass over a source file: lists the classes a module declares
without importing it. Whether a class is concrete is decided later by
introspection (see AutoDiscovery).
"""

import ast
import logging
import os
from dataclasses import dataclass
from typing import List, Optional

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ScannedType:
    """A class declaration found in source text"""
    name: str
    namespace: str

    @property
    def identifier(self) -> str:
        return f"{self.namespace}.{self.name}" if self.namespace else self.name


class TypeScanner:
    """Extracts top-level class declarations from Python source.

    Example::

        scanner = TypeScanner()
        scanner.scan("class Mailer:\\n    pass\\n", "app.mail")
        # [ScannedType(name="Mailer", namespace="app.mail")]
    """

    def scan(self, source: str, namespace: str, filename: str = "<unknown>") -> List[ScannedType]:
        try:
            tree = ast.parse(source, filename=filename)
        except (SyntaxError, ValueError) as e:
            logger.warning("Skipping %s: cannot parse source (%s)", filename, e)
            return []

        return [
            ScannedType(name=node.name, namespace=namespace)
            for node in tree.body
            if isinstance(node, ast.ClassDef)
        ]

    def scan_file(self, path: str, namespace: str) -> List[ScannedType]:
        try:
            with open(path, "rb") as f:
                source = f.read()
        except OSError as e:
            logger.warning("Skipping %s: %s", path, e)
            return []

        return self.scan(source, namespace, filename=path)


def module_name_for(path: str, root: str) -> Optional[str]:
    """Map a ``.py`` file under ``root`` to its dotted module name.

    ``root/pkg/__init__.py`` maps to ``pkg`` and ``root/pkg/mod.py`` to
    ``pkg.mod``. Returns None for files outside ``root`` or without a
    valid module name.
    """
    path = os.path.realpath(path)
    root = os.path.realpath(root)

    relative = os.path.relpath(path, root)
    if relative.startswith(os.pardir) or os.path.isabs(relative):
        return None

    stem, ext = os.path.splitext(relative)
    if ext != ".py":
        return None

    parts = stem.split(os.sep)
    if parts[-1] == "__init__":
        parts = parts[:-1]
    if not parts or not all(part.isidentifier() for part in parts):
        return None

    return ".".join(parts)
