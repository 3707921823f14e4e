"""
Class map

The class map is the persisted index of discoverable concrete classes:
identifier -> ClassMetadata(path, mtime, dependencies). It is the only
thing the cache artifact holds; factories are rebuilt from it on load.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional


@dataclass(frozen=True)
class ClassMetadata:
    """Metadata for one discoverable class"""
    path: str
    mtime: float
    dependencies: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "path": self.path,
            "mtime": self.mtime,
            "dependencies": list(self.dependencies),
        }

    @classmethod
    def from_dict(cls, raw: Any) -> Optional["ClassMetadata"]:
        """Build a record from its persisted form.

        Returns None for malformed records (not a mapping, or missing
        ``path``/``mtime``). A missing or invalid ``dependencies`` entry is
        read as an empty list.
        """
        if not isinstance(raw, Mapping):
            return None

        path = raw.get("path")
        mtime = raw.get("mtime")
        if not isinstance(path, str) or not path:
            return None
        if isinstance(mtime, bool) or not isinstance(mtime, (int, float)):
            return None

        dependencies = raw.get("dependencies")
        if not isinstance(dependencies, list):
            dependencies = []

        return cls(
            path=path,
            mtime=mtime,
            dependencies=[d for d in dependencies if isinstance(d, str)],
        )


ClassMap = Dict[str, ClassMetadata]


def serialize_class_map(class_map: ClassMap) -> Dict[str, Dict[str, Any]]:
    return {identifier: metadata.to_dict() for identifier, metadata in class_map.items()}


def parse_class_map(raw: Any, strict: bool = True) -> Optional[ClassMap]:
    """Parse a persisted class map.

    Args:
        raw: The decoded cache payload
        strict: Reject the whole map when one record is malformed. When
            False, malformed records are skipped.

    Returns:
        The class map, or None if the payload is not a mapping or (strict
        mode) any record is malformed
    """
    if not isinstance(raw, Mapping):
        return None

    class_map: ClassMap = {}
    for identifier, entry in raw.items():
        metadata = ClassMetadata.from_dict(entry)
        if metadata is None:
            if strict:
                return None
            continue
        class_map[identifier] = metadata
    return class_map
