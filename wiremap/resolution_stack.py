"""
ResolutionStack

This module provides the bookkeeping for cycle detection during autowiring.
The ResolutionStack tracks the classes currently under construction on the
active call chain, in the order autowiring entered them.

The stack belongs to one container instance. It is not shared between
containers and is not safe for concurrent use from several threads.
"""

from typing import Dict, Iterator, List, Type

from .type_registry import type_id


class ResolutionStack:
    """Ordered set of classes currently being autowired.

    A class may appear at most once. Attempting to push a class that is
    already present is the cycle condition; the container checks
    membership before pushing and raises CircularDependencyError.

    Example (internal usage)::

        stack = ResolutionStack()
        stack.push(ServiceA)
        stack.push(ServiceB)

        ServiceA in stack          # True
        stack.chain(ServiceA)      # "pkg.ServiceA -> pkg.ServiceB -> pkg.ServiceA"

        stack.pop(ServiceB)
        stack.pop(ServiceA)
    """

    def __init__(self):
        # dict preserves insertion order, giving an ordered set
        self._entries: Dict[Type, None] = {}

    def push(self, cls: Type) -> None:
        """Mark a class as being constructed.

        Raises:
            ValueError: When the class is already on the stack. Callers
                must check membership first.
        """
        if cls in self._entries:
            raise ValueError(f"{type_id(cls)} is already being resolved")
        self._entries[cls] = None

    def pop(self, cls: Type) -> None:
        """Remove a class from the stack. Unknown classes are ignored."""
        self._entries.pop(cls, None)

    def clear(self) -> None:
        self._entries.clear()

    def types(self) -> List[Type]:
        return list(self._entries)

    def chain(self, tail: Type) -> str:
        """Render the stack followed by ``tail`` as ``A -> B -> tail``."""
        return " -> ".join(type_id(t) for t in [*self._entries, tail])

    def __contains__(self, cls: object) -> bool:
        return cls in self._entries

    def __iter__(self) -> Iterator[Type]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)
