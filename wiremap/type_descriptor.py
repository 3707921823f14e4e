"""
TypeDescriptor

This module provides the runtime introspection used by both autowiring
and discovery. A TypeDescriptor answers two questions about a class:

- Can the container construct it? (not an interface, not abstract)
- What does its constructor need? (parameter names, types, defaults)

Parameter types are read from ``__init__`` annotations. Forward references
(string annotations and PEP 563) are resolved with typing.get_type_hints(),
falling back to the defining module's namespace.
"""

import inspect
import logging
import os
import types
import typing
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple, Type, Union

from .type_registry import is_internal, type_id

logger = logging.getLogger(__name__)

_NONE_TYPE = type(None)


@dataclass(frozen=True)
class ParameterInfo:
    """One constructor parameter as seen by autowiring.

    Attributes:
        name: Parameter name
        annotation: The resolved annotation (may be a string if unresolvable)
        type: The non-primitive class to inject, or None for primitives
        has_default: Whether the parameter declares a default value
        default: The default value (``inspect.Parameter.empty`` if none)
        nullable: Whether the annotation admits None
        kind: The inspect parameter kind
    """
    name: str
    annotation: Any
    type: Optional[Type]
    has_default: bool
    default: Any
    nullable: bool
    kind: Any

    @property
    def type_id(self) -> Optional[str]:
        return type_id(self.type) if self.type is not None else None

    @property
    def type_name(self) -> str:
        if self.type is not None:
            return type_id(self.type)
        if self.annotation is inspect.Parameter.empty:
            return "unknown"
        if inspect.isclass(self.annotation):
            return type_id(self.annotation)
        return str(self.annotation)


class TypeDescriptor:
    """Introspection capability for a single class.

    Example::

        descriptor = TypeDescriptor(UserRepository)
        descriptor.is_instantiable()      # True
        descriptor.dependencies()         # ["app.db.Database", "app.cache.Cache"]
    """

    def __init__(self, cls: Type):
        self.cls = cls

    def is_interface(self) -> bool:
        """True for Protocol classes (structural interfaces)."""
        if not inspect.isclass(self.cls):
            return False
        if hasattr(typing, "is_protocol"):
            return typing.is_protocol(self.cls)
        return bool(getattr(self.cls, "_is_protocol", False))

    def is_abstract(self) -> bool:
        return inspect.isclass(self.cls) and inspect.isabstract(self.cls)

    def is_instantiable(self) -> bool:
        """True when autowiring can call the class."""
        if not inspect.isclass(self.cls):
            return False
        if self.is_interface() or self.is_abstract():
            return False
        return not issubclass(self.cls, Enum)

    def has_constructor(self) -> bool:
        return self.cls.__init__ is not object.__init__

    def source_file(self) -> Optional[str]:
        """Resolved path of the defining file, None for internal classes."""
        if is_internal(self.cls):
            return None
        try:
            path = inspect.getsourcefile(self.cls)
        except (TypeError, OSError):
            return None
        return os.path.realpath(path) if path else None

    def constructor_parameters(self) -> List[ParameterInfo]:
        """Describe ``__init__`` parameters in declaration order.

        ``self``, ``*args`` and ``**kwargs`` are excluded. A class without
        its own constructor has no parameters.
        """
        if not self.has_constructor():
            return []

        try:
            sig = inspect.signature(self.cls.__init__)
        except (ValueError, TypeError) as e:
            logger.debug("No signature for %s.__init__: %s", type_id(self.cls), e)
            return []

        hints = self._resolve_type_hints()
        parameters = []
        for index, (name, param) in enumerate(sig.parameters.items()):
            if index == 0:
                continue  # self
            if param.kind in (inspect.Parameter.VAR_POSITIONAL, inspect.Parameter.VAR_KEYWORD):
                continue

            annotation = hints.get(name, param.annotation)
            if isinstance(annotation, str):
                annotation = self._resolve_string_annotation(annotation)

            cls, nullable = _unwrap(annotation)
            parameters.append(ParameterInfo(
                name=name,
                annotation=annotation,
                type=cls,
                has_default=param.default is not inspect.Parameter.empty,
                default=param.default,
                nullable=nullable,
                kind=param.kind,
            ))

        return parameters

    def dependencies(self) -> List[str]:
        """Identifiers of the non-primitive constructor parameter types."""
        return [p.type_id for p in self.constructor_parameters() if p.type is not None]

    def _resolve_type_hints(self) -> Dict[str, Any]:
        try:
            return typing.get_type_hints(self.cls.__init__, include_extras=True)
        except Exception as e:
            # Unresolvable names; raw annotations are evaluated one by one
            logger.debug("Cannot read type hints of %s.__init__: %s", type_id(self.cls), e)
            return {}

    def _resolve_string_annotation(self, annotation: str) -> Any:
        """Evaluate a forward reference in the defining module's namespace.

        Returns the original string when it cannot be resolved; autowiring
        then treats the parameter as primitive.
        """
        module = inspect.getmodule(self.cls)
        namespace: Dict[str, Any] = {"Optional": Optional, "Union": Union}
        if module is not None:
            namespace.update(vars(module))
        namespace.update(vars(self.cls))

        try:
            return eval(annotation, namespace)
        except Exception as e:
            logger.debug(
                "Cannot resolve forward reference '%s' in %s.__init__: %s",
                annotation, type_id(self.cls), e,
            )
            return annotation


def extract_dependencies(cls: Type) -> List[str]:
    return TypeDescriptor(cls).dependencies()


def _unwrap(annotation: Any) -> Tuple[Optional[Type], bool]:
    """Reduce an annotation to (injectable class or None, nullable)."""
    if annotation is inspect.Parameter.empty:
        return None, False
    if annotation is None or annotation is _NONE_TYPE:
        return None, True

    origin = typing.get_origin(annotation)
    if origin is typing.Annotated:
        return _unwrap(typing.get_args(annotation)[0])

    if origin is Union or origin is getattr(types, "UnionType", None):
        args = typing.get_args(annotation)
        members = [a for a in args if a is not _NONE_TYPE]
        nullable = len(members) < len(args)
        if len(members) == 1:
            cls, _ = _unwrap(members[0])
            return cls, nullable
        return None, nullable

    if inspect.isclass(annotation) and annotation.__module__ != "builtins":
        return annotation, False

    return None, False
