"""
WiremapContainer

This module provides the core DI container implementation with dependency
resolution and lifecycle management. It is the heart of wiremap,
responsible for:

- Storing bindings and cached singleton instances
- Autowiring classes from their constructor annotations
- Applying singleton and transient lifecycles to explicit bindings
- Detecting circular dependencies

Autowired classes are always cached as singletons, including classes bound
without a factory (the default factory autowires). Only bindings with an
explicit factory can be transient.
"""

import functools
import inspect
import logging
import os
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple, Type, TypeVar, Union, TYPE_CHECKING

from .binding import Binding
from .class_map import ClassMap
from .config import load_config_file
from .exceptions import (
    CircularDependencyError,
    NotFoundError,
    NotInstantiableError,
    UnresolvableParameterError,
)
from .lifecycle import WiremapLifeCycle
from .resolution_stack import ResolutionStack
from .resolver import Resolver
from .settings import WiremapSettings
from .type_descriptor import ParameterInfo, TypeDescriptor
from .type_registry import add_source_root, is_internal, load_type, to_type, type_id

if TYPE_CHECKING:
    from .cache_manager import CacheManager

logger = logging.getLogger(__name__)

T = TypeVar('T')


class WiremapContainer:
    """DI container with autowiring.

    Attributes:
        _bindings: Dictionary mapping classes to their Binding
        _instances: Cached singleton instances
        _resolving: Classes currently being autowired (cycle detection)

    Note:
        A container is not safe for concurrent use. Give each thread (or
        request) its own container.

    Example::

        container = WiremapContainer()
        container.bind(LoggerInterface, lambda: FileLogger("/tmp/app.log"))

        service = container.get(UserService)   # autowired
        service is container.get(UserService)  # True
    """

    def __init__(self, settings: Optional[WiremapSettings] = None):
        self._bindings: Dict[Type, Binding] = {}
        self._instances: Dict[Type, Any] = {}
        self._resolving = ResolutionStack()
        self._resolver: Optional[Resolver] = None
        self.settings = settings

    def bind(
        self,
        abstract: Union[Type, str],
        factory: Optional[Callable[..., Any]] = None,
        singleton: bool = True,
    ) -> None:
        """Bind a class or interface to a factory.

        Args:
            abstract: The class (or its dotted identifier) to bind
            factory: Callable taking no argument or one Resolver. A class
                is accepted and resolved through the container. When
                omitted, the binding autowires ``abstract``.
            singleton: Cache the instance produced by ``factory``

        Raises:
            InvalidIdentifierError: When ``abstract`` is not a known class
            TypeError: When ``factory`` is not callable

        Example::

            container.bind(Mailer)
            container.bind(Clock, lambda: FrozenClock(0), singleton=False)
            container.bind(Storage, lambda resolver: resolver.get(DiskStorage))
        """
        interface = to_type(abstract)

        # bind(X, X) would resolve X through its own binding
        if factory is None or factory is interface:
            factory = functools.partial(self._autowire, interface)
        elif inspect.isclass(factory):
            factory = functools.partial(_resolve_implementation, factory)
        elif not callable(factory):
            raise TypeError(
                f"Factory for {type_id(interface)} must be callable, got {type(factory).__name__}"
            )

        lifecycle = WiremapLifeCycle.SINGLETON if singleton else WiremapLifeCycle.TRANSIENT
        self._bindings[interface] = Binding(
            interface=interface,
            factory=factory,
            lifecycle=lifecycle,
        )

    def resolve(self, id: Union[Type[T], str]) -> T:
        """Resolve a class to an instance.

        Resolution order:
        1. Cached singleton instance
        2. Explicit binding
        3. Autowiring (result cached as singleton)

        Raises:
            InvalidIdentifierError: When ``id`` is not a known class
            NotFoundError: When ``id`` is an unbound interface
            NotInstantiableError: When ``id`` is an unbound abstract class
            UnresolvableParameterError: When a constructor parameter cannot be supplied
            CircularDependencyError: When autowiring revisits a class
        """
        cls = to_type(id)

        if cls in self._instances:
            return self._instances[cls]

        binding = self._bindings.get(cls)
        if binding is not None:
            return self._resolve_binding(binding)

        descriptor = TypeDescriptor(cls)
        if descriptor.is_instantiable():
            return self._autowire(cls)

        if descriptor.is_abstract() and not descriptor.is_interface():
            raise NotInstantiableError(
                f"Class {type_id(cls)} is abstract and has no binding.\n"
                f"Hint: container.bind({cls.__name__}, lambda resolver: resolver.get(Implementation))"
            )

        bound_types = ", ".join(type_id(t) for t in self._bindings) or "None"
        raise NotFoundError(
            f"Service {type_id(cls)} not found.\n"
            f"Bound types: {bound_types}\n"
            f"Hint: container.bind({cls.__name__}, lambda resolver: ...)"
        )

    def get(self, id: Union[Type[T], str]) -> T:
        """Alias of resolve()."""
        return self.resolve(id)

    def has(self, id: Union[Type, str]) -> bool:
        """True if ``id`` is bound, cached, or can be autowired."""
        cls = id if inspect.isclass(id) else load_type(id)
        if cls is None:
            return False

        return (
            cls in self._bindings
            or cls in self._instances
            or TypeDescriptor(cls).is_instantiable()
        )

    def clear(self) -> None:
        """Drop all bindings, instances and resolution state.

        The persisted class map is not touched.
        """
        self._bindings.clear()
        self._instances.clear()
        self._resolving.clear()
        self._resolver = None

    def get_registered(self) -> List[Type]:
        """Bound classes, in binding order."""
        return list(self._bindings)

    def resolver(self) -> Resolver:
        """The cached Resolver handed to factories."""
        if self._resolver is None:
            self._resolver = Resolver(self)
        return self._resolver

    def load_config(self, config: Mapping[Any, Callable[..., Any]]) -> None:
        """Bind every ``abstract -> factory`` pair of a configuration mapping."""
        for abstract, factory in config.items():
            self.bind(abstract, factory)

    def load_compiled(self, class_map: ClassMap) -> None:
        """Bind the classes of a class map with autowiring factories.

        Classes that already have a binding (e.g. from configuration) keep
        it. Identifiers that no longer name a class are skipped.
        """
        for identifier in class_map:
            cls = load_type(identifier)
            if cls is None:
                logger.warning("Skipping %s from class map: class not found", identifier)
                continue
            if cls in self._bindings:
                continue
            self.bind(cls)

    def initialize(
        self,
        anchor_file: str,
        cache_manager: Optional['CacheManager'] = None,
    ) -> None:
        """Set the container up for the project around ``anchor_file``.

        Loads configuration bindings first, then binds every class of the
        (possibly refreshed) class map. Explicit configuration therefore
        takes precedence over autowiring.

        Args:
            anchor_file: File of the composition root; its directory is the
                project directory holding ``src/``, ``cache/`` and the
                configuration file
            cache_manager: Cache manager to use (defaults to one for the
                project directory)
        """
        from .cache_manager import CacheManager

        settings = self.settings or WiremapSettings()
        base_path = os.path.dirname(os.path.abspath(anchor_file))

        manager = cache_manager or CacheManager(base_path, settings=settings)
        # The configuration file imports project classes by module name
        add_source_root(manager.src_path)

        self.load_config(load_config_file(os.path.join(base_path, settings.config_file)))
        self.load_compiled(manager.get_class_map(anchor_file))

    def _resolve_binding(self, binding: Binding) -> Any:
        instance = self._invoke_factory(binding.factory)

        if binding.singleton:
            self._instances[binding.interface] = instance

        return instance

    def _invoke_factory(self, factory: Callable[..., Any]) -> Any:
        if _accepts_resolver(factory):
            return factory(self.resolver())
        return factory()

    def _autowire(self, cls: Type[T]) -> T:
        """Construct ``cls`` by resolving its constructor parameters.

        The resolution stack entry for ``cls`` is removed on every exit,
        so a failed resolution cannot trip cycle detection later.
        """
        if cls in self._resolving:
            chain = [*self._resolving.types(), cls]
            raise CircularDependencyError(
                f"Circular dependency detected: {self._resolving.chain(cls)}",
                chain=chain,
            )

        self._resolving.push(cls)
        try:
            descriptor = TypeDescriptor(cls)
            if not descriptor.is_instantiable():
                raise NotInstantiableError(f"Class {type_id(cls)} is not instantiable")

            args, kwargs = self._resolve_dependencies(cls, descriptor.constructor_parameters())
            instance = cls(*args, **kwargs)

            # Autowiring treats every class as a singleton
            self._instances[cls] = instance
            return instance
        finally:
            self._resolving.pop(cls)

    def _resolve_dependencies(
        self,
        cls: Type,
        parameters: List[ParameterInfo],
    ) -> Tuple[List[Any], Dict[str, Any]]:
        args: List[Any] = []
        kwargs: Dict[str, Any] = {}
        for param in parameters:
            value = self._resolve_parameter(cls, param)
            if param.kind == inspect.Parameter.POSITIONAL_ONLY:
                args.append(value)
            else:
                kwargs[param.name] = value
        return args, kwargs

    def _resolve_parameter(self, cls: Type, param: ParameterInfo) -> Any:
        if param.type is not None and self._can_inject(param.type):
            return self.resolve(param.type)

        if param.has_default:
            return param.default

        if param.nullable:
            return None

        raise UnresolvableParameterError(
            f"Cannot resolve parameter '{param.name}' of type '{param.type_name}' "
            f"in class '{type_id(cls)}'",
            parameter=param.name,
            type_name=param.type_name,
            declaring_class=type_id(cls),
        )

    def _can_inject(self, cls: Type) -> bool:
        """Standard library value types (datetime, Path, ...) need a binding."""
        if cls in self._bindings or cls in self._instances:
            return True
        return not is_internal(cls) and self.has(cls)

    def __getitem__(self, interface: Type[T]) -> Callable[[], T]:
        """Support subscript syntax: container[Type]().

        Example::

            # These are equivalent:
            service = container[MyService]()
            service = container.get(MyService)
        """

        def getter() -> T:
            return self.get(interface)

        return getter


def _resolve_implementation(implementation: Type, resolver: Resolver) -> Any:
    return resolver.get(implementation)


def _accepts_resolver(factory: Callable[..., Any]) -> bool:
    """True when the factory has a required positional parameter (or *args)."""
    try:
        sig = inspect.signature(factory)
    except (TypeError, ValueError):
        return False

    for param in sig.parameters.values():
        if param.kind == inspect.Parameter.VAR_POSITIONAL:
            return True
        if (
            param.kind in (inspect.Parameter.POSITIONAL_ONLY, inspect.Parameter.POSITIONAL_OR_KEYWORD)
            and param.default is inspect.Parameter.empty
        ):
            return True
    return False
