"""
Resolver

Restricted view of a container, exposing only ``get()`` and ``has()``.
Factories that take one argument receive a Resolver, as does
``WiremapScope.bootstrap()``: service location stays possible there
without handing out ``bind()`` or ``clear()``.
"""

from typing import Any, Callable, TYPE_CHECKING, Type, TypeVar, Union

if TYPE_CHECKING:
    from .container import WiremapContainer

T = TypeVar('T')


class Resolver:
    """Limited container access for factory functions.

    Example::

        container.bind(
            PaymentClient,
            lambda resolver: LiveClient(resolver.get(HttpTransport)),
        )
    """

    def __init__(self, container: 'WiremapContainer'):
        self._container = container

    def get(self, id: Union[Type[T], str]) -> Any:
        """Resolve a service from the underlying container."""
        return self._container.get(id)

    def has(self, id: Union[Type, str]) -> bool:
        """Check whether the underlying container can provide ``id``."""
        return self._container.has(id)

    def __getitem__(self, interface: Type[T]) -> Callable[[], T]:
        """Support subscript syntax: resolver[Type]()."""

        def getter() -> T:
            return self.get(interface)

        return getter
