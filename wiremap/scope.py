"""
WiremapScope

Base class for an application's composition root. Subclass it in the
file at the top of your project (next to ``src/``), implement
``bootstrap()``, and instantiate it once at startup::

    # /srv/app/app.py
    class App(WiremapScope):
        def bootstrap(self) -> None:
            self._get(HttpServer).serve()

    App()

The scope owns a private container initialized from the subclass's own
file, so editing the composition root invalidates the class map cache.
"""

import inspect
import os
from abc import ABC, abstractmethod
from typing import Any, Optional, Type, TypeVar, Union

from .container import WiremapContainer
from .settings import WiremapSettings

T = TypeVar('T')


class WiremapScope(ABC):
    """Composition root with its own container."""

    def __init__(self, anchor_file: Optional[str] = None, settings: Optional[WiremapSettings] = None):
        """Initialize the container and run bootstrap().

        Args:
            anchor_file: File of the composition root (defaults to the file
                defining the subclass)
            settings: Host options (defaults to WiremapSettings())
        """
        self._anchor_file = os.path.abspath(anchor_file or inspect.getfile(type(self)))
        self._container = WiremapContainer(settings=settings)
        self._container.initialize(self._anchor_file)
        self.bootstrap()

    @property
    def base_path(self) -> str:
        """Project directory: the directory of the anchor file."""
        return os.path.dirname(self._anchor_file)

    def _get(self, cls: Union[Type[T], str]) -> Any:
        """Resolve a service (only for use inside the scope)."""
        return self._container.get(cls)

    def _has(self, cls: Union[Type, str]) -> bool:
        return self._container.has(cls)

    @abstractmethod
    def bootstrap(self) -> None:
        """Composition root - the only place where service location happens."""
