# Public API
from .binding import Binding
from .cache_manager import CacheManager
from .class_map import ClassMap, ClassMetadata
from .container import WiremapContainer
from .discovery import AutoDiscovery
from .exceptions import (
    CircularDependencyError,
    InvalidIdentifierError,
    NotFoundError,
    NotInstantiableError,
    UnresolvableParameterError,
    WiremapConfigError,
    WiremapError,
)
from .lifecycle import WiremapLifeCycle
from .resolver import Resolver
from .scanner import ScannedType, TypeScanner
from .scope import WiremapScope
from .settings import WiremapSettings
from .store import ClassMapStore
from .type_descriptor import ParameterInfo, TypeDescriptor, extract_dependencies

__all__ = [
    "WiremapContainer",
    "WiremapScope",
    "WiremapLifeCycle",
    "WiremapSettings",
    "Resolver",
    "Binding",
    # Discovery and caching
    "AutoDiscovery",
    "CacheManager",
    "ClassMapStore",
    "ClassMap",
    "ClassMetadata",
    "TypeScanner",
    "ScannedType",
    # Introspection
    "TypeDescriptor",
    "ParameterInfo",
    "extract_dependencies",
    # Exceptions
    "WiremapError",
    "InvalidIdentifierError",
    "NotFoundError",
    "NotInstantiableError",
    "UnresolvableParameterError",
    "CircularDependencyError",
    "WiremapConfigError",
]

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("wiremap")
except PackageNotFoundError:
    # Fallback for development
    __version__ = '0.0.0'
