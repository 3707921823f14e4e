"""
Test Fixtures

Common test classes used across test modules
"""

import datetime
import logging
import pathlib
from abc import ABC, abstractmethod
from enum import Enum
from typing import Optional, Protocol


class Database:
    """Test database class"""

    def __init__(self):
        self.name = "TestDB"


class CacheService:
    """Test cache service without a constructor"""
    pass


class UserRepository:
    """Test repository with dependencies"""

    def __init__(self, db: Database, cache: CacheService):
        self.db = db
        self.cache = cache


class CounterService:
    """Service with mutable state for testing singleton behavior"""

    def __init__(self):
        self.counter = 0

    def increment(self):
        self.counter += 1
        return self.counter


class LoggerInterface(Protocol):
    """Interface - must be bound explicitly"""

    def log(self, message: str) -> None: ...


class ArrayLogger:
    """Logger implementation collecting messages"""

    def __init__(self):
        self.messages = []

    def log(self, message: str) -> None:
        self.messages.append(message)


class BaseStorage(ABC):
    """Abstract class - not instantiable"""

    @abstractmethod
    def read(self) -> str: ...


class DiskStorage(BaseStorage):
    def read(self) -> str:
        return "disk"


class Color(Enum):
    RED = "red"


class ServiceWithLogger:
    """Service depending on an interface"""

    def __init__(self, logger: LoggerInterface):
        self.logger = logger


class ServiceWithOptionalLogger:
    """Optional interface dependency defaults to None when unbound"""

    def __init__(self, logger: Optional[LoggerInterface] = None):
        self.logger = logger


class ServiceWithNullableLogger:
    """Nullable interface dependency without default"""

    def __init__(self, logger: LoggerInterface | None):
        self.logger = logger


class ServiceWithDefaults:
    """Primitive parameters with defaults"""

    def __init__(self, db: Database, name: str = "default", retries: int = 3):
        self.db = db
        self.name = name
        self.retries = retries


class ServiceWithPrimitive:
    """Primitive parameter without default - cannot be autowired"""

    def __init__(self, api_key: str):
        self.api_key = api_key


class ServiceWithoutHint:
    """Parameter without annotation or default"""

    def __init__(self, dependency):
        self.dependency = dependency


class ServiceWithKeywordOnly:
    def __init__(self, *, db: Database, **options):
        self.db = db
        self.options = options


class ServiceWithPositionalOnly:
    def __init__(self, db: Database, /):
        self.db = db


class ServiceWithStorage:
    """Depends on an abstract class"""

    def __init__(self, storage: BaseStorage):
        self.storage = storage


class CircularA:
    def __init__(self, b: "CircularB"):
        self.b = b


class CircularB:
    def __init__(self, a: CircularA):
        self.a = a


class SelfReferencing:
    def __init__(self, other: "SelfReferencing"):
        self.other = other


class Level1:
    """First level of nested dependencies"""
    pass


class Level2:
    """Second level of nested dependencies"""

    def __init__(self, l1: Level1):
        self.l1 = l1


class Level3:
    """Third level of nested dependencies"""

    def __init__(self, l2: Level2):
        self.l2 = l2


class Level4:
    """Fourth level of nested dependencies"""

    def __init__(self, l3: Level3, l1: Level1):
        self.l3 = l3
        self.l1 = l1


class ServiceWithClock:
    """Standard library value type with a default"""

    def __init__(self, db: Database, started: datetime.datetime = None):
        self.db = db
        self.started = started


class ServiceWithStdlibLogger:
    def __init__(self, log: logging.Logger = None):
        self.log = log


class ServiceWithPath:
    """Standard library value type without default - needs a binding"""

    def __init__(self, root: pathlib.Path):
        self.root = root
