"""
Binding

Data class representing a registered service binding
"""

from dataclasses import dataclass
from typing import Callable, Type

from .lifecycle import WiremapLifeCycle


@dataclass
class Binding:
    """Service binding"""
    interface: Type
    factory: Callable
    lifecycle: WiremapLifeCycle

    @property
    def singleton(self) -> bool:
        return self.lifecycle == WiremapLifeCycle.SINGLETON
