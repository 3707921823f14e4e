"""
WiremapLifeCycle Enum

Defines the lifecycle of bound services
"""

from enum import Enum


class WiremapLifeCycle(Enum):
    """Lifecycle of bound services"""
    SINGLETON = "SINGLETON"
    TRANSIENT = "TRANSIENT"
