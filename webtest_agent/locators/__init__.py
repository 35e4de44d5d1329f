"""
Locator resolution: deterministic candidate generation and the self-healing cache
"""
from .strategy import LocatorStrategy
from .self_healing import SelfHealingLocator

__all__ = [
    "LocatorStrategy",
    "SelfHealingLocator",
]
