"""
Acquisition: sanitization, cache layout, fetch strategies, toolchains.
"""

from vessel.core.acquire.acquirer import Acquirer
from vessel.core.acquire.cache import CacheLayout
from vessel.core.acquire.strategies import AcquisitionStrategy, CloneStrategy, TarballStrategy

__all__ = [
    "Acquirer",
    "AcquisitionStrategy",
    "CacheLayout",
    "CloneStrategy",
    "TarballStrategy",
]
