"""
Domain models for the package manager.

All models are re-exported here for convenient access:

    from vessel.core.models import Package, Manifest, PackageCatalog, Receipt
"""

from vessel.core.models.catalog import PackageCatalog
from vessel.core.models.package import Manifest, Package
from vessel.core.models.receipt import Receipt

__all__ = [
    # package.py
    "Manifest",
    "Package",
    # catalog.py
    "PackageCatalog",
    # receipt.py
    "Receipt",
]
