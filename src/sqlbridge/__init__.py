"""
sqlbridge - Engine-portable typed statement execution over DB-API drivers.

- sqlbridge.core: type registry, dialects, executor, data sources
- sqlbridge.cli: ``sqlbridge`` command line
"""

__version__ = "0.3.0"

# Re-export the public API from the implementation package
from sqlbridge.core import *  # noqa
