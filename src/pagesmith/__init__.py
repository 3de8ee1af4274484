"""
Pagesmith: page compilation and theme stylesheet publishing for
multi-tenant site builders.
"""

from pagesmith._version import get_version

__version__ = get_version()

__all__ = ["__version__", "get_version"]
