"""
alias_platform package initializer.
"""

from . import manager
from . import security
from . import storage

__all__ = ["manager", "security", "storage"]
