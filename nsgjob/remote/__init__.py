"""
Remote job service clients.
"""

from .interface import JobRemote, ProgressCallback
from .nsg_client import NsgClient

__all__ = ["JobRemote", "NsgClient", "ProgressCallback"]
