"""
ServerList Backend
GraphQL API for listing, tagging and voting on Minecraft servers
"""

__version__ = "0.1.0"

from .config import settings

__all__ = ["settings", "__version__"]
