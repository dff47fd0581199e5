from .scanner import discover_repos, is_excluded
from .types import DiscoveryError

__all__ = ["discover_repos", "is_excluded", "DiscoveryError"]
