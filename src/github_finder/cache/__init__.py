from github_finder.cache.pressure import MemoryPressureSignal
from github_finder.cache.user_cache import DEFAULT_TTL_SECONDS, ExpiringUserCache

__all__ = ["DEFAULT_TTL_SECONDS", "ExpiringUserCache", "MemoryPressureSignal"]
