class _CacheProxy:
    @property
    def base(self):
        from .base import BaseCacheManager

        return BaseCacheManager

    @property
    def preferences(self):
        from .preferences import PreferencesCacheManager

        return PreferencesCacheManager


Cache = _CacheProxy()
