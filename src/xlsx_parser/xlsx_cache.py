from collections import defaultdict
from functools import wraps


class Cacheable:
    def __new__(cls, *_args, **_kwargs):
        obj = object.__new__(cls)
        obj._cache = defaultdict(dict)
        return obj

    def cache_clear(self) -> None:
        """Drop every memoized result held by this instance."""
        self._cache.clear()


def cache(num_args=1):
    """
    Decorator to memoize a method of a :class:`Cacheable` using its
    first ``num_args`` positional arguments as the key.
    """

    def cache_decorator(func):
        method = func.__name__

        @wraps(func)
        def inner(self, *args, **kwargs):
            key = args[:num_args]
            results = self._cache[method]
            if key not in results:
                results[key] = func(self, *args, **kwargs)
            return results[key]

        return inner

    return cache_decorator
