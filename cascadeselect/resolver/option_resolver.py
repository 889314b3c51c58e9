"""
resolver/option_resolver.py - Cached option lookups with stale fallback

Wraps a caller-supplied lookup (sync or async) with the TTL cache:
fresh entries short-circuit the lookup, successful lookups are written
back, and failed lookups fall back to whatever entry exists for the key.
"""

from __future__ import annotations

import inspect
import logging
import time
from typing import Any, Dict, Optional

from ..cache import TTLCache
from ..core.models import FetchCallable, OptionList, parse_options
from ..exceptions import OptionFetchError

logger = logging.getLogger("cascade.resolver")


class OptionResolver:
    """
    Resolves option lists through a TTLCache.

    The lookup is invoked at most once per cache miss. Retry policy, if
    any, belongs to the lookup itself.
    """

    def __init__(self, cache: Optional[TTLCache] = None):
        self._cache = cache if cache is not None else TTLCache()
        self._stats = {
            "fetches": 0,
            "fetch_failures": 0,
        }

    @property
    def cache(self) -> TTLCache:
        return self._cache

    async def resolve(
        self,
        fetch_fn: FetchCallable,
        parent_value: Any,
        cache_key: str,
    ) -> OptionList:
        """
        Return the option list for parent_value.

        A fresh cache entry is returned without calling fetch_fn. Otherwise
        fetch_fn runs once; its result is validated, cached and returned.

        Args:
            fetch_fn: Lookup taking the parent value, returning options or
                an awaitable of options
            parent_value: Current value of the parent field
            cache_key: Key derived from field index and parent value

        Returns:
            List of Option

        Raises:
            OptionFetchError: If the lookup fails and no entry exists for
                cache_key
        """
        entry = self._cache.get_fresh(cache_key)
        if entry is not None:
            return list(entry.data)

        self._stats["fetches"] += 1
        start = time.time()
        try:
            result = fetch_fn(parent_value)
            if inspect.isawaitable(result):
                result = await result
            options = parse_options(result)
        except Exception as e:
            self._stats["fetch_failures"] += 1

            # Fresh or stale, any entry beats an error
            fallback = self._cache.get(cache_key)
            if fallback is not None:
                self._cache.record_fallback(cache_key)
                logger.warning(
                    f"Fetch failed for {cache_key}, serving cached options "
                    f"({len(fallback.data)} items): {e}"
                )
                return list(fallback.data)

            logger.error(f"Fetch failed for {cache_key} with no cached fallback: {e}")
            raise OptionFetchError(cache_key, e, parent_value=parent_value) from e

        elapsed_ms = int((time.time() - start) * 1000)
        logger.debug(f"Fetched {len(options)} options for {cache_key} in {elapsed_ms}ms")

        self._cache.put(cache_key, options)
        return options

    def get_stats(self) -> Dict[str, Any]:
        return {
            **self._stats,
            "cache": self._cache.get_stats(),
        }
