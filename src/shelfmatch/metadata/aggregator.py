# ABOUTME: Fan-out/fan-in querying of every metadata source for each search variation.
# ABOUTME: One worker thread per source per round; results gathered in registration order.

import logging
from concurrent.futures import Future, ThreadPoolExecutor

from shelfmatch.metadata.cache import SearchCache
from shelfmatch.metadata.provider import MetadataSource
from shelfmatch.metadata.types import MetadataCandidate

logger = logging.getLogger(__name__)


class FanOutAggregator:
    """Queries all registered sources concurrently, one variation at a time.

    Each round (one variation) waits for every source before the next round
    starts. The optional cache is consulted before the round and filled
    after it, both from the calling thread, so the sqlite connection behind
    it never crosses threads.
    """

    def __init__(
        self,
        sources: list[MetadataSource],
        cache: SearchCache | None = None,
    ) -> None:
        self._sources = list(sources)
        self._cache = cache

    @property
    def sources(self) -> list[MetadataSource]:
        return list(self._sources)

    def collect(self, variations: list[str]) -> list[tuple[MetadataCandidate, str]]:
        """Run every variation against every source.

        Args:
            variations: Queries in priority order.

        Returns:
            (candidate, query) pairs: grouped by variation, then by source
            registration order, then in each source's own result order.
            Duplicates across variations are kept.
        """
        collected: list[tuple[MetadataCandidate, str]] = []
        for query in variations:
            for candidates in self._run_round(query):
                collected.extend((candidate, query) for candidate in candidates)
        logger.info(
            "Collected %d candidates from %d variations", len(collected), len(variations)
        )
        return collected

    def _run_round(self, query: str) -> list[list[MetadataCandidate]]:
        """Results for one query, one list per source in registration order."""
        results: list[list[MetadataCandidate] | None] = [
            self._cache.get(source.name, query) if self._cache else None
            for source in self._sources
        ]
        pending = [i for i, cached in enumerate(results) if cached is None]

        if pending:
            logger.debug("Querying %d sources for %r", len(pending), query)
            with ThreadPoolExecutor(max_workers=len(pending)) as pool:
                futures: dict[int, Future[list[MetadataCandidate]]] = {
                    i: pool.submit(self._sources[i].search, query) for i in pending
                }
                for i, future in futures.items():
                    results[i] = self._result_or_empty(self._sources[i], query, future)

            if self._cache is not None:
                for i in pending:
                    fresh = results[i]
                    if fresh:
                        self._cache.put(self._sources[i].name, query, fresh)

        return [r or [] for r in results]

    @staticmethod
    def _result_or_empty(
        source: MetadataSource,
        query: str,
        future: Future[list[MetadataCandidate]],
    ) -> list[MetadataCandidate]:
        try:
            return list(future.result())
        except Exception:
            logger.exception("Source %s raised while searching %r", source.name, query)
            return []
