"""
Self-Healing Locator Cache

Remembers the last locator that worked for each (test, step) pair so it is
tried first on later runs. Entries are overwritten on every success and never
expire; the cache lives as long as the owning executor.
"""
import logging
from typing import Dict, List, Optional, Tuple

from webtest_agent.locators.strategy import LocatorStrategy
from webtest_agent.views import ExecutionPlanStep, LocatorCandidate

logger = logging.getLogger(__name__)

CacheKey = Tuple[str, str]


class SelfHealingLocator:
    """
    Keyed cache of known-good locators with a strategy fallback

    A hit returns exactly the cached candidate, so the caller must merge it
    with freshly planned candidates rather than rely on it alone.
    """

    def __init__(self, strategy: Optional[LocatorStrategy] = None):
        self.strategy = strategy or LocatorStrategy()
        self._cache: Dict[CacheKey, LocatorCandidate] = {}

    def get_candidates(self, test_id: str, step: ExecutionPlanStep) -> List[LocatorCandidate]:
        """Cached locator as a singleton list, or the strategy's candidates on a miss"""
        cached = self._cache.get((test_id, step.id))
        if cached is not None:
            logger.debug(f"Locator cache hit for {test_id}/{step.id}: {cached.as_locator()}")
            return [cached]
        return self.strategy.build_candidate_locators(step)

    def record_success(self, test_id: str, step: ExecutionPlanStep, candidate: LocatorCandidate) -> None:
        """Overwrite the cache entry for (test_id, step.id)"""
        self._cache[(test_id, step.id)] = candidate
        logger.debug(f"Recorded working locator for {test_id}/{step.id}: {candidate.as_locator()}")

    def __len__(self) -> int:
        return len(self._cache)
