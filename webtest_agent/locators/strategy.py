"""
Locator Strategy - derive candidate locators from a step description

Candidates are ranked most-specific first; callers try them in order.
No I/O, so planning can be tested without a browser.
"""
import re
from typing import List

from webtest_agent.views import ExecutionPlanStep, LocatorCandidate

_NON_ALNUM = re.compile(r"[^a-z0-9]+", re.IGNORECASE)


class LocatorStrategy:
    """Deterministic candidate locator generator"""

    def build_candidate_locators(self, step: ExecutionPlanStep) -> List[LocatorCandidate]:
        """
        Build ranked candidates for a step

        Order: exact text, role/label, normalized test id, then a
        "contains" match on the first three description tokens.

        Args:
            step: Plan step providing description and label

        Returns:
            Ordered list of LocatorCandidate
        """
        tokens = step.description.split()
        test_id = _NON_ALNUM.sub("-", step.label).lower()

        candidates = [
            LocatorCandidate(strategy="text", value=step.description),
            LocatorCandidate(strategy="role+text", value=step.label),
            LocatorCandidate(strategy="data-testid", value=test_id),
        ]

        if tokens:
            candidates.append(LocatorCandidate(strategy="text-contains", value=" ".join(tokens[:3])))

        return candidates
