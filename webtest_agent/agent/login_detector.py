"""Login page detection on observed DOM snapshots"""
from webtest_agent.views import ObservedState


class LoginDetector:
    """Flags pages that look like a sign-in form"""

    def is_login_page(self, state: ObservedState) -> bool:
        dom = state.dom_snapshot.lower()
        return "password" in dom and "sign in" in dom
