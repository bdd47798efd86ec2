"""
Tests for image_updater_modules/request_guard.py
"""

import sys
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from image_updater_modules.request_guard import LatestRequestTracker


class TestLatestRequestTracker:
    """Tests for LatestRequestTracker."""

    def test_latest_token_wins(self):
        tracker = LatestRequestTracker()
        first = tracker.begin("search")
        second = tracker.begin("search")

        assert not tracker.is_current("search", first)
        assert tracker.is_current("search", second)

    def test_channels_are_independent(self):
        tracker = LatestRequestTracker()
        search = tracker.begin("search")
        tracker.begin("products")

        assert tracker.is_current("search", search)

    def test_invalidate(self):
        tracker = LatestRequestTracker()
        token = tracker.begin("products")
        tracker.invalidate("products")

        assert not tracker.is_current("products", token)

    def test_out_of_order_responses(self):
        tracker = LatestRequestTracker()
        applied = []
        tokens = {query: tracker.begin("search") for query in ("s", "su", "sum")}

        # Responses arrive in reverse order; only the newest query is applied
        for query in ("sum", "s", "su"):
            if tracker.is_current("search", tokens[query]):
                applied.append(query)

        assert applied == ["sum"]
