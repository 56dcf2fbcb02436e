"""Integration tests for the ``order_placement`` throttle scope."""

from __future__ import annotations

import pytest

from rest_framework.settings import api_settings

pytestmark = pytest.mark.integration


@pytest.fixture()
def tight_placement_rate(monkeypatch):
    rates = dict(api_settings.DEFAULT_THROTTLE_RATES, order_placement="2/minute")
    monkeypatch.setattr(
        "rest_framework.throttling.ScopedRateThrottle.THROTTLE_RATES", rates
    )


class TestOrderPlacementThrottle:
    def test_placement_is_throttled(self, api_client, tight_placement_rate, baguette):
        body = {
            "customer": {"name": "Alice", "email": "a@x.com"},
            "items": [{"product_id": baguette.id, "quantity": 1}],
        }
        codes = [
            api_client.post("/orders", body, format="json").status_code for _ in range(3)
        ]

        assert codes == [200, 200, 429]
        throttled = api_client.post("/orders", body, format="json")
        assert "error" in throttled.json()
        baguette.refresh_from_db()
        assert baguette.quantity == 8

    def test_reads_are_not_placement_throttled(self, api_client, tight_placement_rate):
        codes = [api_client.get("/orders").status_code for _ in range(5)]
        assert codes == [200] * 5
