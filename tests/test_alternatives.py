"""Tests for cargorate.alternatives."""

from decimal import Decimal

from cargorate.alternatives import find_alternatives
from cargorate.models import SectorRate


def _rate(id, origin, destination, amount, active=True):
    return SectorRate(
        id=id,
        origin=origin,
        destination=destination,
        sector_rate=Decimal(str(amount)),
        is_active=active,
    )


class TestFindAlternatives:
    def test_direct_first_then_ascending(self):
        rates = [
            _rate("1", "FRA", "RIX", "3.00"),
            _rate("2", "FRA", "IST", "4.00"),
            _rate("3", "RMO", "RIX", "2.50"),
        ]
        alts = find_alternatives("FRA", "RIX", rates)
        assert [(a.route, a.rate, a.is_direct) for a in alts] == [
            ("FRA → RIX", Decimal("3.00"), True),
            ("RMO → RIX", Decimal("2.50"), False),
            ("FRA → IST", Decimal("4.00"), False),
        ]

    def test_no_direct(self):
        rates = [_rate("2", "FRA", "IST", "4.00"), _rate("3", "RMO", "RIX", "2.50")]
        alts = find_alternatives("FRA", "RIX", rates)
        assert [a.route for a in alts] == ["RMO → RIX", "FRA → IST"]
        assert not any(a.is_direct for a in alts)

    def test_unrelated_rates_excluded(self):
        rates = [_rate("1", "AMS", "ATH", "1.00")]
        assert find_alternatives("FRA", "RIX", rates) == []

    def test_inactive_excluded(self, snapshot):
        alts = find_alternatives("FRA", "RIX", snapshot.sector_rates)
        assert "8" not in [a.sector_rate_id for a in alts]

    def test_fixture_registry(self, sector_rates):
        alts = find_alternatives("fra", "rix", sector_rates)
        assert alts[0].is_direct
        assert [a.sector_rate_id for a in alts] == ["1", "4", "3", "5", "2"]

    def test_routes_unique(self):
        rates = [_rate("1", "FRA", "IST", "4.00"), _rate("2", "FRA", "IST", "1.00")]
        alts = find_alternatives("FRA", "RIX", rates)
        assert len(alts) == 1
        assert alts[0].sector_rate_id == "1"
