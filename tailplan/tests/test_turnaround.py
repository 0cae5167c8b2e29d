"""Turnaround resolution and route classification checks."""
from __future__ import annotations

import unittest

from tailplan.domain.context import OperatorContext
from tailplan.engine.turnaround import RouteClassifier, TurnaroundPolicyResolver
from tailplan.models.flight import RouteTier
from tailplan.models.turnaround import AirportTatOverride, ResolvedTat, TierPair, TurnaroundPolicy


class TurnaroundResolverTest(unittest.TestCase):
    def setUp(self) -> None:
        self.resolver = TurnaroundPolicyResolver(
            policies=[
                TurnaroundPolicy("A321", scheduled_minutes=45, minimum_minutes=40, tier_overrides={TierPair.DOM_INT: 60}),
                TurnaroundPolicy("A330", scheduled_minutes=75),
            ],
            airport_overrides=[AirportTatOverride(station="HAN", aircraft_type="A321", minutes=50)],
            global_default=30,
        )

    def test_minimum_and_floor_fall_back(self) -> None:
        self.assertEqual(self.resolver.resolve("A330"), ResolvedTat(75, 75, 75))
        self.assertEqual(self.resolver.resolve("A321"), ResolvedTat(45, 40, 40))

    def test_tier_pair_override(self) -> None:
        self.assertEqual(self.resolver.resolve("A321", TierPair.DOM_INT).scheduled, 60)
        self.assertEqual(self.resolver.resolve("A321", TierPair.INT_INT).scheduled, 45)

    def test_airport_override_wins(self) -> None:
        self.assertEqual(self.resolver.resolve("A321", station="HAN"), ResolvedTat(50, 40, 40))
        self.assertEqual(self.resolver.resolve("A321", TierPair.DOM_INT, station="HAN").scheduled, 50)
        self.assertEqual(self.resolver.resolve("A321", station="SGN").scheduled, 45)

    def test_global_default_then_nothing(self) -> None:
        self.assertEqual(self.resolver.resolve("B787"), ResolvedTat(30, 30, 30))
        strict = TurnaroundPolicyResolver(policies=[], global_default=None)
        self.assertIsNone(strict.resolve("B787"))

    def test_minimum_never_exceeds_scheduled(self) -> None:
        resolver = TurnaroundPolicyResolver([TurnaroundPolicy("E190", 30, minimum_minutes=40, hard_floor_minutes=50)])
        self.assertEqual(resolver.resolve("E190"), ResolvedTat(30, 30, 30))

    def test_tat_maps_cover_only_resolvable_types(self) -> None:
        resolver = TurnaroundPolicyResolver(
            [TurnaroundPolicy("A321", 45, minimum_minutes=40, hard_floor_minutes=35)], global_default=None
        )
        maps = resolver.tat_maps(["A321", "B787"])
        self.assertEqual(dict(maps.scheduled), {"A321": 45})
        self.assertEqual(dict(maps.minimum), {"A321": 40})
        self.assertEqual(dict(maps.hard_floor), {"A321": 35})
        self.assertTrue(maps.covers("A321"))
        self.assertFalse(maps.covers("B787"))

    def test_tat_maps_wire_shape(self) -> None:
        wire = self.resolver.tat_maps(["A321"]).to_wire()
        self.assertEqual(wire["tatMinutes"], {"A321": 45})
        self.assertEqual(wire["tatTierOverrides"], {"A321": {"dom_int": 60}})
        self.assertEqual(wire["stationTatOverrides"], [{"station": "HAN", "icaoType": "A321", "minutes": 50}])


class RouteTierTest(unittest.TestCase):
    def test_tier_pairs(self) -> None:
        dom, intl = RouteTier.DOMESTIC, RouteTier.INTERNATIONAL
        self.assertIs(TierPair.of(dom, dom), TierPair.DOM_DOM)
        self.assertIs(TierPair.of(dom, intl), TierPair.DOM_INT)
        self.assertIs(TierPair.of(intl, dom), TierPair.INT_DOM)
        self.assertIs(TierPair.of(intl, intl), TierPair.INT_INT)

    def test_classifier_uses_home_country(self) -> None:
        countries = {"SGN": "VN", "HAN": "VN", "ICN": "KR"}
        classify = RouteClassifier(countries, OperatorContext(operator_id="VJ", home_country="VN"))
        self.assertIs(classify("SGN", "HAN"), RouteTier.DOMESTIC)
        self.assertIs(classify("SGN", "ICN"), RouteTier.INTERNATIONAL)
        self.assertIs(classify("SGN", "XXX"), RouteTier.INTERNATIONAL)

    def test_classifier_without_home_country(self) -> None:
        classify = RouteClassifier({"SGN": "VN", "HAN": "VN"}, OperatorContext())
        self.assertIs(classify("SGN", "HAN"), RouteTier.INTERNATIONAL)


if __name__ == "__main__":
    unittest.main()
