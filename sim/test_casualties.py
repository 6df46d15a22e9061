#!/usr/bin/env python3
"""
Tests for the pure fatality rules in :mod:`sim.casualties`.
"""

from __future__ import annotations

import math
import unittest

from sim.casualties import (
    Headcount,
    braking_casualties,
    braking_kill_fraction,
    collision_casualties,
    toggle_accident_probability,
    toggle_shock_casualties,
)
from sim.rail_policy import RailPolicy


def _never_called() -> float:
    raise AssertionError("random source must not be drawn")


class HeadcountTests(unittest.TestCase):
    def test_kill_fraction_floors_and_preserves_total(self) -> None:
        hc, killed = Headcount(120).kill_fraction(0.35)
        self.assertEqual(killed, math.floor(120 * 0.35))
        self.assertEqual(hc.alive + hc.dead, 120)
        self.assertEqual(hc.dead, killed)

    def test_kill_fraction_is_clamped(self) -> None:
        hc, killed = Headcount(10, 5).kill_fraction(3.0)
        self.assertEqual((hc.alive, hc.dead, killed), (0, 15, 10))
        hc, killed = Headcount(10, 5).kill_fraction(-1.0)
        self.assertEqual((hc.alive, hc.dead, killed), (10, 5, 0))

    def test_nobody_left_to_kill(self) -> None:
        hc, killed = Headcount(0, 7).kill_fraction(0.5)
        self.assertEqual((hc.alive, hc.dead, killed), (0, 7, 0))

    def test_collision_kills_everyone(self) -> None:
        hc, killed = collision_casualties(Headcount(90, 10))
        self.assertEqual((hc.alive, hc.dead, killed), (0, 100, 90))


class ToggleShockTests(unittest.TestCase):
    def setUp(self) -> None:
        self.policy = RailPolicy()

    def test_probability_profile(self) -> None:
        p = self.policy
        self.assertEqual(toggle_accident_probability(150.0, p), 0.0)
        self.assertEqual(toggle_accident_probability(190.0, p), 0.0)
        self.assertAlmostEqual(toggle_accident_probability(245.0, p), 0.425)
        self.assertAlmostEqual(toggle_accident_probability(300.0, p), 0.85)
        self.assertAlmostEqual(toggle_accident_probability(320.0, p), 0.85)

    def test_hit_at_top_speed_kills_35_percent(self) -> None:
        hc, killed, accident = toggle_shock_casualties(
            Headcount(120), 300.0, lambda: 0.0, self.policy,
        )
        self.assertTrue(accident)
        self.assertEqual(killed, math.floor(120 * 0.35))
        self.assertEqual(hc.alive, 120 - killed)

    def test_miss_when_draw_above_probability(self) -> None:
        hc, killed, accident = toggle_shock_casualties(
            Headcount(120), 300.0, lambda: 0.9, self.policy,
        )
        self.assertFalse(accident)
        self.assertEqual((hc.alive, killed), (120, 0))

    def test_below_threshold_never_draws(self) -> None:
        hc, killed, accident = toggle_shock_casualties(
            Headcount(120), 150.0, _never_called, self.policy,
        )
        self.assertFalse(accident)
        self.assertEqual(killed, 0)


class BrakingCasualtyTests(unittest.TestCase):
    def setUp(self) -> None:
        self.policy = RailPolicy()

    def test_safe_deceleration_is_harmless(self) -> None:
        self.assertEqual(braking_kill_fraction(220.0, self.policy), 0.0)
        hc, killed = braking_casualties(Headcount(120), 80.0, 62.0, 0.1, self.policy)
        self.assertEqual((hc.alive, killed), (120, 0))

    def test_saturated_deceleration_kills_18_percent(self) -> None:
        hc, killed = braking_casualties(Headcount(120), 300.0, 0.0, 0.1, self.policy)
        self.assertEqual(killed, math.floor(120 * 0.18))
        self.assertEqual(hc.alive + hc.dead, 120)

    def test_partial_severity(self) -> None:
        # 420 units/s² sits 200/430 of the way from safe to max.
        hc, killed = braking_casualties(Headcount(120), 80.0, 38.0, 0.1, self.policy)
        self.assertEqual(killed, 10)

    def test_acceleration_is_harmless(self) -> None:
        hc, killed = braking_casualties(Headcount(120), 50.0, 300.0, 0.1, self.policy)
        self.assertEqual(killed, 0)

    def test_zero_dt_does_not_divide_by_zero(self) -> None:
        hc, killed = braking_casualties(Headcount(100), 10.0, 0.0, 0.0, self.policy)
        self.assertEqual(killed, math.floor(100 * 0.18))

    def test_paths_compose_sequentially(self) -> None:
        hc, shock, _ = toggle_shock_casualties(Headcount(120), 300.0, lambda: 0.0, self.policy)
        hc, brake = braking_casualties(hc, 300.0, 0.0, 0.1, self.policy)
        self.assertEqual(shock, math.floor(120 * 0.35))
        self.assertEqual(brake, math.floor((120 - shock) * 0.18))
        self.assertEqual(hc.dead, shock + brake)
        self.assertEqual(hc.total, 120)


if __name__ == "__main__":
    unittest.main()
