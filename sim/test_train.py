#!/usr/bin/env python3
"""
Tests for train kinematics, operator commands and the toggle-stop state machine.
"""

from __future__ import annotations

import math
import unittest

from sim.rail_policy import RailPolicy, SeverityMode
from sim.train import (
    Accelerate,
    Brake,
    SetCruise,
    SoftStop,
    SpeedTrend,
    ToggleState,
    ToggleStop,
    Train,
    TrainId,
)


def _never_called() -> float:
    raise AssertionError("random source must not be drawn")


def _train_a(policy: RailPolicy = None) -> Train:
    return Train(
        TrainId.A,
        start=(240.0, 300.0),
        end=(900.0, 300.0),
        intersection=(490.0, 300.0),
        passenger_count=120,
        policy=policy,
    )


class TrainCommandTests(unittest.TestCase):
    def setUp(self) -> None:
        self.train = _train_a()

    def test_initial_state(self) -> None:
        t = self.train
        self.assertEqual(t.position, (240.0, 300.0))
        self.assertEqual(t.speed, 80.0)
        self.assertEqual(t.cruise_speed, 80.0)
        self.assertEqual((t.alive_passengers, t.dead_passengers), (120, 0))
        self.assertFalse(t.is_finished)
        self.assertIs(t.toggle_state, ToggleState.RUNNING)

    def test_set_cruise_inverted_scale(self) -> None:
        self.train.command(SetCruise(0.0), _never_called)
        self.assertAlmostEqual(self.train.cruise_speed, 120.0)
        self.train.command(SetCruise(1.0), _never_called)
        self.assertAlmostEqual(self.train.cruise_speed, 50.0)
        self.train.command(SetCruise(0.5), _never_called)
        self.assertAlmostEqual(self.train.cruise_speed, 85.0)
        self.assertAlmostEqual(self.train.last_cruise_speed, 85.0)

    def test_set_cruise_clamps_out_of_range(self) -> None:
        self.train.command(SetCruise(-3.0), _never_called)
        self.assertAlmostEqual(self.train.cruise_speed, 120.0)
        self.train.command(SetCruise(7.0), _never_called)
        self.assertAlmostEqual(self.train.cruise_speed, 50.0)

    def test_accelerate_bounds(self) -> None:
        self.train.command(Accelerate(), _never_called)
        self.assertEqual(self.train.cruise_speed, 84.0)
        for _ in range(200):
            self.train.command(Accelerate(), _never_called)
        self.assertEqual(self.train.cruise_speed, 300.0)
        self.assertEqual(self.train.last_cruise_speed, 300.0)

    def test_accelerate_from_standstill_jumps_to_floor(self) -> None:
        self.train.command(SoftStop(), _never_called)
        self.train.command(Accelerate(), _never_called)
        self.assertEqual(self.train.cruise_speed, 60.0)

    def test_brake_bounds_and_memory(self) -> None:
        for _ in range(100):
            self.train.command(Brake(), _never_called)
        self.assertEqual(self.train.cruise_speed, 0.0)
        self.assertEqual(self.train.last_cruise_speed, 5.0)

    def test_cruise_stays_in_range_after_any_sequence(self) -> None:
        cmds = [Accelerate(), Brake(), SetCruise(2.0), Brake(), SetCruise(-1.0)] * 40
        for cmd in cmds:
            self.train.command(cmd, _never_called)
            self.assertGreaterEqual(self.train.cruise_speed, 0.0)
            self.assertLessEqual(self.train.cruise_speed, 300.0)

    def test_soft_stop_never_draws(self) -> None:
        self.train.speed = 300.0
        self.assertIsNone(self.train.command(SoftStop(), _never_called))
        self.assertEqual(self.train.cruise_speed, 0.0)
        self.assertEqual(self.train.dead_passengers, 0)

    def test_rejects_non_commands(self) -> None:
        with self.assertRaises(TypeError):
            self.train.command("ACCEL", _never_called)


class ToggleStopTests(unittest.TestCase):
    def setUp(self) -> None:
        self.train = _train_a()

    def test_two_state_machine(self) -> None:
        t = self.train
        t.command(ToggleStop(), _never_called)
        self.assertIs(t.toggle_state, ToggleState.TOGGLE_STOPPED)
        self.assertEqual(t.cruise_speed, 0.0)
        t.command(ToggleStop(), _never_called)
        self.assertIs(t.toggle_state, ToggleState.RUNNING)
        self.assertEqual(t.cruise_speed, 80.0)
        self.assertEqual(t.toggle_count, 2)

    def test_resume_uses_remembered_cruise_with_floor(self) -> None:
        t = self.train
        for _ in range(10):
            t.command(Accelerate(), _never_called)
        t.command(ToggleStop(), _never_called)
        t.command(ToggleStop(), _never_called)
        self.assertEqual(t.cruise_speed, 120.0)

        for _ in range(100):
            t.command(Brake(), _never_called)
        t.command(ToggleStop(), _never_called)
        t.command(ToggleStop(), _never_called)
        self.assertEqual(t.cruise_speed, 80.0)

    def test_set_cruise_while_stopped_keeps_memory(self) -> None:
        t = self.train
        t.command(ToggleStop(), _never_called)
        t.command(SetCruise(0.0), _never_called)
        self.assertAlmostEqual(t.cruise_speed, 120.0)
        self.assertEqual(t.last_cruise_speed, 80.0)

    def test_hazard_at_top_speed(self) -> None:
        t = self.train
        t.speed = 300.0
        messages = []
        info = t.command(ToggleStop(), lambda: 0.0, messages.append)
        killed = math.floor(120 * 0.35)
        self.assertIsNotNone(info)
        self.assertEqual(messages, [info])
        self.assertIn(str(killed), info)
        self.assertEqual(t.dead_passengers, killed)
        self.assertEqual(t.alive_passengers, 120 - killed)
        self.assertEqual(t.cruise_speed, 0.0)

    def test_no_hazard_below_threshold(self) -> None:
        t = self.train
        t.speed = 150.0
        messages = []
        for draw in (0.0, 0.5, 0.999):
            t.toggle_state = ToggleState.RUNNING
            self.assertIsNone(t.command(ToggleStop(), lambda: draw, messages.append))
        self.assertEqual(messages, [])
        self.assertEqual(t.dead_passengers, 0)

    def test_resume_never_draws(self) -> None:
        t = self.train
        t.command(ToggleStop(), _never_called)
        t.speed = 300.0
        self.assertIsNone(t.command(ToggleStop(), _never_called))


class TrainUpdateTests(unittest.TestCase):
    def test_accelerates_at_fixed_rate(self) -> None:
        t = _train_a()
        t.command(SetCruise(0.0), _never_called)
        t.update(0.1, SeverityMode.GENTLE)
        self.assertAlmostEqual(t.speed, 97.0)
        self.assertAlmostEqual(t.s, 9.7)
        self.assertIs(t.speed_trend(), SpeedTrend.RISING)

    def test_does_not_overshoot_target(self) -> None:
        t = _train_a()
        t.command(Accelerate(), _never_called)
        t.update(0.1, SeverityMode.GENTLE)
        self.assertEqual(t.speed, 84.0)

    def test_brake_rate_depends_on_mode(self) -> None:
        gentle, harsh = _train_a(), _train_a()
        for t in (gentle, harsh):
            t.command(SoftStop(), _never_called)
        gentle.update(0.1, SeverityMode.GENTLE)
        harsh.update(0.1, SeverityMode.HARSH)
        self.assertAlmostEqual(gentle.speed, 62.0)
        self.assertAlmostEqual(harsh.speed, 38.0)
        self.assertIs(harsh.speed_trend(), SpeedTrend.FALLING)

    def test_gentle_braking_is_harmless_harsh_is_not(self) -> None:
        gentle, harsh = _train_a(), _train_a()
        for t in (gentle, harsh):
            t.command(SoftStop(), _never_called)
        gentle.update(0.1, SeverityMode.GENTLE)
        harsh.update(0.1, SeverityMode.HARSH)
        self.assertEqual(gentle.dead_passengers, 0)
        self.assertEqual(harsh.dead_passengers, 10)
        self.assertEqual(harsh.last_brake_killed, 10)

    def test_single_tick_full_stop_kills_18_percent(self) -> None:
        t = _train_a(RailPolicy(brake_rate_harsh=5000.0))
        t.speed = 300.0
        t.command(SoftStop(), _never_called)
        t.update(0.1, SeverityMode.HARSH)
        self.assertEqual(t.speed, 0.0)
        self.assertEqual(t.dead_passengers, math.floor(120 * 0.18))
        self.assertEqual(t.alive_passengers + t.dead_passengers, 120)

    def test_speed_is_capped(self) -> None:
        t = _train_a()
        t.cruise_speed = 10_000.0
        for _ in range(50):
            t.update(0.05, SeverityMode.GENTLE)
            self.assertLessEqual(t.speed, 320.0)
            self.assertGreaterEqual(t.speed, 0.0)

    def test_reaching_track_end_finishes(self) -> None:
        t = Train(TrainId.B, (0.0, 0.0), (0.0, 10.0), (0.0, 5.0), 50)
        t.update(1.0, SeverityMode.GENTLE)
        self.assertTrue(t.is_finished)
        self.assertEqual(t.position, (0.0, 10.0))

        t.command(Accelerate(), _never_called)
        self.assertEqual(t.cruise_speed, 80.0)
        s_before = t.s
        t.update(1.0, SeverityMode.GENTLE)
        self.assertEqual(t.s, s_before)

    def test_negative_dt_is_harmless(self) -> None:
        t = _train_a()
        t.update(-1.0, SeverityMode.HARSH)
        self.assertEqual(t.s, 0.0)
        self.assertEqual(t.speed, 80.0)


class TrainQueryTests(unittest.TestCase):
    def test_position_follows_arc_length(self) -> None:
        t = _train_a()
        t.s = 330.0
        self.assertAlmostEqual(t.x, 570.0)
        self.assertAlmostEqual(t.y, 300.0)
        self.assertAlmostEqual(t.distance_to_intersection(), 80.0)

    def test_time_to_intersection(self) -> None:
        t = _train_a()
        self.assertAlmostEqual(t.time_to_intersection(), 250.0 / 80.0)
        t.speed = 4.9
        self.assertIsNone(t.time_to_intersection())

    def test_steady_trend_within_epsilon(self) -> None:
        t = _train_a()
        t.prev_speed = 80.1
        self.assertIs(t.speed_trend(), SpeedTrend.STEADY)


if __name__ == "__main__":
    unittest.main()
