import unittest

from games.asteroid_defense import progression
from games.asteroid_defense.progression import (
    ASTEROID_STORM,
    BOSS_CATALOG,
    FAST,
    HEAVY,
    METEOR_SHOWER,
    NO_EFFECT,
    NORMAL,
    SHIELD,
    SOLAR_FLARE,
    SPLITTER,
    active_effect,
    boss_waves_until,
    clamp_wave_number,
    daily_challenge,
    difficulty_tier,
    get_boss_type,
    wave_config,
)


class WaveConfigTests(unittest.TestCase):
    def test_first_wave(self) -> None:
        cfg = wave_config(1)
        self.assertEqual(cfg.wave_number, 1)
        self.assertEqual(cfg.asteroid_count, 3)
        self.assertEqual(cfg.max_simultaneous, 2)
        self.assertEqual(cfg.spawn_rate, 2850)
        self.assertEqual(cfg.time_limit, 14)
        self.assertFalse(cfg.has_boss)
        self.assertIsNone(cfg.boss)
        self.assertAlmostEqual(cfg.point_multiplier, 1.1)

    def test_fifth_wave_has_first_boss(self) -> None:
        cfg = wave_config(5)
        self.assertTrue(cfg.has_boss)
        self.assertEqual(cfg.boss.name, "Ceres Fragment")
        self.assertEqual(cfg.boss.health, 3)

    def test_boss_progression_clamps_to_catalog(self) -> None:
        self.assertEqual(wave_config(10).boss.name, "Vesta Core")
        self.assertEqual(wave_config(20).boss.name, "Bennu Cluster")
        self.assertEqual(wave_config(500).boss, BOSS_CATALOG[-1])
        self.assertEqual(get_boss_type(0), BOSS_CATALOG[0])
        self.assertEqual(get_boss_type(99), BOSS_CATALOG[-1])

    def test_only_multiples_of_five_have_bosses(self) -> None:
        for n in range(1, 31):
            self.assertEqual(wave_config(n).has_boss, n % 5 == 0, n)

    def test_bounds_hold_for_every_wave(self) -> None:
        for n in range(1, 201):
            cfg = wave_config(n)
            self.assertLessEqual(cfg.asteroid_count, 8)
            self.assertLessEqual(cfg.max_simultaneous, 4)
            self.assertGreaterEqual(cfg.spawn_rate, 1000)
            self.assertGreaterEqual(cfg.time_limit, 8)
            self.assertGreaterEqual(cfg.asteroid_count, 1)
            self.assertGreaterEqual(cfg.max_simultaneous, 1)

    def test_difficulty_never_eases(self) -> None:
        prev = wave_config(1)
        for n in range(2, 101):
            cfg = wave_config(n)
            self.assertGreaterEqual(cfg.asteroid_count, prev.asteroid_count)
            self.assertGreaterEqual(cfg.max_simultaneous, prev.max_simultaneous)
            self.assertLessEqual(cfg.spawn_rate, prev.spawn_rate)
            self.assertLessEqual(cfg.time_limit, prev.time_limit)
            self.assertGreater(cfg.point_multiplier, prev.point_multiplier)
            prev = cfg

    def test_same_wave_same_config(self) -> None:
        self.assertEqual(wave_config(7), wave_config(7))

    def test_invalid_wave_numbers_clamp_to_one(self) -> None:
        first = wave_config(1)
        for bad in (0, -4, None, "abc", float("nan"), float("inf")):
            self.assertEqual(wave_config(bad), first, bad)
        self.assertEqual(clamp_wave_number(2.6), 3)
        self.assertEqual(clamp_wave_number("4"), 4)

    def test_kinds_and_events_unlock_with_waves(self) -> None:
        self.assertEqual(wave_config(1).asteroid_kinds, (NORMAL,))
        self.assertEqual(wave_config(1).special_events, ())
        self.assertIn(FAST, wave_config(3).asteroid_kinds)
        self.assertNotIn(HEAVY, wave_config(4).asteroid_kinds)
        cfg = wave_config(10)
        self.assertEqual(cfg.asteroid_kinds, (NORMAL, FAST, HEAVY, SPLITTER, SHIELD))
        self.assertEqual(cfg.special_events, (METEOR_SHOWER, SOLAR_FLARE, ASTEROID_STORM))


class EventEffectTests(unittest.TestCase):
    def test_effects_expire_on_their_own_schedule(self) -> None:
        cfg = wave_config(7)
        start = active_effect(cfg, 0)
        self.assertAlmostEqual(start.spawn_rate, 0.3)
        self.assertAlmostEqual(start.fall_speed, 2.0)
        self.assertAlmostEqual(start.time_limit, 0.8)

        later = active_effect(cfg, 12000)
        self.assertAlmostEqual(later.spawn_rate, 1.0)
        self.assertAlmostEqual(later.fall_speed, 2.0)

        self.assertEqual(active_effect(cfg, 16000), NO_EFFECT)

    def test_no_events_no_effect(self) -> None:
        self.assertEqual(active_effect(wave_config(1), 0), NO_EFFECT)
        self.assertEqual(active_effect(wave_config(7), None), NO_EFFECT)
        self.assertEqual(active_effect(wave_config(7), -5), NO_EFFECT)


class ProgressionHelperTests(unittest.TestCase):
    def test_difficulty_tier(self) -> None:
        self.assertEqual(difficulty_tier(1), "easy")
        self.assertEqual(difficulty_tier(2), "easy")
        self.assertEqual(difficulty_tier(5), "medium")
        self.assertEqual(difficulty_tier(6), "hard")

    def test_boss_waves_until(self) -> None:
        self.assertEqual(boss_waves_until(1), 4)
        self.assertEqual(boss_waves_until(5), 0)
        self.assertEqual(boss_waves_until(6), 4)

    def test_daily_challenge_rotates(self) -> None:
        self.assertEqual(daily_challenge(0)["name"], "Speed Run")
        self.assertEqual(daily_challenge(4)["name"], "No Power-ups")
        self.assertEqual(daily_challenge(len(progression.DAILY_CHALLENGES)), daily_challenge(0))


if __name__ == "__main__":
    unittest.main()
