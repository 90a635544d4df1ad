"""Helper constants and small utilities for the Asteroid Defense package."""

SCREEN_W = 800
SCREEN_H = 600

# vertical geometry: asteroids start above the screen and aim slightly below the ground
GROUND_Y = SCREEN_H * 0.75
SPAWN_Y = -100
FALL_OVERSHOOT = 50
SPAWN_MARGIN = 50

# spawn attributes
SIZE_RANGE = (60, 120)
HEAVY_SIZE_RANGE = (110, 150)
MINION_SIZE_RANGE = (40, 60)
FRAGMENT_SCALE = 0.6
HAZARD_PROBABILITY = 0.3
DEFAULT_VELOCITY = 25000
SKINS = ("REGULAR", "GOLD", "CRYSTAL")

# fall durations (ms) per difficulty tier
FALL_DURATION_BY_TIER = {"easy": 8000, "medium": 7000, "hard": 6000}
FAST_FALL_FACTOR = 0.7
BOSS_FALL_FACTOR = 1.5

# boss speed burst: the last BURST_MS of every BURST_PERIOD_MS of fall time run faster
SPEED_BURST_PERIOD_MS = 3000
SPEED_BURST_MS = 1000
SPEED_BURST_FACTOR = 2.0

# spawn cadence
MIN_SPAWN_INTERVAL_MS = 1000
SPAWN_JITTER = (0.5, 1.5)

# settle delays (ms)
COLLISION_SETTLE_MS = 1000
DEFLECT_SETTLE_MS = 1500
WRONG_ANSWER_SETTLE_MS = 500

# damage
BASE_IMPACT_DAMAGE = 20
WRONG_ANSWER_DAMAGE = 30
BOSS_IMPACT_DAMAGE = 2 * BASE_IMPACT_DAMAGE

# lateral scatter range for deflected asteroids
DEFLECT_SCATTER = 800


def format_time_ms(ms):
    """Format milliseconds as M:SS. If ms is None, return the infinity symbol."""
    if ms is None:
        return "∞"
    if ms < 0:
        ms = 0
    s = int(ms // 1000)
    m = s // 60
    s = s % 60
    return f"{m}:{s:02d}"


def lerp(a, b, t):
    return a + (b - a) * t
