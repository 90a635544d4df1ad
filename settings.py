"""
settings.py
Defines the Settings data structure with load/save and default values.
"""

import json
import logging
from dataclasses import dataclass, asdict
from pathlib import Path

logger = logging.getLogger(__name__)

SETTINGS_FILE = "settings.json"


@dataclass
class Settings:
    # resolve an unanswered question as wrong when its countdown runs out
    answer_timeout: bool = True
    # Earth's starting health; asteroid damage is subtracted from it
    earth_health: int = 100
    # wave to start on (>= 1)
    starting_wave: int = 1
    # time-freeze power-ups available per game and how long each lasts
    time_freeze_charges: int = 1
    time_freeze_ms: int = 5000
    # sound effects on/off
    sfx: bool = True
    # music on/off and selection
    music: bool = False
    music_choice: str = ""  # filename
    # optional fixed seed for reproducible runs (None = random)
    seed: int = None

    @staticmethod
    def load(path: str = SETTINGS_FILE):
        p = Path(path)
        if not p.exists():
            return Settings()
        try:
            data = json.loads(p.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            logger.warning("Ignoring unreadable settings file %s: %s", p, exc)
            return Settings()
        if not isinstance(data, dict):
            return Settings()
        # allow only dataclass fields (ignore unknown keys)
        allowed = set(Settings.__dataclass_fields__.keys())
        filtered = {k: v for k, v in data.items() if k in allowed}
        try:
            return Settings(**filtered).normalized()
        except (TypeError, ValueError) as exc:
            logger.warning("Invalid settings in %s: %s", p, exc)
            return Settings()

    def save(self, path: str = SETTINGS_FILE):
        p = Path(path)
        p.write_text(json.dumps(asdict(self), indent=2), encoding="utf-8")

    def normalized(self):
        """Clamp numeric fields into sane ranges."""
        self.earth_health = max(1, int(self.earth_health))
        self.starting_wave = max(1, int(self.starting_wave))
        self.time_freeze_charges = max(0, int(self.time_freeze_charges))
        self.time_freeze_ms = max(0, int(self.time_freeze_ms))
        if self.seed is not None:
            self.seed = int(self.seed)
        return self
