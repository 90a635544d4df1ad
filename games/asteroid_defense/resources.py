"""Resource loading helpers (images, sounds, music) for Asteroid Defense.

Package-local assets (games/asteroid_defense/assets) take priority; project-level
assets/ is the fallback. Missing or unreadable files are skipped silently so the
game always runs with drawn shapes and no sound.
"""

import logging
from pathlib import Path

import pygame

logger = logging.getLogger(__name__)

EXTS_AUDIO = (".wav", ".ogg", ".mp3", ".flac")
EXTS_IMAGE = (".png", ".bmp", ".gif", ".jpg", ".jpeg", ".webp")

# sound role -> file stems that may provide it
SOUND_ROLES = {
    "question": ("new_asteroid", "newasteroid", "question", "alert"),
    "deflect": ("deflect", "hit", "explode"),
    "impact": ("impact", "crash", "explosion"),
    "wrong": ("wrong", "buzz", "error"),
}


def _candidate_dirs(folder, subfolders):
    pkg_assets = Path(__file__).resolve().parent / "assets"
    dirs = [pkg_assets / s for s in subfolders] + [pkg_assets]
    if folder:
        dirs.append(Path(folder))
    dirs += [Path("assets") / s for s in subfolders] + [Path("assets")]
    return [d for d in dirs if d.exists() and d.is_dir()]


def try_load_sound(path):
    try:
        return pygame.mixer.Sound(str(path))
    except pygame.error as exc:
        logger.debug("Could not load sound %s: %s", path, exc)
        return None


def load_sounds(game, folder=None):
    """Populate game.sounds {role: Sound} by matching file stems in the candidate dirs."""
    game.sounds = {}
    files = []
    for d in _candidate_dirs(folder, ("Sound Effects", "SoundEffects", "sounds")):
        files += [p for p in sorted(d.iterdir()) if p.is_file() and p.suffix.lower() in EXTS_AUDIO]
    for role, stems in SOUND_ROLES.items():
        for stem in stems:
            match = next((p for p in files if stem in p.stem.lower()), None)
            if match is None:
                continue
            snd = try_load_sound(match)
            if snd is not None:
                game.sounds[role] = snd
                break


def play(game, role):
    if not getattr(game, "sfx_enabled", True):
        return
    snd = getattr(game, "sounds", {}).get(role)
    if snd is None:
        return
    try:
        snd.play()
    except pygame.error:
        pass


def load_graphics(game, folder=None):
    """Load asteroid skin images (file stems containing regular/gold/crystal)."""
    images = {}
    for d in _candidate_dirs(folder, ("Graphics", "images")):
        for p in sorted(d.iterdir()):
            if p.suffix.lower() not in EXTS_IMAGE:
                continue
            name = p.stem.lower()
            for skin in ("REGULAR", "GOLD", "CRYSTAL"):
                if skin.lower() in name and skin not in images:
                    try:
                        images[skin] = pygame.image.load(str(p)).convert_alpha()
                    except pygame.error:
                        continue
    game.graphics = images


def start_music(game):
    """Start looping music from settings.music_choice if music is enabled."""
    if not getattr(game, "music_enabled", False):
        return False
    mc = getattr(game.settings, "music_choice", "") or ""
    if not mc:
        return False
    pkg_assets = Path(__file__).resolve().parent / "assets"
    candidates = [
        pkg_assets / "Music" / mc,
        pkg_assets / mc,
        Path("assets") / "Music" / mc,
        Path("assets") / "music" / mc,
        Path("music") / mc,
        Path(mc),
    ]
    for p in candidates:
        if p.exists() and p.is_file():
            try:
                pygame.mixer.music.load(str(p))
                pygame.mixer.music.play(-1)
                return True
            except pygame.error as exc:
                logger.debug("Could not play %s: %s", p, exc)
    return False


def stop_music(game):
    try:
        pygame.mixer.music.stop()
    except pygame.error:
        pass
