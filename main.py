import datetime
import importlib
import logging
import sys
from pathlib import Path

import pygame

import utils
from games.asteroid_defense.progression import daily_challenge
from settings import Settings

logger = logging.getLogger(__name__)

QUESTION_EXTS = (".csv", ".json")


def list_question_files(folder):
    return sorted(p.name for p in Path(folder).iterdir() if p.is_file() and p.suffix.lower() in QUESTION_EXTS)


def discover_games():
    games = []
    gd = Path("games")
    if not gd.exists() or not gd.is_dir():
        return games
    for d in sorted(gd.iterdir()):
        if not d.is_dir() or d.name.startswith("__"):
            continue
        pkg = f"games.{d.name}"
        try:
            mod = importlib.import_module(pkg)
        except ImportError as exc:
            logger.warning("Skipping game package %s: %s", pkg, exc)
            continue
        cls = getattr(mod, "Game", None)
        if cls is not None:
            label = d.name.replace("_", " ").title()
            games.append((d.name, label, cls))
    return games


def _find_default_music(game_folder_name):
    """First music file in the game's assets, then project-level music folders."""
    exts = (".mp3", ".ogg", ".wav", ".flac")
    search_dirs = [
        Path("games") / game_folder_name / "assets" / "Music",
        Path("assets") / "Music",
        Path("music"),
    ]
    for d in search_dirs:
        if not d.exists() or not d.is_dir():
            continue
        for p in sorted(d.iterdir()):
            if p.suffix.lower() in exts and p.is_file():
                return p
    return None


def _toggle_label(name, value):
    return f"{name}: {'On' if value else 'Off'}"


def run_menu():
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    pygame.init()
    screen = pygame.display.set_mode((800, 600))
    pygame.display.set_caption("Asteroid Defense - Main Menu")
    clock = pygame.time.Clock()
    font = pygame.font.Font(None, 28)
    big = pygame.font.Font(None, 40)

    settings = Settings.load()
    today = daily_challenge(datetime.date.today().timetuple().tm_yday)

    games = discover_games()
    game_idx = 0 if games else -1
    if game_idx >= 0 and settings.music and not settings.music_choice:
        p = _find_default_music(games[game_idx][0])
        settings.music_choice = p.name if p else ""

    # default question file (questions.csv, then questions.json, then anything)
    files = list_question_files(".")
    selected = None
    for preferred in ("questions.csv", "questions.json"):
        if preferred in files:
            selected = preferred
            break
    if selected is None and files:
        selected = files[0]

    play_rect = utils.button_rect(400, 150, w=360, h=60)
    file_rect = utils.button_rect(400, 240, w=360, h=50)
    timeout_rect = utils.button_rect(400, 310, w=360, h=50)
    sound_rect = utils.button_rect(400, 380, w=360, h=50)
    quit_rect = utils.button_rect(400, 470, w=200, h=44)

    while True:
        clock.tick(60)
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                pygame.quit()
                sys.exit(0)
            elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
                mx, my = event.pos
                if play_rect.collidepoint(mx, my):
                    if game_idx < 0:
                        logger.warning("No game package found under games/")
                        continue
                    # no file selected -> built-in fallback questions
                    pkgname, label, cls = games[game_idx]
                    game = cls(selected, screen=screen, settings=settings)
                    result = game.run()
                    logger.info("%s finished: %s", label, result)
                    if result == "quit":
                        pygame.quit()
                        sys.exit(0)
                    pygame.display.set_caption("Asteroid Defense - Main Menu")
                    files = list_question_files(".")
                elif file_rect.collidepoint(mx, my):
                    files = list_question_files(".")
                    if not files:
                        selected = None
                    elif selected in files:
                        selected = files[(files.index(selected) + 1) % len(files)]
                    else:
                        selected = files[0]
                elif timeout_rect.collidepoint(mx, my):
                    settings.answer_timeout = not settings.answer_timeout
                    settings.save()
                elif sound_rect.collidepoint(mx, my):
                    settings.sfx = not settings.sfx
                    settings.save()
                elif quit_rect.collidepoint(mx, my):
                    pygame.quit()
                    sys.exit(0)

        screen.fill((18, 18, 28))
        title = big.render("Asteroid Defense", True, (255, 255, 255))
        screen.blit(title, (400 - title.get_width() // 2, 40))

        pygame.draw.rect(screen, (60, 120, 180), play_rect, border_radius=8)
        screen.blit(font.render("Play", True, (255, 255, 255)), (play_rect.x + 14, play_rect.y + 18))

        pygame.draw.rect(screen, (90, 90, 90), file_rect, border_radius=8)
        file_text = selected if selected else "built-in questions"
        screen.blit(
            font.render(f"Questions: {file_text}", True, (255, 255, 255)),
            (file_rect.x + 14, file_rect.y + 14),
        )

        pygame.draw.rect(screen, (100, 90, 140), timeout_rect, border_radius=8)
        screen.blit(
            font.render(_toggle_label("Answer timeout", settings.answer_timeout), True, (255, 255, 255)),
            (timeout_rect.x + 14, timeout_rect.y + 14),
        )

        pygame.draw.rect(screen, (100, 90, 140), sound_rect, border_radius=8)
        screen.blit(
            font.render(_toggle_label("Sound effects", settings.sfx), True, (255, 255, 255)),
            (sound_rect.x + 14, sound_rect.y + 14),
        )

        pygame.draw.rect(screen, (120, 60, 80), quit_rect, border_radius=8)
        screen.blit(font.render("Quit", True, (255, 255, 255)), (quit_rect.x + 64, quit_rect.y + 10))

        challenge = font.render(f"Daily challenge: {today['name']} - {today['description']}", True, (255, 215, 0))
        screen.blit(challenge, (400 - challenge.get_width() // 2, 95))

        hint = font.render("Click 'Questions' to cycle .csv/.json files in this folder.", True, (180, 180, 180))
        screen.blit(hint, (400 - hint.get_width() // 2, 540))

        pygame.display.flip()


if __name__ == "__main__":
    run_menu()
