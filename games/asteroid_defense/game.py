# games/asteroid_defense/game.py
import logging
import random
from pathlib import Path

import pygame

import quiz_loader
import utils
from . import resources
from .achievements import AchievementTracker, apply_reward
from .asteroid import AsteroidState
from .cards import CardCollection
from .engine import AsteroidEngine, Scoreboard
from .helpers import GROUND_Y, SCREEN_H, SCREEN_W, format_time_ms
from .neo_data import size_comparison, speed_comparison
from .progression import BOSS_FIGHT, WAVE_COMPLETE, boss_waves_until
from .sprites import AsteroidSprite

logger = logging.getLogger(__name__)

BANNER_MS = 2500
THREAT_COLORS = {"HIGH": (255, 107, 107), "MEDIUM": (255, 179, 71), "LOW": (144, 238, 144)}


class GameSink(Scoreboard):
    """Scoreboard that also plays the impact sound."""

    def __init__(self, game, health):
        super().__init__(health)
        self.game = game

    def report_damage(self, amount, asteroid):
        super().report_damage(amount, asteroid)
        resources.play(self.game, "impact")


class AsteroidDefenseGame:
    """
    Asteroid defense study game:
      - asteroids fall toward the ground line in waves
      - click an asteroid to open its question; everything freezes while you answer
      - correct answer -> asteroid deflected (points); wrong answer or timeout -> Earth takes damage
      - asteroids nobody clicked crash into the ground
      - press F to spend a time-freeze power-up
    """

    def __init__(self, question_path, screen=None, settings=None):
        self.question_path = question_path
        self.screen = screen
        self.settings = settings
        self.font_name = None

        self.sounds = {}
        self.graphics = {}
        self.sfx_enabled = bool(getattr(settings, "sfx", True))
        self.music_enabled = bool(getattr(settings, "music", False))

        self.engine = None
        self.sink = None
        self.achievements = None
        self.cards = None
        self.sprites = {}
        self.banner = None
        self.banner_until = 0
        self.freeze_charges = int(getattr(settings, "time_freeze_charges", 1))
        self.freeze_ms = int(getattr(settings, "time_freeze_ms", 5000))
        self.freeze_until = 0
        self.state = "playing"

    # -- setup --
    def setup(self):
        seed = getattr(self.settings, "seed", None)
        rng = random.Random(seed)
        provider = quiz_loader.QuestionProvider.from_file(self.question_path, rng=rng)
        logger.info("Question bank: %s", provider.stats())
        self.sink = GameSink(self, int(getattr(self.settings, "earth_health", 100)))
        self.achievements = AchievementTracker(on_unlock=self.on_achievement)
        self.cards = CardCollection()
        self.engine = AsteroidEngine(
            provider,
            sink=self.sink,
            rng=rng,
            starting_wave=getattr(self.settings, "starting_wave", 1),
            on_active_question_change=self.on_question_change,
            answer_timeout=bool(getattr(self.settings, "answer_timeout", True)),
            width=SCREEN_W,
            achievements=self.achievements,
            cards=self.cards,
        )

    def show_banner(self, text, now=None):
        self.banner = text
        self.banner_until = (pygame.time.get_ticks() if now is None else now) + BANNER_MS

    def on_question_change(self, active):
        if active is not None:
            resources.play(self, "question")

    def on_achievement(self, achievement):
        self.show_banner(f"Achievement: {achievement.name}!")
        if apply_reward(achievement, self.sink):
            return
        if achievement.reward_value == "time_freeze":
            self.freeze_charges += 1
        elif achievement.reward_value == "card_gallery":
            counts = {rarity: len(cards) for rarity, cards in self.cards.by_rarity().items()}
            self.show_banner(f"Card gallery unlocked: {len(self.cards)} cards")
            logger.info("Card gallery: %s", counts)

    # -- input --
    def handle_click(self, pos, now):
        engine = self.engine
        active = engine.active_question
        if active is not None:
            rects = utils.choice_rects(SCREEN_W, SCREEN_H, count=len(active.question.answers), top=330)
            for i, r in enumerate(rects):
                if r.collidepoint(pos):
                    correct = active.question.is_correct(i)
                    result = engine.answer(active.id, correct, now)
                    resources.play(self, "deflect" if correct else "wrong")
                    points = result.points if result is not None else 0
                    self.show_banner(self.answer_banner(active.question, correct, points), now)
                    return
            return
        # topmost (last drawn) falling asteroid under the cursor
        for a in reversed(engine.asteroids):
            sprite = self.sprites.get(a.id)
            if a.state == AsteroidState.FALLING and sprite is not None and sprite.hit(pos):
                engine.trigger_question(a.id, now)
                return

    def answer_banner(self, question, correct, points=0):
        if correct:
            text = f"Correct! +{points} points"
        else:
            text = f"Incorrect! Answer: {question.correct_text}"
        if question.explanation:
            text += f"  ({question.explanation})"
        return text

    def use_time_freeze(self, now):
        if self.freeze_charges <= 0 or now < self.freeze_until:
            return
        self.freeze_charges -= 1
        self.freeze_until = now + self.freeze_ms
        self.show_banner("Time freeze!", now)

    # -- drawing --
    def sync_sprites(self, frozen):
        live = set()
        for a in self.engine.asteroids:
            live.add(a.id)
            sprite = self.sprites.get(a.id)
            if sprite is None:
                self.sprites[a.id] = AsteroidSprite(a, images=self.graphics)
            else:
                sprite.sync(a, frozen=frozen)
        for gone in set(self.sprites) - live:
            del self.sprites[gone]

    def draw_hud(self, screen, font, now):
        engine = self.engine
        left = f"Score: {self.sink.score}   Earth: {self.sink.health}   Wave: {engine.wave_number}"
        screen.blit(font.render(left, True, (255, 255, 255)), (12, 10))
        right = f"Freeze [F]: {self.freeze_charges}"
        if now < self.freeze_until:
            right += f" ({format_time_ms(self.freeze_until - now)})"
        surf = font.render(right, True, (135, 206, 235))
        screen.blit(surf, (SCREEN_W - surf.get_width() - 12, 10))
        if engine.phase == BOSS_FIGHT:
            label = "BOSS FIGHT"
        elif engine.phase == WAVE_COMPLETE:
            label = f"Wave {engine.wave_number} complete!"
        else:
            until = boss_waves_until(engine.wave_number)
            label = f"Boss in {until} wave(s)" if until else ""
        if label:
            surf = font.render(label, True, (255, 215, 0))
            screen.blit(surf, (SCREEN_W // 2 - surf.get_width() // 2, 10))

    def draw_question(self, screen, fonts, now):
        font, bigfont, smallfont = fonts
        active = self.engine.active_question
        if active is None:
            return
        overlay = pygame.Surface((SCREEN_W, SCREEN_H), pygame.SRCALPHA)
        overlay.fill((0, 0, 0, 160))
        screen.blit(overlay, (0, 0))

        header = "HAZARDOUS ASTEROID" if active.is_potentially_hazardous else "INCOMING ASTEROID"
        screen.blit(bigfont.render(f"{header}: {active.name}", True, (255, 255, 255)), (40, 40))
        info = (
            f"~{round(active.diameter)}m ({size_comparison(active.diameter)}), "
            f"{round(active.velocity):,} km/h ({speed_comparison(active.velocity)})"
        )
        screen.blit(smallfont.render(info, True, (200, 200, 200)), (40, 80))
        threat = smallfont.render(
            f"Threat level: {active.threat_level}", True, THREAT_COLORS.get(active.threat_level, (255, 255, 255))
        )
        screen.blit(threat, (40, 100))
        if active.is_boss:
            screen.blit(smallfont.render(f"Boss hits left: {active.hit_points}", True, (255, 215, 0)), (40, 120))

        left = self.engine.question_time_left_ms(now)
        color = (255, 107, 107) if left is not None and left <= 3000 else (144, 238, 144)
        t = bigfont.render(format_time_ms(left), True, color)
        screen.blit(t, (SCREEN_W - t.get_width() - 40, 40))

        y = 160
        for line in utils.wrap_text(active.question.question, font, SCREEN_W - 80):
            screen.blit(font.render(line, True, (255, 255, 255)), (40, y))
            y += 26

        labels = quiz_loader.answer_labels(active.question.answers)
        rects = utils.choice_rects(SCREEN_W, SCREEN_H, count=len(labels), top=330)
        for r, label in zip(rects, labels):
            pygame.draw.rect(screen, (40, 60, 90), r, border_radius=8)
            screen.blit(font.render(label, True, (255, 255, 255)), (r.x + 12, r.y + 10))

    def draw(self, screen, fonts, now):
        font, bigfont, smallfont = fonts
        frozen = now < self.freeze_until
        screen.fill((20, 20, 40) if not frozen else (20, 35, 55))
        pygame.draw.line(screen, (60, 160, 60), (0, int(GROUND_Y)), (SCREEN_W, int(GROUND_Y)), 3)
        self.sync_sprites(frozen)
        for a in self.engine.asteroids:
            sprite = self.sprites.get(a.id)
            if sprite is not None:
                screen.blit(sprite.image, sprite.rect)
                if a.size > 50:
                    name = smallfont.render(a.name[:15], True, (255, 224, 178))
                    screen.blit(name, name.get_rect(center=sprite.rect.center))
        self.draw_hud(screen, font, now)
        if self.banner and now < self.banner_until:
            surf = font.render(self.banner, True, (255, 255, 255))
            screen.blit(surf, (SCREEN_W // 2 - surf.get_width() // 2, SCREEN_H - 40))
        self.draw_question(screen, fonts, now)
        if self.state == "game_over":
            over = bigfont.render(f"Earth destroyed! Final score: {self.sink.score}", True, (255, 80, 80))
            screen.blit(over, (SCREEN_W // 2 - over.get_width() // 2, SCREEN_H // 2 - 20))
            hint = smallfont.render("Click or press any key to return", True, (200, 200, 200))
            screen.blit(hint, (SCREEN_W // 2 - hint.get_width() // 2, SCREEN_H // 2 + 20))

    # -- main run method --
    def run(self):
        pygame.init()
        try:
            pygame.mixer.init()
        except pygame.error:
            self.sfx_enabled = False
        screen = self.screen or pygame.display.set_mode((SCREEN_W, SCREEN_H))
        pygame.display.set_caption("Asteroid Defense")
        clock = pygame.time.Clock()
        fonts = (
            pygame.font.Font(self.font_name, 22),
            pygame.font.Font(self.font_name, 30),
            pygame.font.Font(self.font_name, 16),
        )

        self.setup()
        resources.load_graphics(self, Path("assets") / "Graphics")
        resources.load_sounds(self, Path("assets") / "Sound Effects")
        resources.start_music(self)

        while True:
            clock.tick(60)
            now = pygame.time.get_ticks()

            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    resources.stop_music(self)
                    return "quit"
                if self.state == "game_over":
                    if event.type in (pygame.KEYDOWN, pygame.MOUSEBUTTONDOWN):
                        resources.stop_music(self)
                        return "game_over"
                    continue
                if event.type == pygame.KEYDOWN:
                    if event.key == pygame.K_ESCAPE:
                        resources.stop_music(self)
                        return "menu"
                    if event.key == pygame.K_f:
                        self.use_time_freeze(now)
                elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
                    self.handle_click(event.pos, now)

            if self.state == "playing" and self.sink.game_over:
                self.state = "game_over"
                logger.info("Game over at wave %d with %d points", self.engine.wave_number, self.sink.score)

            self.engine.tick(now, time_freeze=now < self.freeze_until, game_state=self.state)
            self.draw(screen, fonts, now)
            pygame.display.flip()
