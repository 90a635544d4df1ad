"""Sprite class that draws one Asteroid entity for the Asteroid Defense screen."""
import pygame

from .asteroid import AsteroidState
from .helpers import SPAWN_Y

FILL_BY_STATE = {
    AsteroidState.DEFLECTED: (0, 200, 0),
    AsteroidState.DOWNGRADED: (0, 200, 120),
    AsteroidState.COLLIDING: (255, 69, 0),
    AsteroidState.WRONG_ANSWER: (255, 0, 60),
}
FILL_BY_SKIN = {
    "GOLD": (255, 200, 0),
    "CRYSTAL": (0, 206, 209),
    "REGULAR": (139, 69, 19),
}
FROZEN_FILL = (135, 206, 235)
HAZARD_BORDER = (255, 0, 0)
DEFAULT_BORDER = (255, 167, 38)


class AsteroidSprite(pygame.sprite.Sprite):
    def __init__(self, asteroid, images=None):
        super().__init__()
        self.images = images or {}
        self.asteroid = None
        self._key = None
        self.image = None
        self.rect = None
        self.sync(asteroid, frozen=False)

    def _render(self, asteroid, frozen):
        d = max(8, int(asteroid.size))
        img = self.images.get(asteroid.skin) if asteroid.state == AsteroidState.FALLING else None
        if img is not None:
            try:
                return pygame.transform.smoothscale(img, (d, d)).convert_alpha()
            except pygame.error:
                pass
        surf = pygame.Surface((d, d), pygame.SRCALPHA)
        if frozen and asteroid.state in (AsteroidState.FALLING, AsteroidState.QUESTION_OPEN):
            fill = FROZEN_FILL
        else:
            fill = FILL_BY_STATE.get(asteroid.state, FILL_BY_SKIN.get(asteroid.skin, (139, 69, 19)))
        border = HAZARD_BORDER if asteroid.is_potentially_hazardous else DEFAULT_BORDER
        pygame.draw.circle(surf, fill, (d // 2, d // 2), d // 2)
        pygame.draw.circle(surf, border, (d // 2, d // 2), d // 2, 3)
        return surf

    def sync(self, asteroid, frozen=False):
        """Refresh image and position from the latest copy of the entity."""
        key = (asteroid.state, asteroid.skin, int(asteroid.size), frozen)
        if key != self._key:
            self.image = self._render(asteroid, frozen)
            self._key = key
        self.asteroid = asteroid
        x, y = asteroid.x, asteroid.y
        if asteroid.state in (AsteroidState.DEFLECTED, AsteroidState.DOWNGRADED):
            # drift sideways and back up while the deflection settles
            x += asteroid.scatter_x * 0.25
            y = min(y, y + (SPAWN_Y - y) * 0.5)
        self.rect = self.image.get_rect(center=(int(x), int(y)))

    def hit(self, pos):
        return self.rect is not None and self.rect.collidepoint(pos)
