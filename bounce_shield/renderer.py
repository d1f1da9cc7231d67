import logging
import math

import pygame
import pygame.gfxdraw

from .entities import PowerUpKind
from .session import Phase

logger = logging.getLogger(__name__)


class Renderer:
    """Draws a ``RenderState`` snapshot onto a pygame surface."""

    COLOR_BG_TOP = (10, 0, 30)
    COLOR_BG_BOTTOM = (0, 0, 0)
    COLOR_BAR = (255, 255, 255)
    COLOR_BAR_GLOW = (100, 100, 255)
    COLOR_BALL = (50, 255, 50)
    COLOR_SCORE = (50, 255, 50)
    COLOR_HIGH_SCORE = (255, 255, 0)
    COLOR_HEART = (255, 60, 60)
    COLOR_COMBO = (255, 223, 0)
    COLOR_LEVEL = (100, 200, 255)
    COLOR_OVERLAY = (0, 0, 0, 150)
    POWERUP_COLORS = {
        PowerUpKind.WIDTH_INCREASE: (0, 200, 255),
        PowerUpKind.SPEED_BOOST: (255, 165, 0),
        PowerUpKind.EXTRA_HEART: (255, 60, 60),
        PowerUpKind.SLOW_BALL: (180, 100, 255),
    }
    POWERUP_LABELS = {
        PowerUpKind.WIDTH_INCREASE: "W",
        PowerUpKind.SPEED_BOOST: "S",
        PowerUpKind.EXTRA_HEART: "H",
        PowerUpKind.SLOW_BALL: "B",
    }
    BASE_FONT_SIZE = 28

    def __init__(self, surface):
        pygame.font.init()
        self.surface = surface
        self._fonts = {}
        self._frame = 0

    def font(self, size):
        size = max(8, int(size))
        if size not in self._fonts:
            try:
                self._fonts[size] = pygame.font.SysFont("Consolas", size, bold=True)
            except pygame.error as e:
                logger.warning("System font unavailable, using default: %s", e)
                self._fonts[size] = pygame.font.Font(None, size)
        return self._fonts[size]

    def draw(self, state):
        self._frame += 1
        self._render_background()
        self._render_powerups(state)
        self._render_bar(state)
        self._render_ball(state)
        self._render_ui(state)
        self._render_texts(state)
        if state.phase is Phase.PAUSED:
            self._render_pause()

    def _render_background(self):
        width, height = self.surface.get_size()
        for y in range(0, height, 4):
            interp = y / height
            color = tuple(
                int(top * (1 - interp) + bottom * interp)
                for top, bottom in zip(self.COLOR_BG_TOP, self.COLOR_BG_BOTTOM)
            )
            pygame.draw.rect(self.surface, color, (0, y, width, 4))

    def _render_bar(self, state):
        bar_rect = pygame.Rect(int(state.bar_x), int(state.bar_y), int(state.bar_width), int(state.bar_height))
        glow_rect = bar_rect.inflate(10, 10)
        glow_surf = pygame.Surface(glow_rect.size, pygame.SRCALPHA)
        pygame.draw.rect(glow_surf, (*self.COLOR_BAR_GLOW, 60), glow_surf.get_rect(), border_radius=8)
        self.surface.blit(glow_surf, glow_rect.topleft)
        pygame.draw.rect(self.surface, self.COLOR_BAR, bar_rect, border_radius=5)

    def _render_ball(self, state):
        radius = int(state.ball_size / 2)
        cx = int(state.ball_x + state.ball_size / 2)
        cy = int(state.ball_y + state.ball_size / 2)
        glow_radius = int(radius * 1.8)
        if glow_radius > 0:
            pygame.gfxdraw.filled_circle(self.surface, cx, cy, glow_radius, (*self.COLOR_BALL, 40))
        pygame.gfxdraw.filled_circle(self.surface, cx, cy, radius, self.COLOR_BALL)
        pygame.gfxdraw.aacircle(self.surface, cx, cy, radius, self.COLOR_BALL)

    def _render_powerups(self, state):
        pulse = 0.5 + 0.5 * math.sin(self._frame * 0.2)
        for powerup in state.powerups:
            if powerup.collected:
                continue
            color = self.POWERUP_COLORS[powerup.kind]
            rect = pygame.Rect(int(powerup.x), int(powerup.y), int(powerup.size), int(powerup.size))
            temp_surf = pygame.Surface(rect.size, pygame.SRCALPHA)
            pygame.draw.rect(temp_surf, (*color, int(140 + 115 * pulse)), temp_surf.get_rect(), border_radius=4)
            self.surface.blit(temp_surf, rect.topleft)
            label = self.font(int(powerup.size)).render(self.POWERUP_LABELS[powerup.kind], True, (0, 0, 0))
            self.surface.blit(label, label.get_rect(center=rect.center))

    def _render_ui(self, state):
        font = self.font(self.BASE_FONT_SIZE)
        width = self.surface.get_width()

        score_text = font.render(f"Score: {state.score}", True, self.COLOR_SCORE)
        self.surface.blit(score_text, (20, 15))
        high_text = font.render(f"High Score: {state.high_score}", True, self.COLOR_HIGH_SCORE)
        self.surface.blit(high_text, (20, 45))

        hearts_text = font.render(f"Hearts: {state.hearts}", True, self.COLOR_HEART)
        self.surface.blit(hearts_text, (width - hearts_text.get_width() - 20, 15))
        level_text = font.render(f"Level: {state.level}", True, self.COLOR_LEVEL)
        self.surface.blit(level_text, (width - level_text.get_width() - 20, 45))

        if state.combo > 1:
            combo_text = font.render(f"Combo x{state.combo}", True, self.COLOR_COMBO)
            self.surface.blit(combo_text, combo_text.get_rect(midtop=(width / 2, 15)))

    def _render_texts(self, state):
        for text in state.texts:
            surf = self.font(self.BASE_FONT_SIZE * text.scale).render(text.message, True, text.color)
            self.surface.blit(surf, surf.get_rect(center=(int(text.x), int(text.y))))

    def _render_pause(self):
        overlay = pygame.Surface(self.surface.get_size(), pygame.SRCALPHA)
        overlay.fill(self.COLOR_OVERLAY)
        self.surface.blit(overlay, (0, 0))
        surf = self.font(self.BASE_FONT_SIZE * 2).render("PAUSED", True, (255, 255, 255))
        width, height = self.surface.get_size()
        self.surface.blit(surf, surf.get_rect(center=(width / 2, height / 2)))
