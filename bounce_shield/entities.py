from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

import pygame


@dataclass
class Ball:
    pos: pygame.Vector2
    vel: pygame.Vector2
    size: float
    speed_multiplier: float = 1.0

    @property
    def x(self):
        return self.pos.x

    @x.setter
    def x(self, value):
        self.pos.x = value

    @property
    def y(self):
        return self.pos.y

    @y.setter
    def y(self, value):
        self.pos.y = value

    @property
    def dx(self):
        return self.vel.x

    @dx.setter
    def dx(self, value):
        self.vel.x = value

    @property
    def dy(self):
        return self.vel.y

    @dy.setter
    def dy(self, value):
        self.vel.y = value

    def rect(self):
        return pygame.Rect(int(self.pos.x), int(self.pos.y), int(self.size), int(self.size))

    @property
    def bottom(self):
        return self.pos.y + self.size

    @property
    def center(self):
        return self.pos.x + self.size / 2, self.pos.y + self.size / 2


@dataclass
class Bar:
    x: float
    y: float
    width: float
    height: float
    speed: float

    @property
    def center_x(self):
        return self.x + self.width / 2

    def clamp(self, screen_width, min_width, max_width):
        self.width = min(max(self.width, min_width), max_width)
        # A screen narrower than the bar pins it to the left edge
        self.x = min(max(self.x, 0.0), max(screen_width - self.width, 0.0))


class PowerUpKind(Enum):
    WIDTH_INCREASE = "width_increase"
    SPEED_BOOST = "speed_boost"
    EXTRA_HEART = "extra_heart"
    SLOW_BALL = "slow_ball"


@dataclass
class PowerUp:
    x: float
    y: float
    kind: PowerUpKind
    size: float
    collected: bool = False
    expires_at: Optional[float] = None

    def rect(self):
        return pygame.Rect(int(self.x), int(self.y), int(self.size), int(self.size))

    def is_active(self, now):
        if not self.collected:
            return True
        return self.expires_at is not None and now < self.expires_at


@dataclass
class AnimatedText:
    message: str
    start: float
    duration: float
    x: float
    y: float
    vx: float = 0.0
    vy: float = -20.0
    scale: float = 1.0
    color: Tuple[int, int, int] = (255, 255, 255)
    growth: float = 0.0

    def is_alive(self, now):
        return now - self.start < self.duration

    def advance(self, dt):
        self.x += self.vx * dt
        self.y += self.vy * dt
        self.scale = max(0.1, self.scale + self.growth * dt)
