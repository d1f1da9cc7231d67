"""Frame-stepped game state for Bounce Shield.

``GameSession`` owns the ball, the bar, scoring, hearts, power-ups and the
transient text overlays, and advances all of them in ``update``. It performs
no I/O: sound cues come back from ``update`` as ``GameEvent`` values and the
drawing shell reads ``render_state()``.
"""

import logging
import math
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

import numpy as np
import pygame

from .config import DEFAULT_CONFIG, MilestonePolicy
from .entities import AnimatedText, Ball, Bar, PowerUp, PowerUpKind

logger = logging.getLogger(__name__)


class Phase(Enum):
    COUNTDOWN = "countdown"
    PLAYING = "playing"
    PAUSED = "paused"
    GAME_OVER = "game_over"


class GameEvent(Enum):
    PADDLE_HIT = "paddle_hit"
    POWERUP_COLLECTED = "powerup_collected"
    HEART_AWARDED = "heart_awarded"
    GAME_START = "game_start"
    GAME_OVER = "game_over"


@dataclass(frozen=True)
class InputState:
    # Held keys
    left: bool = False
    right: bool = False
    # Just-pressed keys
    pause: bool = False
    restart: bool = False
    fullscreen: bool = False


@dataclass(frozen=True)
class PowerUpView:
    x: float
    y: float
    kind: PowerUpKind
    size: float
    collected: bool


@dataclass(frozen=True)
class TextView:
    message: str
    x: float
    y: float
    scale: float
    color: Tuple[int, int, int]


@dataclass(frozen=True)
class RenderState:
    screen_width: float
    screen_height: float
    ball_x: float
    ball_y: float
    ball_size: float
    bar_x: float
    bar_y: float
    bar_width: float
    bar_height: float
    score: int
    high_score: int
    hearts: int
    combo: int
    level: int
    phase: Phase
    countdown: int
    powerups: Tuple[PowerUpView, ...]
    texts: Tuple[TextView, ...]


POWERUP_KINDS = (
    PowerUpKind.WIDTH_INCREASE,
    PowerUpKind.SPEED_BOOST,
    PowerUpKind.EXTRA_HEART,
    PowerUpKind.SLOW_BALL,
)


class GameSession:
    COLOR_TEXT = (255, 255, 255)
    COLOR_SCORE = (50, 255, 50)
    COLOR_COMBO = (255, 223, 0)
    COLOR_HEART = (255, 80, 80)
    COLOR_POWERUP = (100, 200, 255)
    COLOR_HINT = (180, 180, 180)

    WIDTH_FACTOR = 1.5
    BAR_SPEED_FACTOR = 1.5
    SLOW_BALL_FACTOR = 0.75

    def __init__(self, config=None, rng=None, seed=None):
        self.config = (config or DEFAULT_CONFIG).validate()
        self.rng = rng if rng is not None else np.random.default_rng(seed)

        self.screen_width = float(self.config.screen_width)
        self.screen_height = float(self.config.screen_height)

        # Survive restarts, reset only with a new session
        self.high_score = 0
        self.prev_high_score = 0
        self.first_session = True

        self._events = []
        self._reset_state()

    # ------------------------------------------------------------------ state

    def _reset_state(self):
        cfg = self.config
        self.score = 0
        self.hearts = cfg.initial_hearts
        self.combo = 0
        self.last_hit_time: Optional[float] = None
        self.level = 1
        self.milestones = self._seed_milestones()
        self.powerups = []
        self.texts = []
        self.clock = 0.0
        self.sim_time = 0.0
        self._celebrated = False
        # Bar width before power-up multipliers
        self.base_bar_width = cfg.bar_width

        self.bar = Bar(
            x=(self.screen_width - cfg.bar_width) / 2,
            y=self._bar_y(),
            width=cfg.bar_width,
            height=cfg.bar_height,
            speed=cfg.bar_speed,
        )
        self.ball = self._spawn_ball()

        self.phase = Phase.COUNTDOWN
        self.countdown_remaining = float(cfg.countdown_seconds)
        self.countdown_value = cfg.countdown_seconds
        if self.countdown_value > 0:
            self._add_text(str(self.countdown_value), scale=3.0, growth=-1.0, vy=0.0, duration=1.0)

    def _seed_milestones(self):
        cfg = self.config
        if cfg.milestone_policy is MilestonePolicy.FIXED_LIST:
            return list(cfg.milestones)
        if self.first_session:
            return []
        return [self.prev_high_score + cfg.milestone_margin + 1]

    def _bar_y(self):
        return self.screen_height - self.config.bar_margin - self.config.bar_height

    def _spawn_ball(self, speed_multiplier=1.0):
        cfg = self.config
        size = cfg.ball_size
        x = self.rng.uniform(size, max(self.screen_width - 2 * size, size + 1))
        y = self.rng.uniform(size, max(self.screen_height / 2, size + 1))
        dx = cfg.ball_speed if self.rng.random() < 0.5 else -cfg.ball_speed
        return Ball(
            pos=pygame.Vector2(float(x), float(y)),
            vel=pygame.Vector2(dx, cfg.ball_speed),
            size=size,
            speed_multiplier=speed_multiplier,
        )

    def _emit(self, event):
        self._events.append(event)

    def _add_text(self, message, color=None, scale=1.5, duration=None, x=None, y=None, vx=0.0, vy=-20.0, growth=0.0):
        self.texts.append(
            AnimatedText(
                message=message,
                start=self.clock,
                duration=self.config.text_duration if duration is None else duration,
                x=self.screen_width / 2 if x is None else x,
                y=self.screen_height / 2 if y is None else y,
                vx=vx,
                vy=vy,
                scale=scale,
                color=color or self.COLOR_TEXT,
                growth=growth,
            )
        )

    # ----------------------------------------------------------------- public

    def update(self, dt, inputs=None, screen_size=None):
        """Advance one frame and return the events emitted during it."""
        dt = float(dt)
        if not math.isfinite(dt) or dt < 0.0:
            dt = 0.0
        inputs = inputs or InputState()
        self._events = []

        if screen_size is not None:
            self._resize(*screen_size)

        if self.phase is Phase.COUNTDOWN:
            self._advance_texts(dt)
            self._update_countdown(dt)
        elif self.phase is Phase.PLAYING:
            if inputs.pause:
                self.toggle_pause()
            else:
                self.sim_time += dt
                self._advance_texts(dt)
                self._step(inputs)
        elif self.phase is Phase.PAUSED:
            if inputs.pause:
                self.toggle_pause()
        elif self.phase is Phase.GAME_OVER:
            if inputs.restart:
                self.restart()
            else:
                self._advance_texts(dt)

        self.bar.clamp(self.screen_width, self.config.bar_min_width, self.config.bar_max_width)
        return list(self._events)

    def toggle_pause(self):
        if self.phase is Phase.PLAYING:
            self.phase = Phase.PAUSED
            logger.debug("Paused at score %d", self.score)
        elif self.phase is Phase.PAUSED:
            self.phase = Phase.PLAYING
            self.texts.clear()
            logger.debug("Resumed")

    def restart(self):
        if self.phase is not Phase.GAME_OVER:
            logger.debug("Ignoring restart request in phase %s", self.phase.value)
            return
        self.high_score = max(self.high_score, self.score)
        self.prev_high_score = self.high_score
        self.first_session = False
        self._reset_state()
        logger.debug("Restarted, high score %d", self.high_score)

    def render_state(self):
        return RenderState(
            screen_width=self.screen_width,
            screen_height=self.screen_height,
            ball_x=self.ball.x,
            ball_y=self.ball.y,
            ball_size=self.ball.size,
            bar_x=self.bar.x,
            bar_y=self.bar.y,
            bar_width=self.bar.width,
            bar_height=self.bar.height,
            score=self.score,
            high_score=self.high_score,
            hearts=self.hearts,
            combo=self.combo,
            level=self.level,
            phase=self.phase,
            countdown=self.countdown_value,
            powerups=tuple(PowerUpView(p.x, p.y, p.kind, p.size, p.collected) for p in self.powerups),
            texts=tuple(TextView(t.message, t.x, t.y, t.scale, t.color) for t in self.texts),
        )

    # --------------------------------------------------------------- internal

    def _resize(self, width, height):
        width, height = float(width), float(height)
        if width <= 0 or height <= 0:
            return
        self.screen_width, self.screen_height = width, height
        self.bar.y = self._bar_y()

    def _advance_texts(self, dt):
        self.clock += dt
        for text in self.texts:
            text.advance(dt)
        self.texts = [t for t in self.texts if t.is_alive(self.clock)]

    def _update_countdown(self, dt):
        self.countdown_remaining = max(0.0, self.countdown_remaining - dt)
        value = math.ceil(self.countdown_remaining)
        if value <= 0:
            self._start_play()
        elif value != self.countdown_value:
            self.countdown_value = value
            self._add_text(str(value), scale=3.0, growth=-1.0, vy=0.0, duration=1.0)

    def _start_play(self):
        self.phase = Phase.PLAYING
        self.countdown_value = 0
        self._add_text("Game Start!", color=self.COLOR_SCORE, scale=2.0)
        self._add_text(
            "Left/Right to move, P to pause",
            color=self.COLOR_HINT,
            scale=1.0,
            y=self.screen_height / 2 + 50,
            duration=self.config.text_duration * 2,
        )
        self._emit(GameEvent.GAME_START)
        logger.debug("Game started")

    def _step(self, inputs):
        ball = self.ball

        # Integrate
        prev_bottom = ball.bottom
        ball.pos += ball.vel * ball.speed_multiplier

        # Walls
        if ball.x <= 0:
            ball.dx = abs(ball.dx)
        elif ball.x + ball.size >= self.screen_width:
            ball.dx = -abs(ball.dx)
        if ball.y <= 0:
            ball.dy = abs(ball.dy)

        # Paddle: swept so a fast ball cannot tunnel through the bar
        bar = self.bar
        if (
            ball.dy > 0
            and prev_bottom <= bar.y <= ball.bottom
            and ball.x + ball.size >= bar.x
            and ball.x <= bar.x + bar.width
        ):
            ball.y = bar.y - ball.size
            self._on_paddle_hit()

        # Bottom edge
        if ball.bottom > self.screen_height:
            self._lose_heart()
            if self.phase is Phase.GAME_OVER:
                return

        self._update_powerups()

        # Player movement
        if inputs.left:
            bar.x -= bar.speed
        if inputs.right:
            bar.x += bar.speed
        bar.clamp(self.screen_width, self.config.bar_min_width, self.config.bar_max_width)

    def _on_paddle_hit(self):
        cfg = self.config
        ball = self.ball
        ball.dy = -abs(ball.dy)
        self.score += 1

        if self.last_hit_time is not None and self.sim_time - self.last_hit_time < cfg.combo_window:
            self.combo += 1
        else:
            self.combo = 1
        self.last_hit_time = self.sim_time
        self._emit(GameEvent.PADDLE_HIT)

        cx, _ = ball.center
        if self.combo > 1:
            self._add_text(f"Combo x{self.combo}!", color=self.COLOR_COMBO, scale=1.2, x=cx, y=self.bar.y - 30)
        else:
            self._add_text("+1", color=self.COLOR_SCORE, scale=1.0, x=cx, y=self.bar.y - 30)

        self._check_high_score()
        self._check_milestones()

        if self.rng.random() < cfg.powerup_chance:
            self._spawn_powerup()

        if self.score % cfg.difficulty_interval == 0:
            self.level += 1
            ball.speed_multiplier *= cfg.ball_speed_scale
            self.bar.speed *= cfg.bar_speed_scale
            self._add_text(f"Level {self.level}", color=self.COLOR_POWERUP, scale=1.5, y=self.screen_height / 3)
            logger.debug("Difficulty level %d, ball x%.2f", self.level, ball.speed_multiplier)

    def _check_high_score(self):
        if self.score <= self.high_score:
            return
        self.high_score = self.score
        if not self._celebrated:
            self._celebrated = True
            self._add_text("New High Score!", color=self.COLOR_COMBO, scale=2.0, growth=0.5)

    def _check_milestones(self):
        if not self.milestones or self.score < self.milestones[0]:
            return
        threshold = self.milestones.pop(0)
        cfg = self.config
        self.hearts += 1
        self.base_bar_width = min(self.base_bar_width + cfg.milestone_bar_growth, cfg.bar_max_width)
        self._refresh_bar_width()
        self._add_text("+1 Heart", color=self.COLOR_HEART, scale=1.5, y=self.screen_height / 2 - 40)
        self._emit(GameEvent.HEART_AWARDED)
        logger.debug("Milestone %d reached, hearts %d", threshold, self.hearts)

    def _refresh_bar_width(self):
        """Re-derive the bar width from its base and any active width power-ups."""
        cfg = self.config
        wide = sum(
            1
            for p in self.powerups
            if p.kind is PowerUpKind.WIDTH_INCREASE and p.collected and p.is_active(self.sim_time)
        )
        center = self.bar.center_x
        self.bar.width = self.base_bar_width * self.WIDTH_FACTOR ** wide
        self.bar.x = center - self.bar.width / 2
        self.bar.clamp(self.screen_width, cfg.bar_min_width, cfg.bar_max_width)

    def _lose_heart(self):
        if self.hearts > 0:
            self.hearts -= 1
        self.texts.clear()
        self.combo = 0
        cfg = self.config
        self.base_bar_width = max(self.base_bar_width - cfg.bar_shrink_on_miss, cfg.bar_min_width)
        self._refresh_bar_width()

        if self.hearts == 0:
            self._game_over()
            return
        self.ball = self._spawn_ball(self.ball.speed_multiplier)
        self._add_text("-1 Heart", color=self.COLOR_HEART, scale=1.5)

    def _game_over(self):
        self.phase = Phase.GAME_OVER
        self.high_score = max(self.high_score, self.score)
        self._add_text("Game Over!", color=self.COLOR_HEART, scale=2.5, vy=0.0, duration=math.inf)
        self._add_text(
            "Press R to Restart", scale=1.2, y=self.screen_height / 2 + 60, vy=0.0, duration=math.inf
        )
        self._emit(GameEvent.GAME_OVER)
        logger.debug("Game over at score %d (high score %d)", self.score, self.high_score)

    # -------------------------------------------------------------- power-ups

    def _spawn_powerup(self):
        cfg = self.config
        size = cfg.powerup_size
        kind = POWERUP_KINDS[int(self.rng.integers(0, len(POWERUP_KINDS)))]
        x = self.rng.uniform(0, max(self.screen_width - size, 1))
        y = self.rng.uniform(0, max(self.screen_height / 2 - size, 1))
        self.powerups.append(PowerUp(x=float(x), y=float(y), kind=kind, size=size))
        logger.debug("Spawned %s power-up at (%.0f, %.0f)", kind.value, x, y)

    def _update_powerups(self):
        ball_rect = self.ball.rect()
        for powerup in self.powerups:
            if not powerup.collected and ball_rect.colliderect(powerup.rect()):
                self._collect(powerup)

        kept = []
        for powerup in self.powerups:
            if powerup.is_active(self.sim_time):
                kept.append(powerup)
            else:
                self._expire(powerup)
        self.powerups = kept

    def _collect(self, powerup):
        cfg = self.config
        powerup.collected = True
        powerup.expires_at = self.sim_time + cfg.powerup_duration

        if powerup.kind is PowerUpKind.WIDTH_INCREASE:
            self._refresh_bar_width()
            message = "Wide Bar!"
        elif powerup.kind is PowerUpKind.SPEED_BOOST:
            self.bar.speed *= self.BAR_SPEED_FACTOR
            message = "Speed Boost!"
        elif powerup.kind is PowerUpKind.EXTRA_HEART:
            self.hearts += 1
            self._emit(GameEvent.HEART_AWARDED)
            message = "+1 Heart"
        else:
            self.ball.speed_multiplier *= self.SLOW_BALL_FACTOR
            message = "Slow Ball!"

        self._add_text(message, color=self.COLOR_POWERUP, scale=1.5, x=powerup.x, y=powerup.y)
        self._emit(GameEvent.POWERUP_COLLECTED)
        logger.debug("Collected %s power-up", powerup.kind.value)

    def _expire(self, powerup):
        if powerup.kind is PowerUpKind.WIDTH_INCREASE:
            self._refresh_bar_width()
        elif powerup.kind is PowerUpKind.SPEED_BOOST:
            self.bar.speed /= self.BAR_SPEED_FACTOR
        elif powerup.kind is PowerUpKind.SLOW_BALL:
            self.ball.speed_multiplier /= self.SLOW_BALL_FACTOR
        logger.debug("%s power-up expired", powerup.kind.value)
