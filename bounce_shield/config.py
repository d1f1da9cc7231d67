from dataclasses import dataclass, field, replace
from enum import Enum


class MilestonePolicy(Enum):
    # Ascending list of thresholds, each claimed once per session
    FIXED_LIST = "fixed_list"
    # Single threshold: beat the previous session's high score by a margin
    BEAT_PREVIOUS_HIGH = "beat_previous_high"


@dataclass(frozen=True)
class GameConfig:
    """Tunable constants for a Bounce Shield session.

    Speeds are in pixels per frame (the simulation is frame-stepped), timers
    are in seconds.
    """

    screen_width: int = 800
    screen_height: int = 600

    ball_size: float = 20.0
    ball_speed: float = 3.0

    bar_height: float = 20.0
    bar_width: float = 150.0
    bar_min_width: float = 50.0
    bar_max_width: float = 300.0
    bar_margin: float = 30.0
    bar_speed: float = 7.0
    bar_shrink_on_miss: float = 20.0

    initial_hearts: int = 3
    countdown_seconds: int = 3
    combo_window: float = 2.0

    difficulty_interval: int = 5
    ball_speed_scale: float = 1.1
    bar_speed_scale: float = 1.05

    powerup_chance: float = 0.01
    powerup_size: float = 20.0
    powerup_duration: float = 10.0

    milestone_policy: MilestonePolicy = MilestonePolicy.FIXED_LIST
    milestones: tuple = field(default=(5, 10, 15, 20))
    milestone_margin: int = 5
    milestone_bar_growth: float = 15.0

    text_duration: float = 1.5

    def replace(self, **kwargs):
        return replace(self, **kwargs)

    def validate(self):
        if self.screen_width <= 0 or self.screen_height <= 0:
            raise ValueError(f"screen size must be positive, got {self.screen_width}x{self.screen_height}")
        if self.ball_size <= 0 or self.ball_speed <= 0:
            raise ValueError("ball size and speed must be positive")
        if self.bar_height <= 0 or self.bar_speed <= 0:
            raise ValueError("bar height and speed must be positive")
        if self.bar_shrink_on_miss < 0:
            raise ValueError(f"bar_shrink_on_miss must be non-negative, got {self.bar_shrink_on_miss}")
        if not 0 < self.bar_min_width <= self.bar_max_width:
            raise ValueError(
                f"bar width bounds must satisfy 0 < min <= max, got [{self.bar_min_width}, {self.bar_max_width}]"
            )
        if not self.bar_min_width <= self.bar_width <= self.bar_max_width:
            raise ValueError(f"initial bar width {self.bar_width} outside [{self.bar_min_width}, {self.bar_max_width}]")
        if self.initial_hearts < 1:
            raise ValueError("initial_hearts must be at least 1")
        if self.countdown_seconds < 0 or self.combo_window < 0:
            raise ValueError("timers must be non-negative")
        if self.difficulty_interval < 1:
            raise ValueError("difficulty_interval must be at least 1")
        if self.ball_speed_scale <= 0 or self.bar_speed_scale <= 0:
            raise ValueError("difficulty scales must be positive")
        if not 0.0 <= self.powerup_chance <= 1.0:
            raise ValueError(f"powerup_chance must be a probability, got {self.powerup_chance}")
        if self.powerup_size <= 0 or self.powerup_duration < 0:
            raise ValueError("power-up size must be positive and duration non-negative")
        if list(self.milestones) != sorted(self.milestones):
            raise ValueError(f"milestones must be ascending, got {self.milestones}")
        return self


DEFAULT_CONFIG = GameConfig()
