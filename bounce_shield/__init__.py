from .config import DEFAULT_CONFIG, GameConfig, MilestonePolicy
from .entities import AnimatedText, Ball, Bar, PowerUp, PowerUpKind
from .session import GameEvent, GameSession, InputState, Phase, RenderState

__all__ = [
    "DEFAULT_CONFIG",
    "GameConfig",
    "MilestonePolicy",
    "AnimatedText",
    "Ball",
    "Bar",
    "PowerUp",
    "PowerUpKind",
    "GameEvent",
    "GameSession",
    "InputState",
    "Phase",
    "RenderState",
]
