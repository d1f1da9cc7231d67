import os

os.environ.setdefault("SDL_VIDEODRIVER", "dummy")
os.environ.setdefault("SDL_AUDIODRIVER", "dummy")

import pytest  # noqa: E402

from bounce_shield import GameConfig, GameSession, Phase  # noqa: E402


class ScriptedRng:
    """Stand-in for ``numpy.random.Generator`` that replays fixed values.

    When a script runs out, ``random`` returns 0.99 (no power-up spawns, ball
    heads left), ``uniform`` the midpoint and ``integers`` the lower bound.
    """

    def __init__(self, randoms=(), uniforms=(), integers=()):
        self.randoms = list(randoms)
        self.uniforms = list(uniforms)
        self.ints = list(integers)

    def random(self):
        return self.randoms.pop(0) if self.randoms else 0.99

    def uniform(self, low, high):
        return self.uniforms.pop(0) if self.uniforms else (low + high) / 2

    def integers(self, low, high):
        return self.ints.pop(0) if self.ints else low


def start(session):
    """Run the countdown out so the session is Playing."""
    session.update(float(session.config.countdown_seconds))
    assert session.phase is Phase.PLAYING
    return session


def place_over_bar(session, dy=3.0):
    """Put the ball one pixel above the bar, centred on it, falling."""
    ball = session.ball
    ball.x = session.bar.center_x - ball.size / 2
    ball.y = session.bar.y - ball.size - 1
    ball.dx = 0.0
    ball.dy = dy


def hit(session, dt=0.1, inputs=None):
    place_over_bar(session)
    return session.update(dt, inputs)


def drop_ball(session, dt=0.1):
    ball = session.ball
    ball.x = 10.0
    ball.y = session.screen_height + 5
    ball.dx = 0.0
    ball.dy = 3.0
    return session.update(dt)


@pytest.fixture
def rng():
    return ScriptedRng()


@pytest.fixture
def make_session():
    def _make(rng=None, **overrides):
        config = GameConfig().replace(**overrides) if overrides else None
        return GameSession(config, rng=rng or ScriptedRng())

    return _make


@pytest.fixture
def session(make_session):
    return start(make_session())
