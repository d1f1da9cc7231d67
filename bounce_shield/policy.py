from .session import Phase

DEAD_ZONE = 4


def policy(env):
    # Strategy: keep the bar centred under the ball's centre. The bar is faster than the
    # ball's horizontal component, so greedy tracking reaches it before it falls. A small
    # dead zone stops the bar jittering around the target. Restart as soon as the game ends.
    session = env.session
    if session.phase is Phase.GAME_OVER:
        return [0, 1, 0]  # Restart

    ball_cx, _ = session.ball.center
    diff = ball_cx - session.bar.center_x

    if diff > DEAD_ZONE:
        return [4, 0, 0]  # Move right
    elif diff < -DEAD_ZONE:
        return [3, 0, 0]  # Move left
    else:
        return [0, 0, 0]  # No movement (already under the ball)
