import dataclasses
import math

import pytest

from bounce_shield import GameEvent, InputState, MilestonePolicy, Phase
from conftest import ScriptedRng, drop_ball, hit, place_over_bar, start


# --- walls -------------------------------------------------------------------


def test_left_wall_reflects_dx(session):
    ball = session.ball
    ball.x, ball.y, ball.dx, ball.dy = 0.0, 100.0, -3.0, 3.0
    session.update(1 / 60)
    assert ball.dx > 0
    assert ball.dy == 3.0


def test_right_wall_reflects_dx(session):
    ball = session.ball
    ball.x, ball.y, ball.dx, ball.dy = session.screen_width - ball.size, 100.0, 3.0, -3.0
    session.update(1 / 60)
    assert ball.dx < 0
    assert ball.dy == -3.0


def test_top_wall_reflects_dy(session):
    ball = session.ball
    ball.x, ball.y, ball.dx, ball.dy = 200.0, 1.0, 3.0, -3.0
    session.update(1 / 60)
    assert ball.dy > 0
    assert ball.dx == 3.0


def test_ball_moves_by_velocity_times_multiplier(session):
    ball = session.ball
    ball.x, ball.y, ball.dx, ball.dy, ball.speed_multiplier = 200.0, 100.0, 3.0, 3.0, 2.0
    session.update(1 / 60)
    assert (ball.x, ball.y) == (206.0, 106.0)


# --- paddle --------------------------------------------------------------------


def test_ball_just_above_bar_scores_and_bounces(session):
    events = hit(session, dt=1 / 60)
    assert session.score == 1
    assert session.ball.dy < 0
    assert GameEvent.PADDLE_HIT in events


def test_rising_ball_does_not_bounce_off_bar(session):
    place_over_bar(session, dy=-3.0)
    session.ball.y += 10  # overlapping the bar top while moving up
    session.update(1 / 60)
    assert session.score == 0
    assert session.ball.dy < 0


def test_ball_beside_bar_is_not_hit(session):
    place_over_bar(session)
    session.ball.x = session.bar.x + session.bar.width + 5
    session.update(1 / 60)
    assert session.score == 0
    assert session.ball.dy > 0


def test_fast_ball_does_not_tunnel_through_bar(session):
    place_over_bar(session)
    # One frame carries the ball well past the bar and off the bottom edge
    session.ball.speed_multiplier = 1.1 ** 30
    session.update(1 / 60)
    assert session.score == 1
    assert session.hearts == 3
    assert session.ball.dy < 0
    assert session.ball.bottom == session.bar.y


def test_combo_counts_hits_within_window(session):
    hit(session, dt=0.1)
    assert session.combo == 1
    hit(session, dt=1.0)
    assert session.combo == 2
    hit(session, dt=5.0)
    assert session.combo == 1


def test_difficulty_scales_every_fifth_point(session):
    for _ in range(4):
        hit(session)
    assert session.level == 1
    hit(session)
    assert session.level == 2
    assert session.ball.speed_multiplier == pytest.approx(1.1)
    assert session.bar.speed == pytest.approx(7.0 * 1.05)


def test_high_score_tracks_score(session):
    hit(session)
    hit(session)
    assert session.high_score == 2


def test_first_session_celebrates_new_high_score_once(session):
    assert session.first_session
    hit(session)
    hit(session)
    messages = [t.message for t in session.texts]
    assert messages.count("New High Score!") == 1


# --- hearts and game over ------------------------------------------------------


def test_losing_last_heart_ends_game(session):
    session.hearts = 1
    events = drop_ball(session)
    assert session.hearts == 0
    assert session.phase is Phase.GAME_OVER
    assert GameEvent.GAME_OVER in events
    assert any(t.message == "Game Over!" for t in session.texts)


def test_hearts_never_go_negative(session):
    session.hearts = 1
    drop_ball(session)
    for _ in range(5):
        drop_ball(session)
    assert session.hearts == 0


def test_losing_heart_respawns_ball_and_resets_combo(session):
    hit(session)
    assert session.combo == 1
    drop_ball(session)
    assert session.hearts == 2
    assert session.phase is Phase.PLAYING
    assert session.combo == 0
    assert session.ball.bottom < session.screen_height
    assert session.ball.dy > 0


def test_losing_heart_clears_texts(session):
    hit(session)
    assert session.texts
    drop_ball(session)
    assert [t.message for t in session.texts] == ["-1 Heart"]


def test_losing_heart_shrinks_bar(session):
    drop_ball(session)
    assert session.bar.width == 130.0
    drop_ball(session)
    assert session.bar.width == 110.0


def test_bar_shrink_stops_at_min_width(make_session):
    session = start(make_session(initial_hearts=10))
    for _ in range(8):
        drop_ball(session)
    assert session.hearts == 2
    assert session.bar.width == session.config.bar_min_width


# --- restart -------------------------------------------------------------------


def finish(session):
    session.hearts = 1
    drop_ball(session)
    assert session.phase is Phase.GAME_OVER


def test_restart_reinitializes_and_keeps_high_score(session):
    hit(session)
    hit(session)
    session.bar.width = 200.0
    finish(session)

    session.update(0.0, InputState(restart=True))

    assert session.phase is Phase.COUNTDOWN
    assert session.score == 0
    assert session.hearts == session.config.initial_hearts
    assert session.bar.width == session.config.bar_width
    assert session.level == 1
    assert session.powerups == []
    assert session.milestones == list(session.config.milestones)
    assert session.high_score == 2
    assert session.prev_high_score == 2
    assert not session.first_session


def test_restart_ignored_during_countdown(make_session):
    restarted, plain = make_session(), make_session()
    for _ in range(3):
        restarted.update(0.5, InputState(restart=True))
        plain.update(0.5)
    assert restarted.phase is Phase.COUNTDOWN
    assert restarted.countdown_remaining == plain.countdown_remaining == 1.5
    assert restarted.first_session


def test_restart_ignored_while_playing(session):
    hit(session)
    session.update(0.1, InputState(restart=True))
    assert session.phase is Phase.PLAYING
    assert session.score == 1


# --- milestones ----------------------------------------------------------------


def test_milestone_awards_heart_once(session):
    for _ in range(5):
        hit(session)
    assert session.hearts == 4
    assert session.milestones == [10, 15, 20]
    hit(session)
    assert session.hearts == 4


def test_milestone_grows_bar(session):
    for _ in range(4):
        hit(session)
    events = hit(session)
    assert GameEvent.HEART_AWARDED in events
    assert session.bar.width == session.config.bar_width + session.config.milestone_bar_growth


def test_milestone_growth_is_capped_at_max_width(make_session):
    session = start(make_session(bar_width=300.0, milestones=(1,)))
    hit(session)
    assert session.hearts == 4
    assert session.bar.width == 300.0


def test_beat_previous_high_policy(make_session):
    session = start(make_session(milestone_policy=MilestonePolicy.BEAT_PREVIOUS_HIGH))
    assert session.milestones == []
    hit(session)
    hit(session)
    assert session.hearts == 3
    finish(session)
    session.update(0.0, InputState(restart=True))
    assert session.milestones == [8]
    start(session)

    for _ in range(2):
        hit(session)
    events = hit(session)
    assert session.high_score == 3
    assert any(t.message == "New High Score!" for t in session.texts)
    assert GameEvent.HEART_AWARDED not in events

    for _ in range(5):
        hit(session)
    assert session.score == 8
    assert session.hearts == 4
    hit(session)
    assert session.hearts == 4


# --- countdown and pause -------------------------------------------------------


def test_countdown_ticks_then_starts(make_session):
    session = make_session()
    assert [t.message for t in session.texts] == ["3"]
    ball_pos = (session.ball.x, session.ball.y)

    session.update(1.0)
    assert "2" in [t.message for t in session.texts]
    assert session.countdown_value == 2
    session.update(1.0)
    assert "1" in [t.message for t in session.texts]
    assert (session.ball.x, session.ball.y) == ball_pos

    events = session.update(1.0)
    assert session.phase is Phase.PLAYING
    assert events == [GameEvent.GAME_START]
    assert "Game Start!" in [t.message for t in session.texts]


def test_countdown_ignores_movement(make_session):
    session = make_session()
    x = session.bar.x
    session.update(0.1, InputState(left=True))
    assert session.bar.x == x


def test_pause_freezes_simulation(session):
    session.update(0.0, InputState(pause=True))
    assert session.phase is Phase.PAUSED
    ball = (session.ball.x, session.ball.y)
    bar_x = session.bar.x
    sim_time = session.sim_time

    for _ in range(10):
        session.update(1.0, InputState(left=True))

    assert (session.ball.x, session.ball.y) == ball
    assert session.bar.x == bar_x
    assert session.sim_time == sim_time


def test_resume_clears_texts(session):
    assert session.texts
    session.update(0.0, InputState(pause=True))
    session.update(0.0, InputState(pause=True))
    assert session.phase is Phase.PLAYING
    assert session.texts == []


def test_negative_dt_is_clamped(make_session):
    session = make_session()
    session.update(-5.0)
    assert session.countdown_remaining == 3.0
    session.update(math.nan)
    assert session.countdown_remaining == 3.0


def test_texts_expire(session):
    hit(session)
    assert any(t.message == "+1" for t in session.texts)
    session.ball.y = 100.0
    session.update(session.config.text_duration + 0.1)
    assert not any(t.message == "+1" for t in session.texts)


# --- bar movement --------------------------------------------------------------


def test_bar_stays_on_screen(session):
    session.ball.y = 50.0
    session.ball.dx = session.ball.dy = 0.0
    for _ in range(200):
        session.update(1 / 60, InputState(left=True))
        assert 0 <= session.bar.x <= session.screen_width - session.bar.width
    assert session.bar.x == 0

    for _ in range(200):
        session.update(1 / 60, InputState(right=True))
        assert 0 <= session.bar.x <= session.screen_width - session.bar.width
    assert session.bar.x == session.screen_width - session.bar.width


def test_bar_reclamps_on_resize(session):
    session.bar.x = session.screen_width - session.bar.width
    session.update(1 / 60, screen_size=(400, 300))
    assert session.bar.x == 400 - session.bar.width
    assert session.bar.y == 300 - session.config.bar_margin - session.config.bar_height


# --- snapshot ------------------------------------------------------------------


def test_render_state_snapshot(session):
    hit(session)
    state = session.render_state()
    assert state.score == 1
    assert state.phase is Phase.PLAYING
    assert state.hearts == session.hearts
    assert state.bar_width == session.bar.width
    assert state.ball_x == session.ball.x
    assert all(isinstance(t.message, str) for t in state.texts)
    with pytest.raises(dataclasses.FrozenInstanceError):
        state.score = 5


def test_seeded_sessions_are_reproducible():
    from bounce_shield import GameSession

    a, b = GameSession(seed=7), GameSession(seed=7)
    assert (a.ball.x, a.ball.y, a.ball.dx) == (b.ball.x, b.ball.y, b.ball.dx)
    for _ in range(300):
        a.update(1 / 30, InputState(right=True))
        b.update(1 / 30, InputState(right=True))
    assert a.render_state() == b.render_state()


def test_default_rng_spawn_is_in_upper_half():
    from bounce_shield import GameSession

    for seed in range(20):
        session = GameSession(seed=seed)
        assert session.ball.size <= session.ball.x <= session.screen_width - session.ball.size
        assert session.ball.y <= session.screen_height / 2


def test_scripted_direction(make_session):
    right = make_session(rng=ScriptedRng(randoms=[0.1]))
    left = make_session(rng=ScriptedRng(randoms=[0.9]))
    assert right.ball.dx > 0
    assert left.ball.dx < 0
