import random

import pytest

from pong_server.models import Ball, Direction, GameState, GameStatus, Player, Score, Side
from pong_server.services.games.physics import move_paddle, new_ball, new_paddle, paddle_collision, step
from pong_server.services.games.scoring import goal_scored, winning_side


def _playing_state(settings, ball, with_paddles=True):
    state = GameState(ball=ball, status=GameStatus.PLAYING)
    if with_paddles:
        state.player1 = Player('a', 'A', new_paddle(Side.LEFT, settings))
        state.player2 = Player('b', 'B', new_paddle(Side.RIGHT, settings))
    return state


def test_new_ball_is_centered_with_diagonal_velocity(settings):
    ball = new_ball(settings, random.Random(3))
    assert (ball.x, ball.y) == (400, 200)
    assert abs(ball.velocity_x) == 5
    assert abs(ball.velocity_y) == 5
    assert ball.radius == 8


def test_paddles_are_placed_near_their_edge(settings):
    left = new_paddle(Side.LEFT, settings)
    right = new_paddle(Side.RIGHT, settings)
    assert left.x == 20
    assert right.x == 770
    assert left.y == right.y == 160


def test_move_paddle_clamps_at_top_and_bottom(settings):
    paddle = new_paddle(Side.LEFT, settings)
    paddle.y = 0
    for _ in range(3):
        move_paddle(paddle, Direction.UP, settings)
    assert paddle.y == 0

    paddle.y = 318
    move_paddle(paddle, Direction.DOWN, settings)
    assert paddle.y == 320
    move_paddle(paddle, Direction.DOWN, settings)
    assert paddle.y == 320

    move_paddle(paddle, Direction.STOP, settings)
    assert paddle.y == 320


def test_step_moves_ball_by_velocity(settings):
    state = _playing_state(settings, Ball(400, 200, 5, -5, 8))
    result = step(state, settings, random.Random(1))
    assert (state.ball.x, state.ball.y) == (405, 195)
    assert result.scored is None and result.winner is None


def test_step_is_noop_unless_playing(settings):
    state = _playing_state(settings, Ball(400, 200, 5, 5, 8))
    state.status = GameStatus.WAITING
    step(state, settings, random.Random(1))
    assert (state.ball.x, state.ball.y) == (400, 200)


def test_wall_bounce_flips_vertical_velocity_without_clamping(settings):
    state = _playing_state(settings, Ball(400, 10, 5, -5, 8))
    step(state, settings, random.Random(1))
    assert state.ball.y == 5
    assert state.ball.velocity_y == 5

    state.ball.y, state.ball.velocity_y = 390, 5
    step(state, settings, random.Random(1))
    assert state.ball.y == 395
    assert state.ball.velocity_y == -5


def test_left_paddle_deflects_and_snaps_ball(settings):
    state = _playing_state(settings, Ball(40, 200, -5, 5, 8))
    step(state, settings, random.Random(1))
    assert state.ball.velocity_x == 5
    assert state.ball.x == 20 + 10 + 8


def test_right_paddle_deflects_and_snaps_ball(settings):
    state = _playing_state(settings, Ball(760, 200, 5, 5, 8))
    step(state, settings, random.Random(1))
    assert state.ball.velocity_x == -5
    assert state.ball.x == 770 - 8


def test_ball_passing_paddle_out_of_reach_does_not_deflect(settings):
    paddle = new_paddle(Side.LEFT, settings)
    assert not paddle_collision(Ball(35, 20, -5, 5, 8), paddle)
    assert paddle_collision(Ball(35, 200, -5, 5, 8), paddle)


def test_ball_past_left_edge_scores_for_right_and_resets(settings):
    state = _playing_state(settings, Ball(0, 300, -5, 5, 8))
    result = step(state, settings, random.Random(1))
    assert result.scored is Side.RIGHT
    assert state.score.player2 == 1
    assert state.score.player1 == 0
    assert (state.ball.x, state.ball.y) == (400, 200)
    assert abs(state.ball.velocity_x) == 5
    assert abs(state.ball.velocity_y) == 5


def test_ball_past_right_edge_scores_for_left(settings):
    state = _playing_state(settings, Ball(798, 50, 5, 5, 8))
    result = step(state, settings, random.Random(1))
    assert result.scored is Side.LEFT
    assert state.score.to_dict() == {'player1': 1, 'player2': 0}


def test_winning_point_finishes_game_and_freezes_score(settings):
    state = _playing_state(settings, Ball(798, 50, 5, 5, 8))
    state.score = Score(player1=4, player2=2)
    result = step(state, settings, random.Random(1))
    assert result.winner is Side.LEFT
    assert state.status is GameStatus.FINISHED
    assert state.score.player1 == 5

    # Further steps change nothing once finished
    state.ball.x = -50
    for _ in range(5):
        assert step(state, settings, random.Random(1)).scored is None
    assert state.score.to_dict() == {'player1': 5, 'player2': 2}


@pytest.mark.parametrize('x,expected', [(-1, Side.RIGHT), (0, None), (400, None), (800, None), (801, Side.LEFT)])
def test_goal_scored_boundaries(settings, x, expected):
    assert goal_scored(Ball(x, 200, 5, 5, 8), settings) is expected


def test_winning_side(settings):
    assert winning_side(Score(4, 4), settings) is None
    assert winning_side(Score(5, 3), settings) is Side.LEFT
    assert winning_side(Score(1, 5), settings) is Side.RIGHT
