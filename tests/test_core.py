import random

import numpy as np
import pytest

from falling_blocks_rl.game import (
    COLS,
    ROWS,
    Action,
    FallingBlockGame,
    GameConfig,
    GameGrid,
    Piece,
    PieceType,
)


def make_game(seed=0):
    return FallingBlockGame(GameConfig(random_seed=seed))


def blocked_top_game():
    """Rows 0-1 filled (column 0 left open so nothing clears), long piece hovering above."""
    game = make_game()
    values = np.zeros((ROWS, COLS), dtype=np.int8)
    values[0:2, 1:] = 1
    game.grid = GameGrid.from_array(values)
    game.active_piece = Piece.spawn(PieceType.LONG)
    game.next_piece = Piece.spawn(PieceType.T)
    return game


def test_new_game_state():
    game = make_game()
    assert game.grid.grid.shape == (ROWS, COLS)
    assert not game.grid.grid.any()
    assert game.score == 0
    assert game.drop_interval == 1000
    assert not game.game_over
    assert game.active_piece.cells == list(Piece.spawn(game.active_piece.kind).cells)


def test_same_seed_same_pieces():
    a, b = make_game(3), make_game(3)
    assert a.active_piece == b.active_piece
    assert a.next_piece == b.next_piece


def test_update_accumulates_until_interval():
    game = make_game()
    start = list(game.active_piece.cells)
    game.update(400)
    game.update(400)
    assert game.active_piece.cells == start
    game.update(200)
    assert game.active_piece.cells == [(x, y + 1) for x, y in start]
    assert game.drop_timer == 0


def test_gravity_locks_and_spawns_next():
    game = make_game()
    game.active_piece = Piece([(0, 19), (1, 19), (2, 19), (3, 19)], PieceType.LONG)
    upcoming = game.next_piece
    game.update(game.drop_interval)
    assert list(game.grid.grid[19, :4]) == [int(PieceType.LONG)] * 4
    assert game.active_piece is upcoming
    assert game.next_piece is not upcoming
    assert game.pieces_locked == 1
    assert game.last_lock.cells_locked == 4
    assert game.last_lock.lines_cleared == 0


def test_lock_clears_line_and_scores():
    game = make_game()
    game.grid.grid[19, :6] = 2
    game.active_piece = Piece([(6, 19), (7, 19), (8, 19), (9, 19)], PieceType.LONG)
    game.update(1000)
    assert not game.grid.grid.any()
    assert game.score == 100
    assert game.lines_cleared_total == 1


def test_clear_two_rows_scores_two_hundred():
    game = make_game()
    values = np.zeros((ROWS, COLS), dtype=np.int8)
    values[2, :] = 3
    values[5, :] = 4
    values[1, 4] = 1
    values[10, 4] = 1
    game.grid = GameGrid.from_array(values)
    assert game._clear_lines() == 2
    assert game.score == 200
    assert game.grid.grid.shape == (ROWS, COLS)
    # above both cleared rows: drops by two; below them: stays put
    assert game.grid.grid[3, 4] == 1
    assert game.grid.grid[10, 4] == 1
    assert int(np.count_nonzero(game.grid.grid)) == 2
    # no full rows left: clearing again changes nothing
    before = game.grid_snapshot()
    assert game._clear_lines() == 0
    assert game.score == 200
    assert np.array_equal(game.grid.grid, before)


def test_drop_interval_follows_score():
    game = make_game()
    game.score = 900
    game.grid.grid[19, :] = 1
    game._clear_lines()
    assert game.score == 1000
    assert game.drop_interval == 900


def test_move_commands_respect_walls():
    game = make_game()
    game.active_piece = Piece([(0, 5), (0, 6), (1, 6), (2, 6)], PieceType.L_LEFT)
    assert not game.move_piece_left()
    assert game.active_piece.cells[0] == (0, 5)
    assert game.move_piece_right()
    assert game.active_piece.cells[0] == (1, 5)


def test_rotate_command_is_noop_when_blocked():
    game = make_game()
    game.active_piece = Piece.spawn(PieceType.LONG)
    game.grid.grid[1, 5] = 1
    assert not game.rotate_piece()
    assert game.active_piece.cells == list(Piece.spawn(PieceType.LONG).cells)
    game.grid.grid[1, 5] = 0
    assert game.rotate_piece()
    assert game.active_piece.cells == [(5, -2), (5, -1), (5, 0), (5, 1)]


def test_ghost_does_not_move_active_piece():
    game = make_game()
    game.active_piece = Piece.spawn(PieceType.SQUARE)
    game.grid.grid[15, 5] = 1
    before = list(game.active_piece.cells)
    ghost = game.ghost_cells()
    assert game.active_piece.cells == before
    assert sorted(ghost) == [(5, 13), (5, 14), (6, 13), (6, 14)]


def test_hard_drop_lands_where_gravity_would():
    a, b = make_game(11), make_game(11)
    for game in (a, b):
        game.grid.grid[19, :9] = 5
        game.grid.grid[12, 3:7] = 5
    assert a.active_piece == b.active_piece

    ghost = a.ghost_cells()
    a.hard_drop()
    assert a.pieces_locked == 1
    assert all(a.grid.grid[y, x] == int(b.active_piece.kind) for x, y in ghost if y >= 0)

    ticks = 0
    while b.pieces_locked == 0:
        b.update(b.drop_interval)
        ticks += 1
        assert ticks < 50
    assert b.pieces_locked == 1
    assert np.array_equal(a.grid.grid, b.grid.grid)
    assert a.score == b.score
    assert a.active_piece == b.active_piece
    assert a.next_piece == b.next_piece


def test_hard_drop_runs_one_lock_cycle():
    game = make_game(5)
    game.active_piece = Piece.spawn(PieceType.LONG)
    rows = game.hard_drop()
    assert rows == ROWS
    assert game.pieces_locked == 1
    assert list(game.grid.grid[19, 3:7]) == [int(PieceType.LONG)] * 4
    assert int(np.count_nonzero(game.grid.grid)) == 4


def test_spawn_blocked_is_game_over_and_freezes():
    game = blocked_top_game()
    game.hard_drop()
    assert game.game_over
    assert game.last_lock.game_over
    # the long piece sat entirely above the board, nothing was stored
    assert game.last_lock.cells_locked == 0

    grid = game.grid_snapshot()
    active = list(game.active_piece.cells)
    score = game.score
    game.update(10_000)
    assert not game.move_piece_left()
    assert not game.move_piece_right()
    assert not game.rotate_piece()
    assert game.hard_drop() == 0
    assert not game.soft_drop()
    assert not game.apply(Action.HARD_DROP)
    assert np.array_equal(game.grid.grid, grid)
    assert game.active_piece.cells == active
    assert game.score == score
    assert game.game_over


def test_gravity_path_reaches_game_over():
    game = blocked_top_game()
    game.update(game.drop_interval)
    assert game.game_over


def test_apply_dispatches_actions():
    game = make_game()
    game.active_piece = Piece.spawn(PieceType.T)
    assert game.apply(Action.LEFT)
    assert game.active_piece.cells[0] == (3, 0)
    assert game.apply(Action.RIGHT)
    assert not game.apply(Action.NONE)
    assert game.apply(Action.SOFT_DROP)
    assert game.active_piece.cells[0] == (4, 1)
    assert game.apply(Action.HARD_DROP)
    assert game.pieces_locked == 1


def test_get_state_overlays_active_piece():
    game = make_game()
    game.active_piece = Piece([(4, 10), (5, 10), (5, 9), (6, 10)], PieceType.T)
    state = game.get_state()
    assert state[10, 4] == -int(PieceType.T)
    assert state[9, 5] == -int(PieceType.T)
    assert not game.grid.grid.any()


def test_reset_starts_fresh_session():
    game = blocked_top_game()
    game.hard_drop()
    assert game.game_over
    game.reset(seed=1)
    assert not game.game_over
    assert game.score == 0
    assert not game.grid.grid.any()
    fresh = make_game(1)
    assert game.active_piece == fresh.active_piece
    assert game.next_piece == fresh.next_piece


def test_grid_shape_invariant_under_random_play():
    game = make_game(2)
    rng = random.Random(2)
    commands = [game.move_piece_left, game.move_piece_right, game.rotate_piece, game.hard_drop]
    for _ in range(2000):
        if game.game_over:
            break
        if rng.random() < 0.1:
            rng.choice(commands)()
        game.update(rng.choice([16, 33, 500, 1000]))
        assert game.grid.grid.shape == (ROWS, COLS)
        assert len(game.active_piece.cells) == 4
        assert game.score % 100 == 0
    stats = game.get_game_stats()
    assert stats["pieces_locked"] == game.pieces_locked


@pytest.mark.parametrize("score,interval", [(0, 1000), (1000, 900), (10000, 100)])
def test_interval_after_clear(score, interval):
    game = make_game()
    game.score = score
    game._clear_lines()
    assert game.drop_interval == interval
