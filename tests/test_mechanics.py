from conftest import fill_rows
from waitris_config import GARBAGE_PAIR, INFECTED_PAIR
from waitris_events import CommandEnd, CommandStart
from waitris_game import ClearStage, Game
from waitris_rng import WaitrisRandom


def run_command(g, run_id, command, exit_code=0):
    g.handle_command_event(CommandStart(run_id, command))
    g.handle_command_event(CommandEnd(run_id, exit_code))


# ---------- garbage ----------

def test_garbage_row_has_single_hole(make_game):
    g = make_game(hole=3)
    g.board.set(2, 19, ("x", "y"))
    g.apply_garbage_row()
    assert len(g.board.rows) == g.height
    assert all(len(r) == g.width for r in g.board.rows)
    bottom = g.board.rows[-1]
    assert bottom[3] is None
    assert [c for i, c in enumerate(bottom) if i != 3] == [GARBAGE_PAIR] * (g.width - 1)
    assert g.board.get(2, 18) == ("x", "y")
    assert not g.game_over


def test_garbage_pushing_blocks_off_top_ends_game(make_game):
    g = make_game()
    g.board.set(7, 0, ("x", "y"))
    g.apply_garbage_row()
    assert g.game_over


def test_failed_command_injects_garbage_and_infects(make_game):
    g = make_game(hole=6)
    g.handle_command_event(CommandEnd(42, 1))
    bottom = g.board.rows[-1]
    assert sum(1 for c in bottom if c is None) == 1 and bottom[6] is None
    assert sum(1 for c in bottom if c == INFECTED_PAIR) == 5
    assert g.variety_meter == 0 and g.last_identity is None


def test_successful_command_leaves_board_alone(make_game):
    g = make_game()
    g.board.set(0, 19, ("x", "y"))
    run_command(g, 1, "ls")
    assert list(g.board.filled_cells()) == [(0, 19)]
    assert not g.game_over


# ---------- infection ----------

def test_infection_marks_five_filled_cells():
    g = Game(WaitrisRandom(99))
    fill_rows(g.board, [19])
    g.apply_infection()
    row = g.board.rows[19]
    assert all(c is not None for c in row)
    assert sum(1 for c in row if c == INFECTED_PAIR) == 5
    assert g.board.filled_count() == 10


def test_infection_with_few_cells_takes_them_all():
    g = Game(WaitrisRandom(5))
    for x in (1, 2, 3):
        g.board.set(x, 19, ("a", "b"))
    g.apply_infection()
    assert [g.board.get(x, 19) for x in (1, 2, 3)] == [INFECTED_PAIR] * 3
    assert g.board.filled_count() == 3


def test_infection_on_empty_board_is_harmless():
    g = Game(WaitrisRandom(5))
    g.apply_infection()
    assert g.board.filled_count() == 0


# ---------- variety ----------

def test_repeat_identity_costs_five(make_game):
    g = make_game()
    run_command(g, 1, "git status")
    assert g.variety_meter == 13 and g.variety_streak == 1
    run_command(g, 2, "git log")
    assert g.variety_meter == 8 and g.variety_streak == 0


def test_new_identity_on_fresh_streak_nets_eleven(make_game):
    g = make_game()
    run_command(g, 1, "git status")
    run_command(g, 2, "git log")
    before = g.variety_meter
    run_command(g, 3, "ls")
    assert g.variety_streak == 1
    assert g.variety_meter - before == 11


def test_streak_bonus_caps_at_ten(make_game):
    g = make_game()
    g.variety_streak = 10
    g.last_identity = "a"
    g.apply_variety("b", 0)
    assert g.variety_meter == 40


def test_failed_command_halves_points(make_game):
    g = make_game()
    g.apply_variety("make", 2)
    assert g.variety_meter == 6


def test_meter_never_negative(make_game):
    g = make_game()
    g.last_identity = "ls"
    g.variety_meter = 3
    g.apply_variety("ls", 0)
    assert g.variety_meter == 0


def test_identity_recorded_on_every_end(make_game):
    g = make_game()
    run_command(g, 1, "cargo build")
    assert g.last_identity == "cargo"
    run_command(g, 2, "cargo test", exit_code=101)
    assert g.last_identity == "cargo"


def test_large_gain_promotes_repeatedly_but_bank_is_capped(make_game):
    g = make_game(variety_thresh=5)
    g.variety_streak = 9
    g.apply_variety("new", 0)
    assert g.bombs == g.bomb_cap == 3
    assert 0 <= g.variety_meter < 5


def test_promotion_keeps_remainder(make_game):
    g = make_game()
    g.variety_meter = 95
    g.apply_variety("ls", 0)
    assert g.bombs == 1
    assert g.variety_meter == 95 - 2 + 13 - 100


# ---------- bombs ----------

def test_bomb_dispensed_only_when_no_run_supplies(make_game):
    g = make_game()
    g.bombs = 2
    g.handle_command_event(CommandStart(1, "ls"))
    assert not g.current_is_bomb and g.bombs == 2
    g.handle_command_event(CommandEnd(1, 0))
    g.hard_drop()
    assert g.current_is_bomb
    assert g.active_run is None
    assert g.bombs == 1


def test_bomb_blast_clears_neighbourhood(make_game):
    g = make_game()
    g.bombs = 1
    fill_rows(g.board, range(16, 20), skip=(0,))
    g.spawn_next()
    assert g.current_is_bomb and g.bombs == 0
    g.hard_drop()
    for x in range(3, 7):
        for y in range(13, 17):
            assert g.board.get(x, y) is None
    assert g.board.get(2, 16) is not None
    assert g.board.get(7, 16) is not None
    assert g.board.get(4, 17) is not None
    assert g.board.filled_count() == 36 + 4 - 8
    assert not g.active_piece and not g.is_running()


def test_bomb_blast_runs_after_row_detection(make_game):
    g = make_game()
    g.bombs = 1
    fill_rows(g.board, [18, 19], skip=(4, 5))
    g.spawn_next()
    g.hard_drop()
    assert g.pending_clear == [18, 19]
    assert g.board.get(4, 19) is None and g.board.get(3, 18) is None
    assert g.board.get(0, 19) is not None
    g.process_effects(); g.process_effects()
    assert g.lines_cleared == 2
    assert g.board.filled_count() == 0


def test_garbage_during_clear_flash_shifts_pending_rows(make_game):
    g = make_game(hole=9)
    fill_rows(g.board, [19], skip=(4, 5))
    g.handle_command_event(CommandStart(1, "ls"))
    g.hard_drop()
    assert g.pending_clear == [19]
    flashed = g.lock_flash_cells
    g.handle_command_event(CommandEnd(2, 1))
    assert g.pending_clear == [18]
    assert g.lock_flash_cells == [(x, y - 1) for x, y in flashed]
    g.process_effects(); g.process_effects()
    assert g.lines_cleared == 1 and g.score == 100
    assert not g.board.row_full(19)
    assert g.board.rows[19][9] is None
    assert g.board.rows[19][:9] == [GARBAGE_PAIR] * 9


def test_garbage_drops_pending_row_pushed_off_top(make_game):
    g = make_game()
    g.clearing = ClearStage([0], 2)
    g.apply_garbage_row()
    assert g.clearing is None and g.pending_clear == []
