from waitris_config import CONFIG
from waitris_events import CommandStart
from waitris_layout import CONTROL_LABELS, CONTROL_LINE_H, STAT_LABELS, STAT_LINE_H, compute_dims

from main import advance


def test_idle_game_banks_no_gravity(make_game):
    g = make_game()
    assert not g.is_running()
    assert advance(g, CONFIG["GRAVITY_MS"] * 10, 0) == (0, 0)
    assert g.current is None


def test_running_game_gets_due_ticks(make_game):
    g = make_game()
    g.handle_command_event(CommandStart(1, "ls"))
    left = advance(g, CONFIG["GRAVITY_MS"] * 3 + 5, CONFIG["EFFECTS_MS"])
    assert left == (5, 0)
    assert g.current.y == 3


def test_panel_fits_hud_content():
    d = compute_dims(10, 20)
    assert d.panel_h >= d.board_h
    assert d.controls_y >= d.stats_y + len(STAT_LABELS) * STAT_LINE_H
    assert d.controls_y + len(CONTROL_LABELS) * CONTROL_LINE_H <= d.panel_y + d.panel_h
    assert d.total_w == d.panel_x + d.panel_w + d.margin


def test_short_board_grows_panel_and_window():
    d = compute_dims(10, 4)
    assert d.panel_h > d.board_h
    assert d.total_h == d.margin + d.panel_h + d.margin
    assert d.controls_y >= d.stats_y + len(STAT_LABELS) * STAT_LINE_H
