"""Window geometry: board on the left, stats + controls panel on the right"""
from dataclasses import dataclass
from waitris_config import CONFIG

# Panel content drawn by RenderAssets.draw_panel_hud
STAT_LABELS = ["waitris", "Score: 000000", "Lines: 0000", "Bombs: 0",
               "Variety: 000/000", "Streak: 00", "waiting for commands"]
CONTROL_LABELS = ["Controls:", "←/→ Move", "↓ Step down", "↑ Rotate",
                  "Space Hard drop", "R Restart • Esc Quit"]

FONT_SIZE = 22
STAT_LINE_H = 24
CONTROL_LINE_H = 20
PAD = 12

@dataclass
class Dims:
    cell: int
    margin: int
    board_x: int
    board_y: int
    board_w: int
    board_h: int
    panel_x: int
    panel_y: int
    panel_w: int
    panel_h: int
    stats_y: int
    controls_y: int
    total_w: int
    total_h: int

def text_width(label: str) -> int:
    # default pygame font averages a bit under half its size per glyph
    return len(label) * FONT_SIZE // 2

def compute_dims(cols: int = None, rows: int = None) -> Dims:
    cols = cols if cols is not None else CONFIG["BOARD_W"]
    rows = rows if rows is not None else CONFIG["BOARD_H"]
    cell = int(CONFIG["CELL_SIZE"])
    margin = 16

    board_w, board_h = cols * cell, rows * cell
    board_x = board_y = margin

    panel_w = PAD + max(text_width(s) for s in STAT_LABELS + CONTROL_LABELS) + PAD
    stats_h = len(STAT_LABELS) * STAT_LINE_H
    controls_h = len(CONTROL_LABELS) * CONTROL_LINE_H
    panel_x = board_x + board_w + margin
    panel_y = margin
    stats_y = panel_y + PAD
    # controls sit at the bottom of the panel, or right under the stats on short boards
    content_h = PAD + stats_h + PAD + controls_h + PAD
    panel_h = max(board_h, content_h)
    controls_y = panel_y + panel_h - PAD - controls_h

    return Dims(
        cell=cell, margin=margin,
        board_x=board_x, board_y=board_y, board_w=board_w, board_h=board_h,
        panel_x=panel_x, panel_y=panel_y, panel_w=panel_w, panel_h=panel_h,
        stats_y=stats_y, controls_y=controls_y,
        total_w=panel_x + panel_w + margin,
        total_h=margin + max(board_h, panel_h) + margin,
    )
