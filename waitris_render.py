"""
Rendering helpers for the waitris board.

- Pre-render static background (grid + panel frame) once per Dims.
- Cache one glyph surface per payload pair; cells show their two characters.
- Cache a BOARD SURFACE with all locked cells; rebuild it only when the grid changes.
- Cache HUD text surfaces; re-render only when values change.
"""
from __future__ import annotations
import pygame
from dataclasses import dataclass
from typing import Dict, Optional, Tuple
from waitris_config import BOMB_GLYPH, GARBAGE_PAIR, INFECTED_PAIR
from waitris_layout import CONTROL_LABELS, CONTROL_LINE_H, PAD, STAT_LINE_H, Dims

Pair = Tuple[str, str]

COLORS: Dict[str, Tuple[int,int,int]] = {
    "text": (102,224,255),
    "garbage": (110,110,130),
    "infected": (255,102,119),
    "bomb": (255,158,94),
    "lock_flash": (255,255,255),
    "clear_flash": (255,224,102),
    "ghost": (90,110,170),
}

def pair_kind(pair: Pair) -> str:
    if pair == GARBAGE_PAIR: return "garbage"
    if pair == INFECTED_PAIR: return "infected"
    if pair[0] == BOMB_GLYPH: return "bomb"
    return "text"

@dataclass
class HudCache:
    values: Optional[tuple] = None
    lines: Optional[list] = None
    controls: Optional[list] = None

class RenderAssets:
    """Holds pre-rendered assets for fast blitting."""
    def __init__(self, dims: Dims, font: pygame.font.Font, cols: int, rows: int):
        self.dims = dims
        self.font = font
        self.cols, self.rows = cols, rows
        self._make_static()
        self.cell_surf: Dict[str, pygame.Surface] = {}
        for kind, col in COLORS.items():
            s = pygame.Surface((dims.cell-2, dims.cell-2))
            s.fill(col)
            self.cell_surf[kind] = s
        g = pygame.Surface((dims.cell-8, dims.cell-8), pygame.SRCALPHA)
        pygame.draw.rect(g, COLORS["ghost"], (0,0,dims.cell-8,dims.cell-8), 2)
        self.ghost_surf = g
        self.glyphs: Dict[Pair, pygame.Surface] = {}
        self.hud = HudCache()
        self.board_surface = pygame.Surface((dims.board_w, dims.board_h), pygame.SRCALPHA)
        self._board_key = None

    # ---------- Static background (grid + panel) ----------
    def _make_static(self):
        d = self.dims
        self.bg = pygame.Surface((d.total_w, d.total_h))
        self.bg.fill((10,13,34))
        grid_col = (40,50,90)
        for x in range(self.cols+1):
            X = d.board_x + x*d.cell
            pygame.draw.line(self.bg, grid_col, (X, d.board_y), (X, d.board_y + d.board_h))
        for y in range(self.rows+1):
            Y = d.board_y + y*d.cell
            pygame.draw.line(self.bg, grid_col, (d.board_x, Y), (d.board_x + d.board_w, Y))
        panel_rect = pygame.Rect(d.panel_x, d.panel_y, d.panel_w, d.panel_h)
        pygame.draw.rect(self.bg, (21,25,53), panel_rect)
        pygame.draw.rect(self.bg, (50,60,100), panel_rect, 1)

    def glyph(self, pair: Pair) -> pygame.Surface:
        g = self.glyphs.get(pair)
        if g is None:
            g = self.font.render(pair[0] + pair[1], True, (10,13,34))
            self.glyphs[pair] = g
        return g

    def _blit_cell(self, target, kind, pair, rx, ry):
        target.blit(self.cell_surf[kind], (rx, ry))
        g = self.glyph(pair)
        c = self.dims.cell - 2
        target.blit(g, (rx + (c - g.get_width()) // 2, ry + (c - g.get_height()) // 2))

    # ---------- Board surface cache ----------
    def rebuild_board_surface(self, board, clear_rows=(), flash_cells=()):
        """Rebuilds the locked-cells surface when contents or flashes changed."""
        key = (tuple(tuple(r) for r in board.rows), tuple(clear_rows), tuple(flash_cells))
        if key == self._board_key:
            return False
        self._board_key = key
        self.board_surface.fill((0,0,0,0))
        c = self.dims.cell
        rows, flash = set(clear_rows), set(flash_cells)
        for y, row in enumerate(board.rows):
            for x, pair in enumerate(row):
                if pair is None: continue
                kind = pair_kind(pair)
                if y in rows: kind = "clear_flash"
                elif (x, y) in flash: kind = "lock_flash"
                self._blit_cell(self.board_surface, kind, pair, x*c + 1, y*c + 1)
        return True

    def blit_board_surface(self, screen: pygame.Surface):
        screen.blit(self.board_surface, (self.dims.board_x, self.dims.board_y))

    # ---------- Moving / ghost piece ----------
    def draw_piece(self, screen: pygame.Surface, piece, bomb: bool):
        d = self.dims
        for x, y, pair in piece.cells_with_pairs():
            self._blit_cell(screen, "bomb" if bomb else "text", pair,
                            d.board_x + x*d.cell + 1, d.board_y + y*d.cell + 1)

    def draw_ghost(self, screen: pygame.Surface, piece):
        d = self.dims
        for x, y in piece.cells():
            screen.blit(self.ghost_surf, (d.board_x + x*d.cell + 4, d.board_y + y*d.cell + 4))

    # ---------- HUD / Panel ----------
    def draw_panel_hud(self, screen: pygame.Surface, game):
        d = self.dims
        f = self.font
        running = game.is_running()
        values = (game.score, game.lines_cleared, game.bombs, game.variety_meter,
                  game.variety_streak, running, game.game_over)
        if values != self.hud.values:
            self.hud.values = values
            col = (200,210,240)
            self.hud.lines = [
                f.render("waitris", True, (197,202,233)),
                f.render(f"Score: {game.score}", True, col),
                f.render(f"Lines: {game.lines_cleared}", True, col),
                f.render(f"Bombs: {game.bombs}", True, col),
                f.render(f"Variety: {game.variety_meter}/{game.variety_thresh}", True, col),
                f.render(f"Streak: {game.variety_streak}", True, col),
            ]
            if game.game_over:
                self.hud.lines.append(f.render("GAME OVER (R)", True, (255,220,220)))
            elif not running:
                self.hud.lines.append(f.render("waiting for commands", True, (165,175,215)))
        y = d.stats_y
        for surf in self.hud.lines:
            screen.blit(surf, (d.panel_x + PAD, y)); y += STAT_LINE_H
        if not self.hud.controls:
            self.hud.controls = [f.render(CONTROL_LABELS[0], True, (200,210,240))]
            self.hud.controls += [f.render(s, True, (165,175,215)) for s in CONTROL_LABELS[1:]]
        y = d.controls_y
        for surf in self.hud.controls:
            screen.blit(surf, (d.panel_x + PAD, y)); y += CONTROL_LINE_H
