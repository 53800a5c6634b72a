import logging
import sys

import pygame

from waitris_config import CONFIG
from waitris_events import EventFeed, EventListener
from waitris_game import Game
from waitris_layout import FONT_SIZE, compute_dims
from waitris_render import RenderAssets
from waitris_rng import WaitrisRandom

log = logging.getLogger("waitris")


def new_game():
    return Game(WaitrisRandom(CONFIG["SEED"]))


def handle_key(game, key):
    if key == pygame.K_LEFT:
        game.move(-1, 0)
    elif key == pygame.K_RIGHT:
        game.move(1, 0)
    elif key == pygame.K_DOWN:
        game.move(0, 1)
    elif key == pygame.K_UP:
        game.rotate()
    elif key == pygame.K_SPACE:
        game.hard_drop()


def advance(game, grav_acc, fx_acc):
    """Run the gravity and effects ticks that are due; returns the leftover time."""
    if not game.is_running():
        # nothing to drop until the next command starts
        grav_acc = 0
    while grav_acc >= CONFIG["GRAVITY_MS"]:
        grav_acc -= CONFIG["GRAVITY_MS"]
        game.tick_gravity()
    while fx_acc >= CONFIG["EFFECTS_MS"]:
        fx_acc -= CONFIG["EFFECTS_MS"]
        game.process_effects()
    return grav_acc, fx_acc


def draw(screen, render, game):
    render.rebuild_board_surface(game.board, game.pending_clear, game.lock_flash_cells)
    screen.blit(render.bg, (0, 0))
    render.blit_board_surface(screen)
    if game.current is not None and game.active_piece:
        ghost = game.ghost_piece()
        if ghost is not None:
            render.draw_ghost(screen, ghost)
        render.draw_piece(screen, game.current, game.current_is_bomb)
    render.draw_panel_hud(screen, game)
    pygame.display.flip()


def main():
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(name)s %(levelname)s %(message)s")
    pygame.init()
    pygame.event.set_allowed([pygame.QUIT, pygame.KEYDOWN])

    dims = compute_dims()
    screen = pygame.display.set_mode((dims.total_w, dims.total_h))
    pygame.display.set_caption("waitris")
    font = pygame.font.SysFont(None, FONT_SIZE)
    render = RenderAssets(dims, font, CONFIG["BOARD_W"], CONFIG["BOARD_H"])
    clock = pygame.time.Clock()

    feed = EventFeed()
    listener = EventListener(feed, CONFIG["SOCKET_PATH"])
    listener.start()
    log.info("waiting for command events on %s", CONFIG["SOCKET_PATH"])

    game = new_game()
    grav_acc = fx_acc = 0
    try:
        while True:
            dt = clock.tick(60)
            grav_acc += dt
            fx_acc += dt

            for e in pygame.event.get():
                if e.type == pygame.QUIT:
                    return
                if e.type == pygame.KEYDOWN:
                    if e.key == pygame.K_ESCAPE:
                        return
                    if e.key == pygame.K_r and game.game_over:
                        game = new_game()
                        grav_acc = fx_acc = 0
                        continue
                    handle_key(game, e.key)

            feed.drain(game)
            grav_acc, fx_acc = advance(game, grav_acc, fx_acc)
            draw(screen, render, game)
    finally:
        listener.stop()
        pygame.quit()


if __name__ == '__main__':
    main()
    sys.exit(0)
