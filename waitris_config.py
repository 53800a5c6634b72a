
CONFIG = {
    "BOARD_W": 10,
    "BOARD_H": 20,
    "CHUNK_SIZE": 8,
    "VARIETY_THRESH": 100,
    "BOMB_CAP": 3,
    "INFECT_MAX": 5,
    "CLEAR_FLASH_FRAMES": 2,
    "LOCK_FLASH_FRAMES": 1,
    "SOCKET_PATH": "/tmp/stack-game.sock",
    "SEED": None,
    "CELL_SIZE": 32,
    "GRAVITY_MS": 500,
    "EFFECTS_MS": 80,
}

FILLER = "░"
GARBAGE_PAIR = ("#", FILLER)
INFECTED_PAIR = ("?", FILLER)
BOMB_GLYPH = "▓"
