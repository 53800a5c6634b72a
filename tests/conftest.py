import pytest

from waitris_game import Game


class FixedRandom:
    """Deterministic stand-in for WaitrisRandom."""

    def __init__(self, shape="O", hole=0):
        self.shape = shape
        self.hole = hole

    def next_shape(self):
        return self.shape

    def randrange(self, n):
        return self.hole % n

    def sample(self, items, k):
        return list(items)[:k]


@pytest.fixture
def make_game():
    def _make(shape="O", hole=0, **kw):
        return Game(FixedRandom(shape, hole), **kw)
    return _make


def fill_rows(board, ys, skip=(), pair=("a", "b")):
    for y in ys:
        for x in range(board.width):
            if x not in skip:
                board.set(x, y, pair)
