import random

import pytest

from block_blast.game import PIECE_LIBRARY, Piece, PieceCatalog


def test_library_holds_distinct_polyominoes_up_to_pentomino():
    assert len(PIECE_LIBRARY) == 15
    assert len(set(PIECE_LIBRARY)) == 15
    sizes = sorted(piece.size for piece in PIECE_LIBRARY)
    assert sizes[0] == 1
    assert sizes[-1] == 5
    assert sizes.count(5) == 1


def test_piece_offsets_are_normalized():
    a = Piece.from_offsets([(1, 0), (0, 0), (1, 0)])
    b = Piece.from_offsets([(0, 0), (1, 0)])
    assert a == b
    assert a.size == 2


def test_piece_geometry():
    l_piece = Piece.from_offsets([(0, 0), (1, 0), (2, 0), (0, 1)])
    assert l_piece.width == 3
    assert l_piece.height == 2
    assert l_piece.to_rows() == [[1, 1, 1], [1, 0, 0]]
    assert sorted(l_piece.cells_at(4, 5)) == [(4, 5), (4, 6), (5, 5), (6, 5)]


@pytest.mark.parametrize("offsets", [[], [(0, -1)], [(-2, 0), (0, 0)]])
def test_piece_rejects_empty_or_negative_offsets(offsets):
    with pytest.raises(ValueError):
        Piece.from_offsets(offsets)


def test_catalog_is_deterministic_with_seeded_rng():
    first = PieceCatalog(rng=random.Random(7)).deal(20)
    second = PieceCatalog(rng=random.Random(7)).deal(20)
    assert first == second
    assert all(piece in PIECE_LIBRARY for piece in first)


def test_catalog_draws_from_given_library_only():
    single = Piece.from_offsets([(0, 0)])
    catalog = PieceCatalog([single], rng=random.Random(1))
    assert catalog.deal(5) == [single] * 5


def test_catalog_rejects_empty_library():
    with pytest.raises(ValueError):
        PieceCatalog([])
