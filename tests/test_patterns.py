from hypothesis import given, strategies as st

from gridtac.core.patterns import generate_win_patterns


def test_three_by_three_patterns_in_generation_order():
    assert generate_win_patterns(3) == (
        (0, 1, 2), (3, 4, 5), (6, 7, 8),
        (0, 3, 6), (1, 4, 7), (2, 5, 8),
        (0, 4, 8), (2, 4, 6),
    )


def test_four_by_four_diagonals():
    patterns = generate_win_patterns(4)
    assert patterns[-2] == (0, 5, 10, 15)
    assert patterns[-1] == (3, 6, 9, 12)


@given(st.integers(min_value=1, max_value=12))
def test_pattern_count_and_bounds(n: int):
    patterns = generate_win_patterns(n)
    assert len(patterns) == 2 * n + 2
    for p in patterns:
        assert len(p) == n
        assert all(0 <= c < n * n for c in p)


@given(st.integers(min_value=2, max_value=12))
def test_no_duplicate_patterns(n: int):
    patterns = generate_win_patterns(n)
    assert len(set(patterns)) == len(patterns)


def test_single_cell_board():
    # every line of a 1x1 board is the lone cell
    assert generate_win_patterns(1) == ((0,), (0,), (0,), (0,))
