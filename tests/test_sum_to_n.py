import pytest

from crudserver.sum_to_n import sum_to_n_a, sum_to_n_b, sum_to_n_c

IMPLEMENTATIONS = [sum_to_n_a, sum_to_n_b, sum_to_n_c]


@pytest.mark.parametrize("func", IMPLEMENTATIONS)
@pytest.mark.parametrize("n, expected", [(1, 1), (5, 15), (10, 55), (100, 5050)])
def test_sum_of_first_n(func, n, expected):
    assert func(n) == expected


@pytest.mark.parametrize("func", IMPLEMENTATIONS)
@pytest.mark.parametrize("n", [0, -1, -100])
def test_non_positive_n_returns_zero(func, n):
    assert func(n) == 0


def test_implementations_agree():
    for n in range(0, 200):
        assert sum_to_n_a(n) == sum_to_n_b(n) == sum_to_n_c(n)


def test_closed_form_returns_int():
    assert isinstance(sum_to_n_b(7), int)
