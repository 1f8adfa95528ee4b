"""
금액 반올림 헬퍼 테스트 (ROUND_HALF_UP)

실행: pytest tests/utils/test_money.py -v
"""
import pytest

from garden.utils.money import round1, round2, round_unit


@pytest.mark.parametrize("value, expected", [
    (2.675, 2.68),
    (1.005, 1.01),
    (0.1 + 0.2, 0.3),
    (130.8, 130.8),
    (-1.005, -1.01),
    (545, 545.0),
])
def test_round2(value, expected):
    assert round2(value) == expected


@pytest.mark.parametrize("value, expected", [
    (10 / 7, 1.4),
    (0.05, 0.1),
    (0.25, 0.3),
    (6.0, 6.0),
])
def test_round1(value, expected):
    assert round1(value) == expected


@pytest.mark.parametrize("value, expected", [
    (367.5, 368),
    (220.8, 221),
    (305.5, 306),
    (0.49, 0),
])
def test_round_unit(value, expected):
    result = round_unit(value)
    assert result == expected
    assert isinstance(result, int)
