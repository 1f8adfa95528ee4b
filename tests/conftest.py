import pytest
from datetime import date, timedelta
from decimal import Decimal
from typing import List

from garden.core.limiter import limiter
from garden.models.dto import Accommodation, Week


def _make_weeks(start: date, count: int, days: int = 7) -> List[Week]:
    weeks = []
    current = start
    for i in range(count):
        weeks.append(Week(id=f"w{i}", start_date=current, end_date=current + timedelta(days=days)))
        current += timedelta(days=days)
    return weeks


def _is_cent(value: float) -> bool:
    exact = Decimal(repr(value))
    return exact == exact.quantize(Decimal("0.01"))


@pytest.fixture(autouse=True)
def reset_limiter():
    """각 테스트 전에 limiter storage를 리셋 (라우트별 분당 한도가 테스트 간에 누적되지 않도록)"""
    limiter.reset()
    yield


@pytest.fixture
def make_weeks():
    """start부터 연속된 count개의 주(week)를 만드는 헬퍼"""
    return _make_weeks


@pytest.fixture
def is_cent():
    """소수 둘째 자리를 넘는 잔여 오차가 없는지 확인하는 헬퍼"""
    return _is_cent


@pytest.fixture
def summer_start():
    """2025-07-07 (월): 성수기(7~9월), 시즌 할인 0"""
    return date(2025, 7, 7)


@pytest.fixture
def winter_start():
    """2025-01-06 (월): 비수기(11~5월), 시즌 할인 40%"""
    return date(2025, 1, 6)


@pytest.fixture
def cabin():
    return Accommodation(id="cabin-1", title="Forest Cabin", base_price=200, type="room")


@pytest.fixture
def dorm():
    return Accommodation(id="dorm-1", title="6-Bed DORM", base_price=100, type="room")


@pytest.fixture
def test_room():
    return Accommodation(id="test-1", title="Test Room", base_price=200, type="test")
