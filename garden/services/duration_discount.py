"""
기간 할인 테이블 (DurationDiscountTable)

역할:
    - 완료된 주(complete weeks) 수 → 할인율(0~1) 계단 함수
    - 구간(breakpoint)은 하드코딩하지 않고 설정값(DURATION_DISCOUNT_STEPS)으로 주입

Rationale:
    기간 할인 구간은 운영 정책에 따라 바뀌므로 테스트에서 덮어쓸 수 있는 테이블로 노출합니다.
    생성 시점에 단조 증가를 검증하여, 더 오래 머물수록 할인율이 줄어드는 테이블은 만들 수 없습니다.

실행: pytest tests/services/test_duration_discount.py -v
"""
from typing import Iterable, List, Optional, Tuple

from garden.core.config import DURATION_DISCOUNT_STEPS
from garden.utils.money import round2

Step = Tuple[int, float]

PROGRESSIVE_START_WEEKS = 3
PROGRESSIVE_BASE = 0.10
PROGRESSIVE_PER_WEEK = 0.0278
PROGRESSIVE_CAP = 0.35


class DurationDiscountTable:
    """완료된 주 수 기준 기간 할인율 조회"""

    def __init__(self, steps: Iterable[Step]):
        """
        Build a step table from `(min_weeks, fraction)` pairs.

        Parameters:
            steps (Iterable[Tuple[int, float]]): Breakpoints in any order. A stay of at least
                `min_weeks` complete weeks receives `fraction`. Below the first breakpoint the
                discount is 0.

        Raises:
            ValueError: If a fraction is outside 0..1, a breakpoint is duplicated, or a longer
                breakpoint carries a smaller fraction than a shorter one.
        """
        ordered = sorted(steps, key=lambda step: step[0])
        previous: Optional[Step] = None
        for weeks, fraction in ordered:
            if weeks < 0:
                raise ValueError(f"min_weeks must be >= 0, got {weeks}")
            if not 0 <= fraction <= 1:
                raise ValueError(f"discount fraction must be within 0..1, got {fraction}")
            if previous is not None:
                if weeks == previous[0]:
                    raise ValueError(f"duplicate breakpoint for {weeks} weeks")
                if fraction < previous[1]:
                    raise ValueError(
                        f"discount for {weeks} weeks ({fraction}) is lower than for "
                        f"{previous[0]} weeks ({previous[1]})"
                    )
            previous = (weeks, fraction)
        self._steps: List[Step] = ordered

    @classmethod
    def from_config(cls) -> "DurationDiscountTable":
        return cls(DURATION_DISCOUNT_STEPS)

    @classmethod
    def progressive(cls) -> "DurationDiscountTable":
        """
        3주 10%에서 시작해 1주마다 2.78%씩 늘어나고 35%에서 멈추는 누진 테이블.
        각 구간 값은 소수 둘째 자리로 반올림됩니다.
        """
        steps: List[Step] = []
        weeks = PROGRESSIVE_START_WEEKS
        while True:
            extra = (weeks - PROGRESSIVE_START_WEEKS) * PROGRESSIVE_PER_WEEK
            fraction = min(round2(PROGRESSIVE_BASE + extra), PROGRESSIVE_CAP)
            steps.append((weeks, fraction))
            if fraction >= PROGRESSIVE_CAP:
                break
            weeks += 1
        return cls(steps)

    @property
    def steps(self) -> List[Step]:
        return list(self._steps)

    def lookup(self, complete_weeks: int) -> float:
        """주어진 완료 주 수에 해당하는 할인율. 첫 구간 미만이면 0."""
        discount = 0.0
        for min_weeks, fraction in self._steps:
            if complete_weeks < min_weeks:
                break
            discount = fraction
        return discount

    __call__ = lookup
