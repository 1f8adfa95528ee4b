"""
주(week) 선택 → 숙박일수/주 수 변환

- total_nights: 각 주의 (end - start) 일수 합
- complete_weeks: floor(nights / 7), 기간 할인 조회용
- exact_weeks_decimal: nights / 7 (정밀값)
- display_weeks: 소수 첫째 자리 반올림값. 화면에 보이는 주 수와 청구 금액을
  일치시키기 위해(WYSIWYG) 모든 금액 곱셈은 이 값을 사용합니다.
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import date
from typing import Sequence

from garden.models.dto import Week
from garden.utils.money import round1


@dataclass(frozen=True)
class StayDuration:
    total_nights: int
    complete_weeks: int
    exact_weeks_decimal: float
    display_weeks: float

    @classmethod
    def from_nights(cls, total_nights: int) -> "StayDuration":
        if total_nights <= 0:
            return cls(0, 0, 0.0, 0.0)
        exact = total_nights / 7
        return cls(
            total_nights=total_nights,
            complete_weeks=total_nights // 7,
            exact_weeks_decimal=exact,
            display_weeks=round1(exact),
        )


def nights_between(check_in: date, check_out: date) -> int:
    """체크아웃 당일은 제외한 숙박일수. 역순이면 0."""
    if check_out <= check_in:
        return 0
    return (check_out - check_in).days


def calculate_total_nights(weeks: Sequence[Week]) -> int:
    return sum(nights_between(week.effective_start_date, week.end_date) for week in weeks)


def calculate_stay_duration(weeks: Sequence[Week]) -> StayDuration:
    """선택된 주 목록으로 StayDuration 계산. 빈 목록이면 모두 0."""
    return StayDuration.from_nights(calculate_total_nights(weeks))


def calculate_original_discount_weeks(total_nights: int) -> int:
    """
    기존 예약의 할인 적용 주 수.

    Rationale:
        저장된 체크인/체크아웃만으로 원래 선택을 복원하므로, 부분 주는 올림(ceil)하여
        연장 시 기간 할인이 과소 계산되지 않도록 합니다.
    """
    if total_nights <= 0:
        return 0
    return math.ceil(total_nights / 7)
