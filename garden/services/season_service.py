"""
시즌 할인 계산 서비스 (SeasonCalendar)

역할:
    - 숙박 기간 [체크인, 체크아웃)을 1박 단위로 순회하며 시즌별 숙박일수를 집계
    - 숙박일수 가중 평균 시즌 할인율 계산 (소수 둘째 자리 반올림)
    - 도미토리(dorm) 숙소는 반올림 이후 최종 단계에서 시즌 할인 0으로 고정

Rationale:
    시즌 달력은 외부에서 주입할 수 있는 데이터입니다. 기본 달력은
    비수기(11~5월) 40%, 준성수기(6월/10월) 15%, 성수기(7~9월) 0% 입니다.

실행: pytest tests/services/test_season_service.py -v
"""
import logging
from datetime import date, timedelta
from typing import Dict, List, Optional, Sequence

from garden.models.dto import Accommodation, Season, SeasonBreakdown, SeasonNights, Week
from garden.utils.money import round2

logger = logging.getLogger("garden")

DEFAULT_SEASONS: List[Season] = [
    Season(name="Low Season", discount=0.40, months=[11, 12, 1, 2, 3, 4, 5]),
    Season(name="Medium Season", discount=0.15, months=[6, 10]),
    Season(name="Summer Season", discount=0.0, months=[7, 8, 9]),
]


class SeasonCalendar:
    """월(month) → 시즌 매핑을 가진 시즌 달력"""

    def __init__(self, seasons: Optional[Sequence[Season]] = None):
        """
        Parameters:
            seasons (Optional[Sequence[Season]]): Season definitions. Every month 1..12 must
                belong to exactly one season. Defaults to `DEFAULT_SEASONS`.

        Raises:
            ValueError: If a month is claimed by two seasons or left uncovered.
        """
        self._seasons: List[Season] = list(seasons if seasons is not None else DEFAULT_SEASONS)
        self._by_month: Dict[int, Season] = {}
        for season in self._seasons:
            for month in season.months:
                if month in self._by_month:
                    raise ValueError(
                        f"month {month} belongs to both {self._by_month[month].name} and {season.name}"
                    )
                self._by_month[month] = season
        missing = sorted(set(range(1, 13)) - set(self._by_month))
        if missing:
            raise ValueError(f"season calendar does not cover months {missing}")

    @property
    def seasons(self) -> List[Season]:
        return list(self._seasons)

    def season_for(self, night: date) -> Season:
        return self._by_month[night.month]

    def get_season_breakdown(self, start: date, end: date) -> SeasonBreakdown:
        """
        Decompose the nights in `[start, end)` into per-season night counts.

        Seasons without nights are omitted and the remaining seasons keep calendar
        declaration order. A reversed or empty range yields an empty breakdown.

        Returns:
            SeasonBreakdown: Per-season nights; their sum equals the nights in the range.
        """
        if end <= start:
            return SeasonBreakdown()

        counts: Dict[str, int] = {}
        night = start
        while night < end:
            season = self.season_for(night)
            counts[season.name] = counts.get(season.name, 0) + 1
            night += timedelta(days=1)

        return self._build_breakdown(counts)

    def get_weeks_breakdown(self, weeks: Sequence[Week]) -> SeasonBreakdown:
        """선택된 주마다 시즌 분해 후 합산 (주 사이의 빈 날은 포함하지 않음)"""
        counts: Dict[str, int] = {}
        for week in weeks:
            for entry in self.get_season_breakdown(week.effective_start_date, week.end_date).seasons:
                counts[entry.name] = counts.get(entry.name, 0) + entry.nights
        return self._build_breakdown(counts)

    def _build_breakdown(self, counts: Dict[str, int]) -> SeasonBreakdown:
        entries = [
            SeasonNights(name=season.name, discount=season.discount, nights=counts[season.name])
            for season in self._seasons
            if counts.get(season.name, 0) > 0
        ]
        return SeasonBreakdown(has_multiple_seasons=len(entries) > 1, seasons=entries)


def average_seasonal_discount(breakdown: SeasonBreakdown) -> float:
    """
    Nightly-weighted average discount of a breakdown, rounded to 2 decimals.

    Returns:
        float: Σ(discount × nights) / Σ(nights), or 0 when the breakdown has no nights.
    """
    total_nights = breakdown.total_nights
    if total_nights == 0:
        return 0.0
    weighted = sum(season.discount * season.nights for season in breakdown.seasons)
    return round2(weighted / total_nights)


def effective_seasonal_discount(average: float, accommodation: Optional[Accommodation]) -> float:
    """도미토리는 시즌 할인 없음. 반올림된 평균값 위에 마지막으로 적용."""
    if accommodation is not None and accommodation.is_dorm:
        return 0.0
    return average


class SeasonService:
    """달력 + 숙소 정보를 받아 최종 시즌 할인율을 계산"""

    def __init__(self, calendar: Optional[SeasonCalendar] = None):
        self.calendar = calendar or SeasonCalendar()

    def breakdown_for_weeks(self, weeks: Sequence[Week]) -> SeasonBreakdown:
        return self.calendar.get_weeks_breakdown(weeks)

    def seasonal_discount_for(
        self, breakdown: SeasonBreakdown, accommodation: Optional[Accommodation]
    ) -> float:
        average = average_seasonal_discount(breakdown)
        discount = effective_seasonal_discount(average, accommodation)
        logger.debug({
            "event": "seasonal_discount",
            "seasons": [season.model_dump() for season in breakdown.seasons],
            "average": average,
            "effective": discount,
        })
        return discount
