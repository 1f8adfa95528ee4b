"""
숙박일수/주 수 변환 테스트

실행: pytest tests/utils/test_stay_dates.py -v
"""
from datetime import date

from garden.models.dto import Week
from garden.utils.stay_dates import (
    StayDuration,
    calculate_original_discount_weeks,
    calculate_stay_duration,
    calculate_total_nights,
    nights_between,
)


class TestNights:
    def test_nights_between(self):
        assert nights_between(date(2025, 7, 5), date(2025, 8, 16)) == 42

    def test_reversed_range_is_zero(self):
        assert nights_between(date(2025, 7, 14), date(2025, 7, 7)) == 0

    def test_flex_date_reduces_nights(self):
        weeks = [Week(start_date=date(2025, 7, 7), end_date=date(2025, 7, 14),
                      selected_flex_date=date(2025, 7, 9))]
        assert calculate_total_nights(weeks) == 5

    def test_gap_between_weeks_not_counted(self):
        weeks = [
            Week(start_date=date(2025, 7, 7), end_date=date(2025, 7, 14)),
            Week(start_date=date(2025, 7, 21), end_date=date(2025, 7, 28)),
        ]
        assert calculate_total_nights(weeks) == 14


class TestStayDuration:
    def test_full_weeks(self, make_weeks, summer_start):
        stay = calculate_stay_duration(make_weeks(summer_start, 3))
        assert stay == StayDuration(21, 3, 3.0, 3.0)

    def test_partial_week(self, make_weeks, summer_start):
        stay = calculate_stay_duration(make_weeks(summer_start, 1, days=10))
        assert stay.total_nights == 10
        assert stay.complete_weeks == 1
        assert stay.display_weeks == 1.4

    def test_empty(self):
        assert calculate_stay_duration([]) == StayDuration(0, 0, 0.0, 0.0)


class TestOriginalDiscountWeeks:
    def test_rounds_up_partial_week(self):
        assert calculate_original_discount_weeks(10) == 2

    def test_exact_weeks(self):
        assert calculate_original_discount_weeks(42) == 6

    def test_zero(self):
        assert calculate_original_discount_weeks(0) == 0
