from typing import Sequence

from garden.exception.common.week_exception import WeekSelectionError
from garden.models.dto import Week


def validate_week_selection(weeks: Sequence[Week]):
    """
    선택된 주 목록을 검증합니다.
    • 시작일 기준 오름차순이어야 함
    • 앞 주의 종료일보다 다음 주의 시작일이 빠르면(겹치면) 안 됨
    """
    for previous, current in zip(weeks, weeks[1:]):
        if current.effective_start_date < previous.effective_start_date:
            raise WeekSelectionError()
        if current.effective_start_date < previous.end_date:
            raise WeekSelectionError()


def validate_extension_weeks(weeks: Sequence[Week], check_out):
    """연장 주는 기존 예약의 체크아웃 이후에 시작해야 합니다."""
    validate_week_selection(weeks)
    if weeks and weeks[0].effective_start_date < check_out:
        raise WeekSelectionError("Extension weeks must start on or after the current check-out date.")
