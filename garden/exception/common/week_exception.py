from garden.exception.base_exception import BaseCustomException, ErrorCode

class WeekSelectionError(BaseCustomException):
    """선택된 주 목록이 시간순이 아니거나 서로 겹치는 경우"""
    error_code = ErrorCode.WEEK_SELECTION_INVALID
    message = "Selected weeks must be in chronological order and must not overlap."
    status_code = 400
