from garden.exception.base_exception import BaseCustomException, ErrorCode

class RateLimitException(BaseCustomException):
    """일정 시간 내 요청 횟수 초과"""
    error_code = ErrorCode.RATE_LIMIT_EXCEEDED
    message = "Too many requests. Please try again in a minute."
    status_code = 429
