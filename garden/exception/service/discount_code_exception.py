from garden.exception.base_exception import BaseCustomException, ErrorCode

class DiscountCodeEmptyError(BaseCustomException):
    error_code = ErrorCode.DISCOUNT_CODE_EMPTY
    message = "Discount code cannot be empty."
    status_code = 400

class DiscountCodeInvalidError(BaseCustomException):
    error_code = ErrorCode.DISCOUNT_CODE_INVALID
    message = "Invalid or inactive discount code."
    status_code = 400

class DiscountCodeInactiveError(BaseCustomException):
    error_code = ErrorCode.DISCOUNT_CODE_INACTIVE
    message = "This discount code is no longer active."
    status_code = 400
