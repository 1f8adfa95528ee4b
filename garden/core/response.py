from typing import TypeVar, Generic, Optional, Any
from pydantic import BaseModel, ConfigDict
from garden.core.error_codes import ErrorCode

# Rationale:
# result 필드에 Pydantic 모델뿐 아니라 dict 등 일반 타입도 허용하기 위해 bound를 두지 않음
T = TypeVar('T')

class ApiResponse(BaseModel, Generic[T]):
    """
    API 공통 응답 모델 (Envelope Pattern)

    Attributes:
        isSuccess (bool): 성공 여부
        code (str): 응답 코드 (성공: "COMMON200", 실패: 에러코드)
        message (str): 사용자 노출 가능한 메시지
        result (T | None): 실제 데이터 (실패 시 에러 상세 또는 null)
    """
    isSuccess: bool
    code: str
    message: str
    result: Optional[T] = None

    model_config = ConfigDict(
        json_schema_extra={
            "examples": [
                {
                    "isSuccess": True,
                    "code": "COMMON200",
                    "message": "Success.",
                    "result": {"totalAmount": 545.0}
                },
                {
                    "isSuccess": False,
                    "code": "DISCOUNT-002",
                    "message": "Invalid or inactive discount code.",
                    "result": None
                }
            ]
        }
    )

    @classmethod
    def success(cls, result: Any = None, code: str = ErrorCode.COMMON_SUCCESS, message: str = "Success.") -> "ApiResponse[Any]":
        return cls(
            isSuccess=True,
            code=code,
            message=message,
            result=result
        )

    @classmethod
    def error(cls, code: str = "ERROR", message: str = "An error occurred.", result: Any = None) -> "ApiResponse[Any]":
        return cls(
            isSuccess=False,
            code=code,
            message=message,
            result=result
        )


class ValidationErrorDetail(BaseModel):
    """
    Validation 에러의 상세 정보를 담는 모델
    """
    message: str
    type: str
    input: Any | None = None


def success_response(result: T, code: str = ErrorCode.COMMON_SUCCESS, message: str = "Success.") -> ApiResponse[T]:
    """
    성공 응답 생성 팩토리 함수
    """
    return ApiResponse.success(result=result, code=code, message=message)


def error_response(message: str, code: str = "ERROR", result: Optional[Any] = None) -> ApiResponse[Any]:
    """
    실패 응답 생성 팩토리 함수
    """
    return ApiResponse.error(code=code, message=message, result=result)
