"""
Envelope 응답 포맷(ApiResponse) 테스트

실행: pytest tests/test_envelope_pattern.py -v
"""
from garden.core.error_codes import ErrorCode
from garden.core.response import ApiResponse, error_response, success_response
from garden.models.dto import CreditsBalance, FoodContributionRange


def test_success_response_basic():
    """기본 성공 응답 생성 테스트"""
    response = success_response(result=FoodContributionRange(min=345, max=390, default_value=368))

    assert response.isSuccess is True
    assert response.code == ErrorCode.COMMON_SUCCESS
    assert response.message == "Success."
    assert response.result.default_value == 368


def test_success_response_custom_message_and_code():
    response = success_response(result=None, code="CUSTOM_201", message="Created.")

    assert response.code == "CUSTOM_201"
    assert response.message == "Created."
    assert response.result is None


def test_error_response():
    response = error_response(message="Invalid or inactive discount code.", code="DISCOUNT-002")

    assert response.isSuccess is False
    assert response.code == "DISCOUNT-002"
    assert response.result is None


def test_error_response_with_detail():
    """검증 에러 상세는 result에 담김"""
    response = error_response(message="Please check your input.", code=ErrorCode.VALIDATION_ERROR,
                              result={"weeks": {"message": "required"}})

    assert response.result == {"weeks": {"message": "required"}}


def test_camel_case_result_serialization():
    """result 내부의 도메인 모델은 camelCase로 직렬화"""
    response = ApiResponse[CreditsBalance].success(
        result=CreditsBalance(user_id="u-1", credits=10)
    )
    dumped = response.model_dump(by_alias=True)

    assert set(dumped) == {"isSuccess", "code", "message", "result"}
    assert dumped["result"] == {"userId": "u-1", "credits": 10}


def test_http_error_code():
    assert ErrorCode.http_error(404) == "HTTP_404"
