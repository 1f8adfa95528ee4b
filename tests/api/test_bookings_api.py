"""
예약 확정 API 테스트 (/api/bookings/confirm)

실행: pytest tests/api/test_bookings_api.py -v
"""
import pytest
from datetime import date
from fastapi.testclient import TestClient

from garden.api.dependencies import (
    get_accommodation_repository,
    get_booking_repository,
    get_credits_repository,
    get_discount_code_repository,
    get_in_flight_registry,
    get_payment_repository,
)
from garden.main import app
from garden.models.dto import Accommodation, Booking
from garden.repositories.memory import (
    MockAccommodationRepository,
    MockBookingRepository,
    MockCreditsRepository,
    MockDiscountCodeRepository,
    MockPaymentRepository,
)
from garden.services.booking_service import InFlightRegistry

USER_ID = "5f0c3c3e-9a63-4a3c-9d4e-0b7f1c2d3e4f"
URL = "/api/bookings/confirm"


@pytest.fixture
def payment_repo():
    return MockPaymentRepository()


@pytest.fixture
def credits_repo():
    return MockCreditsRepository({USER_ID: 1000})


@pytest.fixture
def registry():
    return InFlightRegistry()


@pytest.fixture
def client(cabin, payment_repo, credits_repo, registry):
    """Dependency override가 적용된 TestClient 제공 및 자동 정리"""
    app.dependency_overrides[get_accommodation_repository] = lambda: MockAccommodationRepository([
        cabin, Accommodation(id="tent-1", title="Bell Tent", base_price=80),
    ])
    app.dependency_overrides[get_booking_repository] = lambda: MockBookingRepository([
        Booking(id="booking-1", user_id=USER_ID, accommodation_id="cabin-1",
                check_in=date(2025, 7, 5), check_out=date(2025, 8, 16)),
    ])
    app.dependency_overrides[get_discount_code_repository] = lambda: MockDiscountCodeRepository()
    app.dependency_overrides[get_payment_repository] = lambda: payment_repo
    app.dependency_overrides[get_credits_repository] = lambda: credits_repo
    app.dependency_overrides[get_in_flight_registry] = lambda: registry
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def headers():
    return {"X-User-Id": USER_ID}


@pytest.fixture
def body():
    return {
        "weeks": [{"startDate": "2025-07-07", "endDate": "2025-07-14"}],
        "accommodationId": "cabin-1",
        "foodContribution": 345,
    }


def test_confirm_pending(client, headers, body, payment_repo, credits_repo):
    """크레딧 미사용 → 결제 필요, 크레딧 잔액 유지"""
    response = client.post(URL, headers=headers, json=body)

    assert response.status_code == 200
    result = response.json()["result"]
    assert result["requiresPayment"] is True
    assert result["payment"]["status"] == "pending"
    assert result["payment"]["amount_paid"] == 545
    assert result["payment"]["breakdown_json"]["vat_amount"] == 130.8
    assert len(payment_repo.payments) == 1
    assert credits_repo.get_balance(USER_ID) == 1000


def test_confirm_credits_only(client, headers, body, credits_repo):
    """크레딧으로 전액 결제 → paid, 크레딧 차감"""
    response = client.post(URL, headers=headers, json={**body, "useCredits": True})

    assert response.status_code == 200
    result = response.json()["result"]
    assert result["requiresPayment"] is False
    assert result["settlement"] == {"creditsUsed": 545, "amountAfterCredits": 0, "creditsOnly": True}
    assert result["payment"]["status"] == "paid"
    assert result["payment"]["stripe_payment_id"].startswith("credits-only-")
    assert credits_repo.get_balance(USER_ID) == 455


def test_confirm_requires_user_header(client, body):
    response = client.post(URL, json=body)

    assert response.status_code == 400
    assert response.json()["code"] == "HTTP_400"


def test_confirm_empty_weeks(client, headers, body):
    response = client.post(URL, headers=headers, json={**body, "weeks": []})

    assert response.status_code == 422
    assert response.json()["code"] == "VALIDATION-001"


def test_confirm_unknown_accommodation(client, headers, body):
    response = client.post(URL, headers=headers, json={**body, "accommodationId": "missing"})

    assert response.status_code == 404
    assert response.json()["code"] == "ACCOMMODATION-001"


def test_confirm_in_progress(client, headers, body, registry, payment_repo):
    """같은 확정 요청이 처리 중이면 409"""
    key = (USER_ID, "cabin-1", "2025-07-07", "2025-07-14")
    registry.acquire(key)

    response = client.post(URL, headers=headers, json=body)

    assert response.status_code == 409
    assert response.json()["code"] == "BOOKING-002"
    assert payment_repo.payments == []


@pytest.fixture
def extension_body():
    return {
        "weeks": [{"startDate": "2025-08-16", "endDate": "2025-08-23"}],
        "accommodationId": "cabin-1",
        "extendBookingId": "booking-1",
    }


def test_confirm_extension(client, headers, extension_body):
    response = client.post(URL, headers=headers, json=extension_body)

    assert response.status_code == 200
    payment = response.json()["result"]["payment"]
    assert payment["payment_type"] == "extension"
    assert payment["booking_id"] == "booking-1"
    assert payment["accommodation_id"] == "cabin-1"


def test_confirm_extension_with_other_accommodation(client, headers, extension_body, payment_repo):
    """기존 예약과 다른 숙소로 연장하면 400"""
    response = client.post(URL, headers=headers, json={**extension_body, "accommodationId": "tent-1"})

    assert response.status_code == 400
    assert response.json()["code"] == "BOOKING-003"
    assert payment_repo.payments == []


def test_confirm_extension_of_other_users_booking(client, extension_body, payment_repo):
    """다른 사용자의 예약 연장은 존재하지 않는 예약과 동일하게 404"""
    other = {"X-User-Id": "0b7f1c2d-3e4f-4a3c-9d4e-5f0c3c3e9a63"}
    response = client.post(URL, headers=other, json=extension_body)

    assert response.status_code == 404
    assert response.json()["code"] == "BOOKING-001"
    assert payment_repo.payments == []
