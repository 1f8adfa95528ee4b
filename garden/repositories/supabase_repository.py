import logging
from typing import Optional

from supabase import PostgrestAPIError

from garden.core.supabase_client import get_supabase_client
from garden.exception.service.credits_exception import InsufficientCreditsError
from garden.models.dto import Accommodation, Booking, DiscountCodeRecord, PaymentRecord
from garden.repositories.base import (
    IAccommodationRepository,
    IBookingRepository,
    ICreditsRepository,
    IDiscountCodeRepository,
    IPaymentRepository,
)

logger = logging.getLogger("garden")

# deduct_user_credits 함수가 잔액 부족 시 RAISE EXCEPTION으로 돌려주는 코드
INSUFFICIENT_CREDITS_SQLSTATE = "P0001"


class SupabaseAccommodationRepository(IAccommodationRepository):
    """
    Supabase based Accommodation Repository.
    Uses 'accommodations' table (id, title, base_price, type).
    """

    def __init__(self):
        self.supabase = get_supabase_client()
        self.table_name = "accommodations"

    def get(self, accommodation_id: str) -> Optional[Accommodation]:
        try:
            response = self.supabase.table(self.table_name).select(
                "id, title, base_price, type"
            ).eq("id", accommodation_id).limit(1).execute()
        except Exception as e:
            logger.error(f"Error fetching accommodation {accommodation_id}: {e}")
            raise

        if not response.data:
            return None
        return Accommodation.model_validate(response.data[0])


class SupabaseDiscountCodeRepository(IDiscountCodeRepository):
    """
    Supabase based Discount Code Repository.
    Uses 'discount_codes' table. Inactive rows are returned as-is so the caller
    can tell "unknown" from "no longer active".
    """

    def __init__(self):
        self.supabase = get_supabase_client()
        self.table_name = "discount_codes"

    def find_by_code(self, code: str) -> Optional[DiscountCodeRecord]:
        try:
            response = self.supabase.table(self.table_name).select(
                "id, code, percentage_discount, is_active, description, applies_to"
            ).eq("code", code).limit(1).execute()
        except Exception as e:
            logger.error(f"Error querying discount code: {e}")
            raise

        if not response.data:
            return None
        return DiscountCodeRecord.model_validate(response.data[0])


class SupabaseCreditsRepository(ICreditsRepository):
    """
    Supabase based Credits Repository.
    Balance lives in 'profiles.credits'.
    """

    def __init__(self):
        self.supabase = get_supabase_client()
        self.table_name = "profiles"

    def get_balance(self, user_id: str) -> float:
        try:
            response = self.supabase.table(self.table_name).select(
                "credits"
            ).eq("id", user_id).limit(1).execute()
        except Exception as e:
            logger.error(f"Error fetching credits for {user_id}: {e}")
            raise

        if not response.data:
            return 0.0
        return max(0.0, float(response.data[0].get("credits") or 0))

    def deduct(self, user_id: str, amount: float) -> float:
        """
        Deducts through the `deduct_user_credits` database function, which checks and
        updates the balance in one statement. The function raises (SQLSTATE P0001) when
        the balance is too low; that is surfaced as InsufficientCreditsError.
        """
        try:
            self.supabase.rpc(
                "deduct_user_credits",
                {"p_user_id": user_id, "p_credits_to_deduct": amount},
            ).execute()
        except PostgrestAPIError as e:
            if e.code == INSUFFICIENT_CREDITS_SQLSTATE:
                logger.warning({"event": "credits_deduction_rejected", "user_id": user_id, "amount": amount})
                raise InsufficientCreditsError() from e
            logger.error(f"Error deducting credits for {user_id}: {e}")
            raise
        except Exception as e:
            logger.error(f"Error deducting credits for {user_id}: {e}")
            raise
        return self.get_balance(user_id)


class SupabaseBookingRepository(IBookingRepository):
    """
    Supabase based Booking Repository.
    Uses 'bookings' table; only the stored stay dates are needed for extensions.
    """

    def __init__(self):
        self.supabase = get_supabase_client()
        self.table_name = "bookings"

    def get(self, booking_id: str) -> Optional[Booking]:
        try:
            response = self.supabase.table(self.table_name).select(
                "id, user_id, accommodation_id, check_in, check_out"
            ).eq("id", booking_id).limit(1).execute()
        except Exception as e:
            logger.error(f"Error fetching booking {booking_id}: {e}")
            raise

        if not response.data:
            return None
        return Booking.model_validate(response.data[0])


class SupabasePaymentRepository(IPaymentRepository):
    """
    Supabase based Payment Repository.
    Uses 'payments' table; breakdown is stored as JSON in 'breakdown_json'.
    """

    def __init__(self):
        self.supabase = get_supabase_client()
        self.table_name = "payments"

    def create(self, payment: PaymentRecord) -> PaymentRecord:
        data = payment.model_dump(mode="json", exclude_none=True)
        try:
            response = self.supabase.table(self.table_name).insert(data).execute()
        except Exception as e:
            logger.error(f"Error creating payment: {e}")
            raise

        if response.data:
            return PaymentRecord.model_validate(response.data[0])
        return payment
