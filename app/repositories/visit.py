from postgrest.exceptions import APIError

from app.core.errors import BusinessNotFound, CustomerNotFound
from database.connection import get_db, translate_errors

NO_DATA_FOUND = "P0002"
FOREIGN_KEY_VIOLATION = "23503"


class VisitRepository:

    @staticmethod
    @translate_errors
    def check_in(customer_id: str, business_id: str, points: int) -> dict | None:
        """Append a visit and increment the customer/business totals atomically.

        Runs the check_in_customer database function, so the visit insert and
        the relation upsert commit or fail together. Never retried.
        """
        db = get_db()
        try:
            result = db.rpc("check_in_customer", {
                "p_customer_id": customer_id,
                "p_business_id": business_id,
                "p_points": points,
            }).execute()
        except APIError as e:
            if e.code == NO_DATA_FOUND:
                raise CustomerNotFound("Customer not found. Please ask them to register first.") from e
            if e.code == FOREIGN_KEY_VIOLATION:
                raise BusinessNotFound("Business not found") from e
            raise
        return result.data[0] if result and result.data else None

    @staticmethod
    @translate_errors
    def list_recent_by_business(business_id: str, limit: int = 10) -> list[dict]:
        """Get the most recent visits for a business with customer name and phone."""
        db = get_db()
        result = db.table("visits").select(
            "*, customers(name, phone_number)"
        ).eq("business_id", business_id).order("visit_date", desc=True).limit(limit).execute()
        return result.data if result and result.data else []

    @staticmethod
    @translate_errors
    def list_by_customer(customer_id: str) -> list[dict]:
        """Get a customer's visit history with business name and type, newest first."""
        db = get_db()
        result = db.table("visits").select(
            "*, businesses(name, type)"
        ).eq("customer_id", customer_id).order("visit_date", desc=True).execute()
        return result.data if result and result.data else []
