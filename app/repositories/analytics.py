from database.connection import get_db, translate_errors


class AnalyticsRepository:
    """Reads from the aggregate views maintained by the database."""

    @staticmethod
    @translate_errors
    def get_customer_points(phone_number: str) -> dict | None:
        """Get the points summary row for a customer phone number."""
        db = get_db()
        result = db.table("customer_points").select("*").eq("phone_number", phone_number).limit(1).execute()
        return result.data[0] if result and result.data else None

    @staticmethod
    @translate_errors
    def get_business_analytics(business_id: str) -> dict | None:
        """Get the analytics row for a business."""
        db = get_db()
        result = db.table("business_analytics").select("*").eq("business_id", business_id).limit(1).execute()
        return result.data[0] if result and result.data else None

    @staticmethod
    @translate_errors
    def get_relation(customer_id: str, business_id: str) -> dict | None:
        """Get the maintained visit/points totals for a (customer, business) pair."""
        db = get_db()
        result = db.table("customer_businesses").select("*").eq(
            "customer_id", customer_id
        ).eq("business_id", business_id).limit(1).execute()
        return result.data[0] if result and result.data else None
