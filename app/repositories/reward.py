from database.connection import get_db, translate_errors


class RewardRepository:

    @staticmethod
    @translate_errors
    def list_active_by_business(business_id: str) -> list[dict]:
        """Get active rewards for a business, cheapest first."""
        db = get_db()
        result = db.table("rewards").select("*").eq(
            "business_id", business_id
        ).eq("is_active", True).order("points_required").execute()
        return result.data if result and result.data else []

    @staticmethod
    @translate_errors
    def list_all_active() -> list[dict]:
        """Get every active reward with its business name and type, cheapest first."""
        db = get_db()
        result = db.table("rewards").select(
            "*, businesses(name, type)"
        ).eq("is_active", True).order("points_required").execute()
        return result.data if result and result.data else []
