from database.connection import get_db, translate_errors


class BusinessRepository:

    @staticmethod
    @translate_errors
    def create(
        owner_phone: str,
        name: str,
        type: str,
        points_per_visit: int,
    ) -> dict | None:
        """Create a new business owned by the given phone number."""
        db = get_db()
        result = db.table("businesses").insert({
            "owner_phone": owner_phone,
            "name": name,
            "type": type,
            "points_per_visit": points_per_visit,
        }).execute()
        return result.data[0] if result and result.data else None

    @staticmethod
    @translate_errors
    def get_by_id(business_id: str) -> dict | None:
        """Get a business by ID."""
        db = get_db()
        result = db.table("businesses").select("*").eq("id", business_id).limit(1).execute()
        return result.data[0] if result and result.data else None

    @staticmethod
    @translate_errors
    def get_by_phone(owner_phone: str) -> dict | None:
        """Get a business by its owner's phone number."""
        db = get_db()
        result = db.table("businesses").select("*").eq("owner_phone", owner_phone).limit(1).execute()
        return result.data[0] if result and result.data else None
