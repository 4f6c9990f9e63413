from database.connection import get_db, translate_errors


class CustomerRepository:

    @staticmethod
    @translate_errors
    def create(phone_number: str, name: str) -> dict | None:
        """Create a new customer keyed by phone number."""
        db = get_db()
        result = db.table("customers").insert({
            "phone_number": phone_number,
            "name": name,
        }).execute()
        return result.data[0] if result and result.data else None

    @staticmethod
    @translate_errors
    def get_by_phone(phone_number: str) -> dict | None:
        """Get a customer by exact phone number match."""
        db = get_db()
        result = db.table("customers").select("*").eq("phone_number", phone_number).limit(1).execute()
        return result.data[0] if result and result.data else None
