import pytest

from app.core.errors import DuplicateKey, ValidationError
from app.domain.schemas import Role
from app.repositories.customer import CustomerRepository
from app.services import loyalty


class TestResolveIdentity:
    def test_unregistered_phone_is_not_found(self, fake_db):
        assert loyalty.resolve_identity("+254799999999", Role.CUSTOMER) is None
        assert loyalty.resolve_identity("+254799999999", Role.BUSINESS) is None

    def test_finds_registered_customer(self, customer):
        found = loyalty.resolve_identity("+254700000001", "customer")
        assert found["id"] == customer["id"]
        assert found["name"] == "Asha"

    def test_roles_are_independent(self, fake_db):
        loyalty.register_customer("+254722222222", "Wanjiru")
        assert loyalty.resolve_identity("+254722222222", Role.BUSINESS) is None

        business = loyalty.register_business("+254722222222", "Wanjiru Cuts", "barbershop")
        assert loyalty.resolve_identity("+254722222222", Role.BUSINESS)["id"] == business["id"]

    def test_short_phone_rejected_before_lookup(self, fake_db):
        with pytest.raises(ValidationError):
            loyalty.resolve_identity("12345", Role.CUSTOMER)
        assert fake_db.executions == 0

    def test_surrounding_whitespace_ignored(self, customer):
        assert loyalty.resolve_identity("  +254700000001 ", Role.CUSTOMER)["id"] == customer["id"]


class TestRegistration:
    def test_register_customer(self, fake_db):
        customer = loyalty.register_customer("+254700000001", "  Asha ")
        assert customer["name"] == "Asha"
        assert customer["phone_number"] == "+254700000001"
        assert customer["created_at"]
        # no points or visits as a side effect
        assert fake_db.tables["visits"] == []
        assert fake_db.tables["customer_businesses"] == []

    def test_duplicate_customer_does_not_mutate(self, customer, fake_db):
        with pytest.raises(DuplicateKey):
            loyalty.register_customer("+254700000001", "Someone Else")
        assert len(fake_db.tables["customers"]) == 1
        assert fake_db.tables["customers"][0]["name"] == "Asha"

    def test_concurrent_duplicate_trips_unique_constraint(self, customer, fake_db):
        # Simulates a registration that slipped past the pre-check
        with pytest.raises(DuplicateKey):
            CustomerRepository.create("+254700000001", "Racer")
        assert fake_db.tables["customers"][0]["name"] == "Asha"

    def test_empty_name_rejected(self, fake_db):
        with pytest.raises(ValidationError):
            loyalty.register_customer("+254700000001", "   ")
        assert fake_db.executions == 0

    def test_register_business_defaults(self, fake_db):
        business = loyalty.register_business("+254711111111", "Glow Salon", "salon")
        assert business["type"] == "salon"
        assert business["owner_phone"] == "+254711111111"
        assert business["points_per_visit"] == 10

    def test_register_business_custom_points(self, fake_db):
        business = loyalty.register_business("+254711111111", "Java House", "cafe", points_per_visit=25)
        assert business["points_per_visit"] == 25

    @pytest.mark.parametrize("points", [0, 101])
    def test_register_business_points_out_of_range(self, fake_db, points):
        with pytest.raises(ValidationError):
            loyalty.register_business("+254711111111", "Java House", "cafe", points_per_visit=points)

    @pytest.mark.parametrize("category", ["Salon", "SALON", " salon"])
    def test_category_must_match_exactly(self, fake_db, category):
        with pytest.raises(ValidationError):
            loyalty.register_business("+254711111111", "Glow Salon", category)
        assert fake_db.executions == 0

    def test_unknown_category_rejected(self, fake_db):
        with pytest.raises(ValidationError):
            loyalty.register_business("+254711111111", "Gym Ltd", "gym")
        assert fake_db.executions == 0

    def test_duplicate_business(self, business, fake_db):
        with pytest.raises(DuplicateKey):
            loyalty.register_business("+254711111111", "Glow Salon 2", "spa")
        assert fake_db.tables["businesses"][0]["name"] == "Glow Salon"
