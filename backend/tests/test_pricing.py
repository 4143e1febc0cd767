"""
Tests for packages, promotions and extra charges.
"""

import pytest

from mooprompt_api.services.domain.pricing_service import validate_promotion
from shared.config.constants import PromotionType
from shared.utils.exceptions import ValidationError


class TestValidatePromotion:
    @pytest.mark.parametrize(
        "promo_type,value,condition,key",
        [
            (PromotionType.PER_PERSON, 0, {"buy": 3, "pay": 3}, "promotions.buy_pay_required"),
            (PromotionType.PER_PERSON, 0, None, "promotions.buy_pay_required"),
            (PromotionType.FIXED, 0, None, "promotions.value_required"),
            (PromotionType.PERCENT, 120, None, "promotions.percent_too_high"),
            (PromotionType.MIN_PEOPLE, 10, {}, "promotions.min_people_required"),
            (PromotionType.MIN_AMOUNT, 10, {"min_people": 2}, "promotions.min_amount_required"),
        ],
    )
    def test_rejected(self, promo_type, value, condition, key):
        with pytest.raises(ValidationError) as exc:
            validate_promotion(promo_type, value, condition)
        assert exc.value.message_key == key

    def test_per_person_ignores_value(self):
        validate_promotion(PromotionType.PER_PERSON, 0, {"buy": 4, "pay": 3})


class TestPackages:
    def test_create_and_list(self, client, manager_headers):
        response = client.post(
            "/api/packages",
            json={"name": "Premium 499", "price_per_person": 499, "duration_minutes": 120},
            headers=manager_headers,
        )
        assert response.status_code == 201

        names = [p["name"] for p in client.get("/api/packages", headers=manager_headers).json()]
        assert names == ["Premium 499"]

    def test_listing_requires_sign_in(self, client, seed_package):
        assert client.get("/api/packages").status_code == 401

    def test_cashier_cannot_create(self, client, cashier_headers):
        response = client.post(
            "/api/packages",
            json={"name": "Premium 499", "price_per_person": 499},
            headers=cashier_headers,
        )
        assert response.status_code == 403

    def test_duration_can_be_cleared(self, client, manager_headers, seed_package):
        response = client.patch(
            f"/api/packages/{seed_package.id}",
            json={"duration_minutes": None},
            headers=manager_headers,
        )
        assert response.status_code == 200
        assert response.json()["duration_minutes"] is None
        assert response.json()["price_per_person"] == 299.0

    def test_package_in_use_cannot_be_deleted(self, client, manager_headers, buffet_session):
        response = client.delete(
            f"/api/packages/{buffet_session.package_id}",
            headers={**manager_headers, "Accept-Language": "en"},
        )
        assert response.status_code == 400
        assert response.json()["detail"] == "Package Buffet 299 is in use"

    def test_unused_package_is_deleted(self, client, manager_headers, seed_package):
        response = client.delete(f"/api/packages/{seed_package.id}", headers=manager_headers)
        assert response.status_code == 200
        assert client.get("/api/packages", headers=manager_headers).json() == []


class TestPromotions:
    def test_create_come_four_pay_three(self, client, manager_headers):
        response = client.post(
            "/api/promotions",
            json={"name": "Come 4 pay 3", "type": "PER_PERSON", "condition": {"buy": 4, "pay": 3}},
            headers=manager_headers,
        )
        assert response.status_code == 201
        assert response.json()["condition"] == {"buy": 4, "pay": 3}

    def test_invalid_promotion_is_400(self, client, manager_headers):
        response = client.post(
            "/api/promotions",
            json={"name": "Too generous", "type": "PERCENT", "value": 150},
            headers={**manager_headers, "Accept-Language": "en"},
        )
        assert response.status_code == 400
        assert response.json()["detail"] == "Percentage discount cannot exceed 100%"

    def test_update_is_revalidated(self, client, manager_headers):
        created = client.post(
            "/api/promotions",
            json={"name": "Ten percent", "type": "PERCENT", "value": 10},
            headers=manager_headers,
        ).json()
        response = client.patch(
            f"/api/promotions/{created['id']}",
            json={"type": "MIN_PEOPLE"},
            headers=manager_headers,
        )
        assert response.status_code == 400

    def test_active_only(self, client, manager_headers):
        for name, active in (("On", True), ("Off", False)):
            client.post(
                "/api/promotions",
                json={"name": name, "type": "FIXED", "value": 50, "active": active},
                headers=manager_headers,
            )

        everything = client.get("/api/promotions", headers=manager_headers).json()
        active = client.get("/api/promotions", params={"active_only": True}, headers=manager_headers).json()
        assert {p["name"] for p in everything} == {"On", "Off"}
        assert [p["name"] for p in active] == ["On"]


class TestExtraCharges:
    def test_listing_is_ordered_by_name(self, client, cashier_headers, seed_extra_charges):
        names = [c["name"] for c in client.get("/api/extra-charges", headers=cashier_headers).json()]
        assert names == ["Corkage", "Water refill"]

    def test_deactivate(self, client, manager_headers, seed_extra_charges):
        water, _ = seed_extra_charges
        response = client.patch(
            f"/api/extra-charges/{water.id}",
            json={"active": False},
            headers=manager_headers,
        )
        assert response.json()["active"] is False

        active = client.get(
            "/api/extra-charges", params={"active_only": True}, headers=manager_headers
        ).json()
        assert [c["name"] for c in active] == ["Corkage"]

    def test_charge_type_is_validated(self, client, manager_headers):
        response = client.post(
            "/api/extra-charges",
            json={"name": "Bad", "price": 10, "charge_type": "PER_TABLE"},
            headers=manager_headers,
        )
        assert response.status_code == 400
