"""Tests for the delivery fee policy."""

import pytest

from storefront.services.delivery import DeliveryPolicy


@pytest.fixture()
def policy():
    return DeliveryPolicy()


class TestFee:
    @pytest.mark.parametrize("city", ["Casablanca", "Rabat", "Sale", "", None])
    def test_free_at_threshold_regardless_of_city(self, policy, city):
        assert policy.fee(50000, city) == 0
        assert policy.fee(60000, city) == 0

    @pytest.mark.parametrize("subtotal", [0, 100, 20000, 49999])
    @pytest.mark.parametrize("city", ["Rabat", "Sale"])
    def test_free_in_free_zone_regardless_of_subtotal(self, policy, subtotal, city):
        assert policy.fee(subtotal, city) == 0

    @pytest.mark.parametrize("subtotal", [0, 20000, 49999])
    def test_flat_fee_otherwise(self, policy, subtotal):
        assert policy.fee(subtotal, "Casablanca") == 2500

    def test_city_match_ignores_case_and_whitespace(self, policy):
        assert policy.fee(100, "  rabat ") == 0
        assert policy.fee(100, "SALE") == 0

    def test_unknown_destination_pays_flat_fee(self, policy):
        assert policy.estimate(20000) == 2500

    def test_custom_policy(self):
        policy = DeliveryPolicy(free_threshold=1000, flat_fee=300, free_zone=["Fes"])
        assert policy.fee(999, "Rabat") == 300
        assert policy.fee(999, "Fes") == 0
        assert policy.fee(1000, "Rabat") == 0


class TestAmountUntilFree:
    def test_remaining_amount(self, policy):
        assert policy.amount_until_free(20000) == 30000

    def test_zero_once_free(self, policy):
        assert policy.amount_until_free(50000) == 0
        assert policy.amount_until_free(70000) == 0
