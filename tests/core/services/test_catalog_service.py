"""Tests for CatalogService (service catalog)."""

from core.models import PricingType, ServiceCreate
from core.seed_data import CATALOG


class TestResolve:

    def test_by_id(self, catalog_service):
        assert catalog_service.resolve("deep").name == "Deep Cleaning"

    def test_by_name(self, catalog_service):
        assert catalog_service.resolve("On-Site Ironing").id == "ironing"

    def test_id_and_name_resolve_to_same_entry(self, catalog_service):
        assert catalog_service.resolve("kitchen_bath") == catalog_service.resolve("Kitchen & Bathroom Cleaning")

    def test_id_wins_over_name(self, catalog_service):
        catalog_service.seed([
            ServiceCreate(id="special", name="deep", pricing_type=PricingType.PROJECT),
        ])
        assert catalog_service.resolve("deep").id == "deep"

    def test_unknown_and_blank(self, catalog_service):
        assert catalog_service.resolve("Pool Cleaning") is None
        assert catalog_service.resolve("  ") is None
        assert catalog_service.resolve(None) is None


class TestListAndSeed:

    def test_list_in_display_order(self, catalog_service):
        assert [s.id for s in catalog_service.list_all()] == [entry.id for entry in CATALOG]

    def test_pricing_types_from_seed(self, catalog_service):
        assert catalog_service.get_by_id("regular").pricing_type == PricingType.HOURLY
        assert catalog_service.get_by_id("dry_cleaning").pricing_type == PricingType.PROJECT

    def test_reseed_is_idempotent(self, catalog_service):
        before = catalog_service.get_by_id("deep")

        catalog_service.seed(CATALOG)

        assert len(catalog_service.list_all()) == len(CATALOG)
        assert catalog_service.get_by_id("deep").created_at == before.created_at

    def test_reseed_replaces_fields(self, catalog_service):
        catalog_service.seed([
            ServiceCreate(id="deep", name="Deep Cleaning", description="Updated", pricing_type=PricingType.PROJECT),
        ])
        assert catalog_service.get_by_id("deep").description == "Updated"
