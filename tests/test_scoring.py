import pytest

from smartcompare.catalog import build_catalog, resolve, rows_to_definitions
from smartcompare.core.schemas import NOT_SPECIFIED, ProductRecord
from smartcompare.normalizer import fill_defaults
from smartcompare.scoring import is_reputable_brand, round_half_up, score_product, score_products


def _catalog(high: int, total: int = 10):
    rows = [
        (f"attr_{i}", f"Attribute {i}", "General", "high" if i < high else "medium", "text")
        for i in range(total)
    ]
    return build_catalog("widget", "", rows_to_definitions(rows))


def test_empty_product_scores_base_only():
    catalog = _catalog(high=3)
    product = fill_defaults([ProductRecord(brand="ACME")], catalog)[0]
    breakdown = score_product(product, catalog, "widget")
    assert breakdown.score == 50
    assert breakdown.completeness_percent == 0
    assert breakdown.important_attributes_covered == 0


def test_complete_reputable_product_scores_hundred():
    catalog = _catalog(high=10)
    product = ProductRecord(brand="siemens", specifications={a: "x" for a in catalog.attribute_ids()})
    breakdown = score_product(product, catalog, "widget")
    assert breakdown.score == 100
    assert breakdown.completeness_percent == 100
    assert breakdown.important_attributes_covered == 10


def test_partial_product():
    catalog = _catalog(high=3)
    specs = {"attr_0": "a", "attr_1": "b", "attr_5": "c", "attr_6": "d", "attr_7": "e"}
    breakdown = score_product(ProductRecord(brand="ACME", specifications=specs), catalog, "widget")
    # 50 + 5/10 * 30 + 2 * 10
    assert breakdown.score == 85
    assert breakdown.completeness_percent == 50
    assert breakdown.important_attributes_covered == 2


def test_important_bonus_is_capped_but_count_is_not():
    catalog = _catalog(high=6)
    specs = {f"attr_{i}": "v" for i in range(6)}
    breakdown = score_product(ProductRecord(brand="ACME", specifications=specs), catalog, "widget")
    # 50 + 18 + 30
    assert breakdown.score == 98
    assert breakdown.important_attributes_covered == 6


def test_rounds_half_up():
    catalog = resolve("coffee grinder", "")
    product = ProductRecord(brand="ACME", specifications={"model": "X1"})
    breakdown = score_product(product, catalog, "coffee grinder")
    # 50 + 1/8 * 30 = 53.75, completeness 12.5
    assert breakdown.score == 54
    assert breakdown.completeness_percent == 13
    assert round_half_up(0.5) == 1
    assert round_half_up(2.5) == 3


def test_reputable_brand_uses_matching_family():
    assert is_reputable_brand("otis", "Passenger Elevator")
    assert is_reputable_brand("KONE", "elevator")
    assert not is_reputable_brand("SAMSUNG", "elevator")
    assert is_reputable_brand("Bosch", "dishwasher")
    assert not is_reputable_brand("UNKNOWN", "dishwasher")


@pytest.mark.parametrize("product_type", ["coffee machine", "vacuum cleaner", "pallet stacker", "Passenger Lift"])
def test_reputation_list_follows_family_tag_not_keywords(product_type):
    assert is_reputable_brand("BOSCH", product_type)
    assert not is_reputable_brand("DAIKIN", product_type)
    assert not is_reputable_brand("OTIS", product_type)


def test_generic_brand_bonus_for_coffee_machine():
    catalog = resolve("coffee machine", "")
    assert catalog.family == "air_conditioner"
    bosch = score_product(ProductRecord(brand="BOSCH"), catalog, "coffee machine")
    acme = score_product(ProductRecord(brand="ACME"), catalog, "coffee machine")
    assert bosch.score - acme.score == 10
    assert is_reputable_brand("DAIKIN", "split air conditioner")


def test_score_is_bounded_deterministic_and_monotonic():
    catalog = resolve("elevator", "")
    high_ids = [a.id for a in catalog.high_importance()]
    specs = {}
    previous = score_product(ProductRecord(brand="OTIS", specifications=dict(specs)), catalog, "elevator")
    for attribute_id in high_ids:
        specs[attribute_id] = "42"
        product = ProductRecord(brand="OTIS", specifications=dict(specs))
        current = score_product(product, catalog, "elevator")
        assert 0 <= current.score <= 100
        assert current.score >= previous.score
        assert score_product(product, catalog, "elevator") == current
        previous = current


def test_sentinel_values_do_not_count():
    catalog = _catalog(high=3)
    specs = {a: NOT_SPECIFIED for a in catalog.attribute_ids()}
    assert score_product(ProductRecord(brand="ACME", specifications=specs), catalog, "widget").score == 50


def test_score_products_returns_scored_copies():
    catalog = _catalog(high=3)
    products = [ProductRecord(brand="ACME"), ProductRecord(brand="BOSCH", specifications={"attr_0": "x"})]
    scored = score_products(products, catalog, "widget")
    assert [p.score for p in scored] == [50, 73]
    assert scored[1].score_breakdown.important_attributes_covered == 1
    assert products[0].score is None


@pytest.mark.parametrize("brand", ["OTIS", "ACME"])
def test_full_elevator_score_never_exceeds_hundred(brand):
    catalog = resolve("elevator", "")
    product = ProductRecord(brand=brand, specifications={a: "1" for a in catalog.attribute_ids()})
    # 50 + 30 + 30 (+ 10 for OTIS) is clamped
    assert score_product(product, catalog, "elevator").score == 100
