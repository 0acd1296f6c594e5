import pytest

from smartcompare.core.errors import DocumentDecodeError
from smartcompare.core.schemas import NOT_SPECIFIED
from smartcompare.session import (
    add_manual_product, analyze_documents, best_product, recommend_for, refresh, start_session
)

DOCUMENTS = {
    "otis_gen2_quote.txt": "Gen2 Quotation\nLoad Capacity: 1000 kg\nSpeed: 1.75 m/s\nNumber of Stops: 8\nTotal Price: 52,000",
    "kone_offer.txt": "KONE MonoSpace 500\nCapacity 630 KG, Speed 1.0 MPS",
    "lift_offer.txt": "Capacity 800 kg\nStops: 6",
}


def fake_loader(path):
    name = str(path)
    if name == "corrupt.pdf":
        raise DocumentDecodeError(name, "EOF marker not found")
    if name == "explodes.txt":
        raise KeyError("unexpected")
    return DOCUMENTS[name]


@pytest.fixture
def session():
    return start_session("Passenger Elevator", "10-storey office")


def test_start_session_resolves_catalog(session):
    assert session.catalog.family == "elevator"
    assert session.products == []
    with pytest.raises(ValueError):
        start_session("   ", "office")


def test_documents_are_processed_in_order_and_failures_recorded(session):
    report = analyze_documents(
        session,
        ["otis_gen2_quote.txt", "corrupt.pdf", "kone_offer.txt", "explodes.txt", "lift_offer.txt"],
        load_text=fake_loader,
    )
    products = report.session.products
    assert [p.source_name for p in products] == ["otis_gen2_quote.txt", "kone_offer.txt", "lift_offer.txt"]
    assert [f.source_name for f in report.failures] == ["corrupt.pdf", "explodes.txt"]
    assert "EOF marker" in report.failures[0].error
    assert [f.path for f in report.failures] == ["corrupt.pdf", "explodes.txt"]

    otis, kone, unnamed = products
    assert otis.specifications["capacity"] == "1000"
    assert otis.specifications["speed"] == "1.75"
    assert otis.specifications["stops"] == "8"
    assert otis.specifications["total_price"] == "52000"
    assert kone.brand == "KONE"
    assert kone.specifications["capacity"] == "630"
    assert unnamed.brand == "UNKNOWN"
    assert unnamed.specifications["stops"] == "6"

    for product in products:
        assert set(product.specifications) == set(session.catalog.attribute_ids())
        assert product.score_breakdown is not None
        assert product.raw_text

    assert session.products == []


def test_brand_falls_back_to_filename(session):
    report = analyze_documents(session, ["otis_gen2_quote.txt"], load_text=fake_loader)
    assert report.session.products[0].brand == "OTIS"


def test_manual_product_is_trimmed_filled_and_scored(session):
    updated = add_manual_product(session, "  Schindler ", {
        "capacity": " 1150 ",
        "speed": "",
        "cabin_colour": "red",
    })
    product = updated.products[0]
    assert product.brand == "Schindler"
    assert product.source_name == "Manual Entry"
    assert product.specifications["capacity"] == "1150"
    assert product.specifications["speed"] == NOT_SPECIFIED
    assert "cabin_colour" not in product.specifications
    # 50 + 1/26 * 30 + 10 + 10 (reputable)
    assert product.score == 71


def test_manual_product_requires_brand(session):
    with pytest.raises(ValueError):
        add_manual_product(session, " ", {"capacity": "1000"})


def test_refresh_is_stable(session):
    updated = add_manual_product(session, "OTIS", {"capacity": "1000", "stops": "12"})
    assert refresh(updated) == updated


def test_best_product_and_recommendation(session):
    updated = add_manual_product(session, "ACME", {"capacity": "1000"})
    updated = add_manual_product(updated, "KONE", {"capacity": "1000", "speed": "1.6"})
    assert best_product(updated).brand == "KONE"
    assert recommend_for(updated).best_brand == "KONE"
