import pytest

from smartcompare.core.errors import EmptyInputError
from smartcompare.core.schemas import ProductRecord
from smartcompare.recommendation import CONSIDERATIONS, pick_best, recommend


def _scored(brand, score):
    return ProductRecord(brand=brand, score=score, source_name=f"{brand.lower()}.pdf")


def test_recommend_requires_products():
    with pytest.raises(EmptyInputError):
        recommend([], "elevator", "office")
    with pytest.raises(EmptyInputError):
        pick_best([])


def test_ties_go_to_first_product():
    products = [_scored("KONE", 70), _scored("OTIS", 88), _scored("SCHINDLER", 88)]
    assert pick_best(products).brand == "OTIS"
    assert recommend(products, "elevator", "office").best_brand == "OTIS"


def test_unscored_products_count_as_zero():
    products = [ProductRecord(brand="FIRST"), ProductRecord(brand="SECOND")]
    assert pick_best(products).brand == "FIRST"
    assert recommend(products, "elevator", "").best_score == 0


def test_recommendation_text_fields():
    products = [_scored("KONE", 91), _scored("TKE", 64)]
    rec = recommend(products, "elevator", "hospital")
    assert "KONE" in rec.reasoning
    assert "91/100" in rec.reasoning
    assert "hospital" in rec.reasoning
    assert "2 products" in rec.insights
    assert "KONE" in rec.next_steps
    assert rec.considerations == CONSIDERATIONS
    assert len(rec.considerations) == 5


def test_considerations_do_not_depend_on_input():
    a = recommend([_scored("APPLE", 80)], "phone", "travel")
    b = recommend([_scored("DELL", 40)], "laptop", "gaming")
    assert a.considerations == b.considerations
