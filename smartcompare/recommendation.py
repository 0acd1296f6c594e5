# smartcompare/recommendation.py
import logging
from typing import List, Sequence

from smartcompare.core.errors import EmptyInputError
from smartcompare.core.schemas import ProductRecord, Recommendation

logger = logging.getLogger(__name__)

CONSIDERATIONS: List[str] = [
    "Verify actual product availability and delivery timelines",
    "Check after-sales service and support in your region",
    "Confirm warranty terms and conditions",
    "Compare installation requirements if applicable",
    "Review user reviews and ratings for real-world performance",
]


def pick_best(products: Sequence[ProductRecord]) -> ProductRecord:
    """Highest score wins; unscored products count as 0 and ties keep the earliest."""
    if not products:
        raise EmptyInputError("Cannot pick a best product from an empty comparison")
    best = products[0]
    for product in products[1:]:
        if (product.score or 0) > (best.score or 0):
            best = product
    return best


def recommend(products: Sequence[ProductRecord], product_type: str, use_case: str) -> Recommendation:
    if not products:
        raise EmptyInputError("Cannot recommend a product: no products have been added to the comparison")

    best = pick_best(products)
    score = best.score or 0
    purpose = use_case or f"your {product_type or 'product'} needs"
    logger.info(f"Recommending '{best.brand}' with score {score}/100 out of {len(products)} products")

    return Recommendation(
        best_brand=best.brand,
        best_score=score,
        reasoning=(
            f"{best.brand} offers the best balance of specifications and value for {purpose}. "
            f"With an AI score of {score}/100, it provides comprehensive features at competitive pricing."
        ),
        insights=(
            f"Based on analysis of {len(products)} products, {best.brand} leads in specification "
            f"completeness and meets the requirements for {purpose} most effectively."
        ),
        considerations=list(CONSIDERATIONS),
        next_steps=(
            f"Contact {best.brand} for final pricing and proceed with purchase negotiations. "
            f"Ensure all specifications match your requirements before finalizing."
        ),
    )
