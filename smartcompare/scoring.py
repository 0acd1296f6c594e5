# smartcompare/scoring.py
"""
Fixed-weight suitability score.

    score = 50                                   base
          + filled / total * 30                  completeness
          + min(10 * high attributes filled, 30) important coverage
          + 10 if the brand is reputable         reputation

clamped to [0, 100] and rounded half up. The breakdown is always recomputed
from scratch over the whole catalog.
"""
import logging
import math
from typing import List, Optional, Sequence

from smartcompare.catalog import FamilyRegistry, default_registry
from smartcompare.core.schemas import ProductRecord, ScoreBreakdown, SpecificationCatalog
from smartcompare.normalizer import is_specified

logger = logging.getLogger(__name__)

BASE_SCORE = 50
COMPLETENESS_WEIGHT = 30
IMPORTANT_POINTS = 10
IMPORTANT_CAP = 30
REPUTATION_BONUS = 10


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def is_reputable_brand(brand: str, product_type: str, registry: Optional[FamilyRegistry] = None) -> bool:
    family = (registry or default_registry).reputation_family(product_type)
    return brand.strip().upper() in family.reputable_brands


def score_product(
    product: ProductRecord,
    catalog: SpecificationCatalog,
    product_type: str,
    registry: Optional[FamilyRegistry] = None,
) -> ScoreBreakdown:
    total = len(catalog.attributes)
    filled = sum(1 for a in catalog.attributes if is_specified(product.specifications.get(a.id)))
    important_covered = sum(1 for a in catalog.high_importance() if is_specified(product.specifications.get(a.id)))

    score = float(BASE_SCORE)
    score += filled / total * COMPLETENESS_WEIGHT
    score += min(important_covered * IMPORTANT_POINTS, IMPORTANT_CAP)
    if is_reputable_brand(product.brand, product_type, registry):
        score += REPUTATION_BONUS

    return ScoreBreakdown(
        score=round_half_up(min(100.0, max(0.0, score))),
        completeness_percent=round_half_up(filled / total * 100),
        important_attributes_covered=important_covered,
    )


def score_products(
    products: Sequence[ProductRecord],
    catalog: SpecificationCatalog,
    product_type: str,
    registry: Optional[FamilyRegistry] = None,
) -> List[ProductRecord]:
    scored = []
    for product in products:
        breakdown = score_product(product, catalog, product_type, registry)
        logger.info(f"Scored '{product.brand}' ({product.source_name}): {breakdown.score}/100, "
                    f"{breakdown.completeness_percent}% complete, {breakdown.important_attributes_covered} important")
        scored.append(product.model_copy(update={"score": breakdown.score, "score_breakdown": breakdown}))
    return scored
