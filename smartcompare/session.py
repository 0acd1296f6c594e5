# smartcompare/session.py
"""
Comparison session operations.

A ComparisonSession is a plain value: every function here takes one and
returns a new one, running the stages in their fixed order
(resolve -> extract -> fill defaults -> score).
"""
import logging
from pathlib import Path
from typing import Callable, Dict, Iterable, List, Optional, Union

from smartcompare.catalog import FamilyRegistry, resolve
from smartcompare.core.errors import DocumentDecodeError
from smartcompare.core.schemas import (
    UNKNOWN_BRAND, AnalysisReport, ComparisonSession, DocumentFailure, ProductRecord, Recommendation
)
from smartcompare.extractor import brand_from_filename, extract
from smartcompare.normalizer import fill_defaults
from smartcompare.recommendation import pick_best, recommend
from smartcompare.scoring import score_products
from smartcompare.services.document_parser import DocumentParser

logger = logging.getLogger(__name__)

TextLoaderFn = Callable[[Union[str, Path]], str]


def start_session(product_type: str, use_case: str = "", registry: Optional[FamilyRegistry] = None) -> ComparisonSession:
    product_type = product_type.strip()
    use_case = use_case.strip()
    if not product_type:
        raise ValueError("Please enter what product you want to compare")
    catalog = resolve(product_type, use_case, registry)
    return ComparisonSession(product_type=product_type, use_case=use_case, catalog=catalog)


def refresh(session: ComparisonSession, registry: Optional[FamilyRegistry] = None) -> ComparisonSession:
    """Fills defaults and rescores every product against the session catalog."""
    filled = fill_defaults(session.products, session.catalog)
    scored = score_products(filled, session.catalog, session.product_type, registry)
    return session.model_copy(update={"products": scored})


def extract_product(
    session: ComparisonSession,
    text: str,
    source_name: str,
    registry: Optional[FamilyRegistry] = None,
) -> ProductRecord:
    result = extract(text, session.catalog, session.product_type, registry)
    brand = result.brand
    if brand == UNKNOWN_BRAND:
        brand = brand_from_filename(source_name)
    return ProductRecord(
        brand=brand,
        specifications=result.specifications,
        source_name=source_name,
        raw_text=result.raw_text,
    )


def analyze_documents(
    session: ComparisonSession,
    paths: Iterable[Union[str, Path]],
    load_text: TextLoaderFn = DocumentParser.load_text,
    registry: Optional[FamilyRegistry] = None,
) -> AnalysisReport:
    """
    Extracts one product per document, strictly one document at a time.

    A document that cannot be loaded is recorded as a failure and skipped;
    the rest of the batch still runs. The returned session is filled and
    scored as a whole.
    """
    products: List[ProductRecord] = list(session.products)
    failures: List[DocumentFailure] = []

    for path in paths:
        source_name = Path(path).name
        logger.info(f"Processing: {source_name}")
        try:
            text = load_text(path)
            products.append(extract_product(session, text, source_name, registry))
            logger.info(f"Extracted data from: {source_name}")
        except DocumentDecodeError as e:
            logger.warning(f"Skipping {source_name}: {e}")
            failures.append(DocumentFailure(source_name=source_name, path=str(path), error=str(e)))
        except Exception as e:
            logger.error(f"Unexpected error processing {source_name}: {e}", exc_info=True)
            failures.append(DocumentFailure(source_name=source_name, path=str(path), error=f"{type(e).__name__}: {e}"))

    updated = refresh(session.model_copy(update={"products": products}), registry)
    logger.info(f"Analysis completed: {len(updated.products)} products, {len(failures)} failed documents")
    return AnalysisReport(session=updated, failures=failures)


def add_manual_product(
    session: ComparisonSession,
    brand: str,
    values: Dict[str, str],
    registry: Optional[FamilyRegistry] = None,
) -> ComparisonSession:
    brand = brand.strip()
    if not brand:
        raise ValueError("Please enter brand name")

    known_ids = set(session.catalog.attribute_ids())
    specifications: Dict[str, str] = {}
    for attribute_id, value in values.items():
        if attribute_id not in known_ids:
            logger.warning(f"Ignoring manual value for unknown attribute '{attribute_id}'")
            continue
        if value is not None and str(value).strip():
            specifications[attribute_id] = str(value).strip()

    product = ProductRecord(brand=brand, specifications=specifications, source_name="Manual Entry")
    logger.info(f"{brand} added to comparison with {len(specifications)} manual values")
    return refresh(session.model_copy(update={"products": [*session.products, product]}), registry)


def best_product(session: ComparisonSession) -> ProductRecord:
    return pick_best(session.products)


def recommend_for(session: ComparisonSession) -> Recommendation:
    return recommend(session.products, session.product_type, session.use_case)
