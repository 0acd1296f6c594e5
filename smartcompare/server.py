from fastapi import Depends, FastAPI, HTTPException
from fastapi.responses import PlainTextResponse
from pathlib import Path
import uvicorn
import logging

from smartcompare.core.config import settings
from smartcompare.core.errors import EmptyInputError, MalformedCatalogError
from smartcompare.core.schemas import (
    ComparisonSession, DocumentStatus, ManualProductRequest, ProcessDocumentsRequest,
    ProcessDocumentsResponse, Recommendation, ResearchRequest, ResearchResponse
)
from smartcompare.logging_config import configure_logger
from smartcompare.presentation import export_csv, group_by_category
from smartcompare.session import add_manual_product, analyze_documents, recommend_for, start_session
from smartcompare.storage import SessionStore

configure_logger()
logger = logging.getLogger(__name__)

app = FastAPI(
    title=settings.PROJECT_NAME + " - Comparison Server",
    version=settings.VERSION,
    description=settings.DESCRIPTION
)

# Extracted document text stays server-side.
PRIVATE_PRODUCT_FIELDS = {"products": {"__all__": {"raw_text"}}}

def get_store() -> SessionStore:
    return SessionStore(settings.SESSION_FILE, key=settings.SESSION_KEY)

def get_upload_dir() -> Path:
    return settings.UPLOAD_DIR

def _check_upload_path(file_path: str, upload_dir: Path) -> None:
    resolved = Path(file_path).resolve()
    if upload_dir.resolve() not in resolved.parents:
        logger.warning(f"Rejected document outside the upload directory: {file_path}")
        raise HTTPException(status_code=400, detail=f"Document must be inside the upload directory: {Path(file_path).name}")

def _require_session(store: SessionStore) -> ComparisonSession:
    session = store.load()
    if session is None:
        raise HTTPException(status_code=404, detail="No comparison in progress. Research specifications first.")
    return session

@app.on_event("startup")
async def startup_event():
    logger.info(f"Comparison server started. Session file: {settings.SESSION_FILE}")

@app.post("/research", response_model=ResearchResponse)
async def research_endpoint(request: ResearchRequest, store: SessionStore = Depends(get_store)):
    logger.info(f"Researching specifications for '{request.product_type}' ({request.use_case})")
    try:
        session = start_session(request.product_type, request.use_case)
    except MalformedCatalogError as e:
        logger.error(f"Catalog error: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=str(e))
    except ValueError as ve:
        raise HTTPException(status_code=400, detail=str(ve))

    store.save(session)
    categories = {
        category: [attribute.id for attribute in attributes]
        for category, attributes in group_by_category(session.catalog).items()
    }
    return ResearchResponse(catalog=session.catalog, categories=categories)

@app.post("/documents", response_model=ProcessDocumentsResponse, response_model_exclude=PRIVATE_PRODUCT_FIELDS)
async def process_documents_endpoint(
    request: ProcessDocumentsRequest,
    store: SessionStore = Depends(get_store),
    upload_dir: Path = Depends(get_upload_dir),
):
    session = _require_session(store)
    if not request.file_paths:
        raise HTTPException(status_code=400, detail="No documents provided")
    for file_path in request.file_paths:
        _check_upload_path(file_path, upload_dir)
    logger.info(f"Analyzing {len(request.file_paths)} documents")

    report = analyze_documents(session, request.file_paths)
    store.save(report.session)

    failed = {failure.path: failure.error for failure in report.failures}
    statuses = []
    for file_path in request.file_paths:
        name = Path(file_path).name
        if file_path in failed:
            statuses.append(DocumentStatus(source_name=name, status="failed", message=failed[file_path]))
        else:
            statuses.append(DocumentStatus(source_name=name, status="processed", message="Extracted data from document."))
    return ProcessDocumentsResponse(documents=statuses, products=report.session.products)

@app.post("/products/manual", response_model=ComparisonSession, response_model_exclude=PRIVATE_PRODUCT_FIELDS)
async def manual_product_endpoint(request: ManualProductRequest, store: SessionStore = Depends(get_store)):
    session = _require_session(store)
    try:
        session = add_manual_product(session, request.brand, request.specifications)
    except ValueError as ve:
        raise HTTPException(status_code=400, detail=str(ve))
    store.save(session)
    return session

@app.get("/session", response_model=ComparisonSession, response_model_exclude=PRIVATE_PRODUCT_FIELDS)
async def session_endpoint(store: SessionStore = Depends(get_store)):
    return _require_session(store)

@app.get("/recommendation", response_model=Recommendation)
async def recommendation_endpoint(store: SessionStore = Depends(get_store)):
    session = _require_session(store)
    try:
        return recommend_for(session)
    except EmptyInputError as e:
        logger.warning(f"Recommendation requested without products: {e}")
        raise HTTPException(status_code=400, detail=str(e))

@app.get("/export")
async def export_endpoint(store: SessionStore = Depends(get_store)):
    session = _require_session(store)
    if not session.products:
        raise HTTPException(status_code=400, detail="No data to export")
    filename = f"{session.product_type}-comparison.csv".replace(" ", "_")
    return PlainTextResponse(
        export_csv(session),
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )

@app.post("/clear", status_code=204)
async def clear_endpoint(store: SessionStore = Depends(get_store)):
    logger.info("Clearing saved comparison session")
    store.clear()
    return None

@app.get("/health", summary="Health Check", tags=["Management"])
async def health_check(store: SessionStore = Depends(get_store)):
    session = store.load()
    return {
        "status": "healthy",
        "session_loaded": session is not None,
        "product_type": session.product_type if session else None,
        "products": len(session.products) if session else 0,
    }

if __name__ == "__main__":
    uvicorn.run(
        "smartcompare.server:app",
        host=settings.SERVER_HOST,
        port=settings.SERVER_PORT,
        reload=True,
        log_level="info"
    )
