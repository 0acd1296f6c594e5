# smartcompare/main.py
import streamlit as st
import httpx
import asyncio
from typing import Dict, List, Optional

from smartcompare.core.config import settings
from smartcompare.core.schemas import (
    NOT_SPECIFIED, ComparisonSession, ProcessDocumentsRequest, ProcessDocumentsResponse,
    Recommendation, ResearchRequest, ResearchResponse, ManualProductRequest
)
from smartcompare.presentation import (
    comparison_attributes, group_by_category, is_best_value, key_features, price_attribute, value_band
)
from smartcompare.recommendation import pick_best
from smartcompare.services.document_parser import DocumentParser
from smartcompare.utils.logger import setup_logger

logger = setup_logger(__name__)

BAND_ICONS = {"best": "🟢", "good": "🟡", "poor": "🔴"}

if 'session_loaded' not in st.session_state:
    st.session_state.session_loaded = False

def _client() -> httpx.AsyncClient:
    return httpx.AsyncClient(base_url=settings.SERVER_URL, timeout=60.0)

def _error_detail(response: httpx.Response) -> str:
    try:
        return response.json().get("detail", response.text)
    except ValueError:
        return response.text

async def research_on_server(product_type: str, use_case: str) -> Optional[ResearchResponse]:
    logger.info(f"Requesting specification framework for '{product_type}' ({use_case})")
    async with _client() as client:
        try:
            payload = ResearchRequest(product_type=product_type, use_case=use_case)
            response = await client.post("/research", json=payload.model_dump())
            response.raise_for_status()
            return ResearchResponse(**response.json())
        except httpx.HTTPStatusError as e_http:
            st.error(f"Research failed: {_error_detail(e_http.response)}")
            logger.error(f"HTTP error during research: {e_http}", exc_info=True)
        except httpx.RequestError as e_req:
            st.error(f"Network error contacting the comparison server: {e_req}")
            logger.error(f"Request error during research: {e_req}", exc_info=True)
    return None

async def process_uploaded_files_on_server(uploaded_files) -> Optional[ProcessDocumentsResponse]:
    file_paths: List[str] = []
    for uploaded_file in uploaded_files:
        saved = DocumentParser.save_upload(settings.UPLOAD_DIR, uploaded_file.name, uploaded_file.getbuffer())
        file_paths.append(str(saved))

    async with _client() as client:
        try:
            payload = ProcessDocumentsRequest(file_paths=file_paths)
            response = await client.post("/documents", json=payload.model_dump(), timeout=180.0)
            response.raise_for_status()
            return ProcessDocumentsResponse(**response.json())
        except httpx.HTTPStatusError as e_http:
            st.error(f"Document analysis failed: {_error_detail(e_http.response)}")
            logger.error(f"HTTP error analyzing documents: {e_http}", exc_info=True)
        except httpx.RequestError as e_req:
            st.error(f"Network error contacting the comparison server: {e_req}")
            logger.error(f"Request error analyzing documents: {e_req}", exc_info=True)
    return None

async def add_manual_product_on_server(brand: str, specifications: Dict[str, str]) -> bool:
    async with _client() as client:
        try:
            payload = ManualProductRequest(brand=brand, specifications=specifications)
            response = await client.post("/products/manual", json=payload.model_dump())
            response.raise_for_status()
            return True
        except httpx.HTTPStatusError as e_http:
            st.error(f"Could not add product: {_error_detail(e_http.response)}")
            logger.error(f"HTTP error adding manual product: {e_http}", exc_info=True)
        except httpx.RequestError as e_req:
            st.error(f"Network error contacting the comparison server: {e_req}")
            logger.error(f"Request error adding manual product: {e_req}", exc_info=True)
    return False

async def fetch_session() -> Optional[ComparisonSession]:
    async with _client() as client:
        try:
            response = await client.get("/session")
            if response.status_code == 404:
                return None
            response.raise_for_status()
            return ComparisonSession(**response.json())
        except httpx.HTTPError as e:
            logger.warning(f"Could not load saved session: {e}")
    return None

async def fetch_recommendation() -> Optional[Recommendation]:
    async with _client() as client:
        try:
            response = await client.get("/recommendation")
            response.raise_for_status()
            return Recommendation(**response.json())
        except httpx.HTTPError as e:
            logger.warning(f"No recommendation available: {e}")
    return None

async def fetch_export() -> Optional[str]:
    async with _client() as client:
        try:
            response = await client.get("/export")
            response.raise_for_status()
            return response.text
        except httpx.HTTPError as e:
            logger.warning(f"Export failed: {e}")
    return None

async def clear_session_on_server():
    async with _client() as client:
        try:
            await client.post("/clear", timeout=10.0)
            st.success("Cleared the saved comparison.")
        except httpx.HTTPError as e:
            st.error(f"Failed to clear the comparison: {e}")
            logger.error(f"Error clearing session: {e}", exc_info=True)

def render_catalog(session: ComparisonSession):
    st.subheader("AI-Generated Specification Framework")
    categories = list(group_by_category(session.catalog).items())
    columns = st.columns(min(len(categories), 3) or 1)
    for i, (category, attributes) in enumerate(categories):
        with columns[i % len(columns)]:
            st.markdown(f"**{category}**")
            for attribute in attributes:
                st.markdown(f"- {attribute.name} `{attribute.importance.value}`")

def render_manual_form(session: ComparisonSession):
    with st.form("manual_product_form", clear_on_submit=True):
        brand = st.text_input("Brand Name")
        values = {}
        grid = st.columns(3)
        for i, attribute in enumerate(session.catalog.attributes):
            with grid[i % 3]:
                values[attribute.id] = st.text_input(attribute.name, key=f"manual_{attribute.id}")
        if st.form_submit_button("➕ Add Product to Comparison"):
            if not brand.strip():
                st.warning("Please enter brand name")
            elif asyncio.run(add_manual_product_on_server(brand, values)):
                st.success(f"{brand} added to comparison!")
                st.rerun()

def render_results(session: ComparisonSession):
    best = pick_best(session.products)
    st.header(f"{session.product_type} Comparison for {session.use_case or 'general use'}")
    st.markdown(f"**Products Compared:** {len(session.products)}  \n"
                f"**AI Recommended:** {best.brand} (Score: {best.score}/100)")

    specs_tab, price_tab, features_tab, ai_tab = st.tabs(
        ["📋 Specifications", "💰 Price & Value", "⭐ Features", "🤖 AI Recommendation"]
    )

    with specs_tab:
        table = {"Specification": [a.name for a in comparison_attributes(session.catalog)]}
        for index, product in enumerate(session.products):
            cells = []
            for attribute in comparison_attributes(session.catalog):
                value = product.specifications.get(attribute.id, NOT_SPECIFIED)
                cells.append(f"{value} ★" if is_best_value(session, product, attribute.id) else value)
            header = f"{product.brand} 🏆" if product is best else product.brand
            table[f"{header} ({index + 1})"] = cells
        st.dataframe(table, use_container_width=True)

    with price_tab:
        price_spec = price_attribute(session.catalog)
        rows = {"Cost Factor": []}
        if price_spec:
            rows["Cost Factor"].append(price_spec.name)
        rows["Cost Factor"].append("AI Value Score")
        for index, product in enumerate(session.products):
            column = []
            if price_spec:
                column.append(product.specifications.get(price_spec.id, NOT_SPECIFIED))
            column.append(f"{BAND_ICONS[value_band(product.score)]} {product.score or 0}/100")
            rows[f"{product.brand} ({index + 1})"] = column
        st.dataframe(rows, use_container_width=True)

    with features_tab:
        cards = st.columns(min(len(session.products), 3))
        for index, product in enumerate(session.products):
            with cards[index % len(cards)]:
                st.markdown(f"#### {product.brand} {'🏆' if product is best else ''}")
                for name, value in key_features(product, session.catalog):
                    st.markdown(f"✓ {name}: {value}")
                st.markdown(f"**AI Score: {product.score}/100**")

    with ai_tab:
        recommendation = asyncio.run(fetch_recommendation())
        if recommendation:
            st.subheader("🏆 AI Recommendation")
            st.markdown(f"**Best Choice:** {recommendation.best_brand}  \n"
                        f"**Score:** {recommendation.best_score}/100  \n"
                        f"**Reasoning:** {recommendation.reasoning}")
            st.subheader("📊 Comparison Insights")
            st.markdown(recommendation.insights)
            st.subheader("💡 Key Considerations")
            st.markdown("\n".join(f"- {c}" for c in recommendation.considerations))
            st.subheader("🎯 Next Steps")
            st.markdown(recommendation.next_steps)

    csv_text = asyncio.run(fetch_export())
    if csv_text:
        st.download_button(
            "⬇️ Export Comparison (CSV)",
            data=csv_text,
            file_name=f"{session.product_type}-comparison.csv",
            mime="text/csv",
        )

def main_ui():
    st.set_page_config(page_title=settings.PROJECT_NAME, layout="wide")
    st.title(settings.PROJECT_NAME)
    st.markdown(settings.DESCRIPTION)

    st.sidebar.header("Controls")
    if st.sidebar.button("Start Over", key="clear_session_button"):
        asyncio.run(clear_session_on_server())
        st.rerun()

    st.header("1. What do you want to compare?")
    with st.form("research_form"):
        product_type = st.text_input("Product", placeholder="e.g., passenger elevator, smartphone")
        use_case = st.text_input("Use case", placeholder="e.g., 10-storey office building")
        submitted = st.form_submit_button("🔍 Research Specifications")
    if submitted:
        if not product_type.strip():
            st.warning("Please enter what product you want to compare")
        else:
            with st.spinner("Starting AI research..."):
                if asyncio.run(research_on_server(product_type, use_case)):
                    st.success("Specification framework generated successfully")

    session = asyncio.run(fetch_session())
    if session is None:
        return
    st.session_state.session_loaded = True
    render_catalog(session)

    st.header("2. Add products")
    uploaded = st.file_uploader(
        "Upload brochures or quotations (PDF or TXT)",
        type=["pdf", "txt"],
        accept_multiple_files=True,
        key="document_uploader"
    )
    if uploaded and st.button("🤖 Analyze Documents"):
        with st.spinner("Starting document analysis..."):
            result = asyncio.run(process_uploaded_files_on_server(uploaded))
        if result:
            for status in result.documents:
                if status.status == "processed":
                    st.success(f"✓ Extracted data from: {status.source_name}")
                else:
                    st.error(f"✗ {status.source_name}: {status.message}")
            session = asyncio.run(fetch_session()) or session

    with st.expander("Add a product manually"):
        render_manual_form(session)

    if session.products:
        render_results(session)

if __name__ == "__main__":
    main_ui()
