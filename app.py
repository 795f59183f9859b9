"""
AudioRank - Interactive Streamlit Playground

A lightweight UI layer for ranking candidate audio-production texts
against a query. This app wraps the ranking engine with no additional
scoring logic.

Usage:
    streamlit run app.py

Design Principles:
- Thin UI layer: all ranking logic lives in audiorank.core
- Explicit actions: user triggers each ranking manually
- Inspectable: expose per-candidate score details
- No persistence: session resets on reload
"""

import streamlit as st

from audiorank.core.config import get_settings
from audiorank.core.engine import rank_request, validate_request, RequestValidationError
from audiorank.core.logging import configure_logging, get_logger
from audiorank.core.models import (
    ContentDescriptor,
    ContentType,
    EmbeddingModel,
    RankingRequest,
    SimilarityMethod,
)
from audiorank.core.similarity import SimilarityError
from audiorank.core.synthesizer import SynthesisError

logger = get_logger(__name__)


# =============================================================================
# Session State Initialization
# =============================================================================

def init_session_state():
    """
    Initialize session state variables.

    Session state tracks:
    - ranking_result: Output of the last ranking
    - candidate_texts: Candidates as split at ranking time
    - status_message: Current status for user feedback
    - error_message: Current error message (if any)
    """
    defaults = {
        "ranking_result": None,
        "candidate_texts": [],
        "status_message": "",
        "error_message": "",
    }
    for key, value in defaults.items():
        if key not in st.session_state:
            st.session_state[key] = value


def split_candidates(raw: str) -> list:
    """Split pasted candidates on blank lines, dropping empty blocks."""
    blocks = [block.strip() for block in raw.replace("\r\n", "\n").split("\n\n")]
    return [block for block in blocks if block]


# =============================================================================
# Backend Integration
# =============================================================================

def run_ranking(query: str, candidates: list, options: dict) -> bool:
    """
    Build a RankingRequest, validate it and rank it.

    Updates session state with results. Returns True on success,
    False on error.
    """
    st.session_state.error_message = ""
    content_type = options["content_type"]
    model = options["model"]

    request = RankingRequest(
        query=ContentDescriptor(query, content_type, model),
        candidates=[ContentDescriptor(text, content_type, model) for text in candidates],
        method=options["method"],
        max_results=options["max_results"],
        threshold=options["threshold"],
        include_details=True,
        weights=options["weights"],
    )

    try:
        validate_request(request)
        result = rank_request(request)
    except (RequestValidationError, SynthesisError, SimilarityError) as e:
        logger.warning("playground_ranking_failed", error=str(e))
        st.session_state.error_message = f"Ranking failed: {e}"
        st.session_state.ranking_result = None
        return False

    st.session_state.ranking_result = result
    st.session_state.candidate_texts = candidates
    st.session_state.status_message = (
        f"Ranked {result.total_candidates} candidates in "
        f"{result.processing_time_ms:.1f} ms using {result.method.value}."
    )
    return True


# =============================================================================
# UI Components
# =============================================================================

def render_header():
    """Render the app header."""
    settings = get_settings()
    st.title("AudioRank")
    st.caption("Rank session notes, plugin descriptions and feedback by similarity")
    st.caption(f"Vector dimensions: {settings.dimensions} | Normalized: {settings.normalize}")


def render_input_section():
    """
    Render the query and candidate text areas.

    Returns tuple of (query, candidates).
    """
    st.subheader("Inputs")

    query = st.text_area(
        "Query",
        placeholder="e.g., “vocal tracking with a tube preamp”",
        height=100,
        key="query_input",
    )

    raw_candidates = st.text_area(
        "Candidates (separate with a blank line)",
        placeholder="Paste one candidate per paragraph...",
        height=250,
        key="candidates_input",
    )
    candidates = split_candidates(raw_candidates or "")
    if candidates:
        st.caption(f"{len(candidates)} candidates")

    return query, candidates


def render_options():
    """Render ranking options and return them as a dict."""
    settings = get_settings()
    models = list(EmbeddingModel)

    st.subheader("Options")
    col1, col2, col3 = st.columns(3)

    with col1:
        content_type = st.selectbox(
            "Content type",
            options=list(ContentType),
            format_func=lambda ct: ct.value.replace("_", " ").title(),
        )
        model = st.selectbox(
            "Model",
            options=models,
            index=models.index(settings.default_model),
            format_func=lambda m: m.value,
        )

    with col2:
        method = st.selectbox(
            "Method",
            options=list(SimilarityMethod),
            format_func=lambda m: m.value.title(),
        )
        max_results = st.slider("Max results", min_value=1, max_value=100, value=10)

    with col3:
        threshold = st.slider(
            "Threshold",
            min_value=0.0,
            max_value=1.0,
            value=0.0,
            step=0.05,
        )

    weights = None
    if method is SimilarityMethod.WEIGHTED:
        with st.expander("Band weights", expanded=True):
            weights = {
                band: st.number_input(band.title(), min_value=0.0, value=1.0, step=0.1)
                for band in ("technical", "semantic", "context")
            }

    return {
        "content_type": content_type,
        "model": model,
        "method": method,
        "max_results": max_results,
        "threshold": threshold,
        "weights": weights,
    }


def render_action_button(query: str, candidates: list, options: dict):
    """Render the Rank button and status messages."""
    col1, col2 = st.columns([1, 2])

    with col1:
        can_rank = bool(query and query.strip()) and bool(candidates)
        if not can_rank:
            st.caption("Enter a query and at least one candidate")

        if st.button("Rank", disabled=not can_rank, type="primary", use_container_width=True):
            with st.spinner("Ranking..."):
                if run_ranking(query, candidates, options):
                    st.rerun()

    with col2:
        if st.session_state.error_message:
            st.error(st.session_state.error_message)
        elif st.session_state.status_message:
            st.success(st.session_state.status_message)


def get_similarity_color(label: str) -> str:
    """Get a color indicator for an interpretation label."""
    return {
        "Strong": "🟢",
        "Moderate": "🟡",
        "Weak": "🟠",
    }.get(label, "🔴")


def render_results():
    """Render the ranked results table."""
    result = st.session_state.ranking_result
    if not result:
        return

    st.divider()
    st.subheader("Results")

    col1, col2, col3 = st.columns(3)
    col1.metric("Returned", len(result.results))
    col2.metric("Passed threshold", result.processed_candidates)
    col3.metric("Avg similarity", f"{result.average_similarity:.3f}")

    if not result.results:
        st.info("No candidates passed the threshold.")
        return

    texts = st.session_state.candidate_texts
    rows = [
        {
            "Rank": r.rank,
            "Candidate": r.candidate_index + 1,
            "Score": round(r.score, 4),
            "Confidence": round(r.confidence, 2),
            "Interpretation": f"{get_similarity_color(r.interpretation)} {r.interpretation}",
            "Text": texts[r.candidate_index][:80],
        }
        for r in result.results
    ]
    st.dataframe(rows, use_container_width=True, hide_index=True)

    with st.expander("Score details"):
        for r in result.results:
            if r.details is None:
                continue
            st.write(f"**#{r.rank}** candidate {r.candidate_index + 1}: {r.details.analysis_text}")
            summary = r.details.feature_summary()
            if summary:
                st.caption(summary)
            if r.details.feature_weights:
                st.caption(f"Weights: {r.details.feature_weights}")


# =============================================================================
# Main App
# =============================================================================

def main():
    """Main application entry point."""
    settings = get_settings()
    configure_logging(settings.log_level, settings.log_format)

    st.set_page_config(
        page_title="AudioRank",
        page_icon="🎚️",
        layout="wide",
    )

    init_session_state()
    render_header()

    query, candidates = render_input_section()
    options = render_options()
    render_action_button(query, candidates, options)
    render_results()

    st.divider()
    st.caption("AudioRank v0.1.0 | Deterministic local ranking")


if __name__ == "__main__":
    main()
