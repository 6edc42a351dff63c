"""
common/layout.py

Shared layout helpers for the Acehive admin pages.

Embeds its own CSS inside the st.markdown() call to create a thin,
persistent top bar above every view. No external style.css is needed.
"""

from typing import Optional, Callable
import streamlit as st

from config import APP_NAME


HEADER_CSS = """
<style>
    div.block-container {
        padding-top: 1.8rem !important;
    }

    .acehive-header {
        display: flex;
        justify-content: space-between;
        align-items: center;
        padding: 0.3rem 1.25rem;
        background-color: #212529;
        border-radius: 10px;
        box-shadow: 0 4px 12px rgba(0, 0, 0, 0.1);
        margin-bottom: 1.5rem;
        font-family: 'Poppins', sans-serif;
    }
    .header-left h2 {
        font-size: 1.1rem;
        font-weight: 600;
        margin: 0;
        padding: 0;
        line-height: 1.6;
        color: white;
    }
    .header-right {
        display: flex;
        gap: 1.25rem;
        font-size: 0.8rem;
        color: #eee;
    }
    .meta-item {
        white-space: nowrap;
    }
    .meta-item strong {
        font-weight: 600;
        color: #aaa;
    }
    .coming-soon-badge {
        padding: 0.2rem 0.5rem;
        border-radius: 4px;
        font-size: 0.7rem;
        font-weight: 700;
        background-color: #FFC107;
        color: #333;
    }
</style>
"""


def render_frame(
    title_override: str,
    body_component: Optional[Callable],
    last_updated: str,
    owner: str,
    data_source: str,
    coming_soon: bool = False,
) -> None:
    """Render the top bar for the current view, then the view body."""

    coming_soon_tag = '<span class="coming-soon-badge">⚠ Coming Soon</span>' if coming_soon else ""

    header_html = f"""
<div class="acehive-header">
<div class="header-left">
<h2>{APP_NAME} · {title_override} {coming_soon_tag}</h2>
</div>
<div class="header-right">
<div class="meta-item"><strong>Owner:</strong> {owner}</div>
<div class="meta-item"><strong>Updated:</strong> {last_updated}</div>
<div class="meta-item"><strong>Source:</strong> {data_source}</div>
</div>
</div>
"""

    st.markdown(HEADER_CSS, unsafe_allow_html=True)
    st.markdown(header_html, unsafe_allow_html=True)

    if coming_soon:
        st.info(
            "This view has been reserved in the dashboard, "
            "but it is still being built."
        )
        st.stop()

    elif body_component:
        body_component(role=st.session_state.get("role"))

    else:
        st.error(
            f"**Page Rendering Error:** The page '{title_override}' is not marked "
            "'Coming Soon' but did not provide a valid body component to render."
        )
        st.stop()
