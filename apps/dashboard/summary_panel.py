"""
apps/dashboard/summary_panel.py

The "Home" view: how many resources have been added so far.

Shows four cards (Total, CT Papers, Sem Papers, Study Material). Counts are
fetched when the view becomes active and again whenever the refresh button
is pressed. The button is disabled while counts are loading.
"""

from datetime import datetime

import streamlit as st

from common.view_state import SummaryState
from security import get_view_state


def render_count_card(container, label, value, color, loading):
    """One bordered card with a coloured accent strip along the bottom."""
    with container:
        with st.container(border=True):
            st.markdown(f"<h5 style='text-align:center;font-weight:bold;'>{label}</h5>", unsafe_allow_html=True)
            if loading:
                st.markdown("<p style='text-align:center;font-size:2rem;'>⏳</p>", unsafe_allow_html=True)
            else:
                st.markdown(
                    f"<p style='text-align:center;font-size:2rem;font-weight:bold;'>{value}</p>",
                    unsafe_allow_html=True,
                )
            st.markdown(f"<div style='background-color:{color};height:4px;'></div>", unsafe_allow_html=True)


class Page:
    def __init__(self, role: str, backend):
        self.role = role
        self.backend = backend
        self.state = get_view_state("summary", SummaryState)

        self.meta = {
            "title_override": "Resources Added So Far",
            "owner": "Acehive Admins",
            "last_updated": datetime.now().strftime("%Y-%m-%d %H:%M"),
            "data_source": f"Supabase · {self.state.table}",
            "coming_soon": False,
        }

    def render_body(self, role: str) -> None:
        c_title, c_refresh = st.columns([6, 1])
        c_title.subheader("Resources Added So Far")
        c_refresh.button(
            "🔄 Refresh",
            key="summary_refresh",
            on_click=self.state.request_refresh,
            disabled=self.state.loading,
            use_container_width=True,
        )

        columns = st.columns(len(self.state.cards))
        for column, card in zip(columns, self.state.cards):
            render_count_card(
                column,
                card["label"],
                self.state.counts.get(card["key"], 0),
                card["color"],
                self.state.loading,
            )

        if self.state.load_if_needed(self.backend):
            # Counts (or a logged failure) are in: redraw with the button enabled
            st.rerun()

        st.markdown("---")


# -----------------------------------------------------------------------------
# META HEADER DETAILS BACK TO MAIN
# -----------------------------------------------------------------------------

def render_page(role: str, backend) -> (callable, dict):
    """
    This is the public function that main_app.py interacts with.
    """
    page = Page(role=role, backend=backend)
    return page.render_body, page.meta
