# ui_nav.py

import streamlit as st

from security import clear_view_states


def build_sidebar(user, section_icons, all_pages):
    """
    Draw the sidebar UI and update session state
    (active_section, active_page_label).

    Switching to another view clears every view's state, so the newly
    active view always fetches fresh data.

    Returns a dict:
      {
        "active_section": ...,
        "active_page_label": ...,
        "logout": True/False
      }
    """

    # --- 1. Initialize Session State (Defaults) ---
    if "active_section" not in st.session_state or st.session_state["active_section"] not in all_pages:
        st.session_state["active_section"] = list(all_pages.keys())[0]

    if (
            "active_page_label" not in st.session_state
            or st.session_state["active_page_label"] not in all_pages[st.session_state["active_section"]]
    ):
        st.session_state["active_page_label"] = list(
            all_pages[st.session_state["active_section"]].keys()
        )[0]

    # --- 2. Get Active State ---
    active_section = st.session_state["active_section"]
    active_page_label = st.session_state["active_page_label"]

    with st.sidebar:
        st.write(f"**User:** {user}")

        # --- 3. Navigation ---
        for section_name, pages in all_pages.items():
            icon = section_icons.get(section_name, "📁")
            expanded_default = (section_name == active_section)
            with st.expander(f"{icon} {section_name}", expanded=expanded_default):
                for page_label, page_info in pages.items():
                    is_current = (section_name == active_section and page_label == active_page_label)
                    button_label = f"{page_info.get('icon', '•')} {page_label}"
                    if is_current:
                        button_label = f"✅ {page_label}"
                    clicked = st.button(
                        button_label,
                        key=f"nav::{section_name}::{page_label}",
                        use_container_width=True,
                    )
                    if clicked and not is_current:
                        st.session_state["active_section"] = section_name
                        st.session_state["active_page_label"] = page_label
                        clear_view_states()
                        st.rerun()

        # --- 4. Sidebar Footer ---
        st.markdown("---")
        logout_clicked = st.button("🔐 Log Out", use_container_width=True)

    # --- 5. Return the active STATE ---
    return {
        "active_section": st.session_state["active_section"],
        "active_page_label": st.session_state["active_page_label"],
        "logout": logout_clicked
    }
