# =============================================================================
# racf_core/ui/sidebar.py - Sidebar brand and connection badge
# =============================================================================
"""
Call these right after st.set_page_config() on every page.
"""
from __future__ import annotations
import streamlit as st

from racf_core.logging import setup_logging
from racf_core.services import UserManagementService


@st.cache_resource
def get_user_service() -> UserManagementService:
    """One service (and one local store) per Streamlit process."""
    setup_logging()
    return UserManagementService()


def render_sidebar(service: UserManagementService) -> None:
    """Brand plus the result of the latest health probe."""
    status = service.data_service.get_status()

    with st.sidebar:
        st.markdown("### RACF Admin")
        if status["is_online"]:
            st.success("Remote user service: online")
        elif not status["remote_configured"]:
            st.info("Local mode: no remote user service configured")
        else:
            st.warning("Remote user service unreachable: changes are kept locally")
            if status["error"] and st.session_state.get("debug_mode", False):
                st.caption(status["error"])
        if status["last_check"]:
            st.caption(f"Last check: {status['last_check']}")
