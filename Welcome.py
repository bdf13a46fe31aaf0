from __future__ import annotations
import streamlit as st

from racf_core.state.session import init_state
from racf_core.ui.sidebar import get_user_service, render_sidebar

# ============================================================================
# PAGE CONFIGURATION
# ============================================================================
st.set_page_config(
    page_title="RACF Admin",
    page_icon="🛡️",
    layout="wide",
)

init_state()
service = get_user_service()

# Probe once so the badge reflects the current state
service.data_service.connection_manager.check_connection()
render_sidebar(service)

# ============================================================================
# LANDING
# ============================================================================
st.title("RACF Administration")
st.markdown(
    """
Manage RACF user profiles from the **User Management** page.

- When the remote user service is reachable, every change goes straight to it.
- When it is not, the console keeps working against a local store on this machine.
  The first time that store is used it is filled with a few sample users.
- Commands are only **previewed**; nothing is executed on the mainframe.
"""
)

status = service.data_service.get_status()
col1, col2 = st.columns(2)
col1.metric("Backend", "Remote" if status["is_online"] else "Local")
col2.metric("Failed probes in a row", status["failures"])

st.checkbox("Show error details", key="debug_mode")
