import streamlit as st

# Central registry for session-state keys used across the app.
SESSION_DEFAULTS = {
    "editing_user_id": None,
    "flash_message": None,
    "debug_mode": False,
}


def init_state():
    """Initialize session state with defaults."""
    for k, v in SESSION_DEFAULTS.items():
        if k not in st.session_state:
            st.session_state[k] = v


def flash(message: str) -> None:
    """Queue a success message to show after the next rerun."""
    st.session_state["flash_message"] = message


def pop_flash():
    """Return and clear the queued message."""
    message = st.session_state.get("flash_message")
    st.session_state["flash_message"] = None
    return message
