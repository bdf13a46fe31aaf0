# =============================================================================
# 01_User_Management.py - RACF user list, create/edit dialog, bulk delete
# =============================================================================
"""
User Management

Tab Structure:
1. User Selection - narrow the list by user ID prefix or name
2. User Management - table of users, add / edit / delete

The add/edit panel shows the ADDUSER command preview. Passwords and phrases
typed there feed the preview only and are never saved.
"""
from __future__ import annotations
import streamlit as st

from racf_core.errors import ErrorContext, UserValidationError
from racf_core.models.user import AUTH_OPTIONS, DEFAULT_AUTH_OPTION
from racf_core.services import AUTH_OPTION_LABELS, build_adduser_command, check_credentials
from racf_core.state.session import flash, init_state, pop_flash
from racf_core.ui.sidebar import get_user_service, render_sidebar

st.set_page_config(
    page_title="User - RACF Admin",
    page_icon="👤",
    layout="wide",
)

init_state()
service = get_user_service()

FORM_FIELDS = {
    "form_userid": "",
    "form_name": "",
    "form_group": "",
    "form_expiration": "",
    "form_auth_option": DEFAULT_AUTH_OPTION,
    "form_password": "",
    "form_password_confirm": "",
    "form_phrase": "",
    "form_phrase_confirm": "",
}


def _reset_form() -> None:
    for key, value in FORM_FIELDS.items():
        st.session_state[key] = value
    st.session_state["editing_user_id"] = None


def _start_edit(user) -> None:
    _reset_form()
    st.session_state["editing_user_id"] = user.id
    st.session_state["form_userid"] = user.userid
    st.session_state["form_name"] = user.name
    st.session_state["form_group"] = user.default_group
    st.session_state["form_expiration"] = user.expiration or ""
    st.session_state["form_auth_option"] = user.auth_option or DEFAULT_AUTH_OPTION


for key, value in FORM_FIELDS.items():
    st.session_state.setdefault(key, value)

# Widgets cannot be reset after they render, so a save resets on the next run
if st.session_state.pop("_form_reset_pending", False):
    _reset_form()

# ============================================================================
# LOAD USERS
# ============================================================================
result = service.list_users()
users = result.data if result.success else []

render_sidebar(service)

st.caption("RACF › User")
message = pop_flash()
if message:
    st.success(message)
if not result.success:
    st.error(result.error or "Failed to load users.")

selection_tab, management_tab = st.tabs(["User Selection", "User Management"])

with selection_tab:
    col1, col2 = st.columns(2)
    userid_prefix = col1.text_input("User ID", placeholder="e.g. ADM", key="filter_userid").strip().upper()
    name_filter = col2.text_input("Name contains", placeholder="e.g. Finance", key="filter_name").strip().lower()
    st.caption("Filters apply to the User Management tab.")

visible = [
    user for user in users
    if user.userid.startswith(userid_prefix) and name_filter in user.name.lower()
]

with management_tab:
    st.subheader("User Management")

    if not visible:
        st.info("No users found. Create a user to get started.")
        selected = []
    else:
        event = st.dataframe(
            service.users_frame(visible),
            hide_index=True,
            use_container_width=True,
            on_select="rerun",
            selection_mode="multi-row",
            key="user_table",
        )
        selected = [visible[row] for row in event.selection.rows]

    col_add, col_edit, col_delete = st.columns(3)
    col_add.button("Add User", on_click=_reset_form, use_container_width=True)
    col_edit.button(
        "Edit",
        disabled=len(selected) != 1,
        on_click=_start_edit,
        args=(selected[0],) if len(selected) == 1 else (),
        use_container_width=True,
    )
    if col_delete.button(
        "Delete",
        disabled=not selected,
        use_container_width=True,
    ):
        delete_result = service.delete_users([user.id for user in selected])
        if delete_result.success:
            count = delete_result.data
            flash("User deleted successfully" if count == 1 else f"{count} users deleted successfully")
            st.rerun()
        else:
            st.error(delete_result.error)
            for record_id, reason in delete_result.metadata["failed"].items():
                st.caption(f"{record_id}: {reason}")

# ============================================================================
# ADD / EDIT PANEL
# ============================================================================
editing_id = st.session_state["editing_user_id"]
editing_user = next((user for user in users if user.id == editing_id), None)

st.divider()
st.subheader("Edit User" if editing_user else "Add User")

general_tab, password_tab, review_tab = st.tabs(["General", "Password", "Review"])

with general_tab:
    st.text_input("User ID *", max_chars=8, key="form_userid")
    st.text_input("Name *", key="form_name")
    st.text_input("Default Group *", key="form_group")
    st.text_input("Expiration (YYYY-MM-DD)", key="form_expiration")

with password_tab:
    auth_option = st.radio(
        "Authentication",
        AUTH_OPTIONS,
        format_func=AUTH_OPTION_LABELS.get,
        key="form_auth_option",
    )
    if auth_option in ("1", "3"):
        st.text_input("Initial Password", type="password", key="form_password")
        st.text_input("Confirm Password", type="password", key="form_password_confirm")
        st.caption("Password cannot equal user ID or default group")
    if auth_option in ("2", "3"):
        st.text_input("Password Phrase", type="password", key="form_phrase")
        st.text_input("Confirm Password Phrase", type="password", key="form_phrase_confirm")
    if auth_option != "4":
        st.caption("Leave empty to require user to set password on first login")

with review_tab:
    st.markdown("**RACF Command Preview:**")
    st.code(
        build_adduser_command(
            userid=st.session_state["form_userid"],
            name=st.session_state["form_name"],
            default_group=st.session_state["form_group"],
            auth_option=auth_option,
            password=st.session_state["form_password"],
            phrase=st.session_state["form_phrase"],
            expiration=st.session_state["form_expiration"].strip(),
        ),
        language=None,
    )
    st.caption("Review the command that will be executed. Click Create to submit.")

col_submit, col_cancel = st.columns(2)
col_cancel.button("Cancel", on_click=_reset_form, use_container_width=True)

if col_submit.button("Save Changes" if editing_user else "Create User", type="primary", use_container_width=True):
    userid = st.session_state["form_userid"]
    name = st.session_state["form_name"]
    group = st.session_state["form_group"]
    expiration = st.session_state["form_expiration"].strip()

    if not userid.strip() or not name.strip() or not group.strip():
        st.error("Please fill in all required fields")
        st.stop()

    try:
        check_credentials(
            userid,
            group,
            auth_option,
            password=st.session_state["form_password"],
            password_confirm=st.session_state["form_password_confirm"],
            phrase=st.session_state["form_phrase"],
            phrase_confirm=st.session_state["form_phrase_confirm"],
        )
    except UserValidationError as e:
        st.error(e.message)
        st.stop()

    payload = {
        "userid": userid,
        "name": name,
        "defaultGroup": group,
        "authOption": auth_option,
    }

    with ErrorContext(f"Saving user {userid.strip().upper()}") as ctx:
        if editing_user:
            if expiration:
                payload["expiration"] = expiration
            service.data_service.update_user(editing_user.id, payload)
            flash("User updated successfully")
        else:
            payload["expiration"] = expiration or None
            service.data_service.create_user(payload)
            flash("User created successfully")

    if not ctx.failed:
        st.session_state["_form_reset_pending"] = True
        st.rerun()
