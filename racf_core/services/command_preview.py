# =============================================================================
# racf_core/services/command_preview.py
# RACF command preview and credential checks for the user dialog
# =============================================================================
"""
Builds the ADDUSER command shown on the review tab. The command is only
displayed; nothing is executed and no password or phrase is stored.

Authentication options:
    1  Password only
    2  Password phrase only
    3  Both password and phrase
    4  PROTECTED (no password)
"""

from __future__ import annotations
from typing import Optional

from racf_core.errors import UserValidationError


AUTH_OPTION_LABELS = {
    "1": "Option 1: Password only",
    "2": "Option 2: Password phrase only",
    "3": "Option 3: Both password and phrase",
    "4": "Option 4: Create as PROTECTED (no password)",
}

PASSWORD_OPTIONS = ("1", "3")
PHRASE_OPTIONS = ("2", "3")
PROTECTED_OPTION = "4"


def build_adduser_command(
    userid: str = "",
    name: str = "",
    default_group: str = "",
    auth_option: str = "1",
    password: Optional[str] = None,
    phrase: Optional[str] = None,
    expiration: Optional[str] = None,
) -> str:
    """
    Render the ADDUSER command for the current form values.

    Blank required values show as <USERID>, <GROUP> and <NAME>. An
    expiration date "2025-12-31" becomes EXPDATE(20251231).
    """
    command = (
        f"ADDUSER {userid.strip().upper() or '<USERID>'} "
        f"DFLTGRP({default_group.strip().upper() or '<GROUP>'})\n"
        f"  NAME('{name.strip() or '<NAME>'}')"
    )

    if auth_option == PROTECTED_OPTION:
        command += " PROTECTED"
    elif password and auth_option in PASSWORD_OPTIONS:
        command += f" PASSWORD({password})"

    if phrase and auth_option in PHRASE_OPTIONS:
        command += f" PHRASE('{phrase}')"

    if expiration:
        command += f" EXPDATE({expiration.replace('-', '')})"

    return command


def check_credentials(
    userid: str,
    default_group: str,
    auth_option: str,
    password: str = "",
    password_confirm: str = "",
    phrase: str = "",
    phrase_confirm: str = "",
) -> None:
    """
    Form checks for the password and phrase fields. Empty values are allowed
    (the user sets one at first logon); PROTECTED users skip the checks.

    Raises:
        UserValidationError: on the first failed check
    """
    if auth_option == PROTECTED_OPTION:
        return

    if auth_option in PASSWORD_OPTIONS and password:
        if password != password_confirm:
            raise UserValidationError("Passwords do not match", field="password")
        if password.upper() == userid.strip().upper():
            raise UserValidationError("Password cannot equal the user ID", field="password")
        if password.upper() == default_group.strip().upper():
            raise UserValidationError("Password cannot equal the default group", field="password")

    if auth_option in PHRASE_OPTIONS and phrase:
        if phrase != phrase_confirm:
            raise UserValidationError("Password phrases do not match", field="passwordPhrase")
