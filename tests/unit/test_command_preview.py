# =============================================================================
# tests/unit/test_command_preview.py
# Unit Tests for the ADDUSER preview and credential checks
# =============================================================================

import pytest

from racf_core.errors import UserValidationError
from racf_core.services.command_preview import build_adduser_command, check_credentials


class TestBuildAdduserCommand:

    def test_placeholders_for_blank_form(self):
        assert build_adduser_command() == "ADDUSER <USERID> DFLTGRP(<GROUP>)\n  NAME('<NAME>')"

    def test_password_and_expiration(self):
        command = build_adduser_command(
            "jdoe", "Jane Doe", "staff", auth_option="1", password="Secret1", expiration="2025-12-31",
        )
        assert command == (
            "ADDUSER JDOE DFLTGRP(STAFF)\n"
            "  NAME('Jane Doe') PASSWORD(Secret1) EXPDATE(20251231)"
        )

    def test_both_password_and_phrase(self):
        command = build_adduser_command("jdoe", "Jane", "staff", "3", password="pw", phrase="long phrase")
        assert command.endswith("PASSWORD(pw) PHRASE('long phrase')")

    def test_phrase_only_ignores_password(self):
        command = build_adduser_command("jdoe", "Jane", "staff", "2", password="pw", phrase="long phrase")
        assert "PASSWORD" not in command
        assert "PHRASE('long phrase')" in command

    def test_protected(self):
        command = build_adduser_command("jdoe", "Jane", "staff", "4", password="ignored")
        assert command.endswith("NAME('Jane') PROTECTED")


class TestCheckCredentials:

    def test_empty_values_are_allowed(self):
        check_credentials("JDOE", "STAFF", "3")

    def test_mismatched_passwords(self):
        with pytest.raises(UserValidationError, match="Passwords do not match"):
            check_credentials("JDOE", "STAFF", "1", password="abc", password_confirm="abd")

    def test_password_equal_to_userid(self):
        with pytest.raises(UserValidationError, match="user ID"):
            check_credentials("jdoe", "STAFF", "1", password="JDOE", password_confirm="JDOE")

    def test_password_equal_to_group(self):
        with pytest.raises(UserValidationError, match="default group"):
            check_credentials("JDOE", "staff", "1", password="Staff", password_confirm="Staff")

    def test_mismatched_phrases(self):
        with pytest.raises(UserValidationError, match="phrases do not match"):
            check_credentials("JDOE", "STAFF", "2", phrase="one two", phrase_confirm="one three")

    def test_protected_skips_checks(self):
        check_credentials("JDOE", "STAFF", "4", password="a", password_confirm="b")
