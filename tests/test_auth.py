"""
Tests for image_updater_modules/auth.py
"""

import pytest
import sys
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from image_updater_modules.auth import PasswordGate, IncorrectPasswordError


class TestPasswordGate:
    """Tests for PasswordGate."""

    def test_starts_locked(self):
        assert PasswordGate("letmein").is_authenticated is False

    def test_correct_password(self):
        gate = PasswordGate("letmein")
        gate.authenticate("letmein")
        assert gate.is_authenticated is True

    @pytest.mark.parametrize("password", ["wrong", "", "   ", None, "LETMEIN"])
    def test_rejected_passwords(self, password):
        gate = PasswordGate("letmein")
        with pytest.raises(IncorrectPasswordError, match="Incorrect password"):
            gate.authenticate(password)
        assert gate.is_authenticated is False

    def test_failed_attempt_locks_again(self):
        gate = PasswordGate("letmein")
        gate.authenticate("letmein")
        with pytest.raises(IncorrectPasswordError):
            gate.authenticate("nope")
        assert gate.is_authenticated is False

    def test_empty_expected_password_never_unlocks(self):
        gate = PasswordGate("")
        with pytest.raises(IncorrectPasswordError):
            gate.authenticate("anything")

    def test_logout(self):
        gate = PasswordGate("letmein")
        gate.authenticate("letmein")
        gate.logout()
        assert gate.is_authenticated is False
