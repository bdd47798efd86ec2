"""
Password gate for the application window.

A shared password from configuration unlocks the UI for the lifetime of the
process. This is a convenience gate only, not access control: the password
ships with the client configuration.
"""

import hmac
import logging


class IncorrectPasswordError(Exception):
    """The entered password does not match."""


class PasswordGate:
    """Session-scoped authentication flag guarded by a shared password."""

    def __init__(self, expected_password: str):
        self._expected = expected_password or ""
        self._authenticated = False

    @property
    def is_authenticated(self) -> bool:
        return self._authenticated

    def authenticate(self, password: str) -> None:
        """
        Unlock the session.

        Raises:
            IncorrectPasswordError: blank or wrong password
        """
        password = password or ""
        if not password.strip() or not self._expected:
            self._authenticated = False
            raise IncorrectPasswordError("Incorrect password. Please try again.")

        if not hmac.compare_digest(password.encode("utf-8"), self._expected.encode("utf-8")):
            self._authenticated = False
            logging.warning("Rejected incorrect application password")
            raise IncorrectPasswordError("Incorrect password. Please try again.")

        self._authenticated = True
        logging.info("Application unlocked")

    def logout(self) -> None:
        self._authenticated = False
        logging.info("Application locked")
