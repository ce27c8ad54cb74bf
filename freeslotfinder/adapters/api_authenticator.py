"""
Calendar API authentication (email/password login returning a JWT).
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import keyring
import requests
from keyring.errors import KeyringError, PasswordDeleteError

from ..domain.exceptions import AuthenticationError

logger = logging.getLogger(__name__)


KEYRING_SERVICE_NAME = "freeslotfinder"


class ApiAuthenticator:
    """
    Handles authentication with the calendar API.

    Flow:
    1. POST email and password to ``/auth/login``
    2. The API answers with ``{"success", "message", "token", "user"}``
    3. The token is cached in the OS keyring (plaintext file as fallback)
    4. Later calls reuse the cached token until ``force_refresh``
    """

    def __init__(
        self,
        base_url: str,
        email: str,
        cache_file: Path | None = None,
        timeout: int = 30,
    ):
        """
        Initialize the authenticator.

        Args:
            base_url: API root, e.g. ``http://localhost:5000/api/v1``
            email: Account to log in with
            cache_file: Optional path to the fallback token cache file
            timeout: Request timeout in seconds
        """
        self.base_url = base_url.rstrip("/")
        self.email = email
        self.timeout = timeout

        self.cache_file = cache_file or Path.home() / ".freeslotfinder_token"
        self._key_identifier = f"{self.base_url}:{self.email.lower()}"
        self._keyring_supported = True
        self._cache_backend = "keyring"
        self._insecure_storage_warning: Optional[str] = None

    @property
    def cache_backend(self) -> str:
        """Return the active cache backend (keyring or file)."""
        return self._cache_backend

    @property
    def insecure_storage_warning(self) -> Optional[str]:
        """Provide a warning message when the cache falls back to plaintext storage."""
        return self._insecure_storage_warning

    def get_access_token(self, password: str | None = None, force_refresh: bool = False) -> str:
        """
        Get a valid access token, using cache or logging in.

        Args:
            password: Account password, only needed when no token is cached
            force_refresh: Log in even if a cached token exists

        Returns:
            Access token string

        Raises:
            AuthenticationError: If no token is cached and login fails or
                no password was given
        """
        if not force_refresh:
            cached = self._load_token()
            if cached:
                return cached

        if not password:
            raise AuthenticationError(
                f"No cached token for {self.email}; a password is required to log in."
            )

        token = self._login(password)
        self._save_token(token)
        return token

    def _login(self, password: str) -> str:
        url = f"{self.base_url}/auth/login"

        try:
            response = requests.post(
                url,
                json={"email": self.email, "password": password},
                timeout=self.timeout,
            )
            data = response.json()
        except requests.exceptions.RequestException as exc:
            raise AuthenticationError(f"Login request to {url} failed: {exc}") from exc
        except ValueError as exc:
            raise AuthenticationError(f"Invalid login response from {url}: {exc}") from exc

        if not isinstance(data, dict) or not data.get("success") or not data.get("token"):
            message = data.get("message") if isinstance(data, dict) else None
            raise AuthenticationError(f"Authentication failed: {message or 'Unknown error'}")

        logger.info("Logged in to %s as %s", self.base_url, self.email)
        return data["token"]

    def _load_token(self) -> Optional[str]:
        token = self._load_token_from_keyring()
        if token is None:
            token = self._load_token_from_file()
        return token or None

    def _load_token_from_keyring(self) -> Optional[str]:
        if not self._keyring_supported:
            return None

        try:
            return keyring.get_password(KEYRING_SERVICE_NAME, self._key_identifier)
        except KeyringError as exc:
            self._handle_keyring_failure(f"reading credentials failed: {exc}")
            return None

    def _load_token_from_file(self) -> Optional[str]:
        if self.cache_file.exists():
            try:
                with open(self.cache_file, "r", encoding="utf-8") as file_handle:
                    return file_handle.read().strip()
            except OSError as exc:
                logger.warning("Could not load token cache file %s: %s", self.cache_file, exc)
        return None

    def _save_token(self, token: str) -> None:
        """Save the token to the configured backend."""
        if self._keyring_supported and self._save_token_to_keyring(token):
            return

        self._save_token_to_file(token)

    def _save_token_to_keyring(self, token: str) -> bool:
        try:
            keyring.set_password(KEYRING_SERVICE_NAME, self._key_identifier, token)
            self._cache_backend = "keyring"
            return True
        except KeyringError as exc:
            self._handle_keyring_failure(f"writing credentials failed: {exc}")
            return False

    def _save_token_to_file(self, token: str) -> None:
        try:
            self.cache_file.parent.mkdir(parents=True, exist_ok=True)
            with open(self.cache_file, "w", encoding="utf-8") as file_handle:
                file_handle.write(token)
            self.cache_file.chmod(0o600)
        except OSError as exc:
            logger.warning("Could not save token cache to %s: %s", self.cache_file, exc)

    def _handle_keyring_failure(self, reason: str) -> None:
        if self._keyring_supported:
            logger.warning(
                "Secure credential storage unavailable (%s). Falling back to plaintext cache.",
                reason,
            )
        self._keyring_supported = False
        self._cache_backend = "file"
        if not self._insecure_storage_warning:
            self._insecure_storage_warning = (
                f"Secure credential storage unavailable ({reason}). "
                f"Falling back to plaintext cache at {self.cache_file}."
            )

    def clear_cache(self) -> None:
        """Clear the cached token (force a fresh login next time)."""
        if self.cache_file.exists():
            self.cache_file.unlink()
        try:
            keyring.delete_password(KEYRING_SERVICE_NAME, self._key_identifier)
        except PasswordDeleteError:
            logger.debug("No keyring entry for %s", self._key_identifier)
        except KeyringError as exc:
            logger.warning("Could not remove credentials from keyring: %s", exc)
