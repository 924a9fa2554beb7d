"""GitHub token persistence in the global Comistory config file."""

import json
import os
from pathlib import Path
from typing import Any, Dict, List, Optional

import httpx
from loguru import logger
from pydantic import BaseModel, Field

from comistory.config import GITHUB_API_URL, TOKEN_ENV_VAR, config_dir

TOKEN_KEY = "githubToken"
REQUEST_TIMEOUT = httpx.Timeout(30.0, connect=10.0)


class TokenStatus(BaseModel):
    """What is known about the configured token, safe to print."""

    is_configured: bool
    masked_token: Optional[str] = None
    username: Optional[str] = None
    scopes: Optional[List[str]] = None


class TokenDetails(BaseModel):
    valid: bool
    username: Optional[str] = None
    scopes: List[str] = Field(default_factory=list)


class TokenStore:
    """Reads, validates and writes the GitHub token in `config.json`."""

    def __init__(self, directory: Optional[Path] = None, client: Optional[httpx.Client] = None):
        self.directory = Path(directory) if directory else config_dir()
        self.config_file = self.directory / "config.json"
        # Injected clients belong to the caller and are left open
        self.client = client

    def _read_config(self) -> Dict[str, Any]:
        if not self.config_file.exists():
            return {}
        return json.loads(self.config_file.read_text(encoding="utf-8"))

    def _write_config(self, config: Dict[str, Any]) -> None:
        self.config_file.write_text(json.dumps(config, indent=2), encoding="utf-8")

    def _get_user(self, token: str) -> httpx.Response:
        url = f"{GITHUB_API_URL}/user"
        headers = {"Authorization": f"Bearer {token}"}
        if self.client is not None:
            return self.client.get(url, headers=headers)
        with httpx.Client(timeout=REQUEST_TIMEOUT) as client:
            return client.get(url, headers=headers)

    def get_token(self) -> Optional[str]:
        """Return the token from the environment, else from the config file."""
        env_token = os.getenv(TOKEN_ENV_VAR)
        if env_token:
            return env_token

        try:
            return self._read_config().get(TOKEN_KEY)
        except (OSError, ValueError, AttributeError) as e:
            logger.error(f"Error reading configuration: {e}")
            return None

    def validate_token(self, token: str) -> bool:
        """Check the token against the GitHub user endpoint."""
        try:
            response = self._get_user(token)
        except httpx.HTTPError as e:
            logger.error(f"Token validation failed: {e}")
            return False

        if response.status_code == 200:
            return True

        if response.status_code == 401:
            logger.error("Token validation failed: Invalid authentication")
        elif response.status_code == 403:
            logger.error("Token validation failed: Rate limit exceeded or insufficient permissions")
        else:
            logger.error(f"Token validation failed: HTTP {response.status_code}")
        return False

    def fetch_token_details(self, token: str) -> TokenDetails:
        """Look up the login and OAuth scopes of a token.

        Raises:
            httpx.HTTPError: On transport errors or any failure other than 401.
        """
        response = self._get_user(token)
        if response.status_code == 401:
            return TokenDetails(valid=False)
        response.raise_for_status()

        scopes = [scope.strip() for scope in response.headers.get("x-oauth-scopes", "").split(",") if scope.strip()]
        return TokenDetails(valid=True, username=response.json().get("login"), scopes=scopes)

    def save_token(self, token: str) -> bool:
        if not token or not token.strip():
            logger.error("Token is required")
            return False

        try:
            if not self.directory.exists():
                self.directory.mkdir(parents=True, exist_ok=True)
                logger.debug(f"Created configuration directory: {self.directory}")
        except OSError as e:
            logger.error(f"Failed to create config directory: {e}")
            return False

        logger.info("Validating GitHub token...")
        if not self.validate_token(token):
            logger.error("Token validation failed, token not saved")
            return False

        try:
            config = self._read_config()
            config[TOKEN_KEY] = token
            self._write_config(config)
        except (OSError, ValueError) as e:
            logger.error(f"Failed to save token: {e}")
            return False

        logger.info("GitHub token saved successfully")

        try:
            details = self.fetch_token_details(token)
        except httpx.HTTPError as e:
            logger.debug(f"Could not look up token owner: {e}")
        else:
            if details.username:
                logger.info(f"Token verified for user: {details.username}")

        return True

    def remove_token(self) -> bool:
        if not self.config_file.exists():
            logger.info("No configuration file exists - nothing to remove")
            return True

        try:
            config = self._read_config()
            if not config.get(TOKEN_KEY):
                logger.info("No GitHub token configured, nothing to remove")
                return True

            del config[TOKEN_KEY]
            self._write_config(config)
        except (OSError, ValueError) as e:
            logger.error(f"Failed to remove token: {e}")
            return False

        logger.info("GitHub token removed successfully")
        return True

    def get_token_status(self) -> TokenStatus:
        token = self.get_token()
        if not token:
            return TokenStatus(is_configured=False)

        masked_token = token[:6] + "******"

        try:
            details = self.fetch_token_details(token)
        except httpx.HTTPError as e:
            logger.error(f"Failed to get token details: {e}")
            return TokenStatus(is_configured=True, masked_token=masked_token)

        return TokenStatus(
            is_configured=True,
            masked_token=masked_token,
            username=details.username,
            scopes=details.scopes,
        )
