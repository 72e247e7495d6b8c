"""HTTP transport for the back-office API.

Responses are mapped onto the console error taxonomy here so that nothing
above this layer ever sees a `requests` exception or a raw status code.
"""

from __future__ import annotations

from typing import Any

from loguru import logger
import requests

from core.errors import GENERIC_SERVER_MESSAGE, ServerError, SessionExpired

DUPLICATE_PHONE_MESSAGE = "Ce numéro de téléphone est déjà utilisé par un autre utilisateur."
DUPLICATE_EMAIL_MESSAGE = "Cette adresse email est déjà utilisée par un autre utilisateur."
DUPLICATE_OTHER_MESSAGE = "Une entrée avec ces informations existe déjà (doublon)."
NETWORK_ERROR_MESSAGE = "Impossible de joindre le serveur. Vérifiez votre connexion."


def translate_server_message(message: str) -> str:
    """Replace MongoDB duplicate-key errors with an operator-readable sentence."""
    if "E11000" not in message:
        return message
    if "phone" in message:
        return DUPLICATE_PHONE_MESSAGE
    if "email" in message:
        return DUPLICATE_EMAIL_MESSAGE
    return DUPLICATE_OTHER_MESSAGE


class ApiClient:
    """Thin JSON client over a `requests.Session` with bearer authentication."""

    def __init__(
        self,
        base_url: str,
        timeout: float = 15.0,
        session: requests.Session | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._session = session or requests.Session()

    def _headers(self, token: str) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {token}",
            "Accept": "application/json",
            "Content-Type": "application/json",
        }

    def request(self, method: str, path: str, token: str, json: Any | None = None) -> Any:
        """Send one request and return the decoded JSON body.

        Args:
            method: HTTP verb.
            path: Path relative to the base URL, starting with "/".
            token: Bearer token of the signed-in operator.
            json: Optional body, sent as JSON.

        Returns:
            The decoded body, or None for an empty response.

        Raises:
            SessionExpired: on 401 or 403.
            ServerError: on any other failure, including network errors.
        """
        url = f"{self.base_url}{path}"
        logger.debug("{} {}", method, url)
        try:
            response = self._session.request(
                method,
                url,
                headers=self._headers(token),
                json=json,
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            logger.error("Request {} {} failed: {}", method, url, e)
            raise ServerError(None, NETWORK_ERROR_MESSAGE) from e
        return self._handle_response(response)

    def _handle_response(self, response: requests.Response) -> Any:
        status = response.status_code
        if status in (401, 403):
            logger.warning("Session rejected with status {}", status)
            raise SessionExpired()

        if not response.ok:
            content_type = response.headers.get("Content-Type", "")
            if "application/json" in content_type:
                try:
                    body = response.json()
                except ValueError:
                    body = {}
                message = body.get("message") if isinstance(body, dict) else None
                message = translate_server_message(str(message or GENERIC_SERVER_MESSAGE))
            else:
                detail = response.text.strip() or "Réponse inattendue."
                message = f"Erreur du serveur : {status}. {detail}"
            logger.error("Server error {}: {}", status, message)
            raise ServerError(status, message)

        if status == 204 or response.headers.get("Content-Length") == "0" or not response.content:
            return None
        try:
            return response.json()
        except ValueError as e:
            logger.error("Invalid JSON in response with status {}", status)
            raise ServerError(status, GENERIC_SERVER_MESSAGE) from e

    def get(self, path: str, token: str) -> Any:
        return self.request("GET", path, token)

    def post(self, path: str, token: str, json: Any | None = None) -> Any:
        return self.request("POST", path, token, json=json)

    def put(self, path: str, token: str, json: Any | None = None) -> Any:
        return self.request("PUT", path, token, json=json)

    def patch(self, path: str, token: str, json: Any | None = None) -> Any:
        return self.request("PATCH", path, token, json=json)

    def delete(self, path: str, token: str) -> Any:
        return self.request("DELETE", path, token)
