"""Session management for the Hashtrack service.

Exchanges credentials for a token and clears the local token on logout.
Persisting a new token is left to the caller so the TokenStore stays the
only writer of session state.
"""

from __future__ import annotations

import logging

from hashtrack.client import HashtrackClient, decode_response
from hashtrack.credentials import TokenStore
from hashtrack.models.auth import LoginRequest, Session, TokenStatus

logger = logging.getLogger(__name__)


class SessionManager:
    """Creates and discards sessions.

    Only ``login`` talks to the service; logout and status work without a
    client.
    """

    def __init__(self, client: HashtrackClient | None, store: TokenStore) -> None:
        self._client = client
        self._store = store

    def login(self, email: str, password: str) -> Session:
        """Exchange email and password for a session.

        Args:
            email: Account email.
            password: Account password.

        Returns:
            The Session carrying the new token.

        Raises:
            RejectedError: Bad credentials (HTTP 401/403).
            NetworkError, ServerError, MalformedError: Service failures.
        """
        if self._client is None:
            raise RuntimeError("SessionManager.login needs a client")
        body = LoginRequest(email=email, password=password).model_dump()
        response = self._client.post("/sessions", body=body, authenticated=False)
        session = decode_response(response, Session)
        logger.info(f"Session created for {email}")
        return session

    def logout(self) -> None:
        """Forget the local token. The service is not contacted."""
        self._store.save(None)
        logger.info("Session token cleared")

    def status(self) -> TokenStatus:
        """Get the local token status."""
        return TokenStatus(
            has_token=self._store.load() is not None,
            token_path=str(self._store.path),
        )
