"""Current-user lookup."""

from __future__ import annotations

from hashtrack.client import HashtrackClient, decode_response
from hashtrack.models.users import User


class UserService:
    def __init__(self, client: HashtrackClient) -> None:
        self._client = client

    def current(self) -> User:
        """Fetch the user the stored token belongs to."""
        response = self._client.get("/users/me")
        return decode_response(response, User)
