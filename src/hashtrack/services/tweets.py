"""Tweet retrieval service: one-shot batch and live feed."""

from __future__ import annotations

from hashtrack.client import HashtrackClient, decode_response
from hashtrack.models.tweets import Tweet
from hashtrack.services.feed import FeedHandle, subscribe


class TweetService:
    """Service for fetching tweets matching the tracked hashtags."""

    def __init__(self, client: HashtrackClient) -> None:
        self._client = client

    def latest(self, filter: str = "") -> list[Tweet]:
        """Fetch the most recent tweets, optionally narrowed by ``filter``."""
        response = self._client.get("/tweets", params={"filter": filter})
        return decode_response(response, list[Tweet])

    def stream(self, filter: str = "") -> FeedHandle:
        """Subscribe to the live feed. Returns without waiting for a tweet."""
        return subscribe(self._client, filter)
