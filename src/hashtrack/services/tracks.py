"""Track management service."""

from __future__ import annotations

from urllib.parse import quote

from hashtrack.client import HashtrackClient, decode_response
from hashtrack.models.tracks import CreateTrackRequest, Track


def normalize_hashtag(hashtag: str) -> str:
    """Strip whitespace and a leading '#' from a user-supplied hashtag."""
    return hashtag.strip().lstrip("#")


def _require_hashtag(hashtag: str) -> str:
    name = normalize_hashtag(hashtag)
    if not name:
        raise ValueError(f"Empty hashtag: {hashtag!r}")
    return name


class TrackService:
    """Service for tracked-hashtag CRUD operations."""

    def __init__(self, client: HashtrackClient) -> None:
        self._client = client

    def list(self) -> list[Track]:
        """List the hashtags currently tracked."""
        response = self._client.get("/tracks")
        return decode_response(response, list[Track])

    def create(self, hashtag: str) -> Track:
        """Start tracking a hashtag.

        Raises:
            ValueError: Nothing is left of ``hashtag`` once normalised.
        """
        body = CreateTrackRequest(hashtag=_require_hashtag(hashtag)).model_dump()
        response = self._client.post("/tracks", body=body)
        return decode_response(response, Track)

    def remove(self, hashtag: str) -> Track:
        """Stop tracking a hashtag. Returns the removed track.

        Raises:
            ValueError: Nothing is left of ``hashtag`` once normalised.
        """
        name = quote(_require_hashtag(hashtag), safe="")
        response = self._client.delete(f"/tracks/{name}")
        return decode_response(response, Track)
