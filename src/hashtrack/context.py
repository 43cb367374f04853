"""Per-invocation state shared by the CLI commands."""

from __future__ import annotations

from dataclasses import dataclass, field

from hashtrack.client import HashtrackClient
from hashtrack.config import Config
from hashtrack.credentials import TokenStore


@dataclass
class AppContext:
    """Config plus the token store, threaded to every command via ``ctx.obj``.

    The store is created on first use so commands that never need the
    token do not touch its file.
    """

    config: Config
    verbose: bool = False
    _store: TokenStore | None = field(default=None, repr=False)

    @property
    def store(self) -> TokenStore:
        if self._store is None:
            self._store = TokenStore(self.config.token_path)
        return self._store

    def client(self) -> HashtrackClient:
        """A new client bound to this invocation's config and token store."""
        return HashtrackClient(self.config, self.store, verbose=self.verbose)
