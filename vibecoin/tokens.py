"""
Token data sources.

A TokenSource hands out the listed tokens. The fixture source reads the
bundled tokens.json; the in-memory source wraps a list the caller owns.
"""

import json
from pathlib import Path
from typing import Optional

from .engine.cards import Token

FIXTURE_PATH = Path(__file__).parent / "data" / "tokens.json"


class TokenSource:
    """Read-only access to listed tokens."""

    def list_tokens(self) -> list[Token]:
        raise NotImplementedError

    def get_token(self, token_id: str) -> Optional[Token]:
        return next((t for t in self.list_tokens() if t.id == token_id), None)

    def by_category(self, category: str) -> list[Token]:
        return [t for t in self.list_tokens() if t.category == category]


class InMemoryTokenSource(TokenSource):

    def __init__(self, tokens: list[Token] = None):
        self._tokens = list(tokens or [])

    def list_tokens(self) -> list[Token]:
        return list(self._tokens)

    def add_token(self, token: Token) -> None:
        self._tokens.append(token)


class FixtureTokenSource(TokenSource):
    """Tokens loaded from a JSON file of listing records."""

    def __init__(self, path: str = None):
        self.path = Path(path) if path else FIXTURE_PATH
        with open(self.path) as f:
            self._tokens = [Token.from_dict(d) for d in json.load(f)]
        self._lookup = {t.id: t for t in self._tokens}

    def list_tokens(self) -> list[Token]:
        return list(self._tokens)

    def get_token(self, token_id: str) -> Optional[Token]:
        return self._lookup.get(token_id)


def load_token_source(path: str = None) -> TokenSource:
    """Default source: the bundled fixture, or a fixture file at path."""
    return FixtureTokenSource(path)
