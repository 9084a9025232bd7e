"""
Read-only facade over the Redis word-by-word lexicon.

Presentation code uses it to enrich question text. Misses and outages
degrade to "no data"; nothing here ever raises to the caller.
"""
import json
import logging
import unicodedata
from typing import Any, Dict, Iterable, List, Optional

import redis

from app.core.config import settings
from app.schemas.lexicon import WordGloss

logger = logging.getLogger(__name__)


def _is_punctuation(char: str) -> bool:
    return unicodedata.category(char).startswith("P")


def _trim_punctuation(token: str) -> str:
    start, end = 0, len(token)
    while start < end and _is_punctuation(token[start]):
        start += 1
    while end > start and _is_punctuation(token[end - 1]):
        end -= 1
    return token[start:end]


def tokenize(text: str) -> List[str]:
    """Split text on whitespace and trim punctuation from each token.

    Only Unicode punctuation is trimmed, so diacritics stay attached.
    """
    tokens = []
    for raw in text.split():
        token = _trim_punctuation(raw)
        if token:
            tokens.append(token)
    return tokens


class LexiconCache:
    """Word -> reference data lookups."""

    def __init__(self, client: redis.Redis, key_prefix: str = settings.LEXICON_KEY_PREFIX):
        self.client = client
        self.key_prefix = key_prefix

    @classmethod
    def from_settings(cls) -> "LexiconCache":
        """Build a cache client from REDIS_URL. Does not connect until first use."""
        client = redis.Redis.from_url(
            settings.REDIS_URL,
            encoding="utf-8",
            decode_responses=True,
            socket_timeout=settings.REDIS_SOCKET_TIMEOUT,
            socket_connect_timeout=settings.REDIS_SOCKET_TIMEOUT,
        )
        return cls(client, settings.LEXICON_KEY_PREFIX)

    def _make_key(self, word: str) -> str:
        return f"{self.key_prefix}:{word}"

    def _decode(self, word: str, value: Any) -> Any:
        if isinstance(value, bytes):
            try:
                value = value.decode("utf-8")
            except UnicodeDecodeError:
                logger.warning(f"Lexicon entry for '{word}' is not UTF-8; ignoring it")
                return None
        try:
            return json.loads(value)
        except (json.JSONDecodeError, TypeError):
            return value

    def lookup(self, word: str) -> Optional[Any]:
        """
        Look up one word.

        Args:
            word: Lexical token

        Returns:
            Decoded reference data, or None on a miss or any cache failure
        """
        word = word.strip()
        if not word:
            return None
        try:
            value = self.client.get(self._make_key(word))
        except redis.RedisError as e:
            logger.warning(f"Lexicon lookup for '{word}' failed: {e}")
            return None
        if value is None:
            return None
        return self._decode(word, value)

    def lookup_many(self, words: Iterable[str]) -> Dict[str, Any]:
        """
        Look up several words with a single MGET.

        Returns:
            word -> reference data for every hit; misses are left out
        """
        unique = list(dict.fromkeys(w.strip() for w in words if w.strip()))
        if not unique:
            return {}
        try:
            values = self.client.mget([self._make_key(word) for word in unique])
        except redis.RedisError as e:
            logger.warning(f"Lexicon lookup for {len(unique)} words failed: {e}")
            return {}

        found = {}
        for word, value in zip(unique, values):
            if value is None:
                continue
            decoded = self._decode(word, value)
            if decoded is not None:
                found[word] = decoded
        return found

    def annotate(self, text: str) -> List[WordGloss]:
        """Tokenize text and attach reference data to every token that has some."""
        tokens = tokenize(text)
        found = self.lookup_many(tokens)
        return [
            WordGloss(word=token, found=token in found, data=found.get(token))
            for token in tokens
        ]
