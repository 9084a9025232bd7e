"""
Tests for services.lexicon_cache

Test Coverage:
- tokenize(): whitespace split, punctuation trim, diacritics kept
- LexiconCache.lookup(): hits, misses, raw values, outages
- LexiconCache.lookup_many() / annotate(): batched lookups
"""
import logging

import pytest

from app.services.lexicon_cache import LexiconCache, tokenize


@pytest.fixture
def lexicon(fake_redis):
    return LexiconCache(fake_redis, key_prefix="word")


@pytest.fixture
def down_lexicon(down_redis):
    return LexiconCache(down_redis, key_prefix="word")


class TestTokenize:

    def test_tokenize_when_punctuation_then_trimmed(self):
        assert tokenize("Which word means 'book'?") == ["Which", "word", "means", "book"]

    def test_tokenize_when_inner_punctuation_then_kept(self):
        assert tokenize("k-t-b root") == ["k-t-b", "root"]

    def test_tokenize_when_arabic_diacritics_then_kept(self):
        assert tokenize("كِتَابٌ، قَلَمٌ") == ["كِتَابٌ", "قَلَمٌ"]

    def test_tokenize_when_only_punctuation_then_empty(self):
        assert tokenize(" ?! ... ") == []


class TestLookup:

    def test_lookup_when_json_entry_then_decoded(self, lexicon):
        assert lexicon.lookup("book") == {"translation": "kitab", "root": "k-t-b"}

    def test_lookup_when_plain_entry_then_raw_string(self, lexicon):
        assert lexicon.lookup("kitab") == "plain text entry"

    def test_lookup_when_bytes_entry_then_decoded(self, lexicon, fake_redis):
        fake_redis.data["word:bayt"] = b'{"translation": "house"}'
        assert lexicon.lookup("bayt") == {"translation": "house"}

    def test_lookup_when_miss_then_none(self, lexicon):
        assert lexicon.lookup("house") is None

    def test_lookup_when_blank_then_none_without_cache_call(self, lexicon, fake_redis):
        assert lexicon.lookup("   ") is None
        assert fake_redis.calls == 0

    def test_lookup_when_prefix_configured_then_used_in_key(self, fake_redis):
        fake_redis.data["quran:kitab"] = "entry"
        cache = LexiconCache(fake_redis, key_prefix="quran")
        assert cache.lookup("kitab") == "entry"

    def test_lookup_when_cache_down_then_none_and_warning(self, down_lexicon, caplog):
        with caplog.at_level(logging.WARNING, logger="app.services.lexicon_cache"):
            assert down_lexicon.lookup("book") is None

        assert "Lexicon lookup for 'book' failed" in caplog.text


class TestLookupMany:

    def test_lookup_many_when_mixed_then_misses_left_out(self, lexicon):
        assert lexicon.lookup_many(["book", "house", "pen"]) == {
            "book": {"translation": "kitab", "root": "k-t-b"},
            "pen": {"translation": "qalam"},
        }

    def test_lookup_many_when_duplicates_then_single_call(self, lexicon, fake_redis):
        found = lexicon.lookup_many(["book", "book", " ", "pen"])

        assert set(found) == {"book", "pen"}
        assert fake_redis.calls == 1

    def test_lookup_many_when_nothing_to_look_up_then_no_call(self, lexicon, fake_redis):
        assert lexicon.lookup_many(["", "  "]) == {}
        assert fake_redis.calls == 0

    def test_lookup_many_when_cache_down_then_empty(self, down_lexicon):
        assert down_lexicon.lookup_many(["book", "pen"]) == {}


class TestAnnotate:

    def test_annotate_when_text_then_every_token_reported(self, lexicon):
        glosses = lexicon.annotate("Which word means 'book'?")

        assert [g.word for g in glosses] == ["Which", "word", "means", "book"]
        assert [g.found for g in glosses] == [False, False, False, True]
        assert glosses[3].data == {"translation": "kitab", "root": "k-t-b"}

    def test_annotate_when_cache_down_then_tokens_without_data(self, down_lexicon):
        glosses = down_lexicon.annotate("book pen")

        assert [g.word for g in glosses] == ["book", "pen"]
        assert not any(g.found for g in glosses)
        assert all(g.data is None for g in glosses)
