"""
Lexicon lookup endpoints.
"""
from typing import Any

from fastapi import APIRouter, Depends

from app.core.dependencies import get_lexicon_cache
from app.schemas.lexicon import WordGloss
from app.services.lexicon_cache import LexiconCache

router = APIRouter()


@router.get("/{word}", response_model=WordGloss)
def lookup_word(
    word: str,
    lexicon: LexiconCache = Depends(get_lexicon_cache),
) -> Any:
    """
    Look up cached reference data for one word.

    Returns found=false on a miss or when the cache is unavailable.
    """
    data = lexicon.lookup(word)
    return {"word": word, "found": data is not None, "data": data}
