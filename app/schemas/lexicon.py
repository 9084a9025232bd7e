"""
Pydantic schemas for lexicon lookups.
"""
from typing import Any, List, Optional

from pydantic import BaseModel


class WordGloss(BaseModel):
    """One token of a text with its cached reference data, if any."""
    word: str
    found: bool = False
    data: Optional[Any] = None


class QuestionGlossary(BaseModel):
    """Question text split into annotated tokens."""
    question_id: int
    text: str
    words: List[WordGloss]
