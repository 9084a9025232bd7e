"""
Exam composition and scoring modules.
"""
from .aggregate import ExamAggregate, DescriptionNode, SectionNode, QuestionNode, OptionNode
from .rows import ExamRowSet
from .tree_builder import ExamTreeBuilder
from .scoring import ScoringEngine, ScoreResult

__all__ = [
    "ExamAggregate",
    "DescriptionNode",
    "SectionNode",
    "QuestionNode",
    "OptionNode",
    "ExamRowSet",
    "ExamTreeBuilder",
    "ScoringEngine",
    "ScoreResult",
]
