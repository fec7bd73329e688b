"""
QuarryReader Content Extraction Module - Readability scoring engine

Finds the subtree of an HTML page that holds the article body:
1. Preprocessing: stacked <br>s, <font> tags and comments are normalized
2. Filtering: containers whose class/id reads like boilerplate are dropped
3. Scoring: paragraphs credit their parent and grandparent containers
4. Assembly: the best candidate and its qualifying siblings form the article
5. Sanitizing: interactive and low-quality elements go, tags are whitelisted
6. Retry: heuristics are relaxed step by step while the output is too short
"""

from .candidates import CandidateMap
from .document import Document, new_document
from .models import Candidate, ExtractResult, RelaxationLevel, SanitizedArticle
from .preprocess import normalize_html
from .protocols import Extractor, TreeProvider
from .readability_extractor import ReadabilityExtractor
from .sanitizer import Sanitizer
from .tree import SoupTreeProvider

__all__ = [
    "Candidate",
    "CandidateMap",
    "Document",
    "ExtractResult",
    "Extractor",
    "ReadabilityExtractor",
    "RelaxationLevel",
    "SanitizedArticle",
    "Sanitizer",
    "SoupTreeProvider",
    "TreeProvider",
    "new_document",
    "normalize_html",
]
