"""
Guarding and normalization of strings around the translation call.
"""

from .guard import guard, guarded_tokens, wrap
from .normalizer import RULES, RewriteContext, RewriteRule, normalize
from .types import NO_TRANSLATE_CLOSE, NO_TRANSLATE_OPEN, TranslationFormat, placeholders

__all__ = [
    "NO_TRANSLATE_CLOSE",
    "NO_TRANSLATE_OPEN",
    "RULES",
    "RewriteContext",
    "RewriteRule",
    "TranslationFormat",
    "guard",
    "guarded_tokens",
    "normalize",
    "placeholders",
    "wrap",
]
