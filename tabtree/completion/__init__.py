from .input import CompletionInput, tokenize
from .prune import prune
from .recommend import Recommendations, collect_optional, collect_required, recommend

__all__ = [
    "CompletionInput",
    "Recommendations",
    "collect_optional",
    "collect_required",
    "prune",
    "recommend",
    "tokenize",
]
