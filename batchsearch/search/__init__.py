from .config import KEYWORD_TIMEOUT, SearchConfig
from .client import SearchClient, build_params
from .outcomes import (
    DecodeFailure,
    NetworkFailure,
    Outcome,
    RateLimited,
    StatusFailure,
    Success,
)

__all__ = [
    "KEYWORD_TIMEOUT", "SearchConfig", "SearchClient", "build_params",
    "Outcome", "Success", "RateLimited", "NetworkFailure", "StatusFailure", "DecodeFailure",
]
