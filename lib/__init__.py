# =============================================================================
# lib/ - Standalone Utility Modules
# =============================================================================
# This package contains reusable utilities:
# - supabase_client.py: Service-role Supabase client singleton
# - codec.py: Inline base64 data URLs for curriculum code assets
# - quiz_parser.py: Parses assistant replies into MCQ questions
# - cache.py: Read-through TTL cache with stale fallback
# - utils.py: Shared utilities (error handling, id normalization, money)
#
# These modules are self-contained and can be tested in isolation.
# =============================================================================

from lib.supabase_client import SupabaseClient, SupabaseClientError
from lib.cache import ReadThroughCache
from lib.codec import decode_data_url, decode_inline_text, encode_inline_text
from lib.quiz_parser import QuizOption, QuizQuestion, parse_quiz, score_quiz
from lib.utils import ApplicationError, normalize_id, round_amount

__all__ = [
    # Supabase
    "SupabaseClient",
    "SupabaseClientError",
    # Cache
    "ReadThroughCache",
    # Codec
    "decode_data_url",
    "decode_inline_text",
    "encode_inline_text",
    # Quiz
    "QuizOption",
    "QuizQuestion",
    "parse_quiz",
    "score_quiz",
    # Utils
    "ApplicationError",
    "normalize_id",
    "round_amount",
]
