# config.py
import os
from dotenv import load_dotenv

load_dotenv()


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        raise RuntimeError(f"{name} must be an integer, got {raw!r}")


def _bool_env(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


# ====== credentials (checked lazily where they are used) ======
GOOGLE_API_KEY = os.getenv("GOOGLE_API_KEY")
TAVILY_API_KEY = os.getenv("TAVILY_API_KEY")
GOOGLE_MAPS_API_KEY = os.getenv("GOOGLE_MAPS_API_KEY")

# ====== service ======
LLM_MODEL = os.getenv("LLM_MODEL", "gemini-2.5-flash")
PORT = _int_env("PORT", 8787)
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# ====== run artifacts ======
RUNS_DIR = os.getenv("RUNS_DIR", "runs")
SAVE_RUN_ARTIFACTS = _bool_env("SAVE_RUN_ARTIFACTS", True)

# ====== candidate pool ======
SEARCH_MAX_RESULTS = 8
JUNK_NAME_MAX_LEN = 70
CANDIDATE_CAP_RESTAURANTS = 40
CANDIDATE_CAP_ATTRACTIONS = 60
CANDIDATE_CAP_INDOOR = 30
CANDIDATE_CACHE_TTL_S = 24 * 60 * 60

# ====== allowed lists (prompt size bound) ======
ALLOWED_CAP_ATTRACTIONS = _int_env("ALLOWED_CAP_ATTRACTIONS", 60)
ALLOWED_CAP_RESTAURANTS = _int_env("ALLOWED_CAP_RESTAURANTS", 40)
ALLOWED_CAP_INDOOR = _int_env("ALLOWED_CAP_INDOOR", 30)

# ====== generate / validate / repair ======
MAX_REPAIR_ROUNDS = 2
QUALITY_SCORE_THRESHOLD = 90
ENABLE_QUALITY_PASS = _bool_env("ENABLE_QUALITY_PASS", True)

# ====== places / photos ======
PLACES_CACHE_TTL_S = 7 * 24 * 60 * 60
PLACES_MAX_PER_REQUEST = 80
PLACES_DEFAULT_CONCURRENCY = 6
PLACES_HTTP_TIMEOUT_S = 15.0
