# problem_finder/config.py

import os


# ── Storage ───────────────────────────────────────────────────────────────────
DATA_DIRECTORY = os.environ.get("PROBLEM_FINDER_DATA_DIR", "data")

# Matrix artifacts above this size are not read; the platform serves the
# substring fallback instead.
MAX_MATRIX_BYTES = int(
    os.environ.get("PROBLEM_FINDER_MAX_MATRIX_BYTES", int(1.8 * 1024 ** 3))
)

# ── Ranking ───────────────────────────────────────────────────────────────────
DEFAULT_THRESHOLD = 0.01
SIGNIFICANT_SCORE = 0.1
FALLBACK_RESULT_LIMIT = 50

# Problem names are repeated this many times in front of the body text.
TITLE_WEIGHT = 4

# ── HTTP ──────────────────────────────────────────────────────────────────────
API_HOST = os.environ.get("HOST", "0.0.0.0")
API_PORT = int(os.environ.get("PORT", 8081))
CORS_ORIGINS = ["*"]
