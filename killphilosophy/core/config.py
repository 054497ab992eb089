"""
Configuration settings for the academic catalog.
"""
import os
from pathlib import Path
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

# DeepSearch (OpenAI-compatible chat completions) provider
DEEPSEARCH_API_KEY = os.getenv("DEEPSEARCH_API_KEY", "")
DEEPSEARCH_ENDPOINT = os.getenv("DEEPSEARCH_ENDPOINT", "https://api.jina.ai/v1/chat/completions")
DEEPSEARCH_FALLBACK_ENDPOINTS = [
    e.strip() for e in os.getenv(
        "DEEPSEARCH_FALLBACK_ENDPOINTS",
        "https://api-fallback.jina.ai/v1/chat/completions,"
        "https://api-backup.jina.ai/v1/chat/completions"
    ).split(",") if e.strip()
]
DEEPSEARCH_MODEL = os.getenv("DEEPSEARCH_MODEL", "jina-large")
DEEPSEARCH_MAX_TOKENS = int(os.getenv("DEEPSEARCH_MAX_TOKENS", "4000"))
DEEPSEARCH_PROVIDER = os.getenv("DEEPSEARCH_PROVIDER", "jina")  # jina, gemini
REQUEST_TIMEOUT = 60  # seconds

# Gemini provider
GEMINI_API_KEY = os.getenv("GEMINI_API_KEY", "")
GEMINI_MODEL = os.getenv("GEMINI_MODEL", "gemini-2.5-flash-lite")

# Retry settings (linear backoff between full rounds over all endpoints)
RETRY_ATTEMPTS = 3
RETRY_DELAY = 1.0  # seconds, multiplied by attempt number

# Paths
# Navigate from killphilosophy/core/config.py up to project root
BASE_DIR = Path(__file__).parent.parent.parent
DATA_DIR = Path(os.getenv("KILLPHILOSOPHY_DATA_DIR", str(BASE_DIR / "data")))
SEED_DATASET = os.getenv("KILLPHILOSOPHY_SEED", str(BASE_DIR / "academics.json"))

# Storage
STORE_CAPACITY_BYTES = int(os.getenv("STORE_CAPACITY_BYTES", str(5 * 1024 * 1024)))
AUTOSAVE_INTERVAL = 5 * 60  # seconds

STORAGE_PREFIX = "killphilosophy"
ACADEMICS_KEY = f"{STORAGE_PREFIX}_academics"
NOVELTY_TILES_KEY = f"{STORAGE_PREFIX}_noveltyTiles"
FAVORITES_KEY = f"{STORAGE_PREFIX}_favorites"
PENDING_SUBMISSIONS_KEY = f"{STORAGE_PREFIX}_pendingSubmissions"
ACADEMICS_BACKUP_KEY = f"{STORAGE_PREFIX}_academics_backup"
PRE_CLEAR_BACKUP_KEY = f"{STORAGE_PREFIX}_academics_backup_before_clear"

# Novelty tile limits
MAX_NOVELTY_TILES = 100        # kept in memory
PERSISTED_NOVELTY_TILES = 50   # written on each save
TRIMMED_NOVELTY_TILES = 20     # kept after a capacity failure

# Taxonomy categories (fixed)
TAXONOMY_FIELDS = ["discipline", "tradition", "era", "methodology", "theme"]

# Reference vocabulary per category
DEFAULT_TAXONOMY_CATEGORIES = {
    "discipline": ["Philosophy", "Sociology", "Literary Theory", "Political Science",
                   "History", "Gender Studies", "Anthropology", "Psychology"],
    "tradition": ["Existentialism", "Post-structuralism", "Phenomenology",
                  "Critical Theory", "Marxism", "Hermeneutics", "Pragmatism"],
    "era": ["20th Century", "21st Century", "Contemporary", "Modern", "Ancient", "Medieval"],
    "methodology": ["Textual Analysis", "Dialectical Method", "Genealogy",
                    "Deconstruction", "Ethnography", "Discourse Analysis"],
    "theme": ["Power", "Identity", "Language", "Justice", "Ethics", "Consciousness",
              "Embodiment", "Capitalism", "Democracy", "Technology"],
}

# Search depth modifiers
SEARCH_DEPTHS = ["basic", "medium", "deep"]
