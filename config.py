"""Configuration module for StoryVerse narrative extraction."""
import os
from pathlib import Path
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

# Logging
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# Extraction Configuration
EXTRACTION_PROFILE = os.getenv("EXTRACTION_PROFILE", "server")  # "server" | "client"
CONFIDENCE_THRESHOLD = float(os.getenv("CONFIDENCE_THRESHOLD", "0.6"))

# Enrichment (optional LLM pass, off unless requested)
ANTHROPIC_API_KEY = os.getenv("ANTHROPIC_API_KEY")
ANTHROPIC_MODEL = os.getenv("ANTHROPIC_MODEL", "claude-opus-4-5-20251101")
LLM_TEMPERATURE = 0  # For structured extraction consistency
ENRICHMENT_MAX_CHARS = int(os.getenv("ENRICHMENT_MAX_CHARS", "12000"))
MAX_RETRIES = 3
RETRY_BACKOFF_MULTIPLIER = 2

# Storage Configuration
DB_PATH = Path(os.getenv("STORYVERSE_DB_PATH", "./output/storyverse.db"))

# Ensure output directories exist
DB_PATH.parent.mkdir(parents=True, exist_ok=True)

# Output Paths
OUTPUT_DIR = Path("./output")
ANALYSES_DIR = OUTPUT_DIR / "analyses"

ANALYSES_DIR.mkdir(parents=True, exist_ok=True)
