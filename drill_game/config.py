import os

# Load once at module import
STATE_PATH = os.getenv("DRILL_STATE_PATH", "./drill_state.json")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

_seed = os.getenv("DRILL_SEED", "").strip()
SEED: int | None = int(_seed) if _seed.lstrip("-").isdigit() else None
