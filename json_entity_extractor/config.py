from pathlib import Path

# Strings longer than this are stored as unbounded text
LONG_STRING_THRESHOLD = 140

# Recursion limit for nested entities; None keeps only the cycle guard
MAX_DEPTH = None

# Output locations
DEFAULT_OUTPUT_DIR = Path("models")
MANIFEST_NAME = "index"
ARTIFACT_SUFFIX = ".json"

# External formatter run over the output directory, e.g. "npx prettier --write"
DEFAULT_FORMATTER = None
FORMATTER_TIMEOUT = 60  # Seconds

# Accepted extension for example files
INPUT_EXTENSION = ".json"

# Placeholder name for unnamed uploads in the UI
DEFAULT_MODEL_NAME = "model"
