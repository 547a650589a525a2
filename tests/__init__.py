import os
import tempfile
from pathlib import Path

# Applied before any app module reads its settings.
os.environ.setdefault("ANALYTICS_ENABLED", "0")
os.environ.setdefault("RATE_LIMIT_ENABLED", "0")
os.environ.setdefault(
    "FEATURE_LIMIT_DB_PATH",
    str(Path(tempfile.gettempdir()) / "careerpal-tests" / "feature_limit.db"),
)
