"""Root conftest.py for pytest."""

import os
import sys
from pathlib import Path

# Add the project root to the Python path
project_root = Path(__file__).parent.resolve()
sys.path.insert(0, str(project_root))

# Keep the module-level app quiet and free of real backing services.
os.environ["TESTING"] = "True"
for name in (
    "DATABASE_URL",
    "AWS_ACCESS_KEY_ID",
    "AWS_SECRET_ACCESS_KEY",
    "OTEL_EXPORTER_OTLP_ENDPOINT",
):
    os.environ.pop(name, None)
