"""Root conftest: shared test configuration."""

import os

# Keep test runs independent of a developer's .env
os.environ.setdefault("LOG_LEVEL", "WARNING")
os.environ.setdefault("LOG_FORMAT", "text")
