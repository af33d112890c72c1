"""Root conftest — shared test configuration."""

import os

# Never point tests at a real remote store
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("SUPABASE_URL", "http://store.test")
os.environ.setdefault("SUPABASE_KEY", "test-service-key")
os.environ.setdefault("LOG_FORMAT", "text")
