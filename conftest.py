"""Global pytest configuration."""

import os

# Keep tests off any developer .env storage backend
os.environ.setdefault("DAYTRIP_STORAGE_BACKEND", "memory")
