"""Global pytest configuration."""

import os

# Keep test runs offline: no LLM key, no external stores
for var in ("LLM_API_KEY", "DATABASE_URL", "REDIS_URL"):
    os.environ.pop(var, None)
