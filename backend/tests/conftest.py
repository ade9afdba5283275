"""Root conftest — shared test configuration."""

import os

# Ensure tests don't accidentally use real API keys or upstreams
os.environ.setdefault("ANTHROPIC_API_KEY", "sk-ant-test-fake-key")
os.environ.setdefault("PLATFORM_API_KEY", "platform-test-key")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("OWNER_EMAIL", "owner@example.com")
os.environ.setdefault("PROJECT_ID", "storefront-test")
os.environ.setdefault("LOG_FORMAT", "text")
