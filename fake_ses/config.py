import os

# Everything is configurable via environment variables so the same
# package can run inside a test process or as a standalone container.

# Host the listener binds to; also the host part of the advertised "host:port".
FAKE_SES_HOST = os.getenv("FAKE_SES_HOST", "127.0.0.1")

# 0 lets the OS pick a free port (recommended for parallel test runs).
FAKE_SES_PORT = int(os.getenv("FAKE_SES_PORT", "0"))

FAKE_SES_LOG_LEVEL = os.getenv("FAKE_SES_LOG_LEVEL", "INFO").upper()

# Seconds bootstrap() waits for uvicorn to report it is serving.
FAKE_SES_STARTUP_TIMEOUT = float(os.getenv("FAKE_SES_STARTUP_TIMEOUT", "5"))
