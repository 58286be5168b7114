# Tillpoint live-server test suite
#
# This package contains:
# - API tests against a running backend (pytest + httpx)
# - Stress/load tests (Locust)
#
# Unit and integration tests live in backend/tests and run without a server.
# Run these with: pytest tests/api -m smoke
