# Tillpoint Live Test Suite - Shared Configuration and Fixtures
#
# This module provides:
# - Test server lifecycle (ephemeral SQLite per run, Redis from REDIS_URL)
# - Seeded users, catalog and payment method
# - Authentication helpers
# - Failure message formatting

import os
import sys
import time
import tempfile
import subprocess
import shutil
from pathlib import Path
from typing import Generator, Optional, Dict, Any
from dataclasses import dataclass

import pytest
import httpx

# Add backend to path for imports
REPO_ROOT = Path(__file__).parent.parent
BACKEND_DIR = REPO_ROOT / "backend"
sys.path.insert(0, str(BACKEND_DIR))

TEST_PASSWORD = "TestPass123!"


# =============================================================================
# CONFIGURATION
# =============================================================================

@dataclass
class TestConfig:
    """Test configuration with environment variable overrides."""
    backend_base_url: str = os.environ.get("TEST_BACKEND_URL", "http://127.0.0.1:5001")
    redis_url: str = os.environ.get("TEST_REDIS_URL", "redis://localhost:6379/15")

    # Timeouts
    request_timeout: float = float(os.environ.get("TEST_REQUEST_TIMEOUT", "30"))
    server_startup_timeout: float = float(os.environ.get("TEST_SERVER_STARTUP_TIMEOUT", "30"))


# =============================================================================
# FAILURE MESSAGE HELPER
# =============================================================================

class TestFailure(Exception):
    """
    Exception with a human-readable failure report.

    Structure:
    1. Scenario: What was being tested
    2. Expected: What should have happened
    3. Actual: What actually happened
    4. Likely Cause: Most probable reason for failure
    5. Code Location: Where to look in the codebase
    """

    def __init__(
        self,
        scenario: str,
        expected: str,
        actual: str,
        likely_cause: str,
        code_location: str,
        response: Optional[httpx.Response] = None,
        extra_context: Optional[Dict[str, Any]] = None
    ):
        self.scenario = scenario
        self.expected = expected
        self.actual = actual
        self.likely_cause = likely_cause
        self.code_location = code_location
        self.response = response
        self.extra_context = extra_context or {}

        super().__init__(self._format_message())

    def _format_message(self) -> str:
        lines = [
            "",
            "=" * 80,
            "TEST FAILURE DETAILS",
            "=" * 80,
            f"SCENARIO: {self.scenario}",
            "-" * 80,
            f"EXPECTED: {self.expected}",
            f"ACTUAL: {self.actual}",
            "-" * 80,
            f"LIKELY CAUSE: {self.likely_cause}",
            f"CODE LOCATION: {self.code_location}",
        ]

        if self.response is not None:
            lines.extend([
                "-" * 80,
                f"HTTP STATUS: {self.response.status_code}",
                f"RESPONSE BODY: {self.response.text[:1000]}",
            ])

        if self.extra_context:
            lines.append("-" * 80)
            lines.append("EXTRA CONTEXT:")
            for key, value in self.extra_context.items():
                lines.append(f"  {key}: {value}")

        lines.append("=" * 80)
        return "\n".join(lines)


def assert_response(
    response: httpx.Response,
    expected_status: int,
    scenario: str,
    code_location: str,
    expected_message: Optional[str] = None
):
    """
    Assert HTTP status and, for failures, one of the envelope messages.
    Raises TestFailure with a detailed report on mismatch.
    """
    if response.status_code != expected_status:
        raise TestFailure(
            scenario=scenario,
            expected=f"HTTP {expected_status}",
            actual=f"HTTP {response.status_code}",
            likely_cause=_infer_cause(response),
            code_location=code_location,
            response=response
        )

    if expected_message and expected_message not in response.json().get("messages", []):
        raise TestFailure(
            scenario=scenario,
            expected=f"messages contains: {expected_message}",
            actual=f"Response body: {response.text[:500]}",
            likely_cause="Error kind or message text changed",
            code_location=code_location,
            response=response
        )


def _infer_cause(response: httpx.Response) -> str:
    """Infer likely cause from response status."""
    if response.status_code == 401:
        return "Authentication failed - token invalid, expired or missing"
    elif response.status_code == 403:
        return "Permission denied - endpoint requires an admin token"
    elif response.status_code == 404:
        return "Resource not found - wrong ID or deleted"
    elif response.status_code == 400:
        return "Invalid request - validation failed or business rule rejected it"
    elif response.status_code == 409:
        return "Conflict - duplicate unique value, or the row is still referenced"
    elif response.status_code == 500:
        return "Server error - check backend logs (store or Redis failure)"
    else:
        return f"Unexpected status code {response.status_code}"


# =============================================================================
# HTTP CLIENT WITH AUTH HELPERS
# =============================================================================

class APIClient:
    """
    HTTP client wrapper with authentication and convenience methods.
    """

    def __init__(self, base_url: str, timeout: float = 30.0):
        self.base_url = base_url.rstrip("/")
        self.client = httpx.Client(timeout=timeout)
        self.token: Optional[str] = None

    def _headers(self) -> Dict:
        headers = {"Content-Type": "application/json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    def get(self, path: str, params: Optional[Dict] = None, **kwargs) -> httpx.Response:
        return self.client.get(
            f"{self.base_url}{path}",
            headers=self._headers(),
            params=params,
            **kwargs
        )

    def post(self, path: str, json: Optional[Dict] = None, **kwargs) -> httpx.Response:
        return self.client.post(
            f"{self.base_url}{path}",
            headers=self._headers(),
            json=json,
            **kwargs
        )

    def put(self, path: str, json: Optional[Dict] = None, **kwargs) -> httpx.Response:
        return self.client.put(
            f"{self.base_url}{path}",
            headers=self._headers(),
            json=json,
            **kwargs
        )

    def delete(self, path: str, **kwargs) -> httpx.Response:
        return self.client.delete(
            f"{self.base_url}{path}",
            headers=self._headers(),
            **kwargs
        )

    def login(self, email: str, password: str) -> bool:
        """Authenticate and store token."""
        response = self.post("/v1/users/login", json={"email": email, "password": password})
        if response.status_code == 200:
            self.token = response.json()["data"]["token"]
            return True
        return False

    def close(self):
        self.client.close()


# =============================================================================
# SERVER MANAGEMENT
# =============================================================================

class ServerManager:
    """
    Manages Flask backend server lifecycle for tests.
    """

    def __init__(self, config: TestConfig):
        self.config = config
        self.process: Optional[subprocess.Popen] = None
        self.db_file: Optional[Path] = None
        self.seed: Dict[str, Dict] = {}

    def _env(self) -> Dict[str, str]:
        env = os.environ.copy()
        env["DATABASE_URL"] = f"sqlite:///{self.db_file}"
        env["REDIS_URL"] = self.config.redis_url
        env["BCRYPT_ROUNDS"] = "4"
        return env

    def start(self) -> bool:
        """Start the Flask server with a throwaway database."""
        temp_dir = tempfile.mkdtemp(prefix="tillpoint_test_")
        self.db_file = Path(temp_dir) / "test_tillpoint.sqlite3"

        self.process = subprocess.Popen(
            [sys.executable, "-m", "flask", "--app", "tillpoint", "run", "--port", "5001"],
            cwd=str(BACKEND_DIR),
            env=self._env(),
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
        )
        return self._wait_for_server()

    def _wait_for_server(self) -> bool:
        start_time = time.time()
        while time.time() - start_time < self.config.server_startup_timeout:
            try:
                response = httpx.get(f"{self.config.backend_base_url}/v1/health", timeout=2.0)
                if response.status_code in (200, 503):  # 503 means degraded but running
                    return True
            except (httpx.ConnectError, httpx.TimeoutException):
                pass
            time.sleep(0.5)
        return False

    def stop(self):
        """Stop the Flask server and cleanup."""
        if self.process:
            self.process.terminate()
            try:
                self.process.wait(timeout=5)
            except subprocess.TimeoutExpired:
                self.process.kill()
            self.process = None

        if self.db_file and self.db_file.parent.exists():
            shutil.rmtree(self.db_file.parent, ignore_errors=True)

    def initialize_db(self):
        """Create the schema, flush the test Redis db and seed one of everything."""
        from decimal import Decimal

        from tillpoint import create_app
        from tillpoint.extensions import cache, db
        from tillpoint.services import category_service, payment_service, product_service, user_service

        app = create_app({
            "SQLALCHEMY_DATABASE_URI": f"sqlite:///{self.db_file}",
            "REDIS_URL": self.config.redis_url,
            "BCRYPT_ROUNDS": 4,
        })

        with app.app_context():
            db.create_all()
            cache.flush()

            self.seed["admin"] = user_service.register(
                name="Admin", email="admin@tillpoint.test", password=TEST_PASSWORD, role="admin"
            )
            self.seed["cashier"] = user_service.register(
                name="Cashier", email="cashier@tillpoint.test", password=TEST_PASSWORD
            )
            self.seed["category"] = category_service.create_category(name="Coffee")
            self.seed["product"] = product_service.create_product(
                category_id=self.seed["category"]["id"],
                name="Espresso",
                image="espresso.png",
                price=Decimal("10.00"),
                stock=5,
            )
            self.seed["payment"] = payment_service.create_payment(name="Cash", type="CASH")


# =============================================================================
# PYTEST FIXTURES
# =============================================================================

@pytest.fixture(scope="session")
def test_config() -> TestConfig:
    return TestConfig()


@pytest.fixture(scope="session")
def server_manager(test_config: TestConfig) -> Generator[ServerManager, None, None]:
    """
    Manage test server lifecycle.
    Server is started once per test session.
    """
    manager = ServerManager(test_config)

    # For CI/external server mode, don't manage server
    if os.environ.get("TEST_EXTERNAL_SERVER"):
        yield manager
    else:
        if not manager.start():
            pytest.fail("Failed to start test server")
        manager.initialize_db()
        yield manager
        manager.stop()


@pytest.fixture(scope="session")
def seed(server_manager: ServerManager) -> Dict[str, Dict]:
    if not server_manager.seed:
        pytest.skip("External server mode: seed data is unknown")
    return server_manager.seed


@pytest.fixture(scope="session")
def api_client(test_config: TestConfig, server_manager: ServerManager) -> Generator[APIClient, None, None]:
    client = APIClient(test_config.backend_base_url, timeout=test_config.request_timeout)
    yield client
    client.close()


@pytest.fixture
def client(api_client: APIClient) -> APIClient:
    """API client with auth state cleared."""
    api_client.token = None
    return api_client


@pytest.fixture
def admin_client(client: APIClient, seed) -> APIClient:
    if not client.login(seed["admin"]["email"], TEST_PASSWORD):
        pytest.fail("Failed to login as admin")
    return client


@pytest.fixture
def cashier_client(client: APIClient, seed) -> APIClient:
    if not client.login(seed["cashier"]["email"], TEST_PASSWORD):
        pytest.fail("Failed to login as cashier")
    return client


# =============================================================================
# TEST MARKERS
# =============================================================================

def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "smoke: Quick smoke tests for critical paths")
    config.addinivalue_line("markers", "auth: Authentication tests")
    config.addinivalue_line("markers", "orders: Order workflow tests")
    config.addinivalue_line("markers", "cache: Cache-aside behaviour against a real Redis")
