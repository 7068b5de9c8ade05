"""Pytest configuration and fixtures."""

import asyncio
import shutil
from pathlib import Path

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient

from pagewith.browser import create_browser
from pagewith.compiler import DiagnosticFailure, InvocationFailure, PassthroughBundler, Success
from pagewith.compiler.base import output_name
from pagewith.config import Settings
from pagewith.exceptions import Diagnostic
from pagewith.server import PreviewServer

FIXTURES_DIR = Path(__file__).parent / "fixtures"


class SlowBundler(PassthroughBundler):
    """Passthrough bundler that takes a while, to overlap requests."""

    def __init__(self, delay: float = 0.1) -> None:
        self.delay = delay

    async def run(self, entry_path, config, output):
        await asyncio.sleep(self.delay)
        return await super().run(entry_path, config, output)


class SnapshotBundler(PassthroughBundler):
    """Reads the entry first and emits it after a delay, like a real build."""

    def __init__(self, delay: float = 0.2) -> None:
        self.delay = delay

    async def run(self, entry_path, config, output):
        content = Path(entry_path).read_bytes()
        await asyncio.sleep(self.delay)
        filename = output_name(config, entry_path, content)
        output.write(filename, content)
        return Success(asset_files=(filename,))


class FailingBundler(PassthroughBundler):
    """Bundler reporting a fixed failure outcome."""

    def __init__(self, outcome) -> None:
        self.outcome = outcome

    async def run(self, entry_path, config, output):
        return self.outcome


@pytest.fixture
def fixtures_dir() -> Path:
    return FIXTURES_DIR


@pytest.fixture
def test_settings() -> Settings:
    """Create test settings using the passthrough bundler.

    Returns:
        Test settings.
    """
    return Settings(
        _env_file=None,
        host="127.0.0.1",
        port=0,
        debug=False,
        bundler="passthrough",
        in_memory=True,
    )


@pytest.fixture
def example(tmp_path: Path) -> Path:
    """Copy of hello.js that tests may touch.

    Args:
        tmp_path: Temporary directory.

    Returns:
        Path of the copied example.
    """
    target = tmp_path / "hello.js"
    shutil.copy(FIXTURES_DIR / "hello.js", target)
    return target


@pytest.fixture
def server(test_settings: Settings) -> PreviewServer:
    """Create a preview server that is not listening.

    Args:
        test_settings: Test settings.

    Returns:
        Preview server.
    """
    return PreviewServer(settings=test_settings)


@pytest.fixture
def client(server: PreviewServer) -> TestClient:
    """Create test client for the server app.

    Args:
        server: Preview server.

    Returns:
        Test client.
    """
    with TestClient(server.app) as client:
        yield client


@pytest.fixture
def slow_bundler() -> SlowBundler:
    return SlowBundler()


@pytest.fixture
def snapshot_bundler() -> SnapshotBundler:
    return SnapshotBundler()


@pytest.fixture
def invocation_failure() -> FailingBundler:
    return FailingBundler(InvocationFailure(error="engine misconfigured"))


@pytest.fixture
def diagnostic_failure() -> FailingBundler:
    return FailingBundler(
        DiagnosticFailure(
            diagnostics=(
                Diagnostic(
                    message='Could not resolve "./does-not-exist"',
                    file="broken.js",
                    line=1,
                    column=24,
                ),
            )
        )
    )


@pytest_asyncio.fixture
async def listening_server(test_settings: Settings):
    """Start a preview server on an ephemeral port.

    Args:
        test_settings: Test settings.

    Yields:
        Listening preview server.
    """
    server = PreviewServer(settings=test_settings)
    await server.listen()
    yield server
    if server.is_running:
        await server.close()


@pytest_asyncio.fixture
async def browser(test_settings: Settings):
    """Launch a headless browser, skipping when none is installed.

    Args:
        test_settings: Test settings.

    Yields:
        Browser handle.
    """
    try:
        handle = await create_browser(settings=test_settings)
    except Exception as e:
        pytest.skip(f"Browser not available: {e}")
    yield handle
    await handle.cleanup()
