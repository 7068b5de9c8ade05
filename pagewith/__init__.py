"""Browser testing harness for front-end usage examples.

Bundles a usage example, serves it with an HTML shell and opens it in a real
browser, handing back a live Playwright page for assertions.
"""

__version__ = "0.1.0"

from pagewith.browser import BrowserHandle, create_browser
from pagewith.config import BundlerConfig, Settings, get_settings
from pagewith.exceptions import (
    AssetNotFoundError,
    AssetStreamError,
    BindError,
    CompilationError,
    CompilerInvocationError,
    Diagnostic,
    EntryNotFoundError,
    NotRunningError,
    PageNotFoundError,
    PageWithException,
)
from pagewith.harness import Harness
from pagewith.page import Scenario, page_with
from pagewith.server import PreviewServer
from pagewith.utils.console import spy_on_console
from pagewith.utils.debug import debug
from pagewith.utils.request import create_request_util

__all__ = [
    "AssetNotFoundError",
    "AssetStreamError",
    "BindError",
    "BrowserHandle",
    "BundlerConfig",
    "CompilationError",
    "CompilerInvocationError",
    "Diagnostic",
    "EntryNotFoundError",
    "Harness",
    "NotRunningError",
    "PageNotFoundError",
    "PageWithException",
    "PreviewServer",
    "Scenario",
    "Settings",
    "__version__",
    "create_browser",
    "create_request_util",
    "debug",
    "get_settings",
    "page_with",
    "spy_on_console",
]
