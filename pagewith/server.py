"""Preview server: the session object tying all components together."""

import asyncio
import logging
import os
from functools import partial
from typing import Any, Callable, Optional
from urllib.parse import urlencode

from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles

from pagewith.api.app import create_app
from pagewith.cache import CacheEntry, CompilationCache, Stale, to_absolute_path
from pagewith.compiler import Bundler, CompilerAdapter, create_bundler
from pagewith.config import BundlerConfig, Settings, get_settings, merge_bundler_config
from pagewith.connection import Connection, ConnectionInfo
from pagewith.exceptions import EntryNotFoundError
from pagewith.registry import PageHandle, PageOptions, PageRegistry
from pagewith.render import HtmlRenderer
from pagewith.routes import RegisterFn, RoutePatchManager
from pagewith.storage import AssetStore, create_asset_store
from pagewith.utils.url import make_url

logger = logging.getLogger(__name__)


class PreviewServer:
    """Serves compiled usage examples for browser tests.

    Each instance exclusively owns its compilation cache, page registry,
    asset store, compiler adapter and route groups. Nothing is shared
    between instances.

    Usage:
        server = PreviewServer(settings=Settings(bundler="passthrough"))
        await server.listen()
        page = server.create_page("examples/hello.js")
        # navigate a browser to page.url
        await server.close()

    Attributes:
        settings: Server settings.
        app: FastAPI application.
        cache: Compilation cache.
        registry: Page registry.
        store: Compiled asset store.
        compiler: Compiler adapter.
        renderer: HTML renderer.
        routes: Route patch manager.
        connection: HTTP listener lifecycle.
        content_base: Directory of static files served verbatim, if any.
        static_files: Starlette static file app serving ``content_base``.
    """

    def __init__(
        self,
        router: Optional[RegisterFn] = None,
        bundler_config: BundlerConfig | dict[str, Any] | None = None,
        in_memory: Optional[bool] = None,
        bundler: Optional[Bundler] = None,
        content_base: Optional[str | os.PathLike] = None,
        settings: Optional[Settings] = None,
    ) -> None:
        """Initialize the server.

        Args:
            router: Hook called once with the app to add permanent routes.
            bundler_config: Bundler options merged over the defaults.
            in_memory: Keep compiled assets in memory (settings default).
            bundler: Bundling engine (selected from the settings if omitted).
            content_base: Directory of static files to serve.
            settings: Settings override.
        """
        self.settings = settings or get_settings()
        if in_memory is None:
            in_memory = self.settings.in_memory

        self.bundler_config = merge_bundler_config(bundler_config)
        self.cache = CompilationCache()
        self.registry = PageRegistry()
        self.store: AssetStore = create_asset_store(in_memory, self.settings.output_dir)
        self.compiler = CompilerAdapter(
            bundler or create_bundler(self.settings),
            self.store,
            self.bundler_config,
        )
        self.renderer = HtmlRenderer()
        self.content_base: Optional[str] = None
        self.static_files: Optional[StaticFiles] = None
        self.set_content_base(content_base or self.settings.content_base)

        self.app: FastAPI = create_app(self)
        self.routes = RoutePatchManager(self.app)
        self.connection = Connection(self.app, debug=self.settings.debug)
        self._pending: dict[tuple[str, int], asyncio.Future] = {}

        if router is not None:
            router(self.app)

    # ------------------------------------------------------------------
    # Connection lifecycle
    # ------------------------------------------------------------------

    @property
    def connection_info(self) -> Optional[ConnectionInfo]:
        return self.connection.info

    @property
    def url(self) -> Optional[str]:
        info = self.connection.info
        return info.url if info else None

    @property
    def is_running(self) -> bool:
        return self.connection.is_running

    async def listen(self, port: Optional[int] = None, host: Optional[str] = None) -> ConnectionInfo:
        """Start the HTTP listener.

        Args:
            port: Port to bind (settings default, 0 for ephemeral).
            host: Host to bind (settings default).

        Returns:
            Connection info.

        Raises:
            BindError: If the listener could not be established.
        """
        info = await self.connection.listen(
            port=self.settings.port if port is None else port,
            host=host or self.settings.host,
        )
        self.registry.base_url = info.url
        return info

    async def close(self) -> None:
        """Stop the HTTP listener and drop compiled assets.

        Raises:
            NotRunningError: If the server is not running.
        """
        try:
            await self.connection.close()
        finally:
            self.registry.base_url = ""
        self._release_assets()

    async def wait_closed(self) -> None:
        try:
            await self.connection.wait_closed()
        finally:
            self.registry.base_url = ""
        self._release_assets()

    def _release_assets(self) -> None:
        self.store.cleanup()
        self.cache.clear()

    async def __aenter__(self) -> "PreviewServer":
        await self.listen()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        if self.connection.info is not None:
            await self.close()

    # ------------------------------------------------------------------
    # Compilation
    # ------------------------------------------------------------------

    async def compile(self, entry_path: str | os.PathLike) -> list[str]:
        """Compile an entry module, reusing the cached build when possible.

        A build is reused while the entry's modification time is unchanged.
        With ``dedupe_compilations`` on, concurrent requests for the same
        entry at the same modification time share one in-flight build; a
        request made after the entry changed starts its own build. Builds
        are not cancelled when the requester goes away.

        Args:
            entry_path: Entry module path, absolute or relative to the CWD.

        Returns:
            Emitted asset file names in compiler order.

        Raises:
            EntryNotFoundError: If the entry module does not exist.
            CompilerInvocationError: If the bundler could not run.
            CompilationError: If the module graph has errors.
        """
        logger.debug("compiling %s", entry_path)
        lookup = self.cache.lookup_or_mark_stale(entry_path)

        if isinstance(lookup, CacheEntry):
            return list(lookup.asset_files)

        dedupe = self.settings.dedupe_compilations
        key = (lookup.entry_path, lookup.last_modified)
        if dedupe:
            pending = self._pending.get(key)
            if pending is not None:
                logger.debug("awaiting the in-flight build of %s", lookup.entry_path)
                return list(await asyncio.shield(pending))

        build = asyncio.ensure_future(self._build(lookup))
        if dedupe:
            self._pending[key] = build
        build.add_done_callback(partial(self._on_build_done, key))

        return list(await asyncio.shield(build))

    async def _build(self, stale: Stale) -> tuple[str, ...]:
        asset_files = await self.compiler.compile(stale.entry_path)
        entry = self.cache.store(stale.entry_path, stale.last_modified, asset_files)
        return entry.asset_files

    def _on_build_done(self, key: tuple[str, int], build: asyncio.Future) -> None:
        entry_path = key[0]
        if self._pending.get(key) is build:
            del self._pending[key]
        if not build.cancelled() and build.exception() is not None:
            logger.debug("build of %s failed: %s", entry_path, build.exception())

    def get_compilation_url(self, entry_path: Optional[str] = None) -> str:
        """URL rendering an ad hoc preview of an entry module."""
        url = make_url("/preview", self.url or "")
        if entry_path:
            url += "?" + urlencode({"entry": entry_path})
        return url

    # ------------------------------------------------------------------
    # Pages and routes
    # ------------------------------------------------------------------

    def create_page(
        self,
        entry_path: Optional[str | os.PathLike] = None,
        title: Optional[str] = None,
        markup: Optional[str | os.PathLike] = None,
    ) -> PageHandle:
        """Register a preview page.

        Args:
            entry_path: Entry module to compile, or None for a bare page.
            title: Document title.
            markup: Literal HTML or a path to a markup file.

        Returns:
            Page id and preview URL.

        Raises:
            EntryNotFoundError: If the entry module does not exist.
        """
        if entry_path is not None:
            entry_path = to_absolute_path(entry_path)
            if not os.path.isfile(entry_path):
                raise EntryNotFoundError(entry_path)

        options = PageOptions(
            title=title,
            markup=os.fspath(markup) if markup is not None else None,
        )
        return self.registry.create_page(entry_path, options)

    def remove_page(self, page_id: str) -> bool:
        return self.registry.remove_page(page_id)

    def use(self, register_fn: RegisterFn) -> Callable[[], None]:
        """Add routes for the duration of a test.

        Args:
            register_fn: Called with the app; may add any routes.

        Returns:
            Callable removing exactly the added routes.
        """
        return self.routes.apply_patch(register_fn)

    def set_content_base(self, content_base: Optional[str | os.PathLike]) -> None:
        """Serve static files from a directory (None turns it off).

        Raises:
            FileNotFoundError: If the directory does not exist.
        """
        if content_base is None:
            self.content_base = None
            self.static_files = None
            return

        path = to_absolute_path(content_base)
        if not os.path.isdir(path):
            raise FileNotFoundError(
                f'Failed to use "{path}" as a content base: given directory does not exist.'
            )
        self.content_base = path
        self.static_files = StaticFiles(directory=path, html=True)
