"""Normalizes bundler outcomes into return values and exceptions."""

import logging
import os

from pagewith.compiler.base import Bundler, DiagnosticFailure, InvocationFailure, Success
from pagewith.config import BundlerConfig
from pagewith.exceptions import CompilationError, CompilerInvocationError
from pagewith.storage.base import AssetStore

logger = logging.getLogger(__name__)


class CompilerAdapter:
    """Invokes the bundler once per call.

    Every call is a fresh engine invocation; the only state shared between
    calls is the asset store the bundler writes into.

    Attributes:
        bundler: Bundling engine.
        output: Store receiving emitted files.
        config: Bundler options.
        invocations: Number of engine invocations so far.
    """

    def __init__(self, bundler: Bundler, output: AssetStore, config: BundlerConfig) -> None:
        self.bundler = bundler
        self.output = output
        self.config = config
        self.invocations = 0

    async def compile(self, entry_path: str) -> list[str]:
        """Compile an entry module.

        Args:
            entry_path: Absolute path of the entry module.

        Returns:
            Emitted asset file names in compiler order.

        Raises:
            CompilerInvocationError: If the engine could not run.
            CompilationError: If the engine reported diagnostics.
        """
        entry_path = os.path.abspath(entry_path)
        self.invocations += 1
        logger.debug("compiling %s with %s", entry_path, self.bundler.name)

        try:
            outcome = await self.bundler.run(entry_path, self.config, self.output)
        except OSError as e:
            logger.error("failed to compile %s: %s", entry_path, e)
            raise CompilerInvocationError(entry_path, str(e)) from e

        if isinstance(outcome, InvocationFailure):
            logger.error("failed to invoke the bundler for %s: %s", entry_path, outcome.error)
            raise CompilerInvocationError(entry_path, outcome.error)

        if isinstance(outcome, DiagnosticFailure):
            logger.error(
                "failed to compile %s (%d diagnostics)",
                entry_path,
                len(outcome.diagnostics),
            )
            raise CompilationError(entry_path, list(outcome.diagnostics))

        if isinstance(outcome, Success):
            return list(outcome.asset_files)

        raise TypeError(f"Unexpected build outcome: {outcome!r}")
