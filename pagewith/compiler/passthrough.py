"""Bundler that serves a self-contained script as-is."""

import asyncio
import logging

from pagewith.compiler.base import Bundler, BuildOutcome, InvocationFailure, Success, output_name
from pagewith.config import BundlerConfig
from pagewith.storage.base import AssetStore

logger = logging.getLogger(__name__)


class PassthroughBundler(Bundler):
    """Emits the entry module verbatim as a single hashed chunk.

    Useful for usage examples that import nothing, and for running the
    harness on machines without a JavaScript toolchain.
    """

    name = "passthrough"

    async def run(
        self,
        entry_path: str,
        config: BundlerConfig,
        output: AssetStore,
    ) -> BuildOutcome:
        try:
            content = await asyncio.to_thread(_read_bytes, entry_path)
        except OSError as e:
            return InvocationFailure(error=str(e))

        filename = output_name(config, entry_path, content)
        output.write(filename, content)
        logger.debug("emitted %s for %s", filename, entry_path)
        return Success(asset_files=(filename,))


def _read_bytes(path: str) -> bytes:
    with open(path, "rb") as f:
        return f.read()
