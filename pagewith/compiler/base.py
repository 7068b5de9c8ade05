"""Bundler interface and build outcome types."""

import hashlib
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path
from typing import Union

from pagewith.config import BundlerConfig
from pagewith.exceptions import Diagnostic
from pagewith.storage.base import AssetStore


@dataclass(frozen=True)
class Success:
    """The engine emitted assets.

    Attributes:
        asset_files: Emitted file names in the order the engine reported them.
    """

    asset_files: tuple[str, ...]


@dataclass(frozen=True)
class InvocationFailure:
    """The engine could not run at all (missing executable, bad options)."""

    error: str


@dataclass(frozen=True)
class DiagnosticFailure:
    """The engine ran but the module graph has errors."""

    diagnostics: tuple[Diagnostic, ...] = field(default_factory=tuple)


BuildOutcome = Union[Success, InvocationFailure, DiagnosticFailure]


def content_hash(content: bytes, length: int = 8) -> str:
    """Short content hash used in emitted file names."""
    return hashlib.sha256(content).hexdigest()[:length]


def output_name(config: BundlerConfig, entry_path: str, content: bytes, ext: str = ".js") -> str:
    """Expand the ``entry_names`` pattern for a single emitted file."""
    name = config.entry_names
    name = name.replace("[name]", Path(entry_path).stem)
    name = name.replace("[hash]", content_hash(content))
    name = name.replace("[dir]", "").lstrip("/")
    return name + ext


class Bundler(ABC):
    """Abstract base class for bundling engines.

    A bundler receives an entry module path and a config, writes every file
    it emits into the given asset store and reports the outcome. It must not
    raise for engine errors; those are reported as failure outcomes.

    Attributes:
        name: Unique name for this bundler.
    """

    name: str = "base"

    @abstractmethod
    async def run(
        self,
        entry_path: str,
        config: BundlerConfig,
        output: AssetStore,
    ) -> BuildOutcome:
        """Bundle an entry module.

        Args:
            entry_path: Absolute path of the entry module.
            config: Bundler options.
            output: Store receiving the emitted files.

        Returns:
            Build outcome.
        """
        ...
