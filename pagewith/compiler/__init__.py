"""Bundling engines and the compiler adapter."""

from pagewith.compiler.adapter import CompilerAdapter
from pagewith.compiler.base import (
    BuildOutcome,
    Bundler,
    DiagnosticFailure,
    InvocationFailure,
    Success,
)
from pagewith.compiler.esbuild import EsbuildBundler
from pagewith.compiler.passthrough import PassthroughBundler
from pagewith.config import Settings

__all__ = [
    "BuildOutcome",
    "Bundler",
    "CompilerAdapter",
    "DiagnosticFailure",
    "EsbuildBundler",
    "InvocationFailure",
    "PassthroughBundler",
    "Success",
    "create_bundler",
]


def create_bundler(settings: Settings) -> Bundler:
    """Create the bundler selected in the settings."""
    if settings.bundler == "passthrough":
        return PassthroughBundler()
    return EsbuildBundler(binary=settings.esbuild_binary)
