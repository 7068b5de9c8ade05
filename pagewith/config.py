"""Configuration module using Pydantic Settings."""

import copy
import os
from typing import Any, Literal, Optional

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Preview server settings loaded from environment variables and .env file.

    Every field can be set through a ``PAGEWITH_``-prefixed environment
    variable, e.g. ``PAGEWITH_BUNDLER=passthrough``.

    Attributes:
        host: Host address the preview server binds to.
        port: Port the preview server binds to (0 picks an ephemeral port).
        debug: Enable debug logging and a headed browser.
        bundler: Bundling engine used for entry modules.
        esbuild_binary: Name or path of the esbuild executable.
        in_memory: Keep compiled assets in memory instead of on disk.
        output_dir: Directory for compiled assets when ``in_memory`` is off.
        content_base: Directory of static files served verbatim.
        dedupe_compilations: Share one in-flight build between concurrent
            requests for the same entry module.
        browser_type: Playwright browser engine.
        headless: Run the browser headless.
        wait_until: Playwright navigation wait condition.
    """

    model_config = SettingsConfigDict(
        env_prefix="PAGEWITH_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    # Server Configuration
    host: str = Field(default="localhost", description="Server host address")
    port: int = Field(default=0, description="Server port")
    debug: bool = Field(default=False, description="Enable debug mode")

    # Compilation
    bundler: Literal["esbuild", "passthrough"] = Field(
        default="esbuild",
        description="Bundling engine",
    )
    esbuild_binary: str = Field(default="esbuild", description="esbuild executable")
    in_memory: bool = Field(default=True, description="Keep compiled assets in memory")
    output_dir: Optional[str] = Field(
        default=None,
        description="Output directory for on-disk compilation",
    )
    content_base: Optional[str] = Field(
        default=None,
        description="Directory of static files to serve",
    )
    dedupe_compilations: bool = Field(
        default=True,
        description="Await a pending build instead of starting a duplicate",
    )

    # Browser
    browser_type: Literal["chromium", "firefox", "webkit"] = Field(
        default="chromium",
        description="Playwright browser engine",
    )
    headless: Optional[bool] = Field(
        default=None,
        description="Run headless (defaults to the inverse of debug)",
    )
    wait_until: Literal["load", "domcontentloaded", "networkidle", "commit"] = Field(
        default="networkidle",
        description="Navigation wait condition",
    )

    @field_validator("content_base", "output_dir", mode="before")
    @classmethod
    def expand_directory(cls, v: Any) -> Any:
        if isinstance(v, os.PathLike):
            v = os.fspath(v)
        if not v or not isinstance(v, str):
            return v or None
        return os.path.abspath(os.path.expanduser(v.strip()))

    @property
    def is_headless(self) -> bool:
        """Whether the browser should be launched without a window."""
        if self.headless is not None:
            return self.headless
        return not self.debug


class BundlerConfig(BaseModel):
    """Options passed to the bundling engine.

    Attributes:
        mode: ``development`` keeps output readable, ``production`` minifies.
        target: Language target of the emitted code.
        format: Output module format.
        platform: Platform the bundle runs on.
        entry_names: Output file name pattern for the entry chunk.
        minify: Minify the output regardless of mode.
        sourcemap: Emit external source maps.
        define: Global identifier replacements.
        loader: File extension to loader mapping.
        external: Module specifiers excluded from the bundle.
        node_paths: Extra directories searched for bare module imports.
        extra_args: Raw arguments appended to the engine command line.
    """

    mode: Literal["development", "production"] = "development"
    target: str = "es2017"
    format: Literal["iife", "esm", "cjs"] = "iife"
    platform: Literal["browser", "neutral"] = "browser"
    entry_names: str = "main.[hash]"
    minify: bool = False
    sourcemap: bool = False
    define: dict[str, str] = Field(default_factory=dict)
    loader: dict[str, str] = Field(default_factory=dict)
    external: list[str] = Field(default_factory=list)
    node_paths: list[str] = Field(
        default_factory=lambda: ["node_modules", os.path.join(os.getcwd(), "node_modules")]
    )
    extra_args: list[str] = Field(default_factory=list)


def deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Merge ``override`` over ``base`` without mutating either.

    Nested dicts are merged key by key, lists are concatenated and any other
    value in ``override`` replaces the one in ``base``.
    """
    merged = copy.deepcopy(base)
    for key, value in override.items():
        current = merged.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            merged[key] = deep_merge(current, value)
        elif isinstance(current, list) and isinstance(value, list):
            merged[key] = current + list(value)
        else:
            merged[key] = copy.deepcopy(value)
    return merged


def merge_bundler_config(
    override: BundlerConfig | dict[str, Any] | None = None,
    base: BundlerConfig | None = None,
) -> BundlerConfig:
    """Build a bundler config from the defaults and an optional override.

    Args:
        override: Partial config merged over the defaults.
        base: Config to merge into (defaults when omitted).

    Returns:
        Merged bundler config.
    """
    base = base or BundlerConfig()
    if override is None:
        return base
    if isinstance(override, BundlerConfig):
        override = override.model_dump(exclude_unset=True)
    return BundlerConfig.model_validate(deep_merge(base.model_dump(), override))


# Global settings instance
_settings: Settings | None = None


def get_settings() -> Settings:
    """Get the global settings instance.

    Returns:
        Settings instance.
    """
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings
