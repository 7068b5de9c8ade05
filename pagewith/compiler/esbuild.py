"""esbuild bundler adapter.

Runs the ``esbuild`` executable in a subprocess, lets it write into a scratch
directory and copies every emitted file into the asset store. The metafile
tells which files were emitted and in which order.
"""

import asyncio
import json
import logging
import os
import re
import shutil
import tempfile
from pathlib import Path

from pagewith.compiler.base import (
    Bundler,
    BuildOutcome,
    DiagnosticFailure,
    InvocationFailure,
    Success,
)
from pagewith.config import BundlerConfig
from pagewith.exceptions import Diagnostic
from pagewith.storage.base import AssetStore

logger = logging.getLogger(__name__)

_ERROR_HEADER = re.compile(r"^\s*(?:✘|X)\s+\[ERROR\]\s+(?P<message>.+?)\s*$")
_LOCATION = re.compile(r"^\s+(?P<file>\S.*?):(?P<line>\d+):(?P<column>\d+):\s*$")


def parse_diagnostics(stderr: str) -> list[Diagnostic]:
    """Parse esbuild's human readable error output.

    Each error starts with an ``[ERROR]`` header; the first location line
    that follows it (``file:line:column:``) is attached to it.

    Args:
        stderr: esbuild stderr, without colors.

    Returns:
        Diagnostics in the order esbuild printed them.
    """
    diagnostics: list[Diagnostic] = []
    message = None
    located = False

    for line in stderr.splitlines():
        header = _ERROR_HEADER.match(line)
        if header:
            if message is not None and not located:
                diagnostics.append(Diagnostic(message=message))
            message = header.group("message")
            located = False
            continue

        if message is None or located:
            continue

        location = _LOCATION.match(line)
        if location:
            diagnostics.append(
                Diagnostic(
                    message=message,
                    file=location.group("file"),
                    line=int(location.group("line")),
                    column=int(location.group("column")),
                )
            )
            located = True

    if message is not None and not located:
        diagnostics.append(Diagnostic(message=message))

    return diagnostics


class EsbuildBundler(Bundler):
    """Bundles entry modules with the esbuild CLI.

    Attributes:
        binary: esbuild executable name or path.
    """

    name = "esbuild"

    def __init__(self, binary: str = "esbuild") -> None:
        self.binary = binary

    def build_command(
        self,
        executable: str,
        entry_path: str,
        config: BundlerConfig,
        outdir: str,
        metafile: str,
    ) -> list[str]:
        """Translate a bundler config into an esbuild command line."""
        cmd = [
            executable,
            entry_path,
            "--bundle",
            f"--outdir={outdir}",
            f"--entry-names={config.entry_names}",
            f"--metafile={metafile}",
            f"--target={config.target}",
            f"--format={config.format}",
            f"--platform={config.platform}",
            "--log-level=error",
            "--color=false",
        ]

        if config.minify or config.mode == "production":
            cmd.append("--minify")
        if config.sourcemap:
            cmd.append("--sourcemap")

        define = {"process.env.NODE_ENV": json.dumps(config.mode)}
        define.update(config.define)
        for key, value in define.items():
            cmd.append(f"--define:{key}={value}")
        for ext, loader in config.loader.items():
            cmd.append(f"--loader:{ext}={loader}")
        for module in config.external:
            cmd.append(f"--external:{module}")

        cmd.extend(config.extra_args)
        return cmd

    async def run(
        self,
        entry_path: str,
        config: BundlerConfig,
        output: AssetStore,
    ) -> BuildOutcome:
        executable = shutil.which(self.binary)
        if executable is None:
            return InvocationFailure(error=f'esbuild executable "{self.binary}" not found')

        scratch = tempfile.mkdtemp(prefix="pagewith-esbuild-")
        try:
            outdir = os.path.join(scratch, "dist")
            metafile = os.path.join(scratch, "meta.json")
            cmd = self.build_command(executable, entry_path, config, outdir, metafile)

            env = dict(os.environ)
            env["NODE_PATH"] = os.pathsep.join(os.path.abspath(p) for p in config.node_paths)

            logger.debug("running %s", " ".join(cmd))
            try:
                process = await asyncio.create_subprocess_exec(
                    *cmd,
                    stdout=asyncio.subprocess.PIPE,
                    stderr=asyncio.subprocess.PIPE,
                    cwd=scratch,
                    env=env,
                )
            except OSError as e:
                return InvocationFailure(error=str(e))

            _, stderr = await process.communicate()
            stderr_text = stderr.decode("utf-8", errors="replace")

            if process.returncode != 0:
                diagnostics = parse_diagnostics(stderr_text)
                if not diagnostics:
                    return InvocationFailure(
                        error=stderr_text.strip() or f"esbuild exited with code {process.returncode}"
                    )
                return DiagnosticFailure(diagnostics=tuple(diagnostics))

            return Success(asset_files=tuple(self._collect(scratch, outdir, metafile, output)))
        finally:
            shutil.rmtree(scratch, ignore_errors=True)

    @staticmethod
    def _collect(scratch: str, outdir: str, metafile: str, output: AssetStore) -> list[str]:
        with open(metafile, "r", encoding="utf-8") as f:
            meta = json.load(f)

        files = []
        for key in meta.get("outputs", {}):
            emitted = Path(scratch, key).resolve()
            name = emitted.relative_to(Path(outdir).resolve()).as_posix()
            output.write(name, emitted.read_bytes())
            files.append(name)
        return files
