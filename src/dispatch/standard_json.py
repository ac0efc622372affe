"""Dispatcher for compilers that speak solc-style standard JSON on stdio."""

from __future__ import annotations

import logging
import subprocess
import sys
from pathlib import Path
from typing import TYPE_CHECKING, Any

import orjson

from artifacts.models.compiler import CompilerInfo, Diagnostic
from contract.errors import DispatchFailure
from dispatch.base import DispatchRequest, DispatchResponse, RawArtifact

if TYPE_CHECKING:
    from collections.abc import Sequence

logger = logging.getLogger(__name__)

_SEVERITIES = {"error": "error", "warning": "warning", "info": "info"}


def _creation_flags() -> int:
    if sys.platform == "win32":
        return subprocess.CREATE_NO_WINDOW
    return 0


def build_standard_json_input(
    request: DispatchRequest,
    *,
    language: str = "Solidity",
) -> dict[str, Any]:
    """Build the standard-JSON input document for ``request``.

    Full output is only selected for the compilation targets; the remaining
    sources are submitted so the compiler can resolve their symbols.
    Imports that resolved through a search root are passed as exact
    remappings so the compiler finds them under their submitted key.
    """
    settings = request.settings
    selected = list(settings.output_selection)
    if request.targets:
        output_selection = {target: {"*": selected} for target in sorted(request.targets)}
    else:
        output_selection = {"*": {"*": selected}}

    compiler_settings: dict[str, Any] = {
        "optimizer": {
            "enabled": settings.optimizer.enabled,
            "runs": settings.optimizer.runs,
        },
        "outputSelection": output_selection,
    }
    if request.remappings:
        compiler_settings["remappings"] = [
            f"{reference}={identity}"
            for reference, identity in sorted(request.remappings.items())
        ]

    return {
        "language": language,
        "sources": {
            key: {"content": text} for key, text in sorted(request.sources.items())
        },
        "settings": compiler_settings,
    }


def _parse_diagnostic(raw: dict[str, Any]) -> Diagnostic:
    location = raw.get("sourceLocation") or {}
    return Diagnostic(
        severity=_SEVERITIES.get(str(raw.get("severity", "error")).lower(), "error"),
        message=str(raw.get("formattedMessage") or raw.get("message") or ""),
        source_key=location.get("file"),
        start=location.get("start"),
        end=location.get("end"),
    )


def parse_standard_json_output(
    output: dict[str, Any],
    compiler: CompilerInfo,
) -> DispatchResponse:
    """Translate a standard-JSON output document into a ``DispatchResponse``.

    Raises:
        DispatchFailure: The output reports at least one error.
    """
    diagnostics = [_parse_diagnostic(raw) for raw in output.get("errors", [])]
    errors = [d for d in diagnostics if d.severity == "error"]
    if errors:
        msg = f"Compilation failed with {len(errors)} error(s)"
        raise DispatchFailure(msg, diagnostics)

    artifacts = [
        RawArtifact(source_key=source_key, name=name, payload=payload)
        for source_key, units in sorted(output.get("contracts", {}).items())
        for name, payload in sorted(units.items())
    ]
    source_ids = {
        source_key: int(info["id"])
        for source_key, info in output.get("sources", {}).items()
        if isinstance(info, dict) and "id" in info
    }
    return DispatchResponse(
        compiler=compiler,
        artifacts=artifacts,
        source_ids=source_ids,
        diagnostics=diagnostics,
    )


class StandardJsonDispatcher:
    """Run a compiler command with standard-JSON input on stdin.

    The command is run once per build pass with the whole closure; the
    backend's own failures surface as ``DispatchFailure``.
    """

    def __init__(
        self,
        command: Sequence[str],
        *,
        compiler: CompilerInfo | None = None,
        language: str = "Solidity",
    ) -> None:
        if not command:
            msg = "compiler command must not be empty"
            raise ValueError(msg)
        self.command = list(command)
        self.compiler = compiler
        self.language = language

    def _compiler_info(self, request: DispatchRequest) -> CompilerInfo:
        if self.compiler is not None:
            return self.compiler
        return CompilerInfo(
            name=Path(self.command[0]).name,
            version=request.settings.version or "unknown",
        )

    def dispatch(self, request: DispatchRequest) -> DispatchResponse:
        payload = orjson.dumps(build_standard_json_input(request, language=self.language))
        logger.info(
            f"Dispatching {len(request.sources)} source(s) "
            f"({len(request.targets)} target(s)) to {' '.join(self.command)}"
        )

        try:
            completed = subprocess.run(
                self.command,
                input=payload,
                capture_output=True,
                timeout=request.settings.timeout,
                check=False,
                creationflags=_creation_flags(),
            )
        except FileNotFoundError as exc:
            msg = f"Compiler command not found: {self.command[0]}"
            raise DispatchFailure(msg) from exc
        except subprocess.TimeoutExpired as exc:
            msg = f"Compiler timed out after {request.settings.timeout}s"
            raise DispatchFailure(msg) from exc

        stderr = completed.stderr.decode("utf-8", errors="replace").strip()
        if completed.returncode != 0 and not completed.stdout.strip():
            msg = f"Compiler exited with status {completed.returncode}: {stderr}"
            raise DispatchFailure(msg)

        try:
            output = orjson.loads(completed.stdout)
        except orjson.JSONDecodeError as exc:
            msg = f"Compiler produced invalid JSON output: {exc}"
            raise DispatchFailure(msg) from exc
        if not isinstance(output, dict):
            msg = "Compiler output must be a JSON object"
            raise DispatchFailure(msg)

        return parse_standard_json_output(output, self._compiler_info(request))


__all__ = [
    "StandardJsonDispatcher",
    "build_standard_json_input",
    "parse_standard_json_output",
]
