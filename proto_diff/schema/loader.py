"""
Schema loader - compile a schema root + entry file into a SchemaPool.

Two kinds of entry file are supported:
    - ``.proto`` sources, compiled with the protoc bundled in ``grpcio-tools``
      into a temporary FileDescriptorSet (imports included)
    - Precompiled descriptor sets (``.pb``, ``.desc``, ``.binpb``,
      ``.protoset``), read directly

protoc runs in a subprocess so its stderr can be captured. Each
``file:line:column: message`` line becomes a Diagnostic passed to the
caller's callback; warnings are prefixed with ``warning:`` by protoc.

Usage:
    ```python
    from proto_diff.schema import load_schema

    pool = load_schema("protos/v1", "shapes/shapes.proto")
    for message in pool.entry.messages:
        print(message.full_name)
    ```
"""

import logging
import os
import re
import subprocess
import sys
import tempfile
from importlib import resources
from pathlib import Path
from typing import Callable, List, Optional, Sequence, Union

from google.protobuf import descriptor_pb2
from google.protobuf.message import DecodeError

from proto_diff.schema.errors import Diagnostic, SchemaLoadError
from proto_diff.schema.parser import parse_descriptor_set
from proto_diff.schema.types import SchemaPool

logger = logging.getLogger(__name__)

DESCRIPTOR_SET_SUFFIXES = (".pb", ".desc", ".binpb", ".protoset")

DEFAULT_PROTOC_TIMEOUT = 60.0
PROTOC_TIMEOUT_ENV = "PROTO_DIFF_PROTOC_TIMEOUT"

DiagnosticCallback = Callable[[Diagnostic], None]

_LOCATED_LINE = re.compile(r"^(?P<file>.+?):(?P<line>\d+):(?P<column>\d+): (?P<message>.*)$")
_FILE_LINE = re.compile(r"^(?P<file>[^:]+): (?P<message>.*)$")


def _log_diagnostic(diagnostic: Diagnostic) -> None:
    if diagnostic.is_warning:
        logger.warning(str(diagnostic))
    else:
        logger.error(str(diagnostic))


def load_schema(
    root_dir: Union[str, Path],
    entry_file: Union[str, Path],
    on_diagnostic: Optional[DiagnosticCallback] = None,
    extra_include_paths: Sequence[Union[str, Path]] = (),
    protoc_timeout: Optional[float] = None
) -> SchemaPool:
    """
    Load a schema from ``root_dir``/``entry_file``.

    Args:
        root_dir: Directory that import paths are resolved against
        entry_file: Entry file, relative to root_dir
        on_diagnostic: Called for every compiler error and warning
            (default: log them)
        extra_include_paths: Additional import roots searched after root_dir
        protoc_timeout: Seconds to wait for protoc (default:
            $PROTO_DIFF_PROTOC_TIMEOUT or 60)

    Returns:
        SchemaPool: Snapshots of the entry file and its imports

    Raises:
        SchemaLoadError: If the schema cannot be compiled, decoded or resolved
    """
    on_diagnostic = on_diagnostic or _log_diagnostic
    root = Path(root_dir)
    entry = Path(entry_file)

    if not root.is_dir():
        raise SchemaLoadError(f"Schema root directory not found: {root}")

    entry_path = root / entry
    if not entry_path.is_file():
        raise SchemaLoadError(f"Schema entry file not found: {entry_path}")

    if entry.suffix in DESCRIPTOR_SET_SUFFIXES:
        logger.debug(f"Reading precompiled descriptor set {entry_path}")
        descriptor_set = read_descriptor_set(entry_path)
        return parse_descriptor_set(descriptor_set)

    timeout = protoc_timeout if protoc_timeout is not None else _timeout_from_env()
    descriptor_set = compile_proto(root, entry, on_diagnostic, extra_include_paths, timeout)
    return parse_descriptor_set(descriptor_set, entry_file=entry.as_posix())


def read_descriptor_set(path: Path) -> descriptor_pb2.FileDescriptorSet:
    """Decode a serialized FileDescriptorSet file."""
    try:
        return descriptor_pb2.FileDescriptorSet.FromString(path.read_bytes())
    except DecodeError as e:
        raise SchemaLoadError(f"Invalid descriptor set {path}: {e}")


def compile_proto(
    root: Path,
    entry: Path,
    on_diagnostic: DiagnosticCallback,
    extra_include_paths: Sequence[Union[str, Path]] = (),
    timeout: float = DEFAULT_PROTOC_TIMEOUT
) -> descriptor_pb2.FileDescriptorSet:
    """
    Compile a .proto entry file and its imports with protoc.

    Args:
        root: Import root
        entry: Entry file relative to root
        on_diagnostic: Receives parsed protoc messages
        extra_include_paths: Additional import roots
        timeout: Seconds before protoc is abandoned

    Returns:
        FileDescriptorSet: Compiled set, imports first, entry file last

    Raises:
        SchemaLoadError: If protoc is unavailable, fails or times out
    """
    root = root.resolve()
    include_paths = [str(root)] + [str(Path(p).resolve()) for p in extra_include_paths]
    well_known = _well_known_include_path()
    if well_known:
        include_paths.append(well_known)

    with tempfile.TemporaryDirectory(prefix="proto_diff_") as tmp:
        output = Path(tmp) / "schema.binpb"
        command = [sys.executable, "-m", "grpc_tools.protoc"]
        command += [f"--proto_path={path}" for path in include_paths]
        command += ["--include_imports", f"--descriptor_set_out={output}", entry.as_posix()]

        logger.debug(f"Running: {' '.join(command)}")
        try:
            completed = subprocess.run(
                command,
                cwd=str(root),
                capture_output=True,
                text=True,
                timeout=timeout
            )
        except subprocess.TimeoutExpired:
            raise SchemaLoadError(f"protoc timed out after {timeout:.0f}s compiling {root / entry}")
        except OSError as e:
            raise SchemaLoadError(f"Failed to run protoc: {e}")

        diagnostics = parse_protoc_output(completed.stderr)
        for diagnostic in diagnostics:
            on_diagnostic(diagnostic)

        if completed.returncode != 0 or not output.exists():
            raise SchemaLoadError(f"Failed to load schema {root / entry}", diagnostics)

        return read_descriptor_set(output)


def parse_protoc_output(stderr: str) -> List[Diagnostic]:
    """
    Parse protoc's stderr into diagnostics.

    Examples of recognised lines:
        shapes.proto:4:3: Expected ";".
        shapes.proto:1:1: warning: Import other.proto is unused.
        missing.proto: File not found.
    """
    diagnostics = []
    for raw_line in stderr.splitlines():
        line = raw_line.strip()
        if not line:
            continue

        match = _LOCATED_LINE.match(line)
        if match:
            file_name = match.group("file")
            line_number = int(match.group("line"))
            column = int(match.group("column"))
            message = match.group("message")
        else:
            match = _FILE_LINE.match(line)
            file_name = match.group("file") if match else ""
            message = match.group("message") if match else line
            line_number = column = 0

        is_warning = message.lower().startswith("warning:")
        if is_warning:
            message = message[len("warning:"):].strip()

        diagnostics.append(Diagnostic(file_name, line_number, column, message, is_warning))

    return diagnostics


def _well_known_include_path() -> Optional[str]:
    """Directory holding google/protobuf/*.proto shipped with grpcio-tools."""
    try:
        path = resources.files("grpc_tools") / "_proto"
    except ModuleNotFoundError:
        raise SchemaLoadError("grpcio-tools is required to compile .proto files. Install with: pip install grpcio-tools")
    return str(path) if path.is_dir() else None


def _timeout_from_env() -> float:
    value = os.environ.get(PROTOC_TIMEOUT_ENV)
    if not value:
        return DEFAULT_PROTOC_TIMEOUT
    try:
        return float(value)
    except ValueError:
        logger.warning(f"Ignoring invalid {PROTOC_TIMEOUT_ENV}={value!r}")
        return DEFAULT_PROTOC_TIMEOUT
