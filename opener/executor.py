"""
Opener - Execution engine.
Builds the escaped command line, runs it through the shell in the target
folder and returns a structured ExecuteResult. Never raises to the caller.
"""
import asyncio
from typing import Callable, Optional

from .escape import build_command_line
from .log_sink import LogSink
from .models import ExecuteRequest, ExecuteResult

Notifier = Callable[[str], None]

STDERR_TAIL_BYTES = 12000


async def tail_stream(stream: asyncio.StreamReader, max_bytes: int) -> bytes:
    """Drain `stream`, keeping only its last `max_bytes`."""
    tail = b""
    while True:
        chunk = await stream.read(65536)
        if not chunk:
            return tail
        tail = (tail + chunk)[-max_bytes:]


def _failure_text(command_line: str, returncode: int, stderr: bytes) -> str:
    text = f"Command failed with exit code {returncode}: {command_line}"
    detail = stderr.decode("utf-8", errors="replace").strip()
    return f"{text}\n{detail}" if detail else text


def log_execution(sink: LogSink, result: ExecuteResult) -> None:
    if result.ok:
        sink.info(f"Successfully executed: {result.command_line} (cwd: {result.cwd})")
    else:
        sink.error(
            f"Failed to execute: {result.command_line} (cwd: {result.cwd}) - Error: {result.error}"
        )


async def execute_command(request: ExecuteRequest, sink: LogSink) -> ExecuteResult:
    """
    Run one request to completion. Exactly one subprocess, no retry, no timeout.
    Spawn errors (missing cwd, bad interpreter) and non-zero exits both come
    back as ok=False with the error text filled in. stdout is discarded and
    only the last STDERR_TAIL_BYTES of stderr are kept for the error text.
    """
    command_line = build_command_line(request.command, request.args)
    returncode = None
    try:
        proc = await asyncio.create_subprocess_shell(
            command_line,
            cwd=request.cwd,
            stdin=asyncio.subprocess.DEVNULL,
            stdout=asyncio.subprocess.DEVNULL,
            stderr=asyncio.subprocess.PIPE,
        )
        stderr = await tail_stream(proc.stderr, STDERR_TAIL_BYTES)
        returncode = await proc.wait()
        error = None if returncode == 0 else _failure_text(command_line, returncode, stderr)
    except Exception as e:
        error = str(e) or type(e).__name__

    result = ExecuteResult(
        ok=error is None,
        label=request.label,
        command_line=command_line,
        cwd=request.cwd,
        error=error,
        returncode=returncode,
    )
    log_execution(sink, result)
    return result


def failure_message(result: ExecuteResult) -> str:
    return f"Failed to execute: {result.label}\nCommand: {result.command_line}\nError: {result.error}"


async def run_with_notification(
    request: ExecuteRequest,
    sink: LogSink,
    notify: Optional[Notifier] = None,
) -> ExecuteResult:
    """UI-facing wrapper: a failed run is shown to the user once through `notify`."""
    result = await execute_command(request, sink)
    if not result.ok and notify is not None:
        notify(failure_message(result))
    return result
