# =============================================================================
# core/system.py  —  Subprocess helper for the terminal tools
# =============================================================================
#
# A thin async wrapper over asyncio subprocesses.  Commands are always given
# as argument vectors (never a shell string), so user-supplied values such
# as process names can't inject shell syntax.
# =============================================================================

import asyncio
import logging
from dataclasses import dataclass
from typing import Optional

from core.errors import CommandError

logger = logging.getLogger(__name__)

# background tasks waiting on detached children
_reapers: set[asyncio.Task] = set()


@dataclass(frozen=True)
class CommandResult:
    stdout: str
    stderr: str
    returncode: int


async def run_command(*argv: str, timeout: Optional[float] = None, check: bool = True) -> CommandResult:
    """Run `argv` to completion and capture its output.

    Raises:
        CommandError: If the executable is missing, the timeout expires, or
            (with check=True) the command exits non-zero.
    """
    logger.debug("exec %s", " ".join(argv))
    try:
        proc = await asyncio.create_subprocess_exec(
            *argv,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
    except (FileNotFoundError, PermissionError) as exc:
        raise CommandError(f"Cannot run {argv[0]}: {exc}") from exc

    try:
        stdout, stderr = await asyncio.wait_for(proc.communicate(), timeout=timeout)
    except asyncio.TimeoutError:
        proc.kill()
        await proc.wait()
        raise CommandError(f"{argv[0]} timed out after {timeout}s") from None

    result = CommandResult(
        stdout=stdout.decode("utf-8", errors="replace"),
        stderr=stderr.decode("utf-8", errors="replace"),
        returncode=proc.returncode,
    )
    if check and result.returncode != 0:
        detail = result.stderr.strip() or f"exit code {result.returncode}"
        raise CommandError(f"{argv[0]} failed: {detail}", result.returncode,
                           result.stdout, result.stderr)
    return result


async def _reap(proc: asyncio.subprocess.Process) -> None:
    returncode = await proc.wait()
    logger.debug("detached pid %s exited with %s", proc.pid, returncode)


async def spawn_detached(*argv: str) -> None:
    """Start `argv` in its own session and return without waiting for it.

    The child is reaped in the background, so its transport is closed once it
    exits.
    """
    logger.debug("spawn %s", " ".join(argv))
    try:
        proc = await asyncio.create_subprocess_exec(
            *argv,
            stdin=asyncio.subprocess.DEVNULL,
            stdout=asyncio.subprocess.DEVNULL,
            stderr=asyncio.subprocess.DEVNULL,
            start_new_session=True,
        )
    except (FileNotFoundError, PermissionError) as exc:
        raise CommandError(f"Cannot start {argv[0]}: {exc}") from exc

    task = asyncio.ensure_future(_reap(proc))
    _reapers.add(task)
    task.add_done_callback(_reapers.discard)
