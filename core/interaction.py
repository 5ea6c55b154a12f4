# =============================================================================
# core/interaction.py  —  Asking the Human
# =============================================================================
#
# WHAT THIS MODULE DOES:
#   Puts a question or an action request in front of the person at the
#   keyboard and waits for them.
#
# PLATFORM DISPATCH:
#   macOS     native `osascript` dialog; the call suspends until the user
#             clicks a button, then returns their answer / confirmation.
#   Windows   opens a `cmd` window showing the request (answer goes in chat)
#   Linux     opens an `x-terminal-emulator` window, same idea
#
# WAITING:
#   ask_user() has NO timeout by default; a dialog can stay open forever.
#   Pass `timeout=` (seconds) to bound it; on expiry the dialog is killed and
#   InteractionTimeoutError is raised.
#
#   Two prompts aimed at the same person at the same time are the caller's
#   problem; nothing here serializes them.
# =============================================================================

import asyncio
import logging
import re
import shlex
import sys
from typing import Optional

from core.errors import InteractionTimeoutError, ToolExecutionError, UserCancelledError
from core.system import spawn_detached

logger = logging.getLogger(__name__)

ANSWER_TITLE = "Question from AI"
CONFIRM_TITLE = "Action Required"
DEFAULT_PLACEHOLDER = "Type your answer..."
SEND_BUTTON = "Send"
DONE_BUTTON = "Done"
CANCEL_BUTTON = "Cancel"

CONFIRMED = "User confirmed execution."
WAITING_FOR_ANSWER = "Waiting for user input in chat..."
WAITING_FOR_CONFIRMATION = "Waiting for user confirmation..."

_ANSWER_RE = re.compile(r"text returned:(.+)")
_CMD_SPECIAL_RE = re.compile(r"([\^&|<>()%!])")
_CANCELLED_CODE = "-128"


def compose_request(request: str, details: str = "") -> str:
    return f"{request}\n\nDetails: {details}" if details else request


def _applescript_quote(text: str) -> str:
    return '"' + text.replace("\\", "\\\\").replace('"', '\\"') + '"'


def build_dialog_script(text: str, title: str, expect_answer: bool, placeholder: str) -> str:
    """AppleScript for a `display dialog` with the right buttons."""
    if expect_answer:
        return (
            f"display dialog {_applescript_quote(text)} with title {_applescript_quote(title)} "
            f"default answer {_applescript_quote(placeholder)} "
            f'buttons {{"{CANCEL_BUTTON}", "{SEND_BUTTON}"}} default button "{SEND_BUTTON}"'
        )
    return (
        f"display dialog {_applescript_quote(text)} with title {_applescript_quote(title)} "
        f'buttons {{"{CANCEL_BUTTON}", "{DONE_BUTTON}"}} default button "{DONE_BUTTON}"'
    )


async def _run_dialog(script: str, timeout: Optional[float]) -> str:
    try:
        proc = await asyncio.create_subprocess_exec(
            "osascript", "-e", script,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
    except FileNotFoundError as exc:
        raise ToolExecutionError(f"Interaction Error: osascript not available ({exc})") from exc

    try:
        stdout, stderr = await asyncio.wait_for(proc.communicate(), timeout=timeout)
    except asyncio.TimeoutError:
        proc.kill()
        await proc.wait()
        raise InteractionTimeoutError(f"User did not respond within {timeout} seconds.") from None

    if proc.returncode != 0:
        message = stderr.decode("utf-8", errors="replace").strip()
        # the Cancel button is reported as AppleScript error -128
        if _CANCELLED_CODE in message:
            return ""
        raise ToolExecutionError(
            f"Interaction Error: osascript exited with {proc.returncode}: {message or 'no output'}"
        )
    return stdout.decode("utf-8", errors="replace")


async def _ask_macos(text: str, title: str, expect_answer: bool, placeholder: str,
                     timeout: Optional[float]) -> str:
    output = await _run_dialog(build_dialog_script(text, title, expect_answer, placeholder), timeout)
    if expect_answer:
        match = _ANSWER_RE.search(output)
        answer = match.group(1).strip() if match else ""
        if not answer:
            raise UserCancelledError("User cancelled input.")
        return f'User Answer: "{answer}"'

    if f"button returned:{DONE_BUTTON}" not in output:
        raise UserCancelledError("User cancelled operation.")
    return CONFIRMED


def _cmd_escape(text: str) -> str:
    """Make `text` inert as an argument to cmd's `echo`."""
    flat = text.replace("\r", " ").replace("\n", " ").replace('"', "'")
    return _CMD_SPECIAL_RE.sub(r"^\1", flat)


def terminal_command(platform_name: str, text: str, title: str, expect_answer: bool) -> list[str]:
    """argv that opens a console window showing the request."""
    closing = ("Please type your answer in the chat" if expect_answer
               else "Close this window when done")
    if platform_name == "win32":
        lines = " && ".join(["echo " + _cmd_escape(title), "echo.", "echo " + _cmd_escape(text),
                             "echo.", "echo " + closing, "echo.", "pause"])
        return ["cmd", "/c", "start", "cmd", "/k", lines]

    script = "; ".join([
        f"echo {shlex.quote(title)}", "echo",
        f"echo {shlex.quote(text)}", "echo",
        f"echo {shlex.quote(closing)}",
        'read -p "Press Enter when done..."',
    ])
    return ["x-terminal-emulator", "-e", "bash", "-c", script]


async def ask_user(
    request: str,
    details: str = "",
    expect_answer: bool = False,
    answer_placeholder: str = DEFAULT_PLACEHOLDER,
    timeout: Optional[float] = None,
) -> str:
    """Show `request` to the user and wait for their response.

    Args:
        request: The question or instruction.
        details: Extra context shown under the request.
        expect_answer: True for a free-text answer, False for confirm/cancel.
        answer_placeholder: Pre-filled answer text (answer mode only).
        timeout: Seconds to wait; None (default) waits indefinitely.

    Returns:
        A single string: the user's answer, a confirmation, or (on platforms
        without a native dialog) a note that the request was displayed.

    Raises:
        UserCancelledError: The user cancelled or dismissed the dialog.
        InteractionTimeoutError: `timeout` expired first.
    """
    text = compose_request(request, details)
    title = ANSWER_TITLE if expect_answer else CONFIRM_TITLE
    logger.info("Asking user (%s): %s", "answer" if expect_answer else "confirm", request)

    if sys.platform == "darwin":
        return await _ask_macos(text, title, expect_answer, answer_placeholder, timeout)

    await spawn_detached(*terminal_command(sys.platform, text, title, expect_answer))
    return WAITING_FOR_ANSWER if expect_answer else WAITING_FOR_CONFIRMATION
