# =============================================================================
# tools/terminal.py  —  Host Utility Tools
# =============================================================================
#
# WHAT THIS FILE DOES:
#   Declares the "terminal" tool module: small diagnostics for the machine
#   the server runs on, plus the human-in-the-loop prompt.
#
#     echo            round-trip check for the MCP connection
#     system_info     local time, port status, Node.js process count
#     check_port      is anything listening on a port? (lsof)
#     find_process    search `ps aux` by name
#     safe_curl       one HTTP request (GET/POST/PUT/DELETE)
#     wait_for_user   ask the human a question / for a confirmation
#
#   Handlers return plain strings; the registry turns them into one text
#   block and appends the "System: ..." footer (this module keeps both
#   ambient extras on).  Failures raise ToolExecutionError with a prefix
#   naming the tool, e.g. "Port Check Error (Port: 3000): ...".
# =============================================================================

import logging
from datetime import datetime
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import httpx

from core.config import Settings, load_settings
from core.errors import CommandError, ToolExecutionError
from core.interaction import DEFAULT_PLACEHOLDER, ask_user
from core.registry import ToolDescriptor, ToolModule
from core.system import run_command

HTTP_METHODS = ["GET", "POST", "PUT", "DELETE"]
PORT_LABELS = {3001: "VS Code Bridge"}
SAFE_CURL_TIMEOUT = 30.0

logger = logging.getLogger(__name__)


# =============================================================================
# Helpers (module-level so tests can monkeypatch them)
# =============================================================================
async def port_status(port: int, protocol: str = "tcp") -> tuple[bool, str]:
    """(is_active, lsof output) for a port.  lsof exits 1 when nothing matches."""
    flag = f"{protocol.upper()}:{port}" if protocol == "udp" else f":{port}"
    result = await run_command("lsof", "-i", flag, check=False)
    output = result.stdout.strip()
    return bool(output), output


async def list_processes(pattern: str) -> list[str]:
    """`ps aux` lines whose text contains `pattern` (case-insensitive)."""
    result = await run_command("ps", "aux")
    needle = pattern.lower()
    return [line for line in result.stdout.splitlines()[1:] if needle in line.lower()]


def _format_process(line: str) -> str:
    # ps aux columns: USER PID %CPU %MEM VSZ RSS ...
    parts = line.split()
    try:
        rss_mb = round(float(parts[5]) / 1024)
    except (IndexError, ValueError):
        rss_mb = 0
    pid = parts[1] if len(parts) > 1 else "?"
    cpu = parts[2] if len(parts) > 2 else "?"
    return f"  • PID {pid}: {rss_mb}MB ({cpu}% CPU)"


def _local_time(zone: str) -> tuple[str, str]:
    """(zone label, formatted time); falls back to host local time if `zone` is unknown."""
    try:
        tz = ZoneInfo(zone)
    except (ZoneInfoNotFoundError, ValueError):
        logger.warning("Time zone %r unavailable, reporting host local time", zone)
        return "local", datetime.now().strftime("%d.%m.%Y, %H:%M:%S")
    return zone, datetime.now(tz).strftime("%d.%m.%Y, %H:%M:%S")


def create_terminal_module(settings: Optional[Settings] = None,
                           transport: Optional[httpx.AsyncBaseTransport] = None) -> ToolModule:
    """Build the "terminal" ToolModule.

    Args:
        settings: Time zone and port list; loaded from the environment if None.
        transport: httpx transport for safe_curl (tests pass a MockTransport).
    """
    settings = settings or load_settings()

    # -------------------------------------------------------------------------
    # echo
    # -------------------------------------------------------------------------
    async def echo(args: dict) -> str:
        return f"Echo response:\nMessage: {args['message']}\nStatus: OK"

    # -------------------------------------------------------------------------
    # system_info
    # -------------------------------------------------------------------------
    async def system_info(args: dict) -> str:
        include_processes = args.get("include_processes", False)
        max_processes = int(args.get("max_processes", 10))

        zone_label, now = _local_time(settings.system_info_timezone)
        lines = [
            "System Info Report:",
            f"Time ({zone_label}): {now}",
            "Port Status:",
        ]
        for port in settings.system_info_ports:
            try:
                active, _ = await port_status(port)
            except CommandError:
                active = False
            label = f" ({PORT_LABELS[port]})" if port in PORT_LABELS else ""
            lines.append(f"  • {port}: {'ACTIVE' if active else 'CLOSED'}{label}")

        try:
            pgrep = await run_command("pgrep", "-f", "node", check=False)
            node_count = len([line for line in pgrep.stdout.splitlines() if line.strip()])
        except CommandError:
            node_count = 0
        lines.append(f"Node.js Processes count: {node_count}")
        report = "\n".join(lines) + "\n"

        if include_processes and node_count > 0:
            try:
                processes = await list_processes("node")
                details = "\n".join(_format_process(line) for line in processes[:max_processes])
                report += f"\nNode.js Processes Details:\n{details}\n"
            except CommandError as exc:
                report += f"\nProcess List Error: {exc}\n"

        return report

    # -------------------------------------------------------------------------
    # check_port
    # -------------------------------------------------------------------------
    async def check_port(args: dict) -> str:
        port = int(args["port"])
        protocol = args.get("protocol", "tcp")
        try:
            active, details = await port_status(port, protocol)
        except CommandError as exc:
            raise ToolExecutionError(f"Port Check Error (Port: {port}): {exc}") from exc

        report = (
            "Port Check Result:\n"
            f"Port: {port}\n"
            f"Protocol: {protocol.upper()}\n"
            f"Status: {'ACTIVE' if active else 'CLOSED'}\n"
        )
        if active:
            report += f"\nDetails:\n{details}"
        return report

    # -------------------------------------------------------------------------
    # find_process
    # -------------------------------------------------------------------------
    async def find_process(args: dict) -> str:
        name = args["name"]
        try:
            matches = await list_processes(name)
        except CommandError as exc:
            raise ToolExecutionError(f"Process Search Error: {exc}") from exc
        if not matches:
            raise ToolExecutionError(
                f"Process Search Error: No processes found matching name: {name}"
            )
        return f"Process Search Result ({name}):\n\n" + "\n".join(matches)

    # -------------------------------------------------------------------------
    # safe_curl
    # -------------------------------------------------------------------------
    async def safe_curl(args: dict) -> str:
        url = args["url"]
        method = args.get("method", "GET")
        data = args.get("data")
        try:
            async with httpx.AsyncClient(timeout=SAFE_CURL_TIMEOUT, follow_redirects=True,
                                         transport=transport) as client:
                response = await client.request(method, url, content=data if data else None)
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            raise ToolExecutionError(
                f"HTTP Request Error ({method} {url}): {str(exc) or exc.__class__.__name__}"
            ) from exc

        report = f"HTTP Request ({method} {url})\n"
        if data:
            report += f"Data: {data}\n"
        report += f"Status: {response.status_code}\n"
        report += f"\nResponse:\n{response.text}"
        return report

    # -------------------------------------------------------------------------
    # wait_for_user
    # -------------------------------------------------------------------------
    async def wait_for_user(args: dict) -> str:
        try:
            return await ask_user(
                request=args["request"],
                details=args.get("details", ""),
                expect_answer=args.get("expect_answer", False),
                answer_placeholder=args.get("answer_placeholder", DEFAULT_PLACEHOLDER),
                timeout=args.get("timeout"),
            )
        except CommandError as exc:
            raise ToolExecutionError(f"Interaction Error: {exc}") from exc

    tools = [
        ToolDescriptor(
            name="echo",
            description=(
                "Returns the given message. Use it to check that the MCP server "
                "is alive and the connection works."
            ),
            input_schema={
                "type": "object",
                "properties": {"message": {"type": "string", "description": "Message to echo back"}},
                "required": ["message"],
            },
            handler=echo,
        ),
        ToolDescriptor(
            name="system_info",
            description=(
                "Reports system information: current local time, status of key ports "
                f"({', '.join(str(p) for p in settings.system_info_ports)}) and Node.js "
                "process statistics."
            ),
            input_schema={
                "type": "object",
                "properties": {
                    "include_processes": {
                        "type": "boolean", "default": False,
                        "description": "Include a detailed list of Node.js processes",
                    },
                    "max_processes": {
                        "type": "number", "default": 10, "minimum": 1,
                        "description": "Maximum number of processes to list",
                    },
                },
                "required": [],
            },
            handler=system_info,
        ),
        ToolDescriptor(
            name="check_port",
            description="Checks whether a port is active or closed using the lsof utility.",
            input_schema={
                "type": "object",
                "properties": {
                    "port": {"type": "number", "minimum": 1, "maximum": 65535,
                             "description": "Port number to check"},
                    "protocol": {"type": "string", "enum": ["tcp", "udp"], "default": "tcp",
                                 "description": "Protocol to check"},
                },
                "required": ["port"],
            },
            handler=check_port,
        ),
        ToolDescriptor(
            name="find_process",
            description="Finds running processes by name (ps aux). Returns PID, memory and CPU usage.",
            input_schema={
                "type": "object",
                "properties": {"name": {"type": "string", "minLength": 1,
                                        "description": "Process name to search for"}},
                "required": ["name"],
            },
            handler=find_process,
        ),
        ToolDescriptor(
            name="safe_curl",
            description="Performs an HTTP request (GET, POST, PUT, DELETE) to the given URL.",
            input_schema={
                "type": "object",
                "properties": {
                    "url": {"type": "string", "description": "URL to request"},
                    "method": {"type": "string", "enum": HTTP_METHODS, "default": "GET",
                               "description": "HTTP method"},
                    "data": {"type": "string", "description": "Request body for POST/PUT"},
                },
                "required": ["url"],
            },
            handler=safe_curl,
        ),
        ToolDescriptor(
            name="wait_for_user",
            description=(
                "Asks the user for a text answer or for confirmation of an action "
                "through a system dialog. Blocks until the user responds."
            ),
            input_schema={
                "type": "object",
                "properties": {
                    "request": {"type": "string", "description": "Question or request for the user"},
                    "details": {"type": "string", "description": "Additional details (optional)"},
                    "expect_answer": {
                        "type": "boolean", "default": False,
                        "description": "true = wait for a text answer, false = simple confirmation",
                    },
                    "answer_placeholder": {
                        "type": "string", "default": DEFAULT_PLACEHOLDER,
                        "description": "Placeholder for the answer field (expect_answer=true only)",
                    },
                    "timeout": {
                        "type": "number", "exclusiveMinimum": 0,
                        "description": "Seconds to wait before giving up (optional; waits indefinitely if omitted)",
                    },
                },
                "required": ["request"],
            },
            handler=wait_for_user,
        ),
    ]

    return ToolModule(namespace="terminal", description="System tools", tools=tools)
