# =============================================================================
# core/errors.py  —  Error Taxonomy
# =============================================================================
#
# Every failure the tool system can surface to a caller is one of these.
# Anything that is NOT in this file (missing optional fields, unknown
# message types, duplicate message/data) is absorbed by the normalizer and
# never raised.
#
#   ToolError
#    ├── ConfigError              bad environment / .env value
#    ├── RegistryError            duplicate namespace or tool name (startup)
#    ├── UnknownToolError         caller asked for a tool that doesn't exist
#    ├── SchemaValidationError    arguments violate the tool's schema
#    ├── ToolExecutionError       a handler failed (shell tool, HTTP helper)
#    ├── CommandError             a subprocess failed or couldn't start
#    ├── MalformedResponseError   an upstream body has no recognizable shape
#    └── UserCancelledError       the human declined / dismissed a prompt
#         └── InteractionTimeoutError
# =============================================================================


class ToolError(Exception):
    """Base class for every error raised by the tool system."""


class ConfigError(ToolError):
    """An environment setting could not be parsed."""


class RegistryError(ToolError):
    """Tool modules could not be assembled into a registry."""


class UnknownToolError(ToolError):
    """No tool is registered under the requested name."""

    def __init__(self, name: str):
        super().__init__(f"Unknown tool: {name}")
        self.name = name


class SchemaValidationError(ToolError):
    """Caller-supplied arguments violate a tool's parameter schema.

    Attributes:
        field: Dotted path of the offending argument ("" for the root object).
        constraint: The JSON-schema keyword that failed (e.g. "required").
    """

    def __init__(self, field: str, constraint: str, message: str):
        super().__init__(f"Invalid argument '{field}' ({constraint}): {message}")
        self.field = field
        self.constraint = constraint
        self.message = message


class ToolExecutionError(ToolError):
    """A tool handler could not complete its action."""


class CommandError(ToolError):
    """A subprocess exited non-zero or could not be started."""

    def __init__(self, message: str, returncode: int | None = None,
                 stdout: str = "", stderr: str = ""):
        super().__init__(message)
        self.returncode = returncode
        self.stdout = stdout
        self.stderr = stderr


class MalformedResponseError(ToolError):
    """An upstream payload matches neither known response shape."""


class UserCancelledError(ToolError):
    """The human declined or dismissed an interactive prompt."""


class InteractionTimeoutError(UserCancelledError):
    """The human did not answer within the caller-supplied timeout."""
