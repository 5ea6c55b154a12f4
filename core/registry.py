# =============================================================================
# core/registry.py  —  Tool Descriptors, Modules & the Registry
# =============================================================================
#
# WHAT THIS MODULE DOES:
#   Defines how a tool advertises itself and how tools are grouped and
#   dispatched.
#
#   ToolDescriptor   name + description + JSON schema + async handler
#   ToolModule       a namespace of descriptors plus behaviour flags
#   ToolRegistry     every module visible to the server, indexed by the
#                    qualified name "<namespace>_<tool>"
#
# NAME UNIQUENESS:
#   Checked while modules and the registry are being BUILT.  A duplicate
#   raises RegistryError at startup; call() never has to worry about it.
#
# DISPATCH (ToolRegistry.call):
#   look up → validate arguments → await handler → wrap result
#   A handler may return a plain string (one text block) or a ToolResponse.
# =============================================================================

import logging
import platform
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Awaitable, Callable, Iterator, Union

from jsonschema.exceptions import SchemaError

from core.errors import RegistryError, UnknownToolError
from core.models import TextBlock, ToolResponse
from core.schema import check_schema, validate_arguments

logger = logging.getLogger(__name__)

HandlerResult = Union[str, ToolResponse]
Handler = Callable[[dict], Awaitable[HandlerResult]]


@dataclass(frozen=True)
class ToolDescriptor:
    """A single callable tool."""

    name: str
    description: str
    input_schema: dict
    handler: Handler


@dataclass(frozen=True)
class ModuleFlags:
    """Per-module switches for the ambient extras the registry adds.

    disable_system_info:  don't append the "System: ..." footer block
    disable_debug_logs:   don't log arguments/results of calls at DEBUG
    """

    disable_system_info: bool = False
    disable_debug_logs: bool = False


@dataclass(frozen=True)
class ToolModule:
    """A namespace of related tools."""

    namespace: str
    description: str
    tools: tuple[ToolDescriptor, ...] = ()
    flags: ModuleFlags = field(default_factory=ModuleFlags)

    def __post_init__(self):
        # accept any iterable of descriptors, store an immutable tuple
        object.__setattr__(self, "tools", tuple(self.tools))
        seen: set[str] = set()
        for tool in self.tools:
            if tool.name in seen:
                raise RegistryError(
                    f"Duplicate tool name '{tool.name}' in module '{self.namespace}'"
                )
            seen.add(tool.name)
            try:
                check_schema(tool.input_schema)
            except SchemaError as exc:
                raise RegistryError(
                    f"Invalid parameter schema for '{self.namespace}.{tool.name}': {exc.message}"
                ) from exc


@dataclass(frozen=True)
class RegisteredTool:
    qualified_name: str
    module: ToolModule
    descriptor: ToolDescriptor


def qualify(namespace: str, name: str) -> str:
    return f"{namespace}_{name}"


def system_footer() -> TextBlock:
    now = datetime.now().astimezone().isoformat(timespec="seconds")
    return TextBlock(text=f"System: {platform.system()} {platform.release()} | {now}")


class ToolRegistry:
    """All tools the server exposes, keyed by qualified name."""

    def __init__(self, modules: list[ToolModule]):
        self._modules: dict[str, ToolModule] = {}
        self._tools: dict[str, RegisteredTool] = {}
        for module in modules:
            self._add_module(module)

    def _add_module(self, module: ToolModule) -> None:
        if module.namespace in self._modules:
            raise RegistryError(f"Duplicate module namespace '{module.namespace}'")
        self._modules[module.namespace] = module
        for descriptor in module.tools:
            qualified = qualify(module.namespace, descriptor.name)
            if qualified in self._tools:
                other = self._tools[qualified].module.namespace
                raise RegistryError(
                    f"Tool name '{qualified}' from module '{module.namespace}' "
                    f"collides with module '{other}'"
                )
            self._tools[qualified] = RegisteredTool(qualified, module, descriptor)

    def __contains__(self, qualified_name: str) -> bool:
        return qualified_name in self._tools

    def __len__(self) -> int:
        return len(self._tools)

    @property
    def modules(self) -> list[ToolModule]:
        return list(self._modules.values())

    def descriptors(self) -> Iterator[RegisteredTool]:
        """Registered tools in module order, then declaration order."""
        return iter(self._tools.values())

    def get(self, qualified_name: str) -> RegisteredTool:
        try:
            return self._tools[qualified_name]
        except KeyError:
            raise UnknownToolError(qualified_name) from None

    async def call(self, qualified_name: str, arguments: dict[str, Any] | None = None) -> ToolResponse:
        """Validate arguments and run the named tool.

        Raises:
            UnknownToolError: No such tool.
            SchemaValidationError: Arguments violate the tool's schema; the
                handler is not invoked.
            ToolError: Whatever the handler itself raises (execution failure,
                user cancellation, ...).
        """
        entry = self.get(qualified_name)
        flags = entry.module.flags

        args = validate_arguments(entry.descriptor.input_schema, arguments)
        if not flags.disable_debug_logs:
            logger.debug("Calling %s with %r", qualified_name, args)

        result = await entry.descriptor.handler(args)
        response = result if isinstance(result, ToolResponse) else ToolResponse(
            content=[TextBlock(text=str(result))]
        )

        if not flags.disable_system_info:
            response.content.append(system_footer())
        if not flags.disable_debug_logs:
            logger.debug("%s returned %d block(s), is_error=%s",
                         qualified_name, len(response.content), response.is_error)
        return response
