# =============================================================================
# tools/unity.py  —  Unity Editor Bridge Tools
# =============================================================================
#
# WHAT THIS FILE DOES:
#   Declares the "unity" tool module: four tools that forward to the Unity
#   bridge (an editor window serving HTTP on localhost:7777).
#
#     screenshot          POST /api/screenshot            (default timeout)
#     camera_screenshot   POST /api/camera_screenshot     (camera timeout)
#     scene_hierarchy     POST /api/scene_hierarchy       (scene timeout)
#     execute             POST /api/execute               (execute timeout)
#
#   Every handler is a one-liner over BridgeGateway.post(): build the body,
#   pick the timeout, return the normalized ToolResponse.  All response-shape
#   handling lives in core/normalizer.py.
#
# MODULE FLAGS:
#   Both ambient extras are switched off for this module, so the caller gets
#   exactly the blocks Unity produced (no "System: ..." footer, no argument
#   dumps of C# source in the debug log).
# =============================================================================

from typing import Optional

from core.config import Settings, load_settings
from core.gateway import BridgeGateway
from core.models import ToolResponse
from core.registry import ModuleFlags, ToolDescriptor, ToolModule


VECTOR3_SCHEMA = {
    "type": "array",
    "items": {"type": "number"},
    "minItems": 3,
    "maxItems": 3,
}

EXECUTE_DESCRIPTION = (
    "Executes C# code inside the Unity Editor. The code is wrapped in a method, "
    "so follow these structure rules strictly.\n\n"
    "CODE RULES:\n"
    "1. Execution context: your code (except classes) is placed INSIDE a static "
    "`Execute()` method. Write the logic directly, as in a function body.\n"
    "2. Methods: do NOT declare methods with modifiers (`public void Foo()`) outside "
    "classes; that is a compile error. Use local functions (no modifiers) or methods "
    "inside your own classes.\n"
    "3. Classes: you MAY declare classes (`public class MyHelper { ... }`). They are "
    "extracted from the method and placed next to it.\n"
    "4. Return value: use `return value;` to send a result back to the chat. "
    "Otherwise a default message is returned.\n"
    "5. Namespaces: do NOT wrap code in a `namespace`.\n"
    "6. Using: `UnityEngine` and `UnityEditor` are already imported. Put any other "
    "`using` directives at the top.\n\n"
    "Correct:\n"
    '`var obj = new GameObject("Test"); return obj.name;`\n\n'
    "Wrong:\n"
    "`public void Start() { ... }` (a method inside a method)"
)


def create_unity_module(settings: Optional[Settings] = None,
                        gateway: Optional[BridgeGateway] = None) -> ToolModule:
    """Build the "unity" ToolModule bound to a bridge gateway.

    Args:
        settings: Timeouts and bridge URL; loaded from the environment if None.
        gateway: Pre-built gateway (tests inject one with a mock transport).
    """
    settings = settings or load_settings()
    gateway = gateway or BridgeGateway(settings.bridge_url, port=settings.bridge_port)

    async def screenshot(args: dict) -> ToolResponse:
        return await gateway.post("/api/screenshot", {}, settings.default_timeout)

    async def camera_screenshot(args: dict) -> ToolResponse:
        body = {
            "position": args["position"],
            "target": args["target"],
            "fov": args.get("fov", 60),
            "width": int(args.get("width", 1920)),
            "height": int(args.get("height", 1080)),
        }
        return await gateway.post("/api/camera_screenshot", body, settings.camera_timeout)

    async def scene_hierarchy(args: dict) -> ToolResponse:
        body = {"detailed": bool(args.get("detailed", False))}
        return await gateway.post("/api/scene_hierarchy", body, settings.scene_timeout)

    async def execute(args: dict) -> ToolResponse:
        return await gateway.post("/api/execute", {"code": args["code"]}, settings.execute_timeout)

    tools = [
        ToolDescriptor(
            name="screenshot",
            description="Captures a screenshot of the Unity Game View.",
            input_schema={"type": "object", "properties": {}, "required": []},
            handler=screenshot,
        ),
        ToolDescriptor(
            name="camera_screenshot",
            description="Captures a screenshot from an arbitrary camera position in the scene.",
            input_schema={
                "type": "object",
                "properties": {
                    "position": {**VECTOR3_SCHEMA, "description": "Camera position [x, y, z]"},
                    "target": {**VECTOR3_SCHEMA, "description": "Point the camera looks at [x, y, z]"},
                    "width": {
                        "type": "number", "default": 1920, "minimum": 256, "maximum": 4096,
                        "description": "Screenshot width (px)",
                    },
                    "height": {
                        "type": "number", "default": 1080, "minimum": 256, "maximum": 4096,
                        "description": "Screenshot height (px)",
                    },
                    "fov": {
                        "type": "number", "default": 60, "minimum": 10, "maximum": 179,
                        "description": "Camera field of view (degrees)",
                    },
                },
                "required": ["position", "target"],
            },
            handler=camera_screenshot,
        ),
        ToolDescriptor(
            name="scene_hierarchy",
            description="Analyzes the scene hierarchy and returns the list of objects.",
            input_schema={
                "type": "object",
                "properties": {
                    "detailed": {
                        "type": "boolean",
                        "default": False,
                        "description": "Detailed mode: include position, components and properties of each object.",
                    },
                },
                "required": [],
            },
            handler=scene_hierarchy,
        ),
        ToolDescriptor(
            name="execute",
            description=EXECUTE_DESCRIPTION,
            input_schema={
                "type": "object",
                "properties": {
                    "code": {"type": "string", "description": "C# code to execute"},
                },
                "required": ["code"],
            },
            handler=execute,
        ),
    ]

    return ToolModule(
        namespace="unity",
        description=(
            "Unity Bridge: tools for working with the Unity Editor "
            "(code execution, scene analysis, screenshots)."
        ),
        tools=tools,
        flags=ModuleFlags(disable_system_info=True, disable_debug_logs=True),
    )
