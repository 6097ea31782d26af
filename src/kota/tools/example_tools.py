"""Example tools, registered but disabled unless listed in tools.enabled."""

from typing import Any

from kota.tools.base import tool


@tool(
    name="calculator",
    description="Perform basic arithmetic operations (add, subtract, multiply, divide)",
    parameters={
        "type": "object",
        "properties": {
            "operation": {
                "type": "enum",
                "description": "The operation to perform: add, subtract, multiply, divide",
                "enum": ["add", "subtract", "multiply", "divide"],
            },
            "a": {"type": "number", "description": "First number"},
            "b": {"type": "number", "description": "Second number"},
        },
        "required": ["operation", "a", "b"],
    },
)
def calculator(operation: str, a: float, b: float) -> dict[str, Any]:
    if operation == "add":
        return {"result": a + b, "operation": operation}
    if operation == "subtract":
        return {"result": a - b, "operation": operation}
    if operation == "multiply":
        return {"result": a * b, "operation": operation}
    if operation == "divide":
        if b == 0:
            return {"error": "Division by zero"}
        return {"result": a / b, "operation": operation}
    return {"error": f"Unknown operation: {operation}"}


@tool(
    name="string_transform",
    description="Transform strings (uppercase, lowercase, reverse, length)",
    parameters={
        "type": "object",
        "properties": {
            "text": {"type": "string", "description": "The text to transform"},
            "operation": {
                "type": "enum",
                "description": "The transformation: uppercase, lowercase, reverse, length",
                "enum": ["uppercase", "lowercase", "reverse", "length"],
            },
        },
        "required": ["text", "operation"],
    },
)
def string_transform(text: str, operation: str) -> dict[str, Any]:
    if operation == "uppercase":
        return {"result": text.upper()}
    if operation == "lowercase":
        return {"result": text.lower()}
    if operation == "reverse":
        return {"result": text[::-1]}
    if operation == "length":
        return {"result": len(text)}
    return {"error": f"Unknown operation: {operation}"}
