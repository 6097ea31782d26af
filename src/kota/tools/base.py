"""Tool definition, parameter schema and the @tool decorator."""

from dataclasses import dataclass
from typing import Any, Callable, Literal

from pydantic import BaseModel, Field, model_validator

PropertyType = Literal["string", "number", "boolean", "enum"]


class ParameterProperty(BaseModel):
    """One declared tool parameter."""

    type: PropertyType
    description: str = ""
    enum: list[str | int | float | bool] | None = None

    @model_validator(mode="after")
    def enum_needs_values(self) -> "ParameterProperty":
        if self.type == "enum" and not self.enum:
            raise ValueError("enum parameters need a non-empty 'enum' list")
        return self

    def to_json_schema(self) -> dict[str, Any]:
        schema: dict[str, Any] = {
            "type": "string" if self.type == "enum" else self.type,
            "description": self.description,
        }
        if self.enum:
            schema["enum"] = list(self.enum)
        return schema


class ParameterSchema(BaseModel):
    """Root object schema of a tool's arguments."""

    type: Literal["object"] = "object"
    properties: dict[str, ParameterProperty] = Field(default_factory=dict)
    required: list[str] = Field(default_factory=list)

    @model_validator(mode="after")
    def required_must_be_declared(self) -> "ParameterSchema":
        unknown = [name for name in self.required if name not in self.properties]
        if unknown:
            raise ValueError(f"required names not in properties: {unknown}")
        return self

    def to_json_schema(self) -> dict[str, Any]:
        return {
            "type": "object",
            "properties": {
                name: prop.to_json_schema() for name, prop in self.properties.items()
            },
            "required": list(self.required),
        }


@dataclass(frozen=True)
class ToolDefinition:
    """A registered tool: name, description, parameter schema and handler.

    The handler receives the validated arguments as keyword arguments and
    returns ``{"result": ...}`` or ``{"error": ...}``. It may be sync or async.
    """

    name: str
    description: str
    parameters: ParameterSchema
    handler: Callable[..., Any]

    def get_tool_schema(self) -> dict[str, Any]:
        """Get the tool/function schema for LiteLLM."""
        return {
            "type": "function",
            "function": {
                "name": self.name,
                "description": self.description,
                "parameters": self.parameters.to_json_schema(),
            },
        }


def tool(
    name: str, description: str, parameters: dict[str, Any] | ParameterSchema
) -> Callable[[Callable[..., Any]], ToolDefinition]:
    """Decorator to turn a function into a ToolDefinition."""
    schema = (
        parameters
        if isinstance(parameters, ParameterSchema)
        else ParameterSchema.model_validate(parameters)
    )

    def decorator(func: Callable[..., Any]) -> ToolDefinition:
        return ToolDefinition(name, description, schema, func)

    return decorator
