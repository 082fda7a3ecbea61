"""Base class for tools the model can call.

A tool is a named, schema-typed async callable. Its input contract is a
pydantic model and its output contract is any type pydantic can validate.
Subclasses only implement ``execute``; argument parsing and output checks
live here so every tool (local or remote) is validated the same way.

To create a tool:

    class EchoInput(BaseModel):
        message: str = Field(description="The message to echo back")

    class EchoTool(Tool):
        name = "echo"
        description = "Echoes back the input message"
        input_model = EchoInput
        output_type = str

        async def execute(self, arguments: EchoInput) -> str:
            return arguments.message
"""

import json
from abc import ABC, abstractmethod
from collections.abc import Mapping
from functools import cached_property
from typing import Any

from pydantic import BaseModel, TypeAdapter, ValidationError
from pydantic_core import PydanticSerializationError

from devops_agent.errors import ToolArgumentInvalid, ToolOutputInvalid
from devops_agent.tools.schema import ToolParameters, model_to_parameters


class NoArguments(BaseModel):
    """Input contract for tools that take no parameters."""


class Tool(ABC):
    """A callable the model may request by name."""

    name: str = ""
    description: str = ""
    input_model: type[BaseModel] = NoArguments
    output_type: Any = Any

    @abstractmethod
    async def execute(self, arguments: Any) -> Any:
        """Run the tool.

        Args:
            arguments: An instance of ``input_model``, already validated

        Returns:
            A value satisfying ``output_type``
        """
        ...

    @property
    def parameters(self) -> ToolParameters:
        """Vendor-neutral description of the input contract."""
        return model_to_parameters(self.input_model)

    @cached_property
    def _output_adapter(self) -> TypeAdapter:
        return TypeAdapter(self.output_type)

    def parse_arguments(self, raw_arguments: str | Mapping[str, Any] | None) -> BaseModel:
        """Decode and validate raw tool-call arguments.

        Args:
            raw_arguments: A JSON string, a mapping, or None for no arguments

        Returns:
            A validated ``input_model`` instance

        Raises:
            ToolArgumentInvalid: If decoding or validation fails
        """
        if raw_arguments is None or raw_arguments == "":
            data: Any = {}
        elif isinstance(raw_arguments, str):
            try:
                data = json.loads(raw_arguments)
            except json.JSONDecodeError as e:
                raise ToolArgumentInvalid(
                    f"Invalid JSON arguments for {self.name}: {e}"
                ) from e
        else:
            data = raw_arguments

        if not isinstance(data, Mapping):
            raise ToolArgumentInvalid(
                f"Arguments for {self.name} must be an object, got {type(data).__name__}"
            )

        try:
            return self.input_model.model_validate(dict(data))
        except ValidationError as e:
            raise ToolArgumentInvalid(f"Invalid arguments for {self.name}: {e}") from e

    def validate_output(self, value: Any) -> Any:
        """Check a return value against ``output_type``.

        Returns:
            The validated value dumped to JSON-compatible Python data

        Raises:
            ToolOutputInvalid: If the value does not conform
        """
        try:
            validated = self._output_adapter.validate_python(value)
            return self._output_adapter.dump_python(validated, mode="json")
        except (ValidationError, PydanticSerializationError) as e:
            raise ToolOutputInvalid(f"Invalid output from {self.name}: {e}") from e

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.name!r}>"
