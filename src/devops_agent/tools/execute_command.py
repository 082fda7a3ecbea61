"""Local tool that runs a shell command."""

import asyncio
import logging

from pydantic import BaseModel, Field

from devops_agent.tools.base import Tool

logger = logging.getLogger(__name__)


class ExecuteCommandInput(BaseModel):
    command: str = Field(description="The shell command to execute")
    working_directory: str | None = Field(
        default=None,
        description="The working directory to execute the command in (optional)",
    )


class ExecuteCommandTool(Tool):
    """Execute a shell command and return its captured output."""

    name = "execute_command"
    description = "Execute a shell command on the system"
    input_model = ExecuteCommandInput
    output_type = str

    async def execute(self, arguments: ExecuteCommandInput) -> str:
        """Run the command through the system shell.

        Raises:
            RuntimeError: If the command exits with a non-zero status
        """
        logger.debug(f"Running command: {arguments.command}")
        process = await asyncio.create_subprocess_shell(
            arguments.command,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
            cwd=arguments.working_directory,
        )
        stdout_bytes, stderr_bytes = await process.communicate()
        stdout = stdout_bytes.decode(errors="replace")
        stderr = stderr_bytes.decode(errors="replace")

        if process.returncode != 0:
            raise RuntimeError(
                f"Command failed with exit code {process.returncode}: {stderr.strip()}"
            )

        result = ""
        if stdout:
            result += f"STDOUT:\n{stdout}"
        if stderr:
            if result:
                result += "\n"
            result += f"STDERR:\n{stderr}"

        return result or "Command executed successfully (no output)"
