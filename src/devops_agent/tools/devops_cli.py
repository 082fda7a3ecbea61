"""Local tools wrapping the kubectl, helm and az command-line clients.

Each tool prefixes the model's command with the client binary and the
optional global flags it was given, runs it through the shell and reports
the combined stdout/stderr together with the exit code. A non-zero exit
code is a normal result so the model can read the client's error message.
"""

import asyncio
import logging
import shlex

from pydantic import BaseModel, Field

from devops_agent.tools.base import Tool

logger = logging.getLogger(__name__)


class CommandResult(BaseModel):
    output: str
    exit_code: int


class CLITool(Tool):
    """Base for tools that run one command-line client.

    Attributes:
        binary: Executable the command is prefixed with
        flags: Pairs of (input field, global flag) added when the field is set
    """

    binary: str = ""
    flags: tuple[tuple[str, str], ...] = ()
    output_type = CommandResult

    def build_command(self, arguments: BaseModel) -> str:
        parts = [self.binary]
        for field_name, flag in self.flags:
            value = getattr(arguments, field_name)
            if value:
                parts.append(f"{flag}={shlex.quote(value)}")
        parts.append(arguments.command)  # type: ignore[attr-defined]
        return " ".join(parts)

    async def execute(self, arguments: BaseModel) -> CommandResult:
        command_line = self.build_command(arguments)
        logger.debug(f"Running {self.binary}: {command_line}")

        process = await asyncio.create_subprocess_shell(
            command_line,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.STDOUT,
        )
        output, _ = await process.communicate()

        if process.returncode != 0:
            logger.info(f"{self.binary} exited with code {process.returncode}")
        return CommandResult(
            output=output.decode(errors="replace"),
            exit_code=process.returncode or 0,
        )


class KubectlInput(BaseModel):
    command: str = Field(
        description="The kubectl command to execute (without the 'kubectl' prefix)"
    )
    context: str | None = Field(
        default=None, description="The Kubernetes context to use (optional)"
    )
    namespace: str | None = Field(
        default=None, description="The Kubernetes namespace to use (optional)"
    )
    output: str | None = Field(
        default=None,
        description="The output format (e.g., json, yaml, wide) (optional)",
    )


class KubectlTool(CLITool):
    name = "kubectl"
    description = "Execute a kubectl command and return the result"
    input_model = KubectlInput
    binary = "kubectl"
    flags = (
        ("context", "--context"),
        ("namespace", "--namespace"),
        ("output", "--output"),
    )


class HelmInput(BaseModel):
    command: str = Field(
        description="The helm command to execute (without the 'helm' prefix)"
    )
    kubecontext: str | None = Field(
        default=None, description="The Kubernetes context to use for Helm (optional)"
    )
    namespace: str | None = Field(
        default=None, description="The Kubernetes namespace to use for Helm (optional)"
    )
    output: str | None = Field(
        default=None,
        description="The output format (e.g., json, yaml, table) (optional)",
    )


class HelmTool(CLITool):
    name = "helm"
    description = "Execute a helm command and return the result"
    input_model = HelmInput
    binary = "helm"
    # --output is only understood by some subcommands (list, status, ...)
    flags = (
        ("kubecontext", "--kube-context"),
        ("namespace", "--namespace"),
        ("output", "--output"),
    )


class AzInput(BaseModel):
    command: str = Field(
        description="The Azure CLI command to execute (without the 'az' prefix)"
    )
    subscription: str | None = Field(
        default=None,
        description="The Azure subscription ID or name to use (optional)",
    )
    resource_group: str | None = Field(
        default=None, description="The Azure resource group to use (optional)"
    )
    output: str | None = Field(
        default=None,
        description="The output format (e.g., json, yaml, table, tsv) (optional)",
    )


class AzTool(CLITool):
    name = "az"
    description = "Execute an Azure CLI command and return the result"
    input_model = AzInput
    binary = "az"
    flags = (
        ("subscription", "--subscription"),
        ("resource_group", "--resource-group"),
        ("output", "--output"),
    )


def devops_cli_tools() -> list[Tool]:
    return [KubectlTool(), HelmTool(), AzTool()]
