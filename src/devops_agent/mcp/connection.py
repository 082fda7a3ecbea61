"""Stdio transport for MCP tool servers.

Each server runs as a subprocess speaking JSON-RPC over stdin/stdout. The
``mcp`` SDK's ``stdio_client`` and ``ClientSession`` are async context
managers backed by anyio task groups, which must be exited by the same task
that entered them. StdioConnection therefore owns its session inside a
dedicated task: ``open()`` waits until the handshake has finished and
``close()`` signals that task to unwind the contexts itself. This lets the
manager close many connections concurrently.
"""

import asyncio
import logging

from mcp import ClientSession, StdioServerParameters
from mcp.client.stdio import stdio_client
from mcp.types import Implementation

from devops_agent.config import MCPServerSettings

logger = logging.getLogger(__name__)

CLIENT_INFO = Implementation(name="devops-agent", version="0.1.0")
DEFAULT_INIT_TIMEOUT = 30.0


class StdioConnection:
    """One MCP session with a subprocess server.

    Attributes:
        params: Launch parameters for the server process
        init_timeout: Seconds to wait for the initialize handshake
        session: The initialized ClientSession while open, else None
    """

    def __init__(
        self,
        params: StdioServerParameters,
        init_timeout: float = DEFAULT_INIT_TIMEOUT,
    ) -> None:
        self.params = params
        self.init_timeout = init_timeout
        self.session: ClientSession | None = None
        self._closing = asyncio.Event()
        self._task: asyncio.Task | None = None

    async def open(self) -> ClientSession:
        """Launch the server and complete the MCP handshake.

        Raises:
            Exception: Whatever the launch or handshake raised
        """
        ready: asyncio.Future[ClientSession] = asyncio.get_running_loop().create_future()
        self._task = asyncio.create_task(self._run(ready))
        return await ready

    async def _run(self, ready: "asyncio.Future[ClientSession]") -> None:
        try:
            async with stdio_client(self.params) as (read_stream, write_stream):
                async with ClientSession(
                    read_stream, write_stream, client_info=CLIENT_INFO
                ) as session:
                    await asyncio.wait_for(session.initialize(), self.init_timeout)
                    self.session = session
                    ready.set_result(session)
                    await self._closing.wait()
        except Exception as e:
            if not ready.done():
                ready.set_exception(e)
                return
            raise
        finally:
            self.session = None

    async def close(self) -> None:
        """Shut the session down and wait for the subprocess to exit."""
        self._closing.set()
        if self._task is not None:
            await self._task
            self._task = None


async def open_stdio_connection(
    config: MCPServerSettings,
    init_timeout: float = DEFAULT_INIT_TIMEOUT,
) -> StdioConnection:
    """Default connector used by the MCPManager.

    Args:
        config: Launch configuration of the server
        init_timeout: Seconds to wait for the initialize handshake

    Returns:
        An open StdioConnection
    """
    params = StdioServerParameters(
        command=config.command,
        args=list(config.args),
        env=dict(config.env) if config.env else None,
    )
    logger.debug(f"Launching MCP server: {config.command} {' '.join(config.args)}")
    connection = StdioConnection(params, init_timeout=init_timeout)
    await connection.open()
    return connection
