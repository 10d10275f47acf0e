import asyncio
import logging
import os
import sys
from contextlib import AsyncExitStack
from typing import Any, Dict, Optional, List
from mcp import ClientSession, StdioServerParameters
from mcp.client.stdio import stdio_client
from shared.config import settings

logger = logging.getLogger(__name__)

class McpBridge:
    """Client side of the stdio MCP tool server used to decode documents."""

    def __init__(self, server_path: Optional[str] = None):
        self._server_path = server_path
        self._exit: Optional[AsyncExitStack] = None
        self._session: Optional[ClientSession] = None

    @property
    def is_running(self) -> bool:
        return self._session is not None

    async def start(self):
        if self.is_running:
            return
        try:
            self._exit = AsyncExitStack()

            server_path = os.path.abspath(self._server_path or settings.mcp_server_path)
            if not os.path.exists(server_path):
                raise FileNotFoundError(f"MCP server not found at: {server_path}")

            logger.info(f"Starting MCP server at: {server_path}")

            server_params = StdioServerParameters(
                command=sys.executable,
                args=[server_path],
                env=None
            )

            stdio = await asyncio.wait_for(
                self._exit.enter_async_context(stdio_client(server_params)),
                timeout=30.0
            )
            read_stream, write_stream = stdio

            session = await self._exit.enter_async_context(
                ClientSession(read_stream, write_stream)
            )
            await asyncio.wait_for(session.initialize(), timeout=10.0)
            self._session = session

            try:
                tools = await asyncio.wait_for(self.list_tools(), timeout=10.0)
                logger.info(f"MCP server started successfully; tools: {','.join(sorted(tools))}")
            except Exception as list_err:
                logger.warning(f"MCP started but failed listing tools: {list_err}")

        except asyncio.TimeoutError:
            logger.error("MCP server startup timed out")
            await self.stop()
            raise RuntimeError("MCP server startup timed out")
        except Exception as e:
            logger.error(f"Failed to start MCP server: {e}")
            await self.stop()
            raise

    async def stop(self):
        if self._exit:
            await self._exit.aclose()
        self._exit = None
        self._session = None

    async def list_tools(self) -> List[str]:
        if self._session is None:
            raise RuntimeError("MCP bridge is not started")
        resp = await self._session.list_tools()
        return [t.name for t in resp.tools]

    async def call(self, tool_name: str, args: Dict[str, Any]) -> str:
        if self._session is None:
            raise RuntimeError("MCP bridge is not started")
        logger.info(f"MCP call: tool={tool_name} args_keys={list(args.keys())}")
        result = await self._session.call_tool(tool_name, args)
        if getattr(result, "isError", False):
            detail = "\n".join(getattr(c, "text", str(c)) for c in result.content)
            raise RuntimeError(f"MCP tool {tool_name} failed: {detail}")
        parts = []
        for c in result.content:
            if isinstance(c, str):
                parts.append(c)
            elif hasattr(c, "text"):
                parts.append(c.text)
            else:
                parts.append(str(c))
        output = "\n".join(parts)
        logger.info(f"MCP call done: tool={tool_name} output_len={len(output)}")
        return output

    async def extract_text(self, file_name: str, data: str) -> str:
        return await self.call("extract_text", {"file_name": file_name, "data": data})

# Singleton instance for app
mcp_bridge = McpBridge()
