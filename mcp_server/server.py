# Do not print to stdout; MCP uses stdio. Use logging to stderr.
import asyncio
import base64
import binascii
import io
import logging
import os

from mcp.server.fastmcp import FastMCP
from bs4 import BeautifulSoup
from docx import Document
from pypdf import PdfReader

# Configure logging to stderr before any usage
logger = logging.getLogger("mcp-server")
logging.basicConfig(level=logging.INFO)

mcp = FastMCP("documind_tools")


def _pdf_to_text(data: bytes) -> str:
    reader = PdfReader(io.BytesIO(data))
    pages = [p.extract_text() or "" for p in reader.pages]
    return "\n\n".join(pages)


def _docx_to_text(data: bytes) -> str:
    doc = Document(io.BytesIO(data))
    return "\n".join(p.text for p in doc.paragraphs)


def _html_to_text(data: bytes) -> str:
    soup = BeautifulSoup(data.decode("utf-8", errors="ignore"), "html.parser")
    # Remove script/style
    for s in soup(["script", "style"]):
        s.decompose()
    text = soup.get_text("\n")
    lines = [line.strip() for line in text.split("\n") if line.strip()]
    return "\n".join(lines)


def decode_document(file_name: str, data: str) -> str:
    """Decode a base64 document and return its text, chosen by file extension."""
    try:
        raw = base64.b64decode(data, validate=True)
    except (binascii.Error, ValueError) as e:
        raise ValueError(f"Document data for {file_name} is not valid base64") from e
    ext = os.path.splitext(file_name)[1].lower()
    if ext == ".pdf":
        return _pdf_to_text(raw)
    if ext == ".docx":
        return _docx_to_text(raw)
    if ext in (".html", ".htm"):
        return _html_to_text(raw)
    # fallback: txt
    return raw.decode("utf-8", errors="ignore")


@mcp.tool()
async def extract_text(file_name: str, data: str) -> str:
    """Extract text from a base64-encoded PDF/DOCX/HTML/TXT document."""
    logger.info(f"MCP tool 'extract_text' called: file_name={file_name}, data_len={len(data)}")
    text = decode_document(file_name, data)
    logger.info(f"MCP tool 'extract_text' completed: file_name={file_name}, text_len={len(text)}")
    return text


if __name__ == "__main__":
    # Run over stdio
    try:
        logger.info("Starting MCP server 'documind_tools' over stdio. Waiting for a client/host connection...")
        mcp.run(transport="stdio")
    except (KeyboardInterrupt, asyncio.CancelledError):
        logger.info("MCP server shutdown requested")
    except Exception as e:
        # Log error to stderr without printing to stdout
        logger.error(f"MCP server terminated with error: {e}")
