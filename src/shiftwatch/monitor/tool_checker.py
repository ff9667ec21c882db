"""Tool availability checker for external dependencies."""

import logging
import shutil
from typing import Dict

from .errors import ToolNotFoundError

logger = logging.getLogger(__name__)


def check_tool_availability() -> Dict[str, bool]:
    """
    Check availability of external tools used by extraction channels.

    Returns:
        Dictionary mapping tool names to availability status:
        - 'tesseract': For recognized-text (OCR) extraction (optional)
    """
    return {
        'tesseract': shutil.which('tesseract') is not None,
    }


def check_required_tools(use_ocr: bool = False) -> None:
    """
    Check that tools enabled in config are installed.

    Args:
        use_ocr: Whether tesseract is required (from config)

    Raises:
        ToolNotFoundError: If a tool is enabled in config but not available
    """
    tools = check_tool_availability()

    if not use_ocr:
        logger.info("Tool disabled: {'tool': 'tesseract', 'reason': 'config'}")
        return

    if tools.get('tesseract', False):
        logger.info("Tool available: {'tool': 'tesseract', 'capability': 'OCR text extraction'}")
        return

    logger.error("Tool not found: {'tool': 'tesseract', 'required': True}")
    raise ToolNotFoundError(
        f"Tool 'tesseract' is enabled in config but not available.\n\n"
        f"{_get_installation_instructions('tesseract')}",
        tool='tesseract',
    )


def _get_installation_instructions(tool_name: str) -> str:
    """Get installation instructions for a missing tool."""
    instructions = {
        'tesseract': (
            "Tesseract is needed for OCR of monitored images. Install it, or run with --no-ocr:\n"
            "  - Windows: Download from https://github.com/UB-Mannheim/tesseract/wiki\n"
            "  - macOS: brew install tesseract\n"
            "  - Linux: sudo apt-get install tesseract-ocr (Debian/Ubuntu)"
        ),
    }

    return instructions.get(tool_name, f"Please install {tool_name}")
