"""System clipboard access through pyperclip"""

import pyperclip
from loguru import logger


class SystemClipboard:
    """Read/write capability over the OS clipboard"""

    def read_text(self) -> str:
        """Current clipboard text; raises pyperclip.PyperclipException when unavailable"""
        return pyperclip.paste()

    def write_text(self, text: str) -> None:
        pyperclip.copy(text)
        logger.debug(f"Wrote {len(text)} characters to clipboard")
