# src/sharing/share_dispatcher.py

"""Clipboard and WhatsApp deep-link dispatch."""

import base64
import logging
import re
import sys
import urllib.parse
import webbrowser
from collections.abc import Callable

import pyperclip  # type: ignore[import-untyped]

from src.config.settings import Settings

logger = logging.getLogger("ml_afiliados.sharing")

_NON_DIGITS = re.compile(r"\D")


def osc52_copy(text: str) -> None:
    """Ask the terminal to set the clipboard via the OSC 52 escape.

    Raises:
        OSError: stdout is not a terminal.
    """
    if not sys.stdout.isatty():
        raise OSError("stdout is not a terminal")
    encoded = base64.b64encode(text.encode("utf-8")).decode("ascii")
    sys.stdout.write(f"\x1b]52;c;{encoded}\a")
    sys.stdout.flush()


def copy_to_clipboard(
    text: str,
    fallback: Callable[[str], None] | None = None,
) -> bool:
    """Copy ``text``; try pyperclip first, then one fallback.

    ``fallback`` defaults to :func:`osc52_copy`. Never raises.
    """
    try:
        pyperclip.copy(text)
        return True
    except Exception as exc:
        logger.warning("Clipboard copy failed, trying fallback: %s", exc)

    try:
        (fallback or osc52_copy)(text)
        return True
    except Exception as exc:
        logger.error("Fallback clipboard copy failed: %s", exc)
        return False


def get_whatsapp_share_url(
    message: str, phone_number: str | None = None
) -> str:
    """``wa.me`` link with the message pre-filled.

    Non-digits are stripped from ``phone_number``; without a number the
    user picks the recipient inside WhatsApp.
    """
    encoded = urllib.parse.quote(message, safe="!~*'()")
    digits = _NON_DIGITS.sub("", phone_number or "")
    return f"{Settings.WHATSAPP_SHARE_BASE}{digits}?text={encoded}"


def open_share_url(url: str) -> bool:
    """Open a share link in the default browser."""
    try:
        return webbrowser.open(url)
    except webbrowser.Error as exc:
        logger.error("Could not open browser for %s: %s", url, exc)
        return False
