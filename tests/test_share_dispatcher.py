# tests/test_share_dispatcher.py

"""Tests for clipboard copy and WhatsApp deep links."""

import unittest
from unittest.mock import MagicMock, patch
from urllib.parse import parse_qs, urlsplit

from src.sharing.share_dispatcher import (
    copy_to_clipboard,
    get_whatsapp_share_url,
    open_share_url,
    osc52_copy,
)

MESSAGE = "🛍️ *Fone*\n\n💰 *Preço:* R$ 1.234,50 & mais"


class TestWhatsAppShareUrl(unittest.TestCase):
    """wa.me link generation."""

    def test_phone_digits_only(self) -> None:
        url = get_whatsapp_share_url("oi", "+55 11 99999-9999")
        self.assertEqual(url, "https://wa.me/5511999999999?text=oi")

    def test_generic_share_target(self) -> None:
        for phone in (None, ""):
            with self.subTest(phone=phone):
                url = get_whatsapp_share_url("oi", phone)
                self.assertEqual(url, "https://wa.me/?text=oi")

    def test_message_round_trips(self) -> None:
        url = get_whatsapp_share_url(MESSAGE, "5511999999999")
        text = parse_qs(urlsplit(url).query)["text"][0]
        self.assertEqual(text, MESSAGE)

    def test_message_percent_encoded(self) -> None:
        url = get_whatsapp_share_url("a b&c\nd")
        self.assertEqual(url, "https://wa.me/?text=a%20b%26c%0Ad")


class TestCopyToClipboard(unittest.TestCase):
    """Clipboard copy with one fallback."""

    @patch("src.sharing.share_dispatcher.pyperclip.copy")
    def test_primary_success(self, mock_copy: MagicMock) -> None:
        fallback = MagicMock()

        self.assertTrue(copy_to_clipboard("hello", fallback=fallback))

        mock_copy.assert_called_once_with("hello")
        fallback.assert_not_called()

    @patch("src.sharing.share_dispatcher.pyperclip.copy")
    def test_fallback_used_on_failure(self, mock_copy: MagicMock) -> None:
        mock_copy.side_effect = RuntimeError("no clipboard mechanism")
        fallback = MagicMock()

        self.assertTrue(copy_to_clipboard("hello", fallback=fallback))

        fallback.assert_called_once_with("hello")

    @patch("src.sharing.share_dispatcher.pyperclip.copy")
    def test_both_fail_returns_false(self, mock_copy: MagicMock) -> None:
        mock_copy.side_effect = RuntimeError("no clipboard mechanism")
        fallback = MagicMock(side_effect=OSError("no terminal"))

        self.assertFalse(copy_to_clipboard("hello", fallback=fallback))

    @patch("src.sharing.share_dispatcher.osc52_copy")
    @patch("src.sharing.share_dispatcher.pyperclip.copy")
    def test_default_fallback_is_osc52(
        self, mock_copy: MagicMock, mock_osc52: MagicMock
    ) -> None:
        mock_copy.side_effect = RuntimeError("headless")

        self.assertTrue(copy_to_clipboard("hello"))

        mock_osc52.assert_called_once_with("hello")


class TestOsc52(unittest.TestCase):
    """Terminal clipboard escape."""

    @patch("src.sharing.share_dispatcher.sys.stdout")
    def test_writes_escape_on_tty(self, mock_stdout: MagicMock) -> None:
        mock_stdout.isatty.return_value = True

        osc52_copy("hi")

        mock_stdout.write.assert_called_once_with("\x1b]52;c;aGk=\a")

    @patch("src.sharing.share_dispatcher.sys.stdout")
    def test_refuses_without_tty(self, mock_stdout: MagicMock) -> None:
        mock_stdout.isatty.return_value = False

        with self.assertRaises(OSError):
            osc52_copy("hi")
        mock_stdout.write.assert_not_called()


class TestOpenShareUrl(unittest.TestCase):
    """Browser hand-off."""

    @patch("src.sharing.share_dispatcher.webbrowser.open")
    def test_opens_browser(self, mock_open: MagicMock) -> None:
        mock_open.return_value = True
        self.assertTrue(open_share_url("https://wa.me/?text=oi"))
        mock_open.assert_called_once_with("https://wa.me/?text=oi")


if __name__ == "__main__":
    unittest.main()
