"""Decoding of raw terminal bytes into key tokens.

Bytes are written into a pipe so ``read_key`` exercises its real select/read
path, including the short ESC-sequence timeout.
"""

from __future__ import annotations

import os
import unittest

from vfsview.input import _PENDING_BYTES, read_key


class ReadKeyTests(unittest.TestCase):
    def setUp(self) -> None:
        self.read_fd, self.write_fd = os.pipe()
        _PENDING_BYTES.clear()

    def tearDown(self) -> None:
        os.close(self.read_fd)
        os.close(self.write_fd)
        _PENDING_BYTES.clear()

    def _decode(self, data: bytes) -> list[str]:
        os.write(self.write_fd, data)
        tokens: list[str] = []
        while True:
            token = read_key(self.read_fd, timeout_ms=30)
            if not token:
                return tokens
            tokens.append(token)

    def test_timeout_returns_empty_token(self) -> None:
        self.assertEqual(read_key(self.read_fd, timeout_ms=10), "")

    def test_control_bytes(self) -> None:
        self.assertEqual(
            self._decode(b"\x03\x04\x12\x15\t\x7f\x08\r\n"),
            ["CTRL_C", "CTRL_D", "CTRL_R", "CTRL_U", "TAB", "BACKSPACE", "BACKSPACE", "ENTER_CR", "ENTER_LF"],
        )

    def test_plain_and_multibyte_text(self) -> None:
        self.assertEqual(self._decode("aé→".encode("utf-8")), ["a", "é", "→"])

    def test_csi_and_ss3_arrows(self) -> None:
        self.assertEqual(
            self._decode(b"\x1b[A\x1b[B\x1b[C\x1b[D\x1b[H\x1b[F\x1bOA\x1bOF"),
            ["UP", "DOWN", "RIGHT", "LEFT", "HOME", "END", "UP", "END"],
        )

    def test_tilde_sequences(self) -> None:
        self.assertEqual(
            self._decode(b"\x1b[1~\x1b[3~\x1b[4~\x1b[5~\x1b[6~\x1b[7~\x1b[8~"),
            ["HOME", "DELETE", "END", "PAGE_UP", "PAGE_DOWN", "HOME", "END"],
        )

    def test_modified_keys_collapse_to_base_key(self) -> None:
        self.assertEqual(self._decode(b"\x1b[1;5A\x1b[1;2D"), ["UP", "LEFT"])

    def test_lone_escape_and_alt_prefix(self) -> None:
        self.assertEqual(self._decode(b"\x1b"), ["ESC"])
        self.assertEqual(self._decode(b"\x1bx"), ["ESC", "x"])

    def test_sgr_mouse_reports(self) -> None:
        self.assertEqual(
            self._decode(b"\x1b[<0;12;5M\x1b[<0;12;5m\x1b[<2;3;4M\x1b[<64;1;2M\x1b[<65;1;2M\x1b[<32;9;9M"),
            [
                "MOUSE_LEFT_DOWN:12:5",
                "MOUSE_LEFT_UP:12:5",
                "MOUSE_RIGHT_DOWN:3:4",
                "MOUSE_WHEEL_UP:1:2",
                "MOUSE_WHEEL_DOWN:1:2",
                "MOUSE",
            ],
        )


if __name__ == "__main__":
    unittest.main()
