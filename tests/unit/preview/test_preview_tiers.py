from __future__ import annotations

import unittest
from datetime import datetime
from unittest import mock

from PIL import Image

from vfsview.errors import DecodeError
from vfsview.preview.binary import hex_dump, render_binary_preview
from vfsview.preview.image import (
    IMAGE_MAX_BYTES,
    cell_grid,
    decode_image,
    fit_dimensions,
    image_to_text_art,
    render_image_preview,
)
from vfsview.preview.text import (
    BINARY_TEXT_MESSAGE,
    control_character_ratio,
    decode_text,
    render_text_preview,
)
from vfsview.storage.types import FileMode, Metadata


def _storage(data: bytes = b"") -> mock.Mock:
    storage = mock.Mock()
    storage.read_file.return_value = data
    storage.stat_metadata.return_value = Metadata(
        key="/x", size=len(data), mode=FileMode.file(), modify_time=datetime(2024, 1, 1)
    )
    return storage


class TextTierTests(unittest.TestCase):
    def test_control_ratio_ignores_tab_newline_carriage_return(self) -> None:
        self.assertEqual(control_character_ratio(b""), 0.0)
        self.assertEqual(control_character_ratio(b"\t\n\r a"), 0.0)
        self.assertEqual(control_character_ratio(b"\x00\x01ab"), 0.5)

    def test_truncated_multibyte_tail_is_dropped(self) -> None:
        self.assertEqual(decode_text(b"abc\xc3", truncated=True), "abc")
        self.assertIsNone(decode_text(b"abc\xc3", truncated=False))

    def test_read_is_capped_and_cut_sequence_tolerated(self) -> None:
        storage = _storage("café".encode("utf-8")[:-1])
        text, notice = render_text_preview(storage, "/big.txt", size=50_000, max_bytes=4)
        storage.read_file.assert_called_once_with("/big.txt", 0, 4)
        self.assertEqual((text, notice), ("caf", False))

    def test_malformed_utf8_inside_window_is_binary(self) -> None:
        storage = _storage(b"ok \xff\xfe ok")
        self.assertEqual(render_text_preview(storage, "/x.txt", size=9), (BINARY_TEXT_MESSAGE, True))


class ImageTierTests(unittest.TestCase):
    def test_oversized_image_is_rejected_without_reading(self) -> None:
        storage = _storage()
        size = 6 * 1024 * 1024
        text, notice = render_image_preview(storage, "/huge.png", size)
        storage.read_file.assert_not_called()
        self.assertTrue(notice)
        self.assertTrue(text.startswith("[Image too large to preview: 6.0 MB]"))
        self.assertGreater(size, IMAGE_MAX_BYTES)

    def test_corrupt_bytes_raise_decode_error(self) -> None:
        with self.assertRaises(DecodeError):
            decode_image(b"not an image")

    def test_fit_dimensions_never_upscales(self) -> None:
        self.assertEqual(fit_dimensions(10, 10, 100, 100), (10, 10))
        self.assertEqual(fit_dimensions(1000, 500, 100, 100), (100, 50))
        self.assertEqual(fit_dimensions(0, 10, 100, 100), (0, 0))

    def test_cell_grid_is_bounded_by_viewport_and_ceiling(self) -> None:
        self.assertEqual(cell_grid(0, 0), (260, 80))
        self.assertEqual(cell_grid(40, 12), (40, 12))
        self.assertEqual(cell_grid(1000, 1000), (260, 80))

    def test_transparent_pixels_render_as_spaces(self) -> None:
        image = Image.new("RGBA", (2, 2), (0, 0, 0, 0))
        art = image_to_text_art(image)
        self.assertEqual(art, "\033[0m \033[0m \033[0m")

    def test_odd_height_uses_lower_half_for_missing_row(self) -> None:
        image = Image.new("RGBA", (1, 3), (10, 20, 30, 255))
        lines = image_to_text_art(image).split("\n")
        self.assertEqual(len(lines), 2)
        self.assertIn("\033[49m▀", lines[1])


class BinaryTierTests(unittest.TestCase):
    def test_hex_dump_row_layout(self) -> None:
        row = hex_dump(b"Hello World\n")
        self.assertEqual(
            row,
            "00000000  48 65 6c 6c 6f 20 57 6f  72 6c 64 0a              |Hello World.|",
        )

    def test_render_reads_prefix_and_marks_truncation(self) -> None:
        storage = _storage(bytes(512))
        text = render_binary_preview(storage, "/dir/blob.bin", size=4096)
        storage.read_file.assert_called_once_with("/dir/blob.bin", 0, 512)
        lines = text.split("\n")
        self.assertEqual(lines[0], "Binary file: blob.bin")
        self.assertEqual(lines[1], "Size: 4096 bytes")
        self.assertEqual(lines[3], "Hex dump (first 512 bytes):")
        self.assertEqual(lines[-1], "... (truncated)")

    def test_small_file_has_no_truncation_marker(self) -> None:
        storage = _storage(b"abc")
        text = render_binary_preview(storage, "/a.bin", size=3)
        self.assertNotIn("truncated", text)


if __name__ == "__main__":
    unittest.main()
