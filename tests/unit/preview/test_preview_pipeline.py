"""Preview tier selection and fallback tests.

Runs the pipeline against an in-memory store so every tier sees real
``stat_metadata``/``read_file`` behaviour.
"""

from __future__ import annotations

import io
import unittest
from unittest import mock

from PIL import Image

from vfsview import preview as preview_module
from vfsview.errors import NotFoundError
from vfsview.preview import FileTypeInfo, PreviewKind, detect_file_type, generate_preview
from vfsview.preview.text import BINARY_TEXT_MESSAGE
from vfsview.storage import MemoryBackend, VirtualFileSystem
from vfsview.storage.types import OpenFlags


def _store(files: dict[str, bytes]) -> VirtualFileSystem:
    fs = VirtualFileSystem()
    fs.mount("/", MemoryBackend())
    for path, data in files.items():
        with fs.open_for_write(path, OpenFlags.WRITE | OpenFlags.CREATE) as handle:
            handle.write(data)
    return fs


def _png_bytes(size: tuple[int, int] = (4, 4)) -> bytes:
    buffer = io.BytesIO()
    Image.new("RGB", size, (255, 0, 0)).save(buffer, "PNG")
    return buffer.getvalue()


class DetectFileTypeTests(unittest.TestCase):
    def test_each_extension_maps_to_one_kind(self) -> None:
        self.assertIs(detect_file_type("a.PNG").kind, PreviewKind.IMAGE)
        self.assertIs(detect_file_type("main.py").kind, PreviewKind.TEXT)
        self.assertIs(detect_file_type("blob.dat").kind, PreviewKind.BINARY)
        self.assertIs(detect_file_type("song.mp3").kind, PreviewKind.BINARY)
        self.assertIs(detect_file_type("clip.MKV").kind, PreviewKind.BINARY)

    def test_unknown_and_missing_extensions_are_text_candidates(self) -> None:
        self.assertEqual(detect_file_type("Makefile").description, "Unknown type")
        self.assertEqual(detect_file_type("x.weird").description, "Unknown text file")
        self.assertIs(detect_file_type("x.weird").kind, PreviewKind.TEXT)


class GeneratePreviewTests(unittest.TestCase):
    def test_text_file_returns_contents(self) -> None:
        fs = _store({"/notes.txt": b"line one\nline two\n"})
        result = generate_preview(fs, "/notes.txt")
        self.assertIs(result.kind, PreviewKind.TEXT)
        self.assertEqual(result.text, "line one\nline two\n")
        self.assertFalse(result.notice)

    def test_empty_file_and_directory_yield_empty_text(self) -> None:
        fs = _store({"/empty.txt": b""})
        fs.create_directory("/sub")
        self.assertEqual(generate_preview(fs, "/empty.txt").text, "")
        self.assertEqual(generate_preview(fs, "/sub").text, "")

    def test_control_heavy_text_becomes_binary_notice(self) -> None:
        fs = _store({"/odd.txt": b"\x01\x02" + b"a" * 18})
        result = generate_preview(fs, "/odd.txt")
        self.assertEqual(result.text, BINARY_TEXT_MESSAGE)
        self.assertTrue(result.notice)

    def test_control_ratio_threshold_is_configurable(self) -> None:
        fs = _store({"/odd.txt": b"\x01" + b"a" * 19})
        self.assertTrue(generate_preview(fs, "/odd.txt").notice)
        lenient = generate_preview(fs, "/odd.txt", control_ratio_threshold=0.5)
        self.assertFalse(lenient.notice)

    def test_media_files_get_a_hex_dump(self) -> None:
        fs = _store({"/song.mp3": b"ID3"})
        result = generate_preview(fs, "/song.mp3")
        self.assertIs(result.kind, PreviewKind.BINARY)
        self.assertIn("Binary file: song.mp3", result.text)
        self.assertIn("|ID3|", result.text)

    def test_unsupported_kind_reports_description(self) -> None:
        fs = _store({"/song.mp3": b"ID3"})
        with mock.patch.object(preview_module, "detect_file_type", return_value=FileTypeInfo(PreviewKind.UNSUPPORTED, "media")):
            result = generate_preview(fs, "/song.mp3")
        self.assertIs(result.kind, PreviewKind.UNSUPPORTED)
        self.assertEqual(result.text, "[Cannot preview media files]")
        self.assertTrue(result.notice)

    def test_binary_kind_renders_hex_dump(self) -> None:
        fs = _store({"/blob.dat": bytes(range(20))})
        result = generate_preview(fs, "/blob.dat")
        self.assertIs(result.kind, PreviewKind.BINARY)
        self.assertIn("Binary file: blob.dat", result.text)
        self.assertIn("00000010  10 11 12 13", result.text)

    def test_real_image_renders_header_and_rows(self) -> None:
        fs = _store({"/red.png": _png_bytes()})
        result = generate_preview(fs, "/red.png", viewport_width=40, viewport_height=20)
        self.assertIs(result.kind, PreviewKind.IMAGE)
        header, _blank, *rows = result.text.split("\n")
        self.assertEqual(header, "Image: png format, 4x4 pixels")
        self.assertEqual(len(rows), 2)
        self.assertIn("\033[38;2;255;0;0m", rows[0])

    def test_corrupt_image_falls_back_to_hex_dump(self) -> None:
        fs = _store({"/broken.png": b"\x00" * (10 * 1024)})
        result = generate_preview(fs, "/broken.png")
        self.assertIs(result.kind, PreviewKind.BINARY)
        self.assertIn("Binary file: broken.png", result.text)
        self.assertIn("Size: 10240 bytes", result.text)
        self.assertTrue(result.text.endswith("... (truncated)"))

    def test_missing_path_propagates_storage_error(self) -> None:
        fs = _store({})
        with self.assertRaises(NotFoundError):
            generate_preview(fs, "/nope.txt")


if __name__ == "__main__":
    unittest.main()
