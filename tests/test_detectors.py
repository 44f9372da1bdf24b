"""Tests for header-based file type detection."""

from pathlib import Path

import pytest

from peelfs.unpacking import FileTypeTag, FormatSniffer, classify_header, sniff


@pytest.mark.parametrize("head", [b"", b"P", b"\x1f", b"a", b"\xe0"])
def test_short_headers_are_unknown(head: bytes) -> None:
    assert classify_header(head) is FileTypeTag.UNKNOWN


@pytest.mark.parametrize(
    ("head", "expected"),
    [
        (b"PK", FileTypeTag.ZIP),
        (b"PK\x03\x04\x14\x00\x00\x00\x08\x00", FileTypeTag.ZIP),
        (b"PK\xff\xff\xff", FileTypeTag.ZIP),
        (b"\x1f\x8b", FileTypeTag.GZIP),
        (b"\x1f\x8b\x08\x00\x00\x00\x00\x00\x00\x03", FileTypeTag.GZIP),
        (b"\xe0\x01\x00\x00", FileTypeTag.LEGACY_METADATA),
        (b"\x0e\xff\xfe", FileTypeTag.LEGACY_METADATA),
        (b"# ipfilter", FileTypeTag.TEXT),
        (b"a b\tc\r\n\x0b\x0c", FileTypeTag.TEXT),
        (b"text\x00more", FileTypeTag.UNKNOWN),
        (b"caf\xc3\xa9", FileTypeTag.UNKNOWN),
    ],
)
def test_classify_header(head: bytes, expected: FileTypeTag) -> None:
    assert classify_header(head) is expected


def test_bytes_past_the_tenth_are_ignored() -> None:
    assert classify_header(b"0123456789\x00\x01\x02") is FileTypeTag.TEXT


def test_sniff_reads_file_header(tmp_path: Path) -> None:
    text = tmp_path / "servers.txt"
    text.write_bytes(b"server list\n" + b"\x00" * 64)
    binary = tmp_path / "blob.bin"
    binary.write_bytes(b"\x7fELF\x02\x01\x01")

    sniffer = FormatSniffer()

    assert sniffer.sniff(text) is FileTypeTag.TEXT
    assert sniffer.sniff(binary) is FileTypeTag.UNKNOWN


def test_sniff_unreadable_paths_are_unknown(tmp_path: Path) -> None:
    empty = tmp_path / "empty"
    empty.write_bytes(b"")

    assert sniff(empty) is FileTypeTag.UNKNOWN
    assert sniff(tmp_path / "missing") is FileTypeTag.UNKNOWN
    assert sniff(tmp_path) is FileTypeTag.UNKNOWN


def test_archive_tags() -> None:
    assert FileTypeTag.ZIP.is_archive
    assert FileTypeTag.GZIP.is_archive
    assert not FileTypeTag.TEXT.is_archive
    assert not FileTypeTag.LEGACY_METADATA.is_archive
