"""Format sniffing and in-place archive unpacking."""

from .detectors import FormatSniffer, classify_header, sniff
from .driver import UnpackDriver, unpack_archive
from .errors import CommitError, UnpackError
from .models import FileTypeTag, UnpackOutcome
from .scratch import ScratchFile
from .unpackers import GZipUnpacker, ZipUnpacker

__all__ = [
    "CommitError",
    "FileTypeTag",
    "FormatSniffer",
    "GZipUnpacker",
    "ScratchFile",
    "UnpackDriver",
    "UnpackError",
    "UnpackOutcome",
    "ZipUnpacker",
    "classify_header",
    "sniff",
    "unpack_archive",
]
