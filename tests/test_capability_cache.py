"""Tests for filesystem capability probing and caching."""

import errno
import os
import threading
import time
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

import pytest

from peelfs.config.models import FilesystemSettings
from peelfs.filesystem import (
    PROBE_FILENAME,
    CapabilityCache,
    FilesystemCapability,
    InvalidPathError,
    ProbeCapabilityProvider,
    RestrictedCapabilityProvider,
    canonical_key,
    select_provider,
)


class CountingProvider:
    """Provider stub recording every directory it is asked about."""

    def __init__(self, result: FilesystemCapability, delay: float = 0.0) -> None:
        self.result = result
        self.delay = delay
        self.calls: list[Path] = []
        self._lock = threading.Lock()

    def check(self, directory: Path) -> FilesystemCapability:
        with self._lock:
            self.calls.append(directory)
        if self.delay:
            time.sleep(self.delay)
        return self.result


def _fail_probe_with(monkeypatch: pytest.MonkeyPatch, code: int) -> None:
    real_open = os.open

    def _open(path, flags, mode=0o777, *args, **kwargs):
        if os.path.basename(path) == PROBE_FILENAME:
            raise OSError(code, os.strerror(code), path)
        return real_open(path, flags, mode, *args, **kwargs)

    monkeypatch.setattr(os, "open", _open)


def test_probe_on_permissive_filesystem(tmp_path: Path) -> None:
    assert ProbeCapabilityProvider().check(tmp_path) is FilesystemCapability.NOT_RESTRICTED
    assert list(tmp_path.iterdir()) == []


def test_probe_with_existing_file(tmp_path: Path) -> None:
    occupied = tmp_path / PROBE_FILENAME
    occupied.write_bytes(b"keep me")

    assert ProbeCapabilityProvider().check(tmp_path) is FilesystemCapability.NOT_RESTRICTED
    assert occupied.read_bytes() == b"keep me"


def test_probe_rejected_name_means_restricted(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    _fail_probe_with(monkeypatch, errno.EINVAL)

    assert ProbeCapabilityProvider().check(tmp_path) is FilesystemCapability.RESTRICTED_NAMING


def test_probe_other_errors_fail(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    assert (
        ProbeCapabilityProvider().check(tmp_path / "missing")
        is FilesystemCapability.PROBE_FAILED
    )

    _fail_probe_with(monkeypatch, errno.EACCES)
    assert ProbeCapabilityProvider().check(tmp_path) is FilesystemCapability.PROBE_FAILED


def test_restricted_provider_skips_io(tmp_path: Path) -> None:
    provider = RestrictedCapabilityProvider()

    assert provider.check(tmp_path / "does-not-exist") is FilesystemCapability.RESTRICTED_NAMING


def test_select_provider() -> None:
    assert isinstance(select_provider("auto", platform="win32"), RestrictedCapabilityProvider)
    assert isinstance(select_provider("auto", platform="linux"), ProbeCapabilityProvider)
    assert isinstance(select_provider("probe", platform="win32"), ProbeCapabilityProvider)
    assert isinstance(select_provider("restricted"), RestrictedCapabilityProvider)
    with pytest.raises(ValueError):
        select_provider("sometimes")


def test_cache_probes_each_directory_once(tmp_path: Path) -> None:
    provider = CountingProvider(FilesystemCapability.NOT_RESTRICTED)
    cache = CapabilityCache(provider)

    first = cache.check(tmp_path)
    second = cache.check(str(tmp_path) + os.sep)
    third = cache.check(tmp_path / "." / "sub" / "..")

    assert first is second is third is FilesystemCapability.NOT_RESTRICTED
    assert len(provider.calls) == 1
    assert len(cache) == 1
    assert tmp_path in cache


def test_cache_keeps_directories_apart(tmp_path: Path) -> None:
    provider = CountingProvider(FilesystemCapability.RESTRICTED_NAMING)
    cache = CapabilityCache(provider)
    (tmp_path / "a").mkdir()
    (tmp_path / "b").mkdir()

    cache.check(tmp_path / "a")
    cache.check(tmp_path / "b")
    cache.check(tmp_path / "a")

    assert [call.name for call in provider.calls] == ["a", "b"]


def test_probe_failure_is_cached(tmp_path: Path) -> None:
    provider = CountingProvider(FilesystemCapability.PROBE_FAILED)
    cache = CapabilityCache(provider)

    for _ in range(3):
        assert cache.check(tmp_path) is FilesystemCapability.PROBE_FAILED

    assert len(provider.calls) == 1


def test_concurrent_checks_share_one_probe(tmp_path: Path) -> None:
    provider = CountingProvider(FilesystemCapability.NOT_RESTRICTED, delay=0.05)
    cache = CapabilityCache(provider)

    with ThreadPoolExecutor(max_workers=8) as pool:
        results = list(pool.map(lambda _: cache.check(tmp_path), range(16)))

    assert set(results) == {FilesystemCapability.NOT_RESTRICTED}
    assert len(provider.calls) == 1


def test_cached_peek_and_clear(tmp_path: Path) -> None:
    provider = CountingProvider(FilesystemCapability.NOT_RESTRICTED)
    cache = CapabilityCache(provider)

    assert cache.cached(tmp_path) is None
    cache.check(tmp_path)
    assert cache.cached(tmp_path) is FilesystemCapability.NOT_RESTRICTED

    cache.clear()
    assert len(cache) == 0
    cache.check(tmp_path)
    assert len(provider.calls) == 2


@pytest.mark.parametrize("bad", ["", "dir\x00name"])
def test_malformed_paths_are_rejected(bad: str) -> None:
    cache = CapabilityCache(CountingProvider(FilesystemCapability.NOT_RESTRICTED))

    with pytest.raises(InvalidPathError):
        cache.check(bad)
    assert bad not in cache


def test_canonical_key_is_absolute(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.chdir(tmp_path)

    assert canonical_key("sub/../") == canonical_key(tmp_path)


def test_cache_from_settings_uses_configured_provider(tmp_path: Path) -> None:
    cache = CapabilityCache.from_settings(FilesystemSettings(capability_provider="restricted"))

    assert cache.check(tmp_path) is FilesystemCapability.RESTRICTED_NAMING
    assert list(tmp_path.iterdir()) == []
