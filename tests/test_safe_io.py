"""Tests for the guarded file operations."""

import logging
import os
import stat
from pathlib import Path
from unittest.mock import patch

import pytest

from pathguard.core.errors import PathSecurityError, SecurityViolationError, ViolationKind
from pathguard.core.roots import AllowedRoots
from pathguard.utils.safe_io import (
    safe_file_exists,
    safe_mkdir,
    safe_read_file,
    safe_write_file,
)

ATTACKS = ["../../../etc/passwd", "..\\..\\windows\\system32\\config", "%2e%2e%2fsecret"]


# --- safe_read_file ---


def test_read_returns_bytes(populated_root: Path) -> None:
    path = str(populated_root / "test-file.txt")
    assert safe_read_file(path, populated_root) == b"test content"


def test_read_with_encoding_returns_text(populated_root: Path) -> None:
    content = safe_read_file("subdir/nested.txt", populated_root, encoding="utf-8")
    assert content == "nested content"


@pytest.mark.parametrize("attempt", ATTACKS)
def test_read_blocks_traversal(populated_root: Path, attempt: str) -> None:
    with pytest.raises(SecurityViolationError, match="Security violation"):
        safe_read_file(attempt, populated_root)


def test_read_blocks_dotdot_inside_absolute_path(populated_root: Path) -> None:
    with pytest.raises(SecurityViolationError, match="suspicious pattern"):
        safe_read_file(str(populated_root / ".." / ".." / "etc" / "passwd"), populated_root)


def test_read_missing_file_raises_os_error(root: Path) -> None:
    with pytest.raises(FileNotFoundError):
        safe_read_file("missing.txt", root)


def test_read_uses_allowlist_without_base(populated_root: Path, roots: AllowedRoots) -> None:
    assert safe_read_file(str(populated_root / "test-file.txt"), roots=roots) == b"test content"
    with pytest.raises(SecurityViolationError, match="outside of allowed directories"):
        safe_read_file("/etc/passwd", roots=roots)


def test_read_blocks_symlink_escape(tmp_path: Path, root: Path) -> None:
    outside = tmp_path.resolve() / "outside"
    outside.mkdir()
    (outside / "secret.txt").write_text("secret")
    (root / "link").symlink_to(outside, target_is_directory=True)

    with pytest.raises(SecurityViolationError, match="symlink target is outside"):
        safe_read_file("link/secret.txt", root)


# --- safe_write_file ---


def test_write_then_read_round_trip(root: Path) -> None:
    content = bytes(range(256))
    safe_write_file("blob.bin", content, root)
    assert safe_read_file("blob.bin", root) == content


def test_write_text_is_encoded(root: Path) -> None:
    safe_write_file("note.txt", "héllo", root)
    assert (root / "note.txt").read_bytes() == "héllo".encode()


def test_write_replaces_existing_file(populated_root: Path) -> None:
    safe_write_file("test-file.txt", b"new", populated_root)
    assert (populated_root / "test-file.txt").read_bytes() == b"new"


def test_write_keeps_existing_mode(root: Path) -> None:
    target = root / "shared.txt"
    target.write_bytes(b"old")
    target.chmod(0o644)
    safe_write_file("shared.txt", b"new", root)
    assert stat.S_IMODE(target.stat().st_mode) == 0o644
    assert target.read_bytes() == b"new"


def test_write_new_file_uses_umask(root: Path) -> None:
    umask = os.umask(0o022)
    try:
        safe_write_file("fresh.txt", b"x", root)
    finally:
        os.umask(umask)
    assert stat.S_IMODE((root / "fresh.txt").stat().st_mode) == 0o644


def test_write_leaves_no_temporary_files(root: Path) -> None:
    safe_write_file("a.txt", b"a", root)
    assert [p.name for p in root.iterdir()] == ["a.txt"]


@pytest.mark.parametrize("attempt", ["../../../tmp/evil.txt", "..\\..\\tmp\\evil.txt"])
def test_write_blocks_traversal(tmp_path: Path, root: Path, attempt: str) -> None:
    with pytest.raises(SecurityViolationError, match="Security violation"):
        safe_write_file(attempt, b"evil content", root)
    assert list(root.iterdir()) == []


def test_write_outside_base_creates_nothing(tmp_path: Path, root: Path) -> None:
    target = tmp_path.resolve() / "evil.txt"
    with pytest.raises(SecurityViolationError, match="outside of allowed directory"):
        safe_write_file(str(target), b"evil", root)
    assert not target.exists()


def test_write_into_missing_directory_fails(root: Path) -> None:
    with pytest.raises(FileNotFoundError):
        safe_write_file("no/such/dir/file.txt", b"x", root)


# --- safe_file_exists ---


def test_exists_true_and_false(populated_root: Path) -> None:
    assert safe_file_exists(str(populated_root / "test-file.txt"), populated_root) is True
    assert safe_file_exists(str(populated_root / "nonexistent.txt"), populated_root) is False


@pytest.mark.parametrize("attempt", ATTACKS)
def test_exists_raises_instead_of_false(root: Path, attempt: str) -> None:
    with pytest.raises(SecurityViolationError):
        safe_file_exists(attempt, root)


def test_exists_never_probes_on_violation(root: Path) -> None:
    with patch("pathguard.utils.safe_io.os.path.exists") as mock_exists:
        with pytest.raises(SecurityViolationError):
            safe_file_exists("../etc/passwd", root)
    mock_exists.assert_not_called()


# --- safe_mkdir ---


def test_mkdir_creates_nested_directories(root: Path) -> None:
    created = safe_mkdir("a/b/c", root)
    assert created == str(root / "a" / "b" / "c")
    assert (root / "a" / "b" / "c").is_dir()


def test_mkdir_without_parents(root: Path) -> None:
    safe_mkdir("single", root, parents=False)
    safe_mkdir("single", root, parents=False)
    with pytest.raises(FileExistsError):
        safe_mkdir("single", root, parents=False, exist_ok=False)


def test_mkdir_blocks_traversal(root: Path) -> None:
    with pytest.raises(SecurityViolationError):
        safe_mkdir("../escaped", root)


# --- errors and logging ---


def test_violation_keeps_kind_and_base_class(root: Path) -> None:
    with pytest.raises(PathSecurityError) as e:
        safe_read_file("/etc/passwd", root)
    assert isinstance(e.value, SecurityViolationError)
    assert e.value.kind == ViolationKind.OUTSIDE_ALLOWED_DIRECTORY
    assert isinstance(e.value.__cause__, PathSecurityError)


def test_violation_is_logged(root: Path, caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.WARNING, logger="pathguard.utils.safe_io"):
        with pytest.raises(SecurityViolationError):
            safe_write_file("../evil.txt", b"x", root)
    assert "Blocked write" in caplog.text
