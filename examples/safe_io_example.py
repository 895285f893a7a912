"""Example demonstrating pathguard path validation.

This example shows how to:
1. Validate untrusted paths against an allowlist
2. Join user-supplied relative paths under a project directory
3. Validate project names
4. Read and write files through the guarded helpers
"""

import logging
import tempfile
from pathlib import Path

from pathguard.core.errors import PathSecurityError
from pathguard.core.roots import AllowedRoots
from pathguard.utils import (
    check_path,
    safe_join,
    safe_mkdir,
    safe_read_file,
    safe_write_file,
    validate_project_name,
)

# Setup logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)

logger = logging.getLogger(__name__)


def example_1_allowlist(workspace: Path) -> None:
    """Example 1: Check paths against an allowlist."""
    print("\n" + "=" * 60)
    print("EXAMPLE 1: Allowlist validation")
    print("=" * 60 + "\n")

    roots = AllowedRoots.from_paths([workspace])
    candidates = [
        str(workspace / "notes" / "todo.txt"),
        f"{workspace}//notes/./todo.txt",
        "/etc/passwd",
        "../../etc/passwd",
        "%2e%2e%2fsecret",
        "notes%00.txt",
    ]
    for candidate in candidates:
        result = check_path(candidate, roots=roots)
        if result.success:
            print(f"  OK       {candidate!r} -> {result.path}")
        else:
            print(f"  REJECTED {candidate!r} ({result.violation}): {result.message}")


def example_2_join() -> None:
    """Example 2: Join untrusted relative paths under a project."""
    print("\n" + "=" * 60)
    print("EXAMPLE 2: safe_join")
    print("=" * 60 + "\n")

    base = "/home/user/my-project"
    for relative in ["src/main.py", "./docs/../README.md", "../other-project/secrets.env"]:
        try:
            print(f"  {relative!r} -> {safe_join(base, relative)}")
        except PathSecurityError as e:
            print(f"  {relative!r} rejected: {e}")


def example_3_project_names() -> None:
    """Example 3: Validate project names."""
    print("\n" + "=" * 60)
    print("EXAMPLE 3: Project names")
    print("=" * 60 + "\n")

    for name in ["my-project", "CON", "nul.txt", "a/b", "x" * 300]:
        try:
            validate_project_name(name)
            print(f"  {name[:20]!r}: valid")
        except PathSecurityError as e:
            print(f"  {name[:20]!r}: {e}")


def example_4_safe_io(workspace: Path) -> None:
    """Example 4: Guarded file operations."""
    print("\n" + "=" * 60)
    print("EXAMPLE 4: Guarded file I/O")
    print("=" * 60 + "\n")

    safe_mkdir("notes", workspace)
    safe_write_file("notes/todo.txt", "ship it\n", workspace)
    print(f"  Read back: {safe_read_file('notes/todo.txt', workspace, encoding='utf-8')!r}")

    try:
        safe_write_file("../escaped.txt", "nope", workspace)
    except PathSecurityError as e:
        logger.info(f"Write blocked as expected ({e.kind})")


def main() -> None:
    """Run all examples."""
    with tempfile.TemporaryDirectory() as tmp:
        workspace = Path(tmp).resolve()
        example_1_allowlist(workspace)
        example_2_join()
        example_3_project_names()
        example_4_safe_io(workspace)

    print("\n" + "=" * 60)
    print("All examples completed!")
    print("=" * 60 + "\n")


if __name__ == "__main__":
    main()
