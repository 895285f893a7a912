"""
pathguard - filesystem path sanitization and access control

Validates untrusted path strings and project names against an allowlist of
root directories before any file operation touches the disk.
"""

__version__ = "0.1.0"
__license__ = "Apache-2.0"

__all__ = ["__version__"]
