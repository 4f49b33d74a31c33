"""
File system traversal: walk directories and collect Solidity source files.

Typical usage:
    from pathlib import Path
    from smartcheck.traversal import find_solidity_files

    files = find_solidity_files(Path("./contracts"))

    # Custom ignore set
    files = find_solidity_files(Path("."), ignore_dirs={"lib", "out"})
"""

import logging
from pathlib import Path
from typing import Optional, Set

logger = logging.getLogger(__name__)

SOLIDITY_SUFFIX = ".sol"

# Default directories to ignore during traversal
DEFAULT_IGNORE_DIRS: Set[str] = {
    # Build output (hardhat, foundry, truffle)
    "build",
    "artifacts",
    "cache",
    "out",
    "typechain",
    "typechain-types",
    # Dependencies
    "node_modules",
    "lib",
    "vendor",
    # Version control
    ".git",
    ".svn",
    ".hg",
    # IDE and editor directories
    ".vscode",
    ".idea",
    # Python tooling that may sit next to contracts
    "venv",
    ".venv",
    "__pycache__",
    ".pytest_cache",
}


def is_solidity_file(path: Path) -> bool:
    """
    Check if a file is a Solidity source file (.sol extension, any case).

    Examples:
        >>> is_solidity_file(Path("Token.sol"))
        True
        >>> is_solidity_file(Path("Token.json"))
        False
    """
    return path.suffix.lower() == SOLIDITY_SUFFIX


def should_ignore_directory(dir_path: Path, ignore_dirs: Set[str]) -> bool:
    """Only the directory name is compared, not the full path."""
    return dir_path.name in ignore_dirs


def find_solidity_files(
    root: Path,
    ignore_dirs: Optional[Set[str]] = None,
    follow_symlinks: bool = False,
) -> list[Path]:
    """
    Recursively find all .sol files in a directory tree.

    Args:
        root: Root directory to start traversal from.
        ignore_dirs: Directory names to skip. If None, uses DEFAULT_IGNORE_DIRS.
        follow_symlinks: If True, follow symbolic links during traversal.
                         If False (default), symlinks are skipped.

    Returns:
        Sorted list of paths to every .sol file found.

    Raises:
        FileNotFoundError: If the root directory does not exist.
        NotADirectoryError: If root is not a directory.

    Notes:
        Permission errors on subdirectories are logged but do not stop traversal.
    """
    if ignore_dirs is None:
        ignore_dirs = DEFAULT_IGNORE_DIRS

    root = root.resolve()

    if not root.exists():
        logger.error("Root directory does not exist: %s", root)
        raise FileNotFoundError(f"Root directory does not exist: {root}")

    if not root.is_dir():
        logger.error("Root path is not a directory: %s", root)
        raise NotADirectoryError(f"Root path is not a directory: {root}")

    logger.info("Starting traversal from: %s", root)

    collected_files: list[Path] = []

    def _walk_directory(current_dir: Path) -> None:
        try:
            for entry in current_dir.iterdir():
                if entry.is_symlink() and not follow_symlinks:
                    logger.debug("Skipping symlink: %s", entry)
                    continue

                if entry.is_dir():
                    if should_ignore_directory(entry, ignore_dirs):
                        logger.debug("Ignoring directory: %s", entry)
                        continue
                    _walk_directory(entry)

                elif entry.is_file() and is_solidity_file(entry):
                    logger.debug("Found source file: %s", entry)
                    collected_files.append(entry)

        except PermissionError as e:
            logger.warning("Permission denied accessing directory %s: %s", current_dir, e)
        except OSError as e:
            logger.warning("Error accessing directory %s: %s", current_dir, e)

    _walk_directory(root)

    # Sort for deterministic ordering
    collected_files.sort()

    logger.info(
        "Traversal complete: found %d Solidity file(s) in %s",
        len(collected_files),
        root,
    )

    return collected_files
