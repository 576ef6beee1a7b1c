"""Path validation for files handed to ffprobe and ffmpeg."""

import os
from pathlib import Path

# Common video containers accepted as input
ALLOWED_EXTENSIONS = {
    '.mp4', '.mkv', '.avi', '.mov', '.webm', '.flv', '.wmv', '.m4v', '.mpg', '.mpeg', '.3gp', '.ts',
    '.m2ts', '.mts', '.vob', '.ogv', '.gif',
}

# Critical system directories that should be protected from write operations
UNSAFE_DIRECTORIES = {
    "/bin", "/boot", "/dev", "/etc", "/lib", "/lib64", "/proc",
    "/run", "/sbin", "/sys", "/usr"
}


def _check_unsafe_path(path: Path) -> None:
    """Raise ValueError if the path targets a sensitive system directory."""
    path_str = str(path)
    for unsafe in UNSAFE_DIRECTORIES:
        if path_str == unsafe or path_str.startswith(f"{unsafe}{os.sep}"):
            raise ValueError(f"Path targets unsafe system directory: {path}")

    if os.name == 'nt':
        lower_path = path_str.lower()
        if (lower_path.startswith("c:\\windows") or
                lower_path.startswith("c:\\program files")):
            raise ValueError(f"Path targets unsafe system directory: {path}")


def validate_video_path(path: str | Path, must_exist: bool = True) -> str:
    """Validate and resolve a video file path.

    Args:
        path: The path to validate.
        must_exist: If True, raises ValueError when the file doesn't exist.

    Returns:
        The resolved, absolute path string.

    Raises:
        ValueError: If the path is empty, contains traversal sequences,
                    is not a supported video type, or doesn't exist
                    (when must_exist is True).
    """
    if not str(path).strip():
        raise ValueError("Path cannot be empty")

    if ".." in Path(path).parts:
        raise ValueError(f"Path contains directory traversal (..): {path}")

    resolved = Path(path).resolve()
    if resolved.suffix.lower() not in ALLOWED_EXTENSIONS:
        raise ValueError(
            f"Invalid file extension: {resolved.suffix}. "
            f"Allowed: {sorted(ALLOWED_EXTENSIONS)}"
        )

    if must_exist:
        if not resolved.exists():
            raise ValueError(f"File not found: {resolved}")
        if not resolved.is_file():
            raise ValueError(f"Path is not a file: {resolved}")

    return str(resolved)


def validate_output_dir(path: str | Path) -> str:
    """Validate an export directory, creating it if needed.

    Raises:
        ValueError: If the path contains traversal sequences, targets a
                    protected system directory, or is an existing file.
    """
    if ".." in Path(path).parts:
        raise ValueError(f"Output path contains directory traversal (..): {path}")

    resolved = Path(path).resolve()
    _check_unsafe_path(resolved)
    if resolved.exists() and not resolved.is_dir():
        raise ValueError(f"Output path is not a directory: {resolved}")

    resolved.mkdir(parents=True, exist_ok=True)
    return str(resolved)
