"""Source tree scanning for the last-resort search tier."""

from scan.files import DEFAULT_EXTENSIONS, find_source_files
from scan.fs import FileSystem, LocalFileSystem
from scan.functions import (
    FunctionScanner,
    extract_function_names,
    filter_function_names,
)

__all__ = [
    "DEFAULT_EXTENSIONS",
    "FileSystem",
    "FunctionScanner",
    "LocalFileSystem",
    "extract_function_names",
    "filter_function_names",
    "find_source_files",
]
