# src/gemini_tui/tools/catalog.py
"""Declarations of the filesystem tools the model may request."""
from typing import List

from .types import ToolDefinition, ToolParameter

READ_FILE_TOOL = ToolDefinition(
    name="read_file",
    description=(
        "Read the contents of a file at the given path. Use this to examine source code, configuration files, "
        "documentation, or any text file. Returns the file contents along with metadata."
    ),
    parameters={
        "path": ToolParameter(
            description="The file path to read (absolute or relative to working directory)", required=True
        ),
    },
)

LIST_DIRECTORY_TOOL = ToolDefinition(
    name="list_directory",
    description=(
        "List files and directories at the given path. Returns names with type indicators "
        "(directories end with /). Useful for exploring project structure."
    ),
    parameters={
        "path": ToolParameter(description="The directory path to list. Use '.' or empty for current directory."),
    },
)

GLOB_SEARCH_TOOL = ToolDefinition(
    name="glob_search",
    description=(
        "Find files matching a glob pattern. Useful for finding all files of a certain type. Examples: "
        "'*.py' for Python files in current dir, '**/*.py' for all Python files recursively, "
        "'src/**/*.ts' for TypeScript files in src."
    ),
    parameters={
        "pattern": ToolParameter(
            description="Glob pattern to match (e.g., '*.py', '**/*.ts', 'src/**/*.js')", required=True
        ),
    },
)

WRITE_FILE_TOOL = ToolDefinition(
    name="write_file",
    description=(
        "Create a new file or completely overwrite an existing file with the given content. "
        "Parent directories are created as needed. Prefer edit_file for small changes to existing files."
    ),
    parameters={
        "path": ToolParameter(description="The file path to write (absolute or relative to working directory)", required=True),
        "content": ToolParameter(description="The full content to write to the file", required=True),
    },
)

EDIT_FILE_TOOL = ToolDefinition(
    name="edit_file",
    description=(
        "Edit an existing file by replacing one exact occurrence of old_string with new_string. "
        "old_string must appear exactly once in the file; include surrounding context to make it unique."
    ),
    parameters={
        "path": ToolParameter(description="The file path to edit (absolute or relative to working directory)", required=True),
        "old_string": ToolParameter(description="The exact text to replace; must occur exactly once", required=True),
        "new_string": ToolParameter(description="The replacement text", required=True),
    },
)

CREATE_DIRECTORY_TOOL = ToolDefinition(
    name="create_directory",
    description="Create a directory, including any missing parent directories. Succeeds if it already exists.",
    parameters={
        "path": ToolParameter(description="The directory path to create (absolute or relative to working directory)", required=True),
    },
)


def all_tools() -> List[ToolDefinition]:
    """Return every tool declaration, read-only tools first."""
    return [
        READ_FILE_TOOL,
        LIST_DIRECTORY_TOOL,
        GLOB_SEARCH_TOOL,
        WRITE_FILE_TOOL,
        EDIT_FILE_TOOL,
        CREATE_DIRECTORY_TOOL,
    ]
