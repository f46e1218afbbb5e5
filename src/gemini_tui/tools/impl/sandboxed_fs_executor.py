import asyncio
import glob
import logging
import stat
from pathlib import Path
from typing import Any, Awaitable, Callable, Dict, List, Mapping, Optional, Union

import aiofiles
import aiofiles.os as aios
from pydantic import ValidationError

from gemini_tui.tools.types import ExecutorConfig, ToolResult

logger = logging.getLogger(__name__)

BINARY_SNIFF_BYTES = 512
OUTSIDE_ROOT_ERROR = "path is outside allowed directory"


class ExecutorSetupError(RuntimeError):
    """The executor could not be constructed (e.g. the root cannot be resolved)."""


class SandboxedFileSystemExecutor:
    """
    Runs the filesystem tools inside a single root directory.

    Every operation that takes a `path` resolves it (joined to the root when
    relative, symlinks followed) and refuses anything that lands outside the
    root. User-facing failures are returned as `{"error": ...}` results; the
    executor holds no state between calls and takes no locks, so callers must
    serialize calls that touch the same file.
    """
    plugin_id: str = "sandboxed_fs_executor_v1"
    description: str = "Executes read/list/glob/write/edit/mkdir tools confined to a root directory."

    def __init__(self, config: ExecutorConfig):
        self._config = config
        self._handlers: Dict[str, Callable[[Mapping[str, Any]], Awaitable[ToolResult]]] = {
            "read_file": self._read_file,
            "list_directory": self._list_directory,
            "glob_search": self._glob_search,
            "write_file": self._write_file,
            "edit_file": self._edit_file,
            "create_directory": self._create_directory,
        }
        logger.info(f"{self.plugin_id}: Sandbox root initialized at {self._config.root_directory}")

    @classmethod
    def for_root(cls, root_directory: Union[str, Path], **limits: Any) -> "SandboxedFileSystemExecutor":
        try:
            config = ExecutorConfig(root_directory=Path(root_directory), **limits)
        except ValidationError as e:
            raise ExecutorSetupError(f"failed to resolve working directory '{root_directory}': {e}") from e
        return cls(config)

    @property
    def config(self) -> ExecutorConfig:
        return self._config

    @property
    def root(self) -> Path:
        return self._config.root_directory

    @property
    def tool_names(self) -> List[str]:
        return list(self._handlers)

    async def execute(self, tool_name: str, arguments: Optional[Mapping[str, Any]]) -> ToolResult:
        handler = self._handlers.get(tool_name)
        if handler is None:
            logger.warning(f"{self.plugin_id}: Unknown tool requested: '{tool_name}'.")
            return {"error": f"unknown tool: {tool_name}"}

        args: Mapping[str, Any] = arguments if isinstance(arguments, Mapping) else {}
        logger.info(f"{self.plugin_id}: Executing '{tool_name}' with argument keys {sorted(args)}.")
        try:
            return await handler(args)
        except Exception as e:
            logger.error(f"{self.plugin_id}: Error during '{tool_name}': {e}", exc_info=True)
            return {"error": str(e)}

    # --- path policy ---

    def _resolve_path(self, path_arg: str) -> Path:
        candidate = Path(path_arg)
        if not candidate.is_absolute():
            candidate = self.root / candidate
        return candidate.resolve(strict=False)

    def _is_path_allowed(self, path: Path) -> bool:
        try:
            path.relative_to(self.root)
        except ValueError:
            return False
        return True

    def _secure_path(self, path_arg: str) -> Optional[Path]:
        """Resolve `path_arg`, returning None when it escapes the root or cannot be resolved."""
        try:
            full_path = self._resolve_path(path_arg)
        except (OSError, ValueError, RuntimeError) as e:
            logger.warning(f"{self.plugin_id}: Could not resolve path '{path_arg}': {e}")
            return None
        if not self._is_path_allowed(full_path):
            logger.warning(f"{self.plugin_id}: Rejected path '{path_arg}' resolving to '{full_path}' outside '{self.root}'.")
            return None
        return full_path

    @staticmethod
    def _str_arg(args: Mapping[str, Any], key: str) -> Optional[str]:
        value = args.get(key)
        return value if isinstance(value, str) else None

    # --- operations ---

    async def _read_file(self, args: Mapping[str, Any]) -> ToolResult:
        path_arg = self._str_arg(args, "path")
        if not path_arg:
            return {"error": "path is required"}
        full_path = self._secure_path(path_arg)
        if full_path is None:
            return {"error": OUTSIDE_ROOT_ERROR}

        try:
            st = await aios.stat(full_path)
        except FileNotFoundError:
            return {"error": f"file not found: {path_arg}"}

        if stat.S_ISDIR(st.st_mode):
            return {"error": "path is a directory, use list_directory instead"}

        max_bytes = self._config.max_read_bytes
        if st.st_size > max_bytes:
            return {
                "error": f"file too large: {st.st_size} bytes (max {max_bytes} bytes)",
                "path": str(full_path),
                "size": st.st_size,
                "max_size": max_bytes,
            }

        async with aiofiles.open(full_path, mode="rb") as f:
            head = await f.read(BINARY_SNIFF_BYTES)
            if b"\x00" in head:
                return {"error": "file appears to be binary", "path": str(full_path), "size": st.st_size}
            data = head + await f.read()

        return {
            "path": str(full_path),
            "content": data.decode("utf-8", errors="replace"),
            "size": len(data),
        }

    async def _list_directory(self, args: Mapping[str, Any]) -> ToolResult:
        path_arg = self._str_arg(args, "path") or "."
        full_path = self._secure_path(path_arg)
        if full_path is None:
            return {"error": OUTSIDE_ROOT_ERROR}

        if not await aios.path.exists(full_path):
            return {"error": f"directory not found: {path_arg}"}
        if not await aios.path.isdir(full_path):
            return {"error": "path is not a directory"}

        items: List[str] = []
        for name in sorted(await aios.listdir(full_path)):
            if await aios.path.isdir(full_path / name):
                name += "/"
            items.append(name)

        return {"path": str(full_path), "items": items, "count": len(items)}

    async def _glob_search(self, args: Mapping[str, Any]) -> ToolResult:
        pattern = self._str_arg(args, "pattern")
        if not pattern:
            return {"error": "pattern is required"}
        problem = _glob_pattern_problem(pattern)
        if problem:
            return {"error": f"invalid pattern: {problem}"}

        matches = await asyncio.to_thread(self._glob, pattern)
        truncated = False
        if len(matches) > self._config.max_glob_matches:
            matches = matches[: self._config.max_glob_matches]
            truncated = True

        return {"pattern": pattern, "matches": matches, "count": len(matches), "truncated": truncated}

    def _glob(self, pattern: str) -> List[str]:
        found = glob.glob(pattern, root_dir=str(self.root), recursive=True, include_hidden=True)
        allowed = set()
        for match in found:
            # Recursive globbing follows directory symlinks; drop anything that lands outside the root.
            try:
                resolved = (self.root / match).resolve()
            except (OSError, RuntimeError) as e:
                logger.warning(f"{self.plugin_id}: Could not resolve glob match '{match}': {e}")
                continue
            if self._is_path_allowed(resolved):
                allowed.add(Path(match).as_posix())
            else:
                logger.debug(f"{self.plugin_id}: Dropped glob match '{match}' resolving outside the root.")
        return sorted(allowed)

    async def _write_file(self, args: Mapping[str, Any]) -> ToolResult:
        path_arg = self._str_arg(args, "path")
        if not path_arg:
            return {"error": "path is required"}
        content = self._str_arg(args, "content")
        if content is None:
            return {"error": "content is required"}
        full_path = self._secure_path(path_arg)
        if full_path is None:
            return {"error": OUTSIDE_ROOT_ERROR}

        data = content.encode("utf-8")
        if len(data) > self._config.max_write_bytes:
            return {"error": f"content too large: {len(data)} bytes (max {self._config.max_write_bytes} bytes)"}

        try:
            await aios.makedirs(full_path.parent, exist_ok=True)
        except OSError as e:
            return {"error": f"failed to create directory: {e}"}

        async with aiofiles.open(full_path, mode="wb") as f:
            await f.write(data)

        return {"path": str(full_path), "size": len(data), "success": True}

    async def _edit_file(self, args: Mapping[str, Any]) -> ToolResult:
        path_arg = self._str_arg(args, "path")
        if not path_arg:
            return {"error": "path is required"}
        old_string = self._str_arg(args, "old_string")
        if old_string is None:
            return {"error": "old_string is required"}
        new_string = self._str_arg(args, "new_string")
        if new_string is None:
            return {"error": "new_string is required"}
        full_path = self._secure_path(path_arg)
        if full_path is None:
            return {"error": OUTSIDE_ROOT_ERROR}

        try:
            async with aiofiles.open(full_path, mode="rb") as f:
                raw = await f.read()
        except FileNotFoundError:
            return {"error": f"file not found: {path_arg}"}
        try:
            content = raw.decode("utf-8")
        except UnicodeDecodeError:
            return {"error": "file is not valid UTF-8 text", "path": str(full_path)}

        count = content.count(old_string)
        if count == 0:
            return {"error": "old_string not found in file", "path": str(full_path)}
        if count > 1:
            return {
                "error": f"old_string found {count} times in file, must be unique",
                "path": str(full_path),
                "occurrences": count,
            }

        new_data = content.replace(old_string, new_string, 1).encode("utf-8")
        async with aiofiles.open(full_path, mode="wb") as f:
            await f.write(new_data)

        return {"path": str(full_path), "size": len(new_data), "success": True}

    async def _create_directory(self, args: Mapping[str, Any]) -> ToolResult:
        path_arg = self._str_arg(args, "path")
        if not path_arg:
            return {"error": "path is required"}
        full_path = self._secure_path(path_arg)
        if full_path is None:
            return {"error": OUTSIDE_ROOT_ERROR}

        await aios.makedirs(full_path, exist_ok=True)
        return {"path": str(full_path), "success": True}

    async def teardown(self) -> None:
        logger.debug(f"{self.plugin_id}: Teardown complete (no resources held).")


def _glob_pattern_problem(pattern: str) -> Optional[str]:
    """Return a description of why `pattern` is unusable, or None if it is acceptable."""
    if Path(pattern).is_absolute() or pattern.startswith(("/", "\\")):
        return "pattern must be relative to the working directory"
    if any(segment == ".." for segment in pattern.replace("\\", "/").split("/")):
        return "pattern must not contain '..' segments"
    i, n = 0, len(pattern)
    while i < n:
        if pattern[i] == "[":
            j = i + 1
            if j < n and pattern[j] in "!^":
                j += 1
            if j < n and pattern[j] == "]":
                j += 1
            close = pattern.find("]", j)
            if close == -1:
                return f"syntax error in pattern: unterminated '[' at position {i}"
            i = close
        i += 1
    return None
