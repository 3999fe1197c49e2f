import os
import stat
from contextlib import contextmanager
from pathlib import Path
from typing import BinaryIO, Iterator, NamedTuple

from mypy_extensions import mypyc_attr

# --
# # File Store
#
# Read-only access to the files and directories under a root directory. The
# store applies a single exclusion policy: dot-prefixed, hidden and system
# entries are never visible, whether they are looked up directly, traversed
# as part of a path, or enumerated in a directory listing.

EXCLUDED_ATTRIBUTES: int = stat.FILE_ATTRIBUTE_HIDDEN | stat.FILE_ATTRIBUTE_SYSTEM
EXCLUDED_FLAGS: int = stat.UF_HIDDEN


class FileEntry(NamedTuple):
	name: str
	path: Path
	isDirectory: bool = False

	@contextmanager
	def open(self) -> Iterator[BinaryIO]:
		"""Yields a binary read stream on the entry, closed on exit."""
		with open(self.path, "rb") as f:
			yield f


def stats(path: Path | os.DirEntry) -> os.stat_result | None:
	"""Returns the stats of the given path without following links, or
	`None` if it cannot be accessed."""
	try:
		return (
			path.stat(follow_symlinks=False)
			if isinstance(path, os.DirEntry)
			else os.lstat(path)
		)
	except OSError:
		return None


def target(path: Path) -> os.stat_result | None:
	"""Returns the stats of what the given path points to, or `None` if it
	cannot be accessed."""
	try:
		return os.stat(path)
	except OSError:
		return None


def isExcluded(name: str, stats: os.stat_result | None = None) -> bool:
	"""Tells if the entry with the given name and stats must be invisible."""
	if name.startswith("."):
		return True
	elif stats is None:
		return False
	else:
		# `st_file_attributes` is only available on Windows, `st_flags` on BSDs
		# and macOS.
		return bool(
			getattr(stats, "st_file_attributes", 0) & EXCLUDED_ATTRIBUTES
			or getattr(stats, "st_flags", 0) & EXCLUDED_FLAGS
		)


@mypyc_attr(allow_interpreted_subclasses=True)
class FileStore:
	"""Maps request paths to files and directory listings under `root`."""

	__slots__ = ["root"]

	def __init__(self, root: str | Path) -> None:
		self.root: Path = (root if isinstance(root, Path) else Path(root)).absolute()

	def localPath(self, path: str) -> Path | None:
		"""Returns the local path for the given `/`-separated path, or `None`
		when one of its segments is excluded or when it points outside of
		the root."""
		if "\0" in path:
			return None
		local_path: Path = self.root
		for name in path.split("/"):
			if not name:
				continue
			local_path = local_path / name
			if isExcluded(name, stats(local_path)):
				return None
		if local_path.parts[: len(parts := self.root.parts)] != parts:
			return None
		return local_path

	def resolveFile(self, path: str) -> FileEntry | None:
		local_path = self.localPath(path)
		if (
			local_path is None
			or local_path == self.root
			or (st := target(local_path)) is None
			or not stat.S_ISREG(st.st_mode)
		):
			return None
		else:
			return FileEntry(local_path.name, local_path)

	def resolveDirectory(self, path: str) -> list[FileEntry] | None:
		"""Returns the visible entries of the directory at `path`, in the
		order the filesystem enumerates them, or `None` if there is no
		such directory."""
		local_path = self.localPath(path)
		if (
			local_path is None
			or (st := target(local_path)) is None
			or not stat.S_ISDIR(st.st_mode)
		):
			return None
		entries: list[FileEntry] = []
		with os.scandir(local_path) as items:
			for item in items:
				if not isExcluded(item.name, stats(item)):
					entries.append(FileEntry(item.name, Path(item.path), item.is_dir()))
		return entries

	def __repr__(self) -> str:
		return f"<FileStore root={str(self.root)!r}>"


# EOF
