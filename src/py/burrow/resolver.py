from typing import NamedTuple, TypeAlias

from .config import INDEX
from .store import FileEntry, FileStore

# --
# # Path Resolver
#
# A request path resolves to exactly one of: the file at that path, the
# `index` file in the directory at that path, the listing of that directory,
# or nothing. The first that applies wins, in that order.


class FileMatch(NamedTuple):
	entry: FileEntry


class IndexMatch(NamedTuple):
	entry: FileEntry


class DirectoryListing(NamedTuple):
	entries: list[FileEntry]


class NoMatch(NamedTuple):
	path: str


TResolution: TypeAlias = FileMatch | IndexMatch | DirectoryListing | NoMatch


def resolve(store: FileStore, path: str) -> TResolution:
	if (file := store.resolveFile(path)) is not None:
		return FileMatch(file)
	# NOTE: For the root, this is `/index`, which the store resolves as `index`.
	elif (index := store.resolveFile(f"{path}/{INDEX}")) is not None:
		return IndexMatch(index)
	elif (entries := store.resolveDirectory(path)) is not None:
		return DirectoryListing(entries)
	else:
		return NoMatch(path)


# EOF
