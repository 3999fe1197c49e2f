from pathlib import Path

from burrow.resolver import (
	DirectoryListing,
	FileMatch,
	IndexMatch,
	NoMatch,
	resolve,
)
from burrow.store import FileEntry, FileStore


def test_file(tmp_path: Path):
	(tmp_path / "hello.txt").write_bytes(b"hi")
	res = resolve(FileStore(tmp_path), "hello.txt")
	assert isinstance(res, FileMatch)
	assert res.entry.path == tmp_path / "hello.txt"


def test_index(tmp_path: Path):
	(tmp_path / "docs").mkdir()
	(tmp_path / "docs" / "index").write_bytes(b"welcome")
	(tmp_path / "docs" / "other.txt").write_bytes(b"other")
	res = resolve(FileStore(tmp_path), "docs")
	assert isinstance(res, IndexMatch)
	assert res.entry.path == tmp_path / "docs" / "index"


def test_root_index(tmp_path: Path):
	(tmp_path / "index").write_bytes(b"home")
	res = resolve(FileStore(tmp_path), "")
	assert isinstance(res, IndexMatch)
	assert res.entry.name == "index"


class StubStore(FileStore):
	"""Pretends that the given paths exist, as files or directories."""

	def __init__(self, files: list[str], directories: list[str]):
		super().__init__("/")
		self.files = files
		self.directories = directories

	def resolveFile(self, path: str) -> FileEntry | None:
		return FileEntry(path, Path(path)) if path in self.files else None

	def resolveDirectory(self, path: str) -> list[FileEntry] | None:
		return [] if path in self.directories else None


def test_precedence():
	everything = StubStore(["docs", "docs/index"], ["docs"])
	assert isinstance(resolve(everything, "docs"), FileMatch)
	no_file = StubStore(["docs/index"], ["docs"])
	res = resolve(no_file, "docs")
	assert isinstance(res, IndexMatch)
	assert res.entry.name == "docs/index"
	res = resolve(StubStore([], ["docs"]), "docs")
	assert isinstance(res, DirectoryListing)
	assert res.entries == []
	res = resolve(StubStore([], []), "docs")
	assert isinstance(res, NoMatch)
	assert res.path == "docs"


def test_directory_listing(tmp_path: Path):
	(tmp_path / "docs").mkdir()
	(tmp_path / "docs" / "a.txt").write_bytes(b"a")
	(tmp_path / "docs" / "sub").mkdir()
	(tmp_path / "docs" / ".hidden").write_bytes(b"h")
	res = resolve(FileStore(tmp_path), "docs")
	assert isinstance(res, DirectoryListing)
	assert sorted((_.name, _.isDirectory) for _ in res.entries) == [
		("a.txt", False),
		("sub", True),
	]


def test_index_directory_is_listed(tmp_path: Path):
	# An `index` that is a directory is not an index
	(tmp_path / "docs").mkdir()
	(tmp_path / "docs" / "index").mkdir()
	res = resolve(FileStore(tmp_path), "docs")
	assert isinstance(res, DirectoryListing)
	assert [(_.name, _.isDirectory) for _ in res.entries] == [("index", True)]


def test_no_match(tmp_path: Path):
	(tmp_path / ".secret").write_bytes(b"s")
	store = FileStore(tmp_path)
	for path in ("missing", ".secret", "missing/index"):
		res = resolve(store, path)
		assert isinstance(res, NoMatch)
		assert res.path == path



def test_name_too_long(tmp_path: Path):
	(tmp_path / "docs").mkdir()
	store = FileStore(tmp_path)
	# Longer than the filesystem allows for a name, which is not an error
	for path in ("a" * 300, "docs/" + "a" * 300, "a" * 300 + "/index"):
		res = resolve(store, path)
		assert isinstance(res, NoMatch)
		assert res.path == path


# EOF
