from .store import FileStore, FileEntry  # NOQA: F401
from .resolver import (  # NOQA: F401
	FileMatch,
	IndexMatch,
	DirectoryListing,
	NoMatch,
	resolve,
)
from .server import run, ServerOptions, AIOSocketServer  # NOQA: F401

# EOF
