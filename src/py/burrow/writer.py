import asyncio
import socket
from types import TracebackType

from .config import LISTING_ENCODING
from .resolver import DirectoryListing, FileMatch, IndexMatch, TResolution
from .store import FileEntry

# --
# # Response Writer
#
# Responses have no head: a file is sent as-is, a directory as one `=> name`
# line per entry (with a trailing `/` for directories), and nothing at all
# when the path did not match. Closing the connection ends the response.


class SocketWriter:
	"""Writes to a non-blocking socket through the event loop. Lines are
	buffered until `flush()`, which the writer does when used as an async
	context manager that exits normally."""

	__slots__ = ["client", "loop", "buffer", "encoding", "written"]

	def __init__(
		self,
		client: socket.socket,
		loop: asyncio.AbstractEventLoop,
		*,
		encoding: str = LISTING_ENCODING,
	) -> None:
		self.client: socket.socket = client
		self.loop: asyncio.AbstractEventLoop = loop
		self.buffer: bytearray = bytearray()
		self.encoding: str = encoding
		self.written: int = 0

	def write(self, chunk: bytes) -> "SocketWriter":
		self.buffer += chunk
		return self

	def writeLine(self, line: str) -> "SocketWriter":
		# Names that are not valid in the encoding are written as their raw bytes
		return self.write(f"{line}\n".encode(self.encoding, "surrogateescape"))

	async def flush(self) -> int:
		n: int = len(self.buffer)
		if n:
			await self.loop.sock_sendall(self.client, bytes(self.buffer))
			self.buffer.clear()
			self.written += n
		return n

	async def writeFile(self, entry: FileEntry) -> int:
		"""Copies the contents of the file to the socket, byte for byte."""
		await self.flush()
		with entry.open() as f:
			n = await self.loop.sock_sendfile(self.client, f)
		self.written += n
		return n

	async def __aenter__(self) -> "SocketWriter":
		return self

	async def __aexit__(
		self,
		type: type[BaseException] | None,
		value: BaseException | None,
		traceback: TracebackType | None,
	) -> None:
		if value is None:
			await self.flush()
		else:
			self.buffer.clear()


def formatEntry(entry: FileEntry) -> str:
	return f"=> {entry.name}/" if entry.isDirectory else f"=> {entry.name}"


async def writeResponse(resolution: TResolution, writer: SocketWriter) -> int:
	"""Writes the response for the given resolution, returning the number
	of bytes sent."""
	match resolution:
		case FileMatch(entry) | IndexMatch(entry):
			return await writer.writeFile(entry)
		case DirectoryListing(entries):
			async with writer:
				for entry in entries:
					writer.writeLine(formatEntry(entry))
			return writer.written
		case _:
			return 0


# EOF
