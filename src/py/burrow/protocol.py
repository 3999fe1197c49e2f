import asyncio
import socket
import struct
from fcntl import ioctl
from termios import FIONREAD

from .config import REQUEST_ENCODING, REQUEST_LIMIT
from .utils.logging import warning

# --
# # Request Reader
#
# A request is whatever bytes the client has sent by the time its connection
# is handled: there is no terminator to wait for. The bytes are read in one go
# and decoded into a path, stripped of surrounding newlines and slashes. An
# empty request denotes the root.

REQUEST_STRIP: str = "\n\r/"


def available(client: socket.socket) -> int:
	"""Returns how many bytes can be read from the client right now."""
	return struct.unpack("i", ioctl(client.fileno(), FIONREAD, struct.pack("i", 0)))[0]


def normalize(data: bytes | bytearray, encoding: str = REQUEST_ENCODING) -> str:
	"""Decodes the request bytes into a request path. Bytes that cannot be
	decoded are replaced rather than failing."""
	return data.decode(encoding, errors="replace").strip(REQUEST_STRIP)


async def readRequest(
	client: socket.socket,
	loop: asyncio.AbstractEventLoop,
	*,
	limit: int = REQUEST_LIMIT,
) -> str | None:
	"""Reads the request path from the client, returning `None` when the
	request is larger than `limit`, in which case nothing is read."""
	count: int = available(client)
	if count == 0:
		return ""
	elif count > limit:
		warning(
			"Ignoring oversized request",
			Client=f"{id(client):x}",
			Available=count,
			Limit=limit,
		)
		return None
	buffer = bytearray(count)
	n = await loop.sock_recv_into(client, buffer)
	return normalize(buffer if n == count else buffer[:n])


# EOF
