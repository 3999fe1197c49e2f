import asyncio
import socket
import threading
from dataclasses import dataclass
from pathlib import Path
from signal import SIGINT, SIGTERM
from typing import Any, Callable, NamedTuple

from .config import HOST, LOG_REQUESTS, PORT, REQUEST_LIMIT
from .protocol import readRequest
from .resolver import NoMatch, resolve
from .store import FileStore
from .utils.limits import LimitType, unlimit
from .utils.logging import debug, error, event, exception, info, warning
from .writer import SocketWriter, writeResponse


@dataclass(slots=True)
class ServerState:
	isRunning: bool = True

	def stop(self) -> None:
		info("Server stopping…")
		self.isRunning = False

	def onException(
		self, loop: asyncio.AbstractEventLoop, context: dict[str, Any]
	) -> None:
		e = context.get("exception")
		if e:
			exception(e)
		else:
			warning(context.get("message") or "Unhandled event loop error")


class ServerOptions(NamedTuple):
	host: str = HOST
	port: int = PORT
	backlog: int = 1_024
	# This is the polling timeout for accepting new connections, so that
	# the stop condition and signals are checked regularly.
	polling: float = 1.0
	limit: int = REQUEST_LIMIT
	logRequests: bool = LOG_REQUESTS
	condition: Callable[[], bool] | None = None
	stopSignals: bool = True


OPTIONS: ServerOptions = ServerOptions()


def bind(options: ServerOptions = OPTIONS) -> socket.socket:
	"""Creates the listening socket, bound to the host and port of the
	given options."""
	server = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
	server.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
	server.setsockopt(socket.IPPROTO_TCP, socket.TCP_NODELAY, 1)
	try:
		server.bind((options.host, options.port))
	except OSError as e:
		server.close()
		error(
			f"Unable to bind to {options.host}:{options.port}, aborting.",
			"HOSTPORTERR",
		)
		raise e
	# The argument is the backlog of connections that will be accepted before
	# they are refused.
	server.listen(options.backlog)
	# This is what we need to use it with asyncio
	server.setblocking(False)
	return server


class AIOSocketServer:
	"""AsyncIO server using sockets directly, handling each connection in
	its own task."""

	@classmethod
	async def OnConnection(
		cls,
		store: FileStore,
		client: Any,
		*,
		loop: asyncio.AbstractEventLoop,
		options: ServerOptions,
	) -> None:
		"""Processes a single connection. Nothing raised while processing
		escapes this coroutine, and the client socket is always closed."""
		if not isinstance(client, socket.socket) or client.fileno() == -1:
			warning("Discarding invalid connection", Client=type(client).__name__)
			if hasattr(client, "close"):
				try:
					client.close()
				except Exception as e:
					exception(e, "Could not close invalid connection")
			return
		try:
			await cls.OnRequest(store, client, loop=loop, options=options)
		except Exception as e:
			exception(e, "Error while processing request")
		finally:
			client.close()

	@staticmethod
	async def OnRequest(
		store: FileStore,
		client: socket.socket,
		*,
		loop: asyncio.AbstractEventLoop,
		options: ServerOptions,
	) -> int:
		"""Reads the request from the client, resolves it against the
		store and writes the response, returning the number of bytes
		sent."""
		path = await readRequest(client, loop, limit=options.limit)
		if path is None:
			return 0
		if options.logRequests:
			event("Request", path)
		resolution = resolve(store, path)
		if isinstance(resolution, NoMatch):
			debug("No match", Path=path)
		return await writeResponse(resolution, SocketWriter(client, loop))

	@classmethod
	async def Serve(
		cls,
		store: FileStore,
		options: ServerOptions = OPTIONS,
		*,
		server: socket.socket | None = None,
	) -> None:
		"""Main server coroutine, accepting connections on the given
		listening socket (or a new one bound using the options) until
		stopped."""
		if server is None:
			server = bind(options)
		host, port = server.getsockname()[:2]

		tasks: set[asyncio.Task[None]] = set()
		loop = asyncio.get_running_loop()

		# Manage server state
		state = ServerState()
		# Signal handlers can only be registered from the main thread.
		signals: bool = (
			options.stopSignals
			and threading.current_thread() is threading.main_thread()
		)
		if signals:
			loop.add_signal_handler(SIGINT, lambda: state.stop())
			loop.add_signal_handler(SIGTERM, lambda: state.stop())
		loop.set_exception_handler(state.onException)

		info("Burrow listening", icon="🚀", Host=host, Port=port)

		try:
			while state.isRunning:
				if options.condition and not options.condition():
					break
				try:
					client, _ = await asyncio.wait_for(
						loop.sock_accept(server), timeout=options.polling or 1.0
					)
				except asyncio.TimeoutError:
					continue
				except OSError as e:
					# This can be: [OSError] [Errno 24] Too many open files
					if e.errno == 24:
						await asyncio.sleep(0.1)
					else:
						exception(e)
					continue
				task = loop.create_task(
					cls.OnConnection(store, client, loop=loop, options=options)
				)
				tasks.add(task)
				task.add_done_callback(tasks.discard)
		finally:
			if signals:
				loop.remove_signal_handler(SIGINT)
				loop.remove_signal_handler(SIGTERM)
			server.close()
			for task in tasks:
				task.cancel()
			await asyncio.gather(*tasks, return_exceptions=True)


def run(
	root: str | Path,
	*,
	host: str = OPTIONS.host,
	port: int = OPTIONS.port,
	backlog: int = OPTIONS.backlog,
	polling: float = OPTIONS.polling,
	logRequests: bool = OPTIONS.logRequests,
	condition: Callable[[], bool] | None = None,
) -> None:
	"""High level function to serve the files under `root`."""
	unlimit(LimitType.Files)
	store = FileStore(root)
	options = ServerOptions(
		host=host,
		port=port,
		backlog=backlog,
		polling=polling,
		logRequests=logRequests,
		condition=condition,
	)
	try:
		asyncio.run(AIOSocketServer.Serve(store, options))
	except KeyboardInterrupt:
		event("ManualShutdown")
	event("EOK")


# EOF
