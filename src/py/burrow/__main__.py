import argparse
import os
import sys
from pathlib import Path

from .config import HOST, PORT
from .server import run
from .utils.logging import error, info


def main(args: list[str] | None = None) -> int:
	# Create the parser
	parser = argparse.ArgumentParser(
		prog="burrow",
		description="Serves the files of a directory over a line-oriented TCP protocol",
		formatter_class=argparse.ArgumentDefaultsHelpFormatter,  # Shows default values in help
	)
	parser.add_argument(
		"-p",
		"--port",
		action="store",
		dest="port",
		type=int,
		help="Specifies the port",
		default=PORT,
	)
	parser.add_argument(
		"-H",
		"--host",
		action="store",
		dest="host",
		help="Specifies the interface to listen on",
		default=HOST,
	)
	parser.add_argument(
		"root",
		metavar="ROOT",
		nargs="?",
		help="The directory to serve, defaults to the current directory",
	)
	options = parser.parse_args(args=args)

	root = Path(options.root) if options.root else Path(os.getcwd())
	if not root.is_dir():
		error("Unable to access directory", "ROOTERR", Path=str(root))
		return 1
	info("Hosting directory", Root=str(root.absolute()))
	run(root, host=options.host, port=options.port)
	return 0


if __name__ == "__main__":
	sys.exit(main(sys.argv[1:]))

# EOF
