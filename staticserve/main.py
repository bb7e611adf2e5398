import argparse
import logging
import sys
import threading
import time

from staticserve import __version__
from staticserve.config import DEFAULT_HOST, DEFAULT_PORT, ConfigError, load_config
from staticserve.server import HTTPRequestHandler, TCPServer
from staticserve.utils.logger import setup_logger


def parse_args(argv=None):
    parser = argparse.ArgumentParser(
        prog="staticserve", description="Serve the files of a directory over HTTP."
    )
    parser.add_argument("-s", "--serve-path", default="./", help="local path to serve")
    parser.add_argument("--host", default=DEFAULT_HOST, help="address to bind")
    parser.add_argument("-p", "--port", type=int, default=DEFAULT_PORT, help="port to bind")
    parser.add_argument(
        "--debug",
        action="store_true",
        help="verbose logging, and OS error text in error responses",
    )
    parser.add_argument("--version", action="version", version="%(prog)s " + __version__)
    return parser.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)
    logger = setup_logger(logging.DEBUG if args.debug else logging.WARNING)

    try:
        config = load_config(args.serve_path, args.host, args.port, args.debug)
    except ConfigError as e:
        logger.error("%s", e)
        sys.exit(1)

    try:
        http_server = TCPServer(config, HTTPRequestHandler)
    except OSError as e:
        logger.error("Cannot listen on %s:%s: %s", config.host, config.port, e)
        sys.exit(1)

    print("Serving %s on http://%s:%s" % (config.root, *http_server.server_address[:2]))
    http_thread = threading.Thread(target=http_server.serve_forever)
    http_thread.daemon = True
    http_thread.start()

    try:
        while True:
            time.sleep(1)
    except KeyboardInterrupt:
        http_server.shutdown()
        http_server.server_close()
        print("Server close.")


if __name__ == "__main__":
    main()
