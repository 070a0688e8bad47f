import logging
import sys

from luna_lsp.server import ls


def main():
    # stdout carries the protocol; logs go to stderr.
    logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(message)s", stream=sys.stderr)
    ls.start_io()


if __name__ == "__main__":
    main()
