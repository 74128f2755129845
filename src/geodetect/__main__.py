"""
This file allows to run the module as a script

If adding commands, please follow this conventions for positional (required) args:

python -m geodetect <COMMAND> [<SUBCOMMAND>] INPUT_FILE RASTER DETECTOR OUTPUT_FILE
"""


import argparse
import logging
import sys
from importlib.metadata import PackageNotFoundError, version

from .client import GeodetectClient
from .command_parsers.create import set_parser as set_create_parser
from .command_parsers.delete import set_parser as set_delete_parser
from .command_parsers.detect import set_parser as set_detect_parser
from .command_parsers.list import set_parser as set_list_parser
from .command_parsers.train import set_parser as set_train_parser
from .exceptions import GeodetectError
from .helpers import InvalidOptionError

logger = logging.getLogger(__name__)

try:
    __version__ = version('geodetect')
except PackageNotFoundError:
    __version__ = 'no_version'


def parse_args(args):
    # create the top-level parser
    parser = argparse.ArgumentParser(
        prog='geodetect', description='Detection API wrapper CLI tool')
    # Parser for version and verbosity
    parser.add_argument('--version', action='version', version=__version__)
    parser.add_argument("-v", help="set output verbosity", action="store_true")
    # Create the parser for the subcommands
    subparsers = parser.add_subparsers(dest='command')
    set_create_parser(subparsers)
    set_delete_parser(subparsers)
    set_detect_parser(subparsers)
    set_list_parser(subparsers)
    set_train_parser(subparsers)
    # Parse the command input
    args = parser.parse_args(args)
    # Verbosity increase (optional)
    if args.v:
        logging.basicConfig(level=logging.DEBUG)
    if args.command is None:
        parser.print_help()
        return args
    # The client (and so the API key lookup) is only needed once a command is given
    client = GeodetectClient()
    try:
        args.func(args, client)
    except InvalidOptionError as e:
        e.parser.print_help()
    return args


def main():
    try:
        parse_args(sys.argv[1:])
    except GeodetectError as e:
        sys.exit("\033[91m%s\033[00m" % e)


if __name__ == '__main__':
    main()
