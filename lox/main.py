"""Command-line entry point for the Lox interpreter. Dispatches to a Session for file commands, or to the Shell when
no command is given. Also uses the error handling context manager. Called from the lox executable script.

    lox tokenize <file>   print one line per token                    exit 65 on lexical errors
    lox parse <file>      print the parenthesized expression tree     exit 65 on lexical/syntax errors
    lox evaluate <file>   print the value of one expression           exit 70 on runtime errors
    lox run <file>        execute a program                            exit 65 / 70 as above
    lox [repl]            interactive shell
"""

import argparse
import logging
import sys

from lox.lang.error import EXIT_OK, ErrorHandler
from lox.lang.logger import set_level
from lox.lang.session import Session
from lox.lang.shell import Shell

COMMANDS = ("tokenize", "parse", "evaluate", "run", "repl")


def build_parser():
    parser = argparse.ArgumentParser(prog="lox", description="Tree-walking interpreter for the Lox language.")
    parser.add_argument("command", choices=COMMANDS, nargs="?", default="repl", help="what to do with file")
    parser.add_argument("file", nargs="?", help="Lox source file (not needed for repl)")
    parser.add_argument("--program", action="store_true", help="parse: print every statement of a full program")
    parser.add_argument("--max-call-depth", type=int, default=None, metavar="N",
                        help="maximum number of nested Lox calls before 'Stack overflow.'")
    parser.add_argument("-v", "--verbose", action="store_true", help="log pipeline stages to stderr")
    return parser


def main(argv=None):
    """Runs the Lox interpreter and exits with the command's status. Called from the lox executable script."""
    with ErrorHandler() as error_handler:
        parser = build_parser()
        args = parser.parse_args(argv)

        if args.verbose:
            set_level(logging.DEBUG)

        if args.command == "repl":
            sess = Session(error_handler, Session.SH_FILE, cmd_line=True, max_call_depth=args.max_call_depth)
            Shell(sess).cmdloop()
            sys.exit(EXIT_OK)

        if args.file is None:
            parser.error(f"{args.command} requires a file")

        sess = Session(error_handler, args.file, max_call_depth=args.max_call_depth)
        if args.command == "parse":
            sys.exit(sess.parse(program=args.program))
        sys.exit(getattr(sess, args.command)())


if __name__ == "__main__":
    main()
