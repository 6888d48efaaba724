"""CLI entry point for the plox interpreter.

Usage:
    python -m plox [-v|-vv|-vvv] [--debug-file PATH] [script]

With a script argument the file is scanned, parsed and executed. Without
one an interactive prompt is started; every line runs against the same
global environment, so definitions persist between lines.

Options:
  -v            Increase debug verbosity (can be repeated)
  --debug-file  Where debug traces are written (default: debug.txt)

Exit status: 64 for bad usage, 65 for lexical or syntax errors, 66 when
the script does not exist and 70 for runtime errors.
"""

import argparse
import cmd
import sys
from pathlib import Path

from .interpreter import Interpreter, run_file, run_source

USAGE_STATUS = 64
STATIC_ERROR_STATUS = 65
NO_INPUT_STATUS = 66


class Shell(cmd.Cmd):
    """Read-eval-print loop over one long-lived interpreter."""
    prompt = "> "

    def __init__(self, interpreter: Interpreter, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.interpreter = interpreter

    def onecmd(self, line):
        # plox lines are never shell commands, so skip cmd's own dispatch
        if line == 'EOF':
            return self.do_EOF(line)
        if not line.strip():
            return False
        run_source(line, self.interpreter)
        return False

    def do_EOF(self, arg):
        """Exits interpreter."""
        print()
        return True


class ArgumentParser(argparse.ArgumentParser):
    def error(self, message):
        print("Usage: plox [script]", file=sys.stderr)
        sys.exit(USAGE_STATUS)


def main(argv: list[str] | None = None) -> None:
    parser = ArgumentParser(description="plox language interpreter")
    parser.add_argument('-v', action='count', default=0, help='increase debug verbosity (can be repeated)')
    parser.add_argument('--debug-file', default='debug.txt', help='file receiving debug traces')
    parser.add_argument('script', nargs='?', help='plox script to execute')
    args = parser.parse_args(argv)

    # each plox call nests several Python frames
    sys.setrecursionlimit(max(sys.getrecursionlimit(), 10000))

    if args.script:
        script = Path(args.script)
        if not script.exists():
            print(f"Error: file {script} not found", file=sys.stderr)
            sys.exit(NO_INPUT_STATUS)
        if not run_file(str(script), debug_level=args.v, debug_file=args.debug_file):
            sys.exit(STATIC_ERROR_STATUS)
        return

    interpreter = Interpreter(debug_level=args.v, debug_file=args.debug_file)
    try:
        Shell(interpreter).cmdloop()
    finally:
        interpreter.close()


if __name__ == '__main__':
    main()
