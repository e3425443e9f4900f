import sys

from rich.pretty import pprint

from cliopts import *

__prog__ = "serve"

OPTIONS = (
    Option(("--port", "-p"), Appearance.MANDATORY),
    Option("--bind", Appearance.OPTIONAL_REPEAT, "localhost"),
    Option("--name", Appearance.OPTIONAL, "anon"),
    Option(("--verbose", "-v"), Appearance.OPTIONAL_NO_PARAMETER),
    Option(("--help", "-h"), Appearance.OPTIONAL_NO_PARAMETER),
)

HELP = (
    HelpSection("Network options")
    .add("-p, --port <port>", "port to listen on")
    .add("--bind <address>", "add an address to bind to; may be given several times, "
                             "defaults to localhost only"),
    HelpSection("Other options")
    .add("--name <name>", "a friendly name for this server")
    .add("-v, --verbose", "print more while running")
    .add("-h, --help", "print this help and exit"),
)


if __name__ == '__main__':
    try:
        values = parse(sys.argv[1:], OPTIONS)
        if get_flag(values, "--help"):
            print_help(HELP)
            sys.exit(0)
        verify_option_counts(OPTIONS, values)
    except ParseError as error:
        print_help(HELP)
        trigger(error, shell=True)
    pprint(values)
