import argparse
import os


def positiveInt(value):
    try:
        intVal = int(value)
    except ValueError:
        intVal = 0
    if intVal <= 0:
        raise argparse.ArgumentTypeError(
            "{!r} is not a positive integer".format(value))
    return intVal


def addArgumentParserBaseFlags(parser, logfileName):
    '''
    Adds the flags shared by every nsgjob script: verbosity, state directory,
    rc-file override and debug logging.

    Provides ALL flags required by the Config class.
    '''
    parser.add_argument(
        "-v",
        dest="verbose",
        help="Log more to stderr: -v for progress of each operation, "
        "-vv for everything (ignored with --debug)",
        action="append_const",
        const=1)
    parser.add_argument(
        "-d",
        "--state-dir",
        dest='stateDir',
        metavar="DIR",
        help="Specify state directory (default='%(default)s')",
        default=os.getenv('NSGJOB_STATE_DIR', "~/.local/share/nsgjob"))
    parser.add_argument("--rc-file", dest="rcFile",
                        help="Specify path to rc-file (default=\"%(default)s\")",
                        default="~/.config/nsgjobrc")
    parser.add_argument(
        "--debug",
        nargs="?",
        const=True,
        default=False,
        metavar="FILE",
        help="enable debug output to <state-dir>/log/%s, or to FILE" % logfileName)
