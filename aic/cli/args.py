"""CLI Argument Parsing"""

import argparse
import argcomplete

from aic import __version__
from aic.config import VALID_PROVIDERS


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='aic',
        description='Suggest commit messages for staged changes',
        epilog='Example: aic -s "mention the ticket number"'
    )

    parser.add_argument('-v', '--version', action='version', version=f'%(prog)s {__version__}')

    # Generation options
    parser.add_argument('-s', '--system', type=str, metavar='TEXT', default='', help='Extra instructions appended to the system prompt')
    parser.add_argument('-p', '--provider', type=str, choices=sorted(VALID_PROVIDERS), help='LLM provider')
    parser.add_argument('-m', '--model', type=str, metavar='MODEL', help='Model name')
    parser.add_argument('-n', '--suggestions', type=int, metavar='COUNT', help='Number of suggestions (1-10)')

    # Interaction options
    parser.add_argument('--non-interactive', action='store_true', default=None, help='Pick the first suggestion without prompting')
    parser.add_argument('--push', action='store_true', help='Run git push after committing')
    parser.add_argument('--tag', type=str, metavar='NAME', help='Create a tag after committing')

    # Output options
    parser.add_argument('--no-color', action='store_true', help='Disable coloured output')
    parser.add_argument('--debug', action='store_true', default=None, help='Log requests and raw responses to stderr')

    # Setup/config
    parser.add_argument('--display-config', action='store_true', help='Show the effective configuration')
    parser.add_argument('--install-completion', action='store_true', help='Install shell tab completion')

    subparsers = parser.add_subparsers(dest='command', metavar='COMMAND')
    analyze = subparsers.add_parser('analyze', help='Infer commit style instructions from history')
    analyze.add_argument('--limit', type=int, default=500, metavar='N', help='Commits to inspect (default: 500)')
    analyze.add_argument('--save', action='store_true', help='Write the instructions to the repo .aic.json')

    return parser


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = build_parser()
    argcomplete.autocomplete(parser)
    return parser.parse_args(argv)
