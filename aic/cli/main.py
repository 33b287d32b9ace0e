"""CLI Main Entry Point"""

import logging
import os
import sys

from aic import AicError
from aic.config import Config, ConfigError, load_config, warn_unknown_aic_variables
from aic.generator import SuggestionGenerator
from aic.git import GitAnalyzer, GitError
from aic.llm import HTTPStatusError, get_client
from aic.logging_config import configure_logging
from aic.output import (
    Spinner, bold, dim, disable_colors, print_error, print_hint, print_success,
    print_warning, success, warning, colorize_commit_type,
)

from aic.cli.args import parse_args
from aic.cli.commands import display_config, run_analyze, run_install_completion
from aic.cli.selector import SelectionCanceled, Selector
from aic.cli.utils import copy_to_clipboard, edit_message

logger = logging.getLogger(__name__)


def error_hints(err: Exception) -> list[str]:
    """Short next steps for the errors users hit most."""
    message = str(err)
    if isinstance(err, ConfigError) and message.startswith("missing "):
        key = message.split()[1]
        return [
            f"Export {key}, or set AIC_PROVIDER to a provider you have a key for",
            "Set AIC_MOCK=1 to try aic without a provider",
        ]
    if isinstance(err, HTTPStatusError):
        if err.status == 401:
            return ["The provider rejected your credentials; check that the API key is valid"]
        if err.status == 429:
            return ["Rate limited or out of quota; wait a moment or check your plan"]
    if isinstance(err, GitError) and "no staged changes" in message:
        return ["Stage files first: git add <files>"]
    return []


def _commit(message: str, git: GitAnalyzer | None, push: bool, tag: str | None) -> int:
    git = git or GitAnalyzer()
    git.commit(message)
    print_success("Committed")
    if tag:
        git.tag(tag)
        print_success(f"Tagged {tag}")
    if push:
        git.push()
        print_success("Pushed")
    return 0


def _copy_and_report(message: str) -> None:
    copied, reason = copy_to_clipboard(message)
    if copied:
        print(success("Message copied to clipboard."))
    else:
        print(f"{warning('!')} Could not copy to clipboard{': ' + reason if reason else ''}")
        print(dim("  Select the message above to copy manually."))


def offer_commit(message: str, config: Config, git: GitAnalyzer | None = None,
                 push: bool = False, tag: str | None = None) -> int:
    """Show the chosen message, then commit, edit-and-commit, or copy it."""
    print(f"\n{bold('Selected commit message:')}\n  {colorize_commit_type(message)}")

    if config.non_interactive:
        if config.auto_commit:
            return _commit(message, git, push, tag)
        print(dim("Non-interactive mode: skipping commit (set AIC_AUTO_COMMIT=1 to enable)."))
        return 0

    try:
        answer = input(f"\n{bold('?')} Commit with this message now? {warning('[Y/n/e]')} {dim('[default: Y]')}: ")
    except EOFError:
        answer = "n"
    answer = answer.strip().lower()

    if answer in ("", "y", "yes"):
        return _commit(message, git, push, tag)

    if answer == "e":
        edited = edit_message(message)
        if not edited:
            print_warning("Editor returned no message; nothing committed.")
            return 0
        return _commit(edited, git, push, tag)

    _copy_and_report(message)
    return 0


def _generate_commit_flow(args, config: Config, generator: SuggestionGenerator) -> int:
    """Main generate, select, commit flow."""
    with Spinner(f"Requesting {config.suggestions} suggestions from {config.model}"):
        suggestions = generator.generate()

    def combine(selected: list[str]) -> list[str]:
        with Spinner(f"Combining {len(selected)} selected messages via {config.model}"):
            return generator.combine(selected)

    selector = Selector(combine=combine, non_interactive=config.non_interactive)
    message = selector.select(suggestions)
    return offer_commit(message, config, push=args.push, tag=args.tag)


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the CLI."""
    args = parse_args(argv)

    if args.no_color:
        disable_colors()
    if args.install_completion:
        return run_install_completion()

    warn_unknown_aic_variables(os.environ)

    try:
        config = load_config(
            instructions=args.system,
            provider=args.provider,
            model=args.model,
            suggestions=args.suggestions,
            non_interactive=args.non_interactive,
            debug=args.debug,
        )
        configure_logging("DEBUG" if config.debug else None)
        logger.debug("config: provider=%s model=%s suggestions=%d", config.provider, config.model, config.suggestions)

        if args.display_config:
            return display_config(config)

        config.require_credentials()
        generator = SuggestionGenerator(config, get_client(config))

        if args.command == 'analyze':
            return run_analyze(generator, args.limit, args.save)
        return _generate_commit_flow(args, config, generator)
    except SelectionCanceled:
        print(dim("Cancelled."))
        return 0
    except KeyboardInterrupt:
        print()
        print(dim("Cancelled."))
        return 0
    except AicError as e:
        print_error(str(e))
        for hint in error_hints(e):
            print_hint(hint)
        return 1


if __name__ == '__main__':
    sys.exit(main())
