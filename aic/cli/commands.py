"""CLI Commands"""

import os
import sys

from aic.config import CONFIG_FILENAME, Config, save_repo_instructions
from aic.generator import SuggestionGenerator
from aic.output import Spinner, bold, dim, info, print_success


def display_config(config: Config) -> int:
    """Display the effective configuration."""
    print(f"\n{bold('Current Configuration')}\n")

    print(f"  {bold('Settings:')}")
    print(f"    provider:          {info(config.provider)}")
    print(f"    model:             {info(config.model)}")
    print(f"    suggestions:       {info(str(config.suggestions))}")
    print(f"    api key:           {info('set' if config.api_key else 'not set')} {dim(f'({config.key_name})')}")
    print(f"    instructions:      {info(config.system_addition or '(none)')}")
    print(f"    non_interactive:   {info(str(config.non_interactive).lower())}")
    print(f"    mock:              {info(str(config.mock).lower())}")
    if config.provider == "custom":
        print(f"    custom base url:   {info(config.custom.base_url)}")
        print(f"    chat path:         {info(config.custom.chat_completions_path)}")
        print(f"    models path:       {info(config.custom.models_path)}")

    print(f"\n  {dim('Config locations:')}")
    print(f"    Repo:   {CONFIG_FILENAME} (in repository root)")
    print(f"    Global: ~/{CONFIG_FILENAME}")
    print(f"\n  {dim('Run')} aic analyze --save {dim('to infer repo instructions')}\n")

    return 0


def run_install_completion() -> int:
    """Install shell tab completion."""
    shell = os.environ.get('SHELL', '')

    print(f"\n{bold('Tab Completion Setup')}\n")

    if 'zsh' in shell or 'bash' in shell:
        rc_file = os.path.expanduser('~/.zshrc' if 'zsh' in shell else '~/.bashrc')
        print(f"Add this line to {dim(rc_file)}:\n")
        print('  eval "$(register-python-argcomplete aic)"\n')
        print(f"Then run: {dim('source ' + rc_file)}")
    elif sys.platform == 'win32':
        print("For PowerShell, run:\n")
        print("  register-python-argcomplete --shell powershell aic | Out-String | Invoke-Expression\n")
        print("To make it permanent, add to your $PROFILE.")
    else:
        print("Run one of these based on your shell:\n")
        print(f"  {dim('# Bash/Zsh')}")
        print('  eval "$(register-python-argcomplete aic)"\n')
        print(f"  {dim('# Fish')}")
        print("  register-python-argcomplete --shell fish aic | source")

    print(f"\n{dim('After setup, press TAB to autocomplete flags.')}")
    return 0


def run_analyze(generator: SuggestionGenerator, limit: int, save: bool) -> int:
    """Print commit style instructions inferred from history, optionally saving them."""
    with Spinner(f"Analyzing up to {limit} commits"):
        instructions, sampled = generator.analyze(limit)

    if sampled:
        print(dim(f"Based on {sampled} commit subjects:"))
    else:
        print(dim("No commit history yet; using generic instructions:"))
    print(instructions)

    if save:
        path = save_repo_instructions(instructions)
        print_success(f"Saved to {path}")
    return 0
