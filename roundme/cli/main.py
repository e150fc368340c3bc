"""
Main CLI implementation for roundme.
"""

import argparse
import logging
import sys
from typing import List, Optional

from rich.console import Console
from rich.markup import escape

from roundme.analyzer import analyze
from roundme.cli.prompts import ConsoleAnswerer, ask_user_formula_config
from roundme.errors import ParseError, RoundmeError
from roundme.formula_config import DEFAULT_CONFIG_FILE, FormulaConfigManager
from roundme.formula_parser import PARSE_HINTS
from roundme.printer import OutputFormat, Printer

logger = logging.getLogger(__name__)


class RoundmeCLI:
    """Main CLI class for roundme."""

    def __init__(self, console: Optional[Console] = None):
        self.version = "0.1.0"
        self.console = console or Console()

    def show_version(self):
        """Display version information."""
        self.console.print(f"roundme v{self.version}")

    def init_sample(self, formula_file: str) -> int:
        """Create a sample formula config file."""
        manager = FormulaConfigManager(formula_file)
        manager.init_sample()
        self.console.print(f"[green]{manager.config_file} generated.[/green]")
        return 0

    def init(self, formula_file: str) -> int:
        """Create a formula config file from user provided input."""
        manager = FormulaConfigManager(formula_file)
        if manager.exists():
            self.console.print(f"[red]Config file '{manager.config_file}' already exists.[/red]")
            return 1

        formula_config = ask_user_formula_config(self.console)
        manager.save_config(formula_config)
        self.console.print(f"[green]{manager.config_file} generated.[/green]")
        return 0

    def analyze(self, formula_file: str, output_format: OutputFormat = OutputFormat.TEXT,
                output_dir: str = ".", save: bool = True) -> int:
        """Analyze the formula config file and print the report."""
        manager = FormulaConfigManager(formula_file)
        formula_config = manager.load_config()
        known_before = _classification_count(formula_config)

        ast = analyze(formula_config, ConsoleAnswerer(self.console))

        # Persist what was learned so the next run does not ask again
        if save and _classification_count(formula_config) != known_before:
            manager.save_config(formula_config, overwrite=True)
            logger.info(f"Saved new classifications to {manager.config_file}")

        Printer(output_format, self.console).print(ast, formula_config, output_dir)
        return 0

    def clean(self, formula_file: str) -> int:
        """Delete the formula config file."""
        manager = FormulaConfigManager(formula_file)
        if manager.clean():
            self.console.print(f"Deleted the formula config file {manager.config_file}.")
        else:
            self.console.print(f"[yellow]Nothing to delete: {manager.config_file} does not exist.[/yellow]")
        return 0


def _classification_count(formula_config) -> int:
    return len(formula_config.less_than_one or []) + len(formula_config.greater_than_one or [])


def setup_logging(verbose: bool):
    """Setup logging configuration."""
    log_level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=log_level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[logging.StreamHandler(sys.stderr)],
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="roundme",
        description="roundme: find the rounding direction of every multiplication and division in a formula",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  roundme init-sample
  roundme analyze config.yaml
  roundme analyze config.yaml --output-format pdf
        """
    )
    parser.add_argument('--verbose', '-v', action='store_true', help='Verbose output')
    parser.add_argument('--version', action='store_true', help='Show version and exit')

    subparsers = parser.add_subparsers(dest='command', help='Available commands')

    def add_formula_file(subparser):
        subparser.add_argument(
            'formula_file', nargs='?', default=DEFAULT_CONFIG_FILE,
            help=f'Formula config file (default: {DEFAULT_CONFIG_FILE})'
        )

    add_formula_file(subparsers.add_parser('init-sample', help='Create a sample formula config file'))
    add_formula_file(subparsers.add_parser('init', help='Create a formula config file from user provided input'))

    analyze_parser = subparsers.add_parser('analyze', help='Analyze the specified formula config file')
    add_formula_file(analyze_parser)
    analyze_parser.add_argument(
        '--output-format', '-o', choices=[f.value for f in OutputFormat], default=OutputFormat.TEXT.value,
        help='Output format (default: text)'
    )
    analyze_parser.add_argument('--output-dir', default='.', help='Directory for the PDF report')
    analyze_parser.add_argument('--no-save', action='store_true',
                                help='Do not write new classifications back to the config file')

    add_formula_file(subparsers.add_parser('clean', help='Delete the specified formula config file'))

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the roundme CLI."""
    parser = build_parser()
    args = parser.parse_args(argv)

    cli = RoundmeCLI()

    if args.version:
        cli.show_version()
        return 0

    if not args.command:
        parser.print_help()
        return 1

    setup_logging(args.verbose)

    try:
        if args.command == 'init-sample':
            return cli.init_sample(args.formula_file)
        elif args.command == 'init':
            return cli.init(args.formula_file)
        elif args.command == 'analyze':
            return cli.analyze(
                args.formula_file,
                output_format=OutputFormat(args.output_format),
                output_dir=args.output_dir,
                save=not args.no_save,
            )
        elif args.command == 'clean':
            return cli.clean(args.formula_file)
    except ParseError as e:
        cli.console.print(f"[red]Error occurred while parsing the formula: {escape(str(e))}[/red]", highlight=False)
        cli.console.print("Make sure to:")
        for hint in PARSE_HINTS:
            cli.console.print(f"- {hint}")
        return 1
    except RoundmeError as e:
        cli.console.print(f"[red]{escape(str(e))}[/red]", highlight=False)
        return 1

    parser.print_help()
    return 1
