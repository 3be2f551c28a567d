# src/otpmigrate/codes/cli.py

import argparse
import sys
from typing import Optional, Sequence

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from ..logs import setup_logging
from .generator import generate_code

console = Console(stderr=True)


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        prog="otpmigrate code",
        description="Print the current one time code for otpauth:// URIs.",
    )
    parser.add_argument("uris", nargs="+", help="otpauth:// URIs")
    parser.add_argument("-v", "--verbose", action="store_true", help="show debug logging")
    args = parser.parse_args(sys.argv[2:] if argv is None else argv)
    setup_logging(args.verbose, console)

    table = Table(header_style="bold magenta", border_style="dim")
    table.add_column("Issuer", style="cyan", no_wrap=True)
    table.add_column("Name", style="green")
    table.add_column("Code", style="bold yellow", justify="center")
    table.add_column("Valid for", justify="right")

    failed = 0
    for uri in args.uris:
        result = generate_code(uri)
        if not result.success:
            failed += 1
            table.add_row("", escape(uri[:40]), f"[red]{escape(result.error_message)}[/red]", "")
            continue
        valid_for = "-" if result.remaining is None else f"{result.remaining}s"
        table.add_row(escape(result.issuer), escape(result.name), result.code, valid_for)

    console.print(table)
    return 1 if failed else 0


if __name__ == "__main__":
    sys.exit(main())
