# src/otpmigrate/migration/cli.py

import argparse
import sys
from datetime import datetime
from pathlib import Path
from typing import List, Optional, Sequence

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.prompt import Prompt
from rich.table import Table

from ..codes.generator import CodeResult, generate_code
from ..logs import setup_logging
from .errors import MigrationImportError
from .importer import MIGRATION_SCHEME, import_from_migration_uri
from .scanner import extract_uris_from_path
from .uri import OTPAUTH_SCHEME

# stderr, so the plain URI list on stdout stays pipeable
console = Console(stderr=True)


def _is_uri(value: str) -> bool:
    return value.startswith((MIGRATION_SCHEME, OTPAUTH_SCHEME))


def _collect_inputs(values: Sequence[str]) -> List[str]:
    collected = []
    for item in values:
        if _is_uri(item):
            collected.append(item)
        else:
            found = extract_uris_from_path(item)
            if found:
                console.print(f"[dim]Found {len(found)} URI(s) in {item}[/dim]")
                collected.extend(sorted(found))
            else:
                console.print(f"[yellow]No QR code or URI found in {item}[/yellow]")
    return collected


def _prompt_inputs() -> List[str]:
    console.print(Panel(
        "No input given. You can:\n"
        "1. paste an [bold cyan]otpauth-migration://[/] or [bold cyan]otpauth://[/] URI\n"
        "2. enter the path of a QR code [bold cyan]image[/] or a [bold cyan]directory[/]\n"
        "\nPress [bold yellow]Enter[/] on an empty line to start.",
        title="[bold cyan]otpmigrate",
        border_style="cyan",
    ))
    collected = []
    while True:
        val = Prompt.ask("[bold yellow]URI or path (empty to finish)[/]", console=console).strip()
        if not val:
            break
        collected.extend(_collect_inputs([val]))
    return collected


def _save_report(rows: List[CodeResult], uris: List[str], output_path: Path) -> None:
    content = [
        "# OTP migration report",
        f"- **Generated**: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}",
        f"- **Accounts**: {len(uris)}",
        "\n> Keep this file safe: every URI below contains a shared secret.\n",
        "| # | Issuer | Name | URI |",
        "| :--- | :--- | :--- | :--- |",
    ]
    for i, (row, uri) in enumerate(zip(rows, uris), 1):
        content.append(f"| {i} | {row.issuer} | {row.name} | `{uri}` |")

    output_path.write_text("\n".join(content) + "\n", encoding="utf-8")
    console.print(f"\n[bold green]✓[/] Report saved to [bold magenta]{output_path}[/]")


def _import_all(inputs: Sequence[str], strict: bool, first_only: bool) -> List[str]:
    # Dict keeps first-seen order while dropping repeated scans of one QR code
    imported = {}
    for item in inputs:
        try:
            outcome = import_from_migration_uri(item, strict=strict)
        except MigrationImportError as e:
            console.print(f"[bold red]✗[/] {escape(item[:48])}...: {escape(str(e))}")
            continue

        uris = outcome.uris
        if first_only and outcome.has_multiple_accounts:
            console.print(
                f"[yellow]Warning:[/] batch holds {outcome.account_count} accounts, "
                f"keeping the first and dropping {outcome.account_count - 1}"
            )
            uris = uris[:1]
        for uri in uris:
            imported[uri] = None
    return list(imported)


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        prog="otpmigrate migrate",
        description="Convert authenticator migration QR codes into otpauth:// URIs.",
    )
    parser.add_argument("inputs", nargs="*", help="URI strings, QR code image paths or directories")
    parser.add_argument("-o", "--output", type=Path, help="write a Markdown report to this path")
    parser.add_argument(
        "--strict", action="store_true",
        help="emit URIs exactly as the legacy exporter did (no escaping, no digits/counter)",
    )
    parser.add_argument(
        "--first-only", action="store_true",
        help="keep only the first account of each migration batch",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="show debug logging")

    args = parser.parse_args(sys.argv[2:] if argv is None else argv)
    setup_logging(args.verbose, console)

    inputs = _collect_inputs(args.inputs) if args.inputs else _prompt_inputs()
    if not inputs:
        console.print("[bold red]Error:[/] nothing to import.")
        return 1

    with console.status("[bold green]Decoding migration data..."):
        uris = _import_all(inputs, args.strict, args.first_only)

    if not uris:
        console.print("[bold red]Error:[/] no account could be imported.")
        return 1

    rows = [generate_code(uri) for uri in uris]
    order = sorted(range(len(uris)), key=lambda i: rows[i].issuer.lower())
    rows = [rows[i] for i in order]
    uris = [uris[i] for i in order]

    table = Table(
        title=f"\n{len(uris)} account(s) imported",
        header_style="bold magenta",
        border_style="dim",
    )
    table.add_column("Issuer", style="cyan", no_wrap=True)
    table.add_column("Name", style="green")
    table.add_column("Code", style="bold yellow", justify="center")
    for row in rows:
        code = row.code if row.success else f"[red]{escape(row.error_message)}[/red]"
        table.add_row(escape(row.issuer), escape(row.name), code)
    console.print(table)

    # The URIs themselves go to stdout
    for uri in uris:
        print(uri)

    if args.output:
        try:
            _save_report(rows, uris, args.output)
        except OSError as e:
            console.print(f"[bold red]✗ Could not write report:[/bold red] {e}")
            return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
