# src/otpmigrate/__main__.py

import sys
import argparse

from otpmigrate.codes import cli as codes_cli
from otpmigrate.migration import cli as migration_cli

COMMANDS = {
    "migrate": (
        migration_cli.main,
        "Decode 'otpauth-migration://' URIs or QR code images into otpauth:// URIs.",
    ),
    "code": (
        codes_cli.main,
        "Generate the current one time code for otpauth:// URIs.",
    ),
}


def main():
    parser = argparse.ArgumentParser(
        prog="otpmigrate",
        description="Turn authenticator migration QR codes into standard otpauth:// accounts.",
        epilog="Use 'otpmigrate <command> --help' for more information on a specific command."
    )
    subparsers = parser.add_subparsers(
        title="Available Modules",
        dest="command",
        required=True,
        metavar="<command>"
    )
    for name, (_, summary) in COMMANDS.items():
        subparsers.add_parser(name, help=summary, description=summary)

    # Only the command name is parsed here; each sub-command owns its own options
    args = parser.parse_args(sys.argv[1:2])
    command_main, _ = COMMANDS[args.command]
    return command_main(sys.argv[2:])


if __name__ == "__main__":
    sys.exit(main())
