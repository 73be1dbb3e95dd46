"""
datatransfer CLI - command-line entry point.

Usage:
    datatransfer run --settings migrationsettings.json
    datatransfer list

This creates the 'datatransfer' command via entry point in pyproject.toml.
"""


def main():
    """Main entry point for the datatransfer CLI."""
    from datatransfer.cli.app import cli

    cli()


if __name__ == "__main__":
    main()
