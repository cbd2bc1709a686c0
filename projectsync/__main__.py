"""
Main entry point for the projectsync CLI.
"""

from projectsync.cli import cli


def main() -> None:
    """Main function for the projectsync CLI."""
    cli()


if __name__ == "__main__":
    main()
