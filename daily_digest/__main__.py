"""Allow ``python -m daily_digest``."""

from daily_digest.cli.digest import cli


if __name__ == "__main__":
    cli()
