"""Allow running bump-check as `python -m bump_check`."""

from bump_check.cli import cli

if __name__ == "__main__":
    cli(prog_name="bump-check")
