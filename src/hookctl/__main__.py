"""Allow ``python -m hookctl`` (used by the generated Git hook shims)."""

from hookctl.cli import cli

if __name__ == "__main__":
    cli()
