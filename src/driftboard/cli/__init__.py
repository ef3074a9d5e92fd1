def main() -> None:
    """CLI entrypoint for the driftboard console script."""
    from driftboard.cli.app import app

    app()
