from proto_diff.cli.main import cli

if __name__ == "__main__":
    cli()
