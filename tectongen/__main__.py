from tectongen.cli import cli

cli()
