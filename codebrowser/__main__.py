from codebrowser.cli import cli

cli()
