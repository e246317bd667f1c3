"""Report progress and problems found while generating documents."""

import click


class Reporter:
    """Prints messages and counts the errors reported.

    Reporting an error never interrupts the caller: the counter is checked
    once all the work has been attempted.
    """

    def __init__(self, quiet: bool = False):
        self.quiet = quiet
        self.errors = 0
        self.messages: list[str] = []

    def info(self, message: str, *args) -> None:
        text = message % args if args else message
        self.messages.append(text)
        if not self.quiet:
            click.echo(text)

    def error(self, message: str, *args) -> None:
        text = message % args if args else message
        self.errors += 1
        self.messages.append(text)
        click.secho(f"Error: {text}", fg="red", err=True)
