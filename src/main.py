"""Main entry point for the terminal to-do list.

Running with no arguments opens the interactive shell; see `todo --help`
for the one-shot commands.
"""
from cli import cli


def main():
    cli(prog_name='todo')

if __name__ == "__main__":
    main()
