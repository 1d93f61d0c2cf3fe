# demo.py

import argparse
from datetime import datetime

from rich.console import Console

from textpane import TextPane
from textpane.messages.codes import nickname_span

# Sample lines with the usual mIRC-style formatting
EXAMPLE_LINES = [
    "* Now talking in \x02#textpane\x02",
    nickname_span("alice", "<alice>") + " the docs are at http://example.com/docs (see section 2).",
    nickname_span("bob", "<bob>") + " \x034red\x03, \x0312blue\x03 and \x02\x1fbold underline\x0f :)",
    nickname_span("alice", "<alice>") + " come over to #python, or try 'www.example.org'.",
    "\x0314* bob has quit\x03",
]


def main():
    parser = argparse.ArgumentParser(description='TextPane demo')
    parser.add_argument('-c', '--config',
        help='JSON config file ({"ui": {...}, "colour": {...}, "icon": {...}})')
    parser.add_argument('--channel-prefixes', default='#&',
        help='Characters that start a channel name')
    parser.add_argument('-s', '--search',
        help='Phrase to search for after printing')
    parser.add_argument('--enable-logging',
        action='store_true',
        help='Enable debug logging')
    parser.add_argument('--log-file',
        help='Log file path (use "-" for stdout)')

    args = parser.parse_args()

    pane = TextPane(
        config=args.config,
        channel_prefixes=args.channel_prefixes,
        logging_enabled=args.enable_logging,
        log_file=args.log_file,
    )
    if not pane.config.has_option('icon', 'smilie-:)'):
        pane.config.set_option('icon', 'smilie-:)', 'smile.png')

    for line in EXAMPLE_LINES:
        pane.add_text(line, timestamp=datetime.now())

    console = Console()
    pane.print_to(console)

    if args.search:
        position = pane.search(args.search)
        if position is None:
            console.print(f"No match for {args.search!r}")
        else:
            console.print(f"Found {args.search!r} on line {position.start_line}, "
                          f"columns {position.start_pos}-{position.end_pos}")

    pane.close()


if __name__ == "__main__":
    main()
