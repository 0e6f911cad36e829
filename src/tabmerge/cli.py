# src/tabmerge/cli.py
import sys
import argparse
import asyncio
import os
from pathlib import Path
from typing import List, Optional

# Module imports
from tabmerge.config import EMPTY_LIST_MESSAGE
from tabmerge.core.listing import format_listing, render_listing_html
from tabmerge.core.presenter import FilePresenter, Presenter, StdoutPresenter
from tabmerge.core.session import RequestFiles, Session
from tabmerge.utils.tokenizer import count_tokens

PROMPT_HELP = (
    "Commands: <numbers> toggle | a select all | n unselect all | "
    "x PATTERN exclude | o PATTERN only | r refresh | c combine | q quit"
)

def create_arg_parser():
    parser = argparse.ArgumentParser(
        prog="tabmerge",
        description="Combine a selection of open text documents into a single document, "
                    "each section headed by its path."
    )
    parser.add_argument("files", nargs="*", help="Open documents, in tab order")
    parser.add_argument(
        "-f", "--files-from",
        type=str,
        default=None,
        help="Read more document paths from this file, one per line ('-' for stdin)"
    )
    parser.add_argument("-r", "--root", type=str, default=os.getcwd(), help="Workspace root used for display paths")
    parser.add_argument("-o", "--output", type=str, default=None, help="Write the combined document here (default: stdout)")
    parser.add_argument("-x", "--exclude", action="append", default=[], metavar="PATTERN",
                        help="Unselect documents whose path matches (gitignore syntax, repeatable)")
    parser.add_argument("--only", action="append", default=[], metavar="PATTERN",
                        help="Select only documents whose path matches (repeatable)")
    parser.add_argument("-i", "--interactive", action="store_true", help="Choose documents at a prompt")
    parser.add_argument("-l", "--list", action="store_true", help="Print the document list and exit")
    parser.add_argument("--html", action="store_true", help="With --list, render the list as HTML")
    return parser

def read_path_list(source: str) -> List[str]:
    """Reads one path per line from a file or stdin, skipping blank lines."""
    if source == "-":
        lines = sys.stdin.read().splitlines()
    else:
        with open(source, "r", encoding="utf-8") as f:
            lines = f.read().splitlines()
    return [line.strip() for line in lines if line.strip()]

def print_summary(session: Session, token_counts: List[int]) -> None:
    indices = session.selection.selected_indices()
    total_tokens = sum(token_counts[i] for i in indices)
    print("-" * 60, file=sys.stderr)
    print(f"Selected files: {len(indices)} of {len(session.records)}", file=sys.stderr)
    print(f"Total tokens:   {total_tokens}", file=sys.stderr)
    print("-" * 60, file=sys.stderr)

async def run_prompt(session: Session) -> bool:
    """
    Lets the user edit the selection. Returns True to combine, False to quit.
    A refresh re-reads the documents and resets the selection; when it leaves
    no documents the prompt ends with False and an empty session.
    """
    while True:
        token_counts = [count_tokens(r.content) for r in session.records]
        print(format_listing(session.records, session.selection, token_counts), file=sys.stderr)
        if not session.records:
            return False
        print(PROMPT_HELP, file=sys.stderr)

        try:
            answer = input("> ").strip()
        except EOFError:
            return False

        command, _, argument = answer.partition(" ")
        command = command.lower()
        argument = argument.strip()

        if command in ("", "c"):
            return True
        if command == "q":
            return False
        if command == "a":
            session.selection.set_all(True)
        elif command == "n":
            session.selection.set_all(False)
        elif command == "r":
            await session.handle(RequestFiles())
        elif command in ("x", "o") and argument:
            if command == "o":
                session.selection.set_all(False)
            matched = session.selection.apply_patterns(session.records, [argument], command == "o")
            print(f"Pattern '{argument}' matched {matched} file(s).", file=sys.stderr)
        else:
            try:
                numbers = [int(token) for token in answer.split()]
            except ValueError:
                numbers = []
            # All numbers must be valid before any flag changes
            if numbers and all(1 <= number <= len(session.records) for number in numbers):
                for number in numbers:
                    session.selection.toggle(number - 1)
            else:
                print(f"Unrecognized input: '{answer}'", file=sys.stderr)

async def run(args) -> int:
    root_dir = Path(args.root).resolve()
    if not root_dir.is_dir():
        print(f"Error: Invalid directory '{root_dir}'", file=sys.stderr)
        return 1

    paths = list(args.files)
    if args.files_from:
        try:
            paths.extend(read_path_list(args.files_from))
        except OSError as e:
            print(f"Error reading file list: {e}", file=sys.stderr)
            return 1

    presenter: Presenter = FilePresenter(args.output) if args.output else StdoutPresenter()
    session = Session(paths, presenter, root=root_dir)

    await session.handle(RequestFiles())

    if args.only:
        session.selection.set_all(False)
        session.selection.apply_patterns(session.records, args.only, True)
    if args.exclude:
        session.selection.apply_patterns(session.records, args.exclude, False)

    if args.list:
        if args.html:
            print(render_listing_html(session.records, session.selection))
        else:
            print(format_listing(session.records, session.selection))
        return 0

    if not session.records:
        print(EMPTY_LIST_MESSAGE, file=sys.stderr)
        return 0

    if args.interactive:
        if not await run_prompt(session):
            if not session.records:
                # Listing already showed the empty-list message
                return 0
            print("Cancelled.", file=sys.stderr)
            return 1

    if session.selection.count() == 0:
        print("No files selected.", file=sys.stderr)
        return 1

    print_summary(session, [count_tokens(r.content) for r in session.records])

    try:
        await session.generate()
    except OSError as e:
        print(f"Error writing file: {e}", file=sys.stderr)
        return 1

    if args.output:
        print(f"Success! Combined document written to: {args.output}", file=sys.stderr)
    return 0

def main(argv: Optional[List[str]] = None):
    try:
        parser = create_arg_parser()
        args = parser.parse_args(argv)
        exit_code = asyncio.run(run(args))

    except KeyboardInterrupt:
        print("\nCancelled.", file=sys.stderr)
        sys.exit(1)

    except Exception as e:
        print(f"An unexpected error occurred: {e}", file=sys.stderr)
        sys.exit(1)

    if exit_code:
        sys.exit(exit_code)

if __name__ == "__main__":
    main()
