"""Interactive terminal session for browsing and editing contacts."""
from __future__ import annotations

import argparse
import sys
from typing import Callable, List, Optional, TextIO

from ..config import ConfigError, SORT_CHOICES, load_settings
from ..errors import EditSessionError, FormValidationError
from ..models import Contact
from ..prompts import TerminalPrompt
from ..state import AppState
from ..view import SortKey, render_contact

_FIELD_LABELS = (
    ("name", "Name"),
    ("phone_number", "Phone Number"),
    ("email", "Email"),
)

_HELP = (
    "[a] Add  [e N] Edit  [d N] Delete  [s TEXT] Search  [o KEY] Sort "
    "(name/email/time/none)  [r] Refresh  [q] Quit"
)


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        prog="contact-manager-ui",
        description="Interactive contact list backed by a REST contact collection.",
    )
    parser.add_argument("--backend-url", help="Override the contact collection URL.")
    parser.add_argument(
        "--edit-mode",
        choices=("draft", "in_place"),
        help="How unsaved edits are held (default from config).",
    )
    parser.add_argument(
        "--sort",
        choices=tuple(key or "none" for key in SORT_CHOICES),
        help="Initial sort key.",
    )
    args = parser.parse_args(argv)

    try:
        settings = load_settings(backend_url=args.backend_url)
    except ConfigError as exc:
        print(f"Configuration error: {exc}", file=sys.stderr)
        return 1

    if args.edit_mode:
        settings.edit_mode = args.edit_mode
    if args.sort:
        settings.default_sort = "" if args.sort == "none" else args.sort

    state = AppState.from_settings(settings, TerminalPrompt())
    return run_session(state)


def run_session(
    state: AppState,
    *,
    input_fn: Optional[Callable[[str], str]] = None,
    out: Optional[TextIO] = None,
) -> int:
    """Render, read a command, apply it, repeat until the user quits."""
    input_fn = input_fn or input
    out = out or sys.stdout
    if not state.refresh():
        print("Unable to load contacts right now; showing an empty list.", file=out)

    while True:
        _render(state, out)
        try:
            line = input_fn("\n> ").strip()
        except (EOFError, KeyboardInterrupt):
            print("\nGoodbye!", file=out)
            return 0
        if not line:
            continue

        command, _, arg = line.partition(" ")
        command = command.lower()
        arg = arg.strip()

        if command in {"q", "quit", "exit"}:
            print("Goodbye!", file=out)
            return 0
        if command == "r":
            if not state.refresh():
                print("Refresh failed; keeping the current list.", file=out)
        elif command == "s":
            state.set_search(arg)
        elif command == "o":
            try:
                state.set_sort(SortKey.parse(arg))
            except ValueError as exc:
                print(exc, file=out)
        elif command == "a":
            _add_contact(state, input_fn, out)
        elif command in {"e", "d"}:
            contact = _pick(state, arg, out)
            if contact is None:
                continue
            if command == "e":
                _edit_contact(state, contact, input_fn, out)
            else:
                state.delete(contact.id)
        else:
            print(_HELP, file=out)


def _render(state: AppState, out: TextIO) -> None:
    print("\n=== Contact Manager ===", file=out)
    search = state.search_term or "-"
    sort = state.sort_by.label if state.sort_by is not SortKey.NONE else "none"
    print(f"Search: {search} | Sort: {sort}", file=out)
    contacts = state.visible_contacts()
    if not contacts:
        print("No contacts to show.", file=out)
    for idx, contact in enumerate(contacts, 1):
        marker = " (editing)" if state.session.is_editing(contact.id) else ""
        print(f"\n[{idx:02d}]{marker}", file=out)
        print(render_contact(contact), file=out)
    print(f"\n{_HELP}", file=out)


def _pick(state: AppState, arg: str, out: TextIO) -> Optional[Contact]:
    contacts = state.visible_contacts()
    if not arg.isdigit():
        print("Please enter a contact number, e.g. 'e 2'.", file=out)
        return None
    idx = int(arg) - 1
    if idx < 0 or idx >= len(contacts):
        print("Selection out of range.", file=out)
        return None
    return contacts[idx]


def _add_contact(state: AppState, input_fn: Callable[[str], str], out: TextIO) -> None:
    form = state.form
    try:
        for key, label in _FIELD_LABELS:
            current = form.fields[key]
            hint = f" [{current}]" if current else ""
            value = input_fn(f"{label}{hint}: ").strip()
            if value:
                form.update_field(key, value)
    except (EOFError, KeyboardInterrupt):
        print("\nAdd interrupted; the draft is kept.", file=out)
        return
    try:
        form.submit()
    except FormValidationError as exc:
        print(exc, file=out)


def _edit_contact(
    state: AppState, contact: Contact, input_fn: Callable[[str], str], out: TextIO
) -> None:
    session = state.session
    try:
        session.begin(contact.id)
    except EditSessionError as exc:
        print(exc, file=out)
        return

    while session.is_editing(contact.id):
        current = session.current(contact)
        try:
            for key, label in _FIELD_LABELS:
                value = input_fn(f"{label} [{getattr(current, key)}]: ").strip()
                if value:
                    session.update_field(contact.id, key, value)

            print(render_contact(session.current(contact)), file=out)
            choice = input_fn("[s] Save  [c] Cancel  [k] Keep editing > ").strip().lower()
        except (EOFError, KeyboardInterrupt):
            session.cancel()
            print("\nEdit cancelled.", file=out)
            return
        if choice.startswith("s"):
            session.save(session.current(contact))
        elif choice.startswith("c"):
            session.cancel()


if __name__ == "__main__":
    raise SystemExit(main())
