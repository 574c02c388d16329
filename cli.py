#!/usr/bin/env python3
"""Contact Manager CLI."""
from __future__ import annotations

import argparse
import logging
import os
import sys

from contact_manager.config import ConfigError, SORT_CHOICES, Settings, load_settings
from contact_manager.contacts_client import ContactsClient
from contact_manager.errors import EditSessionError, FormValidationError
from contact_manager.interfaces import terminal_ui
from contact_manager.prompts import ConfirmationPrompt, ScriptedPrompt, TerminalPrompt
from contact_manager.state import AppState
from contact_manager.view import SortKey, render_contact


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="contact-manager",
        description="List, search, add, edit and delete contacts on a REST backend.",
    )
    parser.add_argument("--backend-url", help="Override the contact collection URL.")
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log requests and state changes to stderr.",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    list_parser = subparsers.add_parser("list", help="Show contacts.")
    list_parser.add_argument(
        "--search",
        default="",
        help="Only show contacts whose name contains this text (case-insensitive).",
    )
    list_parser.add_argument(
        "--sort",
        choices=tuple(key or "none" for key in SORT_CHOICES),
        help="Sort by name, email, or creation time (newest first).",
    )

    add_parser = subparsers.add_parser("add", help="Create a contact.")
    add_parser.add_argument("name")
    add_parser.add_argument("phone_number")
    add_parser.add_argument("email")

    edit_parser = subparsers.add_parser("edit", help="Change fields of a contact.")
    edit_parser.add_argument("contact_id", help="Backend id of the contact.")
    edit_parser.add_argument("--name")
    edit_parser.add_argument("--phone", dest="phone_number")
    edit_parser.add_argument("--email")
    edit_parser.add_argument(
        "-y", "--yes", action="store_true", help="Save without asking for confirmation."
    )

    delete_parser = subparsers.add_parser("delete", help="Delete a contact.")
    delete_parser.add_argument("contact_id", help="Backend id of the contact.")
    delete_parser.add_argument(
        "-y", "--yes", action="store_true", help="Delete without asking for confirmation."
    )

    subparsers.add_parser("ui", help="Open the interactive contact list.")

    subparsers.add_parser(
        "check-backend",
        help="Verify the contact backend is reachable and returns a contact list.",
    )

    return parser


def _configure_logging(verbose: bool) -> None:
    level_name = "DEBUG" if verbose else os.getenv("CONTACTS_LOG_LEVEL", "WARNING")
    logging.basicConfig(
        level=getattr(logging, level_name.upper(), logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def _build_client(settings: Settings) -> ContactsClient:
    return ContactsClient(settings)


def _build_state(settings: Settings, prompt: ConfirmationPrompt) -> AppState:
    return AppState.from_settings(settings, prompt, client=_build_client(settings))


def _prompt_for(assume_yes: bool) -> ConfirmationPrompt:
    if assume_yes:
        return ScriptedPrompt(answer=True, echo=sys.stdout)
    return TerminalPrompt()


def _cmd_list(settings: Settings, search: str, sort: str | None) -> int:
    state = _build_state(settings, ScriptedPrompt(echo=sys.stdout))
    if sort is not None:
        state.set_sort(SortKey.parse(sort))
    state.set_search(search)

    if not state.refresh():
        print(f"Unable to load contacts from {settings.backend_url}", file=sys.stderr)
        return 1

    contacts = state.visible_contacts()
    if not contacts:
        print("No contacts found.")
        return 0

    for contact in contacts:
        print(f"[{contact.id}]")
        print(render_contact(contact))
        print()
    print(f"{len(contacts)} of {len(state.contact_list)} contacts shown.")
    return 0


def _cmd_add(settings: Settings, name: str, phone_number: str, email: str) -> int:
    state = _build_state(settings, ScriptedPrompt(echo=sys.stdout))
    form = state.form
    form.update_field("name", name)
    form.update_field("phone_number", phone_number)
    form.update_field("email", email)
    try:
        return 0 if form.submit() else 1
    except FormValidationError as exc:
        print(f"Add failed: {exc}", file=sys.stderr)
        return 1


def _cmd_edit(
    settings: Settings,
    contact_id: str,
    updates: dict[str, str | None],
    assume_yes: bool,
) -> int:
    changes = {key: value for key, value in updates.items() if value is not None}
    if not changes:
        print("Nothing to change. Pass --name, --phone or --email.", file=sys.stderr)
        return 1

    state = _build_state(settings, _prompt_for(assume_yes))
    if not state.refresh():
        print(f"Unable to load contacts from {settings.backend_url}", file=sys.stderr)
        return 1

    session = state.session
    try:
        session.begin(contact_id)
    except EditSessionError as exc:
        print(f"Edit failed: {exc}", file=sys.stderr)
        return 1

    for key, value in changes.items():
        session.update_field(contact_id, key, value)

    contact = state.contact_list.get(contact_id)
    if not session.save(session.current(contact)):
        return 1
    print(f"Contact {contact_id} saved.")
    return 0


def _cmd_delete(settings: Settings, contact_id: str, assume_yes: bool) -> int:
    state = _build_state(settings, _prompt_for(assume_yes))
    return 0 if state.delete(contact_id) else 1


def _cmd_check_backend(settings: Settings) -> int:
    client = _build_client(settings)
    state = AppState.build(client, ScriptedPrompt())
    if not state.refresh():
        print(f"Backend check failed for {settings.backend_url}", file=sys.stderr)
        return 1
    print(
        f"Backend reachable at {settings.backend_url}",
        f"({len(state.contact_list)} contacts)",
        f"environment={settings.environment}",
    )
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    _configure_logging(args.verbose)

    if args.command == "ui":
        ui_args = ["--backend-url", args.backend_url] if args.backend_url else []
        return terminal_ui.main(ui_args)

    try:
        settings = load_settings(backend_url=args.backend_url)
    except ConfigError as exc:
        print(f"Configuration error: {exc}", file=sys.stderr)
        return 1

    if args.command == "list":
        return _cmd_list(settings, search=args.search, sort=args.sort)
    if args.command == "add":
        return _cmd_add(settings, args.name, args.phone_number, args.email)
    if args.command == "edit":
        return _cmd_edit(
            settings,
            args.contact_id,
            {"name": args.name, "phone_number": args.phone_number, "email": args.email},
            assume_yes=args.yes,
        )
    if args.command == "delete":
        return _cmd_delete(settings, args.contact_id, assume_yes=args.yes)
    if args.command == "check-backend":
        return _cmd_check_backend(settings)

    parser.error(f"Unknown command: {args.command}")
    return 2


if __name__ == "__main__":
    raise SystemExit(main())
