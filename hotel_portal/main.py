"""Command-line entry point for the hotel portal."""

import argparse
import asyncio
import json
import sys
from datetime import date
from typing import Any, Optional, Sequence

from hotel_portal.app import PortalApp
from hotel_portal.config import configure_logging, get_logger, settings
from hotel_portal.controllers import GuestForm, Outcome
from hotel_portal.navigation import Route
from hotel_portal.utils import to_date

logger = get_logger(__name__)


def _date_arg(value: str) -> date:
    try:
        return to_date(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(f"invalid date '{value}', expected YYYY-MM-DD") from e


def _guest_arg(value: str) -> GuestForm:
    parts = value.rsplit(":", 2)
    if len(parts) != 3:
        raise argparse.ArgumentTypeError(f"invalid guest '{value}', expected NAME:AADHAAR:AGE")
    name, aadhaar_number, age = parts
    return GuestForm(name=name, aadhaar_number=aadhaar_number, age=age)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="hotel-portal", description="Hotel booking and web check-in")
    commands = parser.add_subparsers(dest="command", required=True)

    for name in ("login", "register"):
        auth = commands.add_parser(name, help=f"{name.capitalize()} with email and password")
        auth.add_argument("--email", required=True)
        auth.add_argument("--password", required=True)

    commands.add_parser("logout", help="Forget the stored session")
    commands.add_parser("whoami", help="Show the authenticated user")
    commands.add_parser("hotels", help="List hotels")

    book = commands.add_parser("book", help="Book a hotel")
    book.add_argument("hotel_id")
    book.add_argument("--check-in", type=_date_arg, required=True)
    book.add_argument("--check-out", type=_date_arg, required=True)
    book.add_argument("--aadhaar", default="", help="Primary guest Aadhaar (optional)")

    commands.add_parser("bookings", help="List your bookings")

    checkin = commands.add_parser("checkin", help="Web check-in for a confirmed booking")
    checkin.add_argument("booking_id")
    checkin.add_argument(
        "--guest",
        type=_guest_arg,
        action="append",
        required=True,
        help="Guest as NAME:AADHAAR:AGE, repeat for each guest",
    )

    return parser


def _emit(payload: dict[str, Any]) -> None:
    print(json.dumps(payload, indent=2, default=str))


def _finish(outcome: Outcome, **extra: Any) -> int:
    _emit({**outcome.to_dict(), **extra})
    return 0 if outcome.success else 1


async def run_command(args: argparse.Namespace, app: Optional[PortalApp] = None) -> int:
    """Run one CLI command against a portal app.

    Returns:
        Exit code
    """
    app = app or PortalApp()

    if args.command in ("login", "register"):
        screen = app.auth_screen(tab=args.command)
        screen.email, screen.password = args.email, args.password
        outcome = await screen.submit()
        user = app.session.user
        return _finish(outcome, user=user.model_dump() if user else None)

    if args.command == "logout":
        redirect = app.logout()
        _emit({"success": True, "redirect": redirect.to_dict()})
        return 0

    await app.start()
    redirect = app.guard(Route.HOTELS)
    if redirect:
        _emit({"success": False, "general_error": app.session.error, "redirect": redirect.to_dict()})
        return 1

    if args.command == "whoami":
        _emit({"success": True, "user": app.session.user.model_dump()})
        return 0

    if args.command == "hotels":
        screen = app.hotels_screen()
        outcome = await screen.load()
        hotels = [{**hotel.model_dump(), "price_label": hotel.price_label} for hotel in screen.hotels]
        return _finish(outcome, hotels=hotels)

    if args.command == "book":
        screen = app.booking_screen(args.hotel_id)
        screen.check_in_date = args.check_in
        screen.check_out_date = args.check_out
        screen.primary_guest_aadhaar = args.aadhaar
        return _finish(await screen.submit(), nights=screen.nights)

    if args.command == "bookings":
        screen = app.bookings_screen()
        outcome = await screen.load()
        return _finish(outcome, bookings=[row.to_dict() for row in screen.rows])

    if args.command == "checkin":
        screen = app.checkin_screen(args.booking_id)
        outcome = await screen.load()
        if not outcome.success:
            return _finish(outcome)
        screen.guests = list(args.guest)
        return _finish(await screen.submit())

    raise ValueError(f"Unknown command: {args.command}")


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Parse arguments and run the command.

    Returns:
        Exit code
    """
    args = build_parser().parse_args(argv)
    logger.debug("Running command", command=args.command, environment=settings.environment)
    try:
        return asyncio.run(run_command(args))
    except Exception as e:
        logger.error("Fatal error in command", command=args.command, error=str(e), exc_info=True)
        return 1


def run() -> None:
    """Console script entry point."""
    configure_logging()
    sys.exit(main())


if __name__ == "__main__":
    run()
