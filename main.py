import argparse
import getpass
import logging
import sys

from barberbook.access import AccessGate, build_verifier
from barberbook.config import load_settings
from barberbook.domain import Accept, BookingRecord
from barberbook.session import BookingSession
from barberbook.state_file import open_storage
from barberbook.store import AvailabilityStore
from barberbook.validator import message_for


def _setup_logging(verbose: bool = False) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s - %(message)s",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Barberbook: single-calendar appointment booking")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("slots", help="List time slots of the current operating window")
    sub.add_parser("days", help="List days open for booking")

    show = sub.add_parser("show", help="Show the slots of one day")
    show.add_argument("--day", help="YYYY-MM-DD (default: today)")

    book = sub.add_parser("book", help="Book an appointment")
    book.add_argument("--day", default="")
    book.add_argument("--time", default="")
    book.add_argument("--first-name", default="")
    book.add_argument("--last-name", default="")
    book.add_argument("--phone", default="")

    admin = sub.add_parser("admin", help="Operator actions (asks for the operator secret)")
    admin_sub = admin.add_subparsers(dest="action", required=True)

    toggle_day = admin_sub.add_parser("toggle-day", help="Enable/disable a whole day")
    toggle_day.add_argument("day")

    toggle_slot = admin_sub.add_parser("toggle-slot", help="Enable/disable one slot of a day")
    toggle_slot.add_argument("day")
    toggle_slot.add_argument("time")

    cancel = admin_sub.add_parser("cancel", help="Cancel a booking")
    cancel.add_argument("day")
    cancel.add_argument("time")

    hours = admin_sub.add_parser("hours", help="Change the operating window")
    hours.add_argument("start_hour", type=int)
    hours.add_argument("end_hour", type=int)

    clear = admin_sub.add_parser("clear", help="Remove all bookings and disabled flags")
    clear.add_argument("--yes", action="store_true", help="Do not ask for confirmation")

    return parser


def _prompt_secret() -> str | None:
    try:
        return getpass.getpass("Operator secret: ")
    except (EOFError, KeyboardInterrupt):
        return None


def _confirm_clear() -> bool:
    try:
        answer = input("Remove all bookings and disabled days/slots? [y/N] ")
    except (EOFError, KeyboardInterrupt):
        return False
    return answer.strip().lower() in {"y", "yes"}


def _print_day(session: BookingSession, day: str) -> None:
    state = "closed" if session.store.is_day_disabled(day) else "open"
    print(f"{day} ({state})")
    for view in session.day_view(day):
        if view.booked:
            b = view.booking
            status = f"booked: {b.first_name} {b.last_name} - {b.phone}"
        elif view.slot_disabled:
            status = "disabled"
        else:
            status = "free"
        print(f"  {view.label}  {status}")


def _run_admin(session: BookingSession, args: argparse.Namespace) -> int:
    if not session.toggle_operator(_prompt_secret):
        print("Incorrect operator secret.", file=sys.stderr)
        return 1

    try:
        if args.action == "toggle-day":
            session.toggle_day(args.day)
            state = "closed" if session.store.is_day_disabled(args.day) else "open"
            print(f"{args.day} is now {state}.")
        elif args.action == "toggle-slot":
            session.toggle_slot(args.day, args.time)
            state = "disabled" if session.store.is_slot_disabled(args.day, args.time) else "enabled"
            print(f"{args.day} {args.time} is now {state}.")
        elif args.action == "cancel":
            session.cancel(args.day, args.time)
            print(f"Booking {args.day} {args.time} cancelled.")
        elif args.action == "hours":
            session.set_hours(args.start_hour, args.end_hour)
            start, end = session.store.operating_window
            print(f"Operating window: {start:02d}:00-{end:02d}:00")
        elif args.action == "clear":
            confirm = (lambda: True) if args.yes else _confirm_clear
            if session.clear_all(confirm):
                print("All bookings and disabled flags removed.")
            else:
                print("Nothing was removed.")
    finally:
        session.gate.logout()
    return 0


def main(argv: list[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)

    _setup_logging(args.verbose)
    settings = load_settings()

    store = AvailabilityStore.open(open_storage(settings.state_file))
    gate = AccessGate(build_verifier(settings))
    session = BookingSession(store, gate, days_ahead=settings.days_ahead)

    try:
        if args.command == "slots":
            for label in store.slots():
                print(label)
            return 0

        if args.command == "days":
            for day in session.days():
                print(day)
            return 0

        if args.command == "show":
            _print_day(session, args.day or session.days()[0])
            return 0

        if args.command == "book":
            payload = BookingRecord(first_name=args.first_name, last_name=args.last_name, phone=args.phone)
            decision = session.book(args.day, args.time, payload)
            print(message_for(decision))
            return 0 if isinstance(decision, Accept) else 1

        return _run_admin(session, args)

    except Exception as e:
        logging.getLogger(__name__).error("Command %s failed (%s: %s)", args.command, type(e).__name__, e)
        raise


if __name__ == "__main__":
    raise SystemExit(main())
