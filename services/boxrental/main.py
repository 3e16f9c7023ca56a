"""
Command line interface for the box rental toolkit.

Results are printed to stdout as JSON; logs go to stderr.
Example: python -m services.boxrental rut validate 12.345.678-5
"""

import argparse
import json
import sys
from typing import Any, List, Optional

from . import __version__
from .helpers.rut import calculate_verifier_digit, format_rut, validate_rut
from .inventory import check_inventory_availability, evaluate_availability
from .log_config import configure_logging, get_logger
from .pricing import (
    RentalLine,
    calculate_guarantee,
    calculate_return_date,
    calculate_total_amount,
    format_currency,
    find_additional_product,
)
from .settings import settings
from .tracking import generate_tracking_code, generate_tracking_token, generate_tracking_url

logger = get_logger(__name__)


def parse_product(value: str) -> RentalLine:
    """
    Parse an add-on given as NAME:QTY:PRICE or NAME:QTY.

    Without PRICE the catalog price of NAME is used.

    Raises:
        argparse.ArgumentTypeError: If the value is malformed or the
            product is not in the catalog
    """
    parts = value.rsplit(":", 2)
    if len(parts) == 3 and _is_int(parts[1]):
        name, quantity, price = parts
    elif len(parts) >= 2:
        name, quantity = value.rsplit(":", 1)
        price = None
    else:
        raise argparse.ArgumentTypeError(
            f"Invalid product '{value}'. Expected NAME:QTY[:PRICE]"
        )

    name = name.strip()
    if not name:
        raise argparse.ArgumentTypeError(
            f"Invalid product '{value}'. Expected NAME:QTY[:PRICE]"
        )

    try:
        quantity = int(quantity)
        price = int(price) if price is not None else find_additional_product(name).price
    except ValueError as e:
        raise argparse.ArgumentTypeError(
            f"Invalid product '{value}'. QTY and PRICE must be integers"
        ) from e
    except KeyError as e:
        raise argparse.ArgumentTypeError(
            f"Unknown product '{name}'. Give a PRICE or use a catalog product"
        ) from e

    return RentalLine(name, quantity, price)


def _is_int(text: str) -> bool:
    try:
        int(text)
    except ValueError:
        return False
    return True


def _emit(payload: Any) -> None:
    print(json.dumps(payload, ensure_ascii=False, indent=2))


def cmd_rut(args: argparse.Namespace) -> int:
    if args.rut_command == "format":
        _emit({"formattedRut": format_rut(args.value)})
        return 0

    if args.rut_command == "digit":
        _emit({"verifierDigit": calculate_verifier_digit(args.value)})
        return 0

    result = validate_rut(args.value)
    _emit(result.to_dict())
    return 0 if result.is_valid else 1


def cmd_quote(args: argparse.Namespace) -> int:
    config = settings()
    try:
        total = calculate_total_amount(
            args.boxes,
            args.days,
            args.price_per_day,
            args.product,
            guarantee_per_box=config.guarantee_per_box,
        )
        guarantee = calculate_guarantee(args.boxes, config.guarantee_per_box)
        return_date = calculate_return_date(args.start, args.days) if args.start else None
    except ValueError as e:
        logger.error("Quote failed", error=str(e))
        return 1

    _emit({
        "boxQuantity": args.boxes,
        "rentalDays": args.days,
        "guarantee": guarantee,
        "totalAmount": total,
        "formattedTotal": format_currency(total),
        "returnDate": return_date,
    })
    return 0


def cmd_tracking(args: argparse.Namespace) -> int:
    validation = validate_rut(args.rut)
    if not validation.is_valid:
        logger.warning("Invalid RUT for tracking code", rut=validation.formatted_rut)
        return 1

    code = generate_tracking_code(validation.clean_rut)
    token = generate_tracking_token()
    _emit({
        "trackingCode": code,
        "trackingToken": token,
        "trackingUrl": generate_tracking_url(code, token),
    })
    return 0


def cmd_availability(args: argparse.Namespace) -> int:
    if args.offline:
        total_boxes = settings().total_boxes
        logger.info(
            "Estimating availability offline",
            quantity=args.quantity,
            total_boxes=total_boxes,
            reserved=args.reserved,
            delivery=args.delivery,
            pickup=args.pickup
        )
        try:
            check = evaluate_availability(args.quantity, total_boxes, args.reserved)
        except ValueError as e:
            logger.error("Availability estimate failed", error=str(e))
            return 1
    else:
        check = check_inventory_availability(args.quantity, args.delivery, args.pickup)

    _emit(check.model_dump(mode="json", by_alias=True))
    return 0 if check.available else 1


def create_parser() -> argparse.ArgumentParser:
    """Create command line argument parser."""
    parser = argparse.ArgumentParser(
        prog="boxrental",
        description="Box rental toolkit",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m services.boxrental rut validate 12.345.678-5
  python -m services.boxrental rut format 123456785
  python -m services.boxrental quote --boxes 10 --days 14 --price-per-day 500 --product "Correa Ratchet:1"
  python -m services.boxrental tracking 12.345.678-5
  python -m services.boxrental availability --quantity 10 --delivery 2025-03-01 --pickup 2025-03-15
  python -m services.boxrental availability --quantity 10 --delivery 2025-03-01 --pickup 2025-03-15 --offline --reserved 42
        """
    )

    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Override log level from configuration"
    )

    parser.add_argument(
        "--log-format",
        choices=["json", "text"],
        help="Override log format from configuration"
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"Box rental toolkit {__version__}"
    )

    commands = parser.add_subparsers(dest="command", required=True)

    rut = commands.add_parser("rut", help="Format and validate Chilean RUTs")
    rut_commands = rut.add_subparsers(dest="rut_command", required=True)
    rut_commands.add_parser("validate", help="Validate a RUT").add_argument("value")
    rut_commands.add_parser("format", help="Format a RUT for display").add_argument("value")
    rut_commands.add_parser("digit", help="Compute the check digit of a RUT body").add_argument("value")
    rut.set_defaults(handler=cmd_rut)

    quote = commands.add_parser("quote", help="Price a rental")
    quote.add_argument("--boxes", type=int, required=True, help="Number of boxes")
    quote.add_argument("--days", type=int, required=True, help="Rental length in days")
    quote.add_argument("--price-per-day", type=int, required=True, help="Price per box per day (CLP)")
    quote.add_argument(
        "--product",
        type=parse_product,
        action="append",
        default=[],
        help="Add-on as NAME:QTY:PRICE, or NAME:QTY for catalog products (repeatable)"
    )
    quote.add_argument("--start", help="Delivery date (YYYY-MM-DD) to compute the return date")
    quote.set_defaults(handler=cmd_quote)

    tracking = commands.add_parser("tracking", help="Generate a tracking code and link")
    tracking.add_argument("rut", help="Customer RUT")
    tracking.set_defaults(handler=cmd_tracking)

    availability = commands.add_parser("availability", help="Check box availability")
    availability.add_argument("--quantity", type=int, required=True)
    availability.add_argument("--delivery", required=True, help="Delivery date (YYYY-MM-DD)")
    availability.add_argument("--pickup", required=True, help="Pickup date (YYYY-MM-DD)")
    availability.add_argument(
        "--offline",
        action="store_true",
        help="Estimate from the configured fleet size instead of asking the backend"
    )
    availability.add_argument(
        "--reserved",
        type=int,
        default=0,
        help="Boxes already reserved for the window (with --offline)"
    )
    availability.set_defaults(handler=cmd_availability)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main entry point for the CLI.

    Returns:
        Exit code (0 for success, 1 for failure or invalid input)
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.log_level or args.log_format:
        configure_logging(args.log_level, args.log_format)

    logger.debug("Command starting", command=args.command, version=__version__)

    try:
        return args.handler(args)
    except KeyboardInterrupt:
        logger.warning("Interrupted by user")
        return 1


if __name__ == "__main__":
    sys.exit(main())
