#!/usr/bin/env python3
"""
Rentalist Admin - Command Line Interface

Usage:
    rentadmin health
    rentadmin list listings --status published
    rentadmin get leads <lead_id>
    rentadmin status listings <listing_id>
    rentadmin status leads <lead_id> contacted
    rentadmin delete partners <partner_id>
"""
import argparse
import json
import logging
import sys

from .api import RentalistClient, RentalistAPIError, Config, configure_logging
from .dashboard.loaders import COLLECTION_LOADERS, RECORD_LOADERS
from .dashboard.tables import TABLES, ListingsTable
from .services.i18n import STATUS_CHOICES, status_label


LOGGER = logging.getLogger(__name__)

ENTITIES = tuple(TABLES)


def print_json(data, indent=2):
    """Pretty print JSON data"""
    print(json.dumps(data, indent=indent, ensure_ascii=False, default=str))


def fail(message: str, code: int = 1):
    print(f"Error: {message}", file=sys.stderr)
    sys.exit(code)


def confirm_prompt(question: str) -> bool:
    """Blocking yes/no confirmation on the terminal"""
    answer = input(f"{question} (yes/no): ")
    return answer.strip().lower() == 'yes'


def _load_table(args, client: RentalistClient):
    page = COLLECTION_LOADERS[args.entity](client)
    if page.error:
        fail(f"{page.error} (is the API running at {page.hint}?)")
    return TABLES[args.entity](client, page.items, lang=args.lang)


def cmd_health(args, client: RentalistClient):
    """Check the backend is reachable"""
    try:
        print_json(client.health_check())
    except RentalistAPIError as e:
        fail(e.message)


def cmd_list(args, client: RentalistClient):
    """List one collection"""
    print(f"Fetching {args.entity}...", file=sys.stderr)
    page = COLLECTION_LOADERS[args.entity](client, args.status)
    if page.error:
        fail(f"{page.error} (is the API running at {page.hint}?)")
    print_json([item.to_dict() for item in page.items])


def cmd_get(args, client: RentalistClient):
    """Get a single record"""
    page = RECORD_LOADERS[args.entity](client, args.record_id)
    if not page.ok:
        fail(page.error or f"{args.entity} {args.record_id} not found")
    print_json(page.item.to_dict())


def cmd_status(args, client: RentalistClient):
    """Change a record's status (listings toggle when none is given)"""
    table = _load_table(args, client)
    if args.status:
        if args.status not in STATUS_CHOICES[args.entity]:
            fail(f"Unknown status {args.status!r}; choose from {', '.join(STATUS_CHOICES[args.entity])}")
        result = table.change_status(args.record_id, args.status)
    elif isinstance(table, ListingsTable):
        result = table.toggle_status(args.record_id)
    else:
        fail("A status is required for leads and partners")

    if not result.ok:
        fail(result.message)
    # The row may be missing from the loaded page; fall back to what was asked
    status = result.row.status if result.row is not None else args.status
    print(f"✓ {result.message}: {status_label(args.entity, status, args.lang)}")


def cmd_delete(args, client: RentalistClient):
    """Delete a record after confirmation"""
    table = _load_table(args, client)
    confirm = (lambda question: True) if args.yes else confirm_prompt
    result = table.delete(args.record_id, confirm=confirm)
    if result.cancelled:
        print("Cancelled.")
        return
    if not result.ok:
        fail(result.message)
    print(f"✓ {result.message}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='rentadmin',
        description='Rentalist Admin',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Check the backend
  rentadmin health

  # List published listings
  rentadmin list listings --status published

  # Toggle a listing between published and draft
  rentadmin status listings LISTING_ID

  # Mark a lead as contacted
  rentadmin status leads LEAD_ID contacted

  # Delete a partner (asks first)
  rentadmin delete partners PARTNER_ID
        """
    )

    parser.add_argument('--debug', action='store_true', help='Enable debug logging')
    parser.add_argument('--api-url', help='Backend base URL (overrides .env)')
    parser.add_argument('--lang', choices=['es', 'en'], default=Config.DEFAULT_LANGUAGE, help='Message language')

    subparsers = parser.add_subparsers(dest='command', help='Command to run')

    subparsers.add_parser('health', help='Check backend health')

    list_parser = subparsers.add_parser('list', help='List a collection')
    list_parser.add_argument('entity', choices=ENTITIES)
    list_parser.add_argument('--status', '-s', help='Only records with this status')

    get_parser = subparsers.add_parser('get', help='Get a record by ID')
    get_parser.add_argument('entity', choices=ENTITIES)
    get_parser.add_argument('record_id', help='Record ID')

    status_parser = subparsers.add_parser('status', help='Change a record status')
    status_parser.add_argument('entity', choices=ENTITIES)
    status_parser.add_argument('record_id', help='Record ID')
    status_parser.add_argument('status', nargs='?', help='New status (listings toggle when omitted)')

    delete_parser = subparsers.add_parser('delete', help='Delete a record')
    delete_parser.add_argument('entity', choices=ENTITIES)
    delete_parser.add_argument('record_id', help='Record ID')
    delete_parser.add_argument('--yes', '-y', action='store_true', help='Do not ask for confirmation')

    return parser


def main(argv=None, client: RentalistClient = None):
    """Main entry point"""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        sys.exit(0)

    configure_logging(debug=args.debug or Config.DEBUG)

    if args.api_url and not args.api_url.startswith(('http://', 'https://')):
        fail(f"Invalid --api-url: {args.api_url!r}")
    if not args.api_url and not Config.validate():
        print("\nPlease configure RENTALIST_API_URL in the .env file")
        print("See .env.example for the available settings")
        sys.exit(1)

    client = client or RentalistClient(base_url=args.api_url)

    commands = {
        'health': cmd_health,
        'list': cmd_list,
        'get': cmd_get,
        'status': cmd_status,
        'delete': cmd_delete,
    }
    commands[args.command](args, client)


if __name__ == '__main__':
    main()
