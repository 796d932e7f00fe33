#!/usr/bin/env python3
"""
Grouped Totals - Main Entry Point

Usage:
    python main.py group data.csv --keys year,month     # Group and print JSON
    python main.py group data.csv --preset "Year / Quarter" --locale de-DE
    python main.py presets                              # List table structures
    python main.py setup                                # Validate configuration
"""
import os
import sys
import json
import argparse
import logging
from datetime import date, datetime
from pathlib import Path

# Add project root to path
PROJECT_ROOT = Path(__file__).parent
sys.path.insert(0, str(PROJECT_ROOT))

logger = logging.getLogger(__name__)

def configure_logging(level: str = "INFO"):
    """Configure root logging for CLI runs."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[logging.StreamHandler()],
    )

def setup_environment():
    """Load environment variables from .env file if present."""
    env_file = PROJECT_ROOT / '.env'
    if env_file.exists():
        logger.info("Loading environment from .env file")
        with open(env_file) as f:
            for line in f:
                line = line.strip()
                if line and not line.startswith('#') and '=' in line:
                    key, value = line.split('=', 1)
                    os.environ.setdefault(key.strip(), value.strip())

def _json_default(value):
    """Serialize dates and Timestamps in record fields."""
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    return str(value)

def cmd_group(args):
    """Group a record file and print the flattened rows."""
    from src.data.record_loader import load_records
    from src.grouping import aggregate_to_dicts, find_aggregate_option
    from src.core.error_taxonomy import InvalidGroupingKeyError

    if args.preset:
        option = find_aggregate_option(args.preset)
        if option is None:
            raise InvalidGroupingKeyError(
                f"Unknown preset '{args.preset}'. Run 'python main.py presets' to list them.",
                context={"preset": args.preset},
            )
        keys = option.keys
    else:
        keys = [k.strip() for k in (args.keys or "").split(",") if k.strip()]

    records = load_records(args.file)
    logger.info(f"Grouping {len(records)} records by {keys}")
    rows = aggregate_to_dicts(records, keys, locale=args.locale)

    output = json.dumps(rows, indent=2, default=_json_default, ensure_ascii=False)
    if args.output:
        Path(args.output).write_text(output + "\n", encoding="utf-8")
        print(f"Wrote {len(rows)} rows to {args.output}")
    else:
        print(output)

def cmd_presets(args):
    """List the configured table structures."""
    from src.grouping import get_aggregate_options

    options = get_aggregate_options()
    if not options:
        print("No aggregate presets configured.")
        return
    for option in options:
        print(f"  {option.title:<28} {', '.join(option.keys)}")

def cmd_setup(args):
    """Validate configuration and setup."""
    from src.core.data_context import get_data_context
    from src.core.locale_format import resolve_locale
    from src.grouping import get_aggregate_options, parse_keys

    print("\n" + "="*60)
    print("CONFIGURATION VALIDATION")
    print("="*60)

    context = get_data_context()
    print(f"\nData dictionary: {context.config_dir / 'data_dictionary.yaml'}")

    print("\nField mappings:")
    for logical, actual in context.get_field_mappings().items():
        print(f"   {logical:<8} -> {actual}")

    locale = context.get_default_locale()
    formatter = resolve_locale(locale, context)
    print(f"\nDefault locale: {locale} (January = {formatter(date(2000, 1, 1), {'month': 'long'})})")
    print(f"Configured locales: {', '.join(sorted(context.get_month_name_tables()))}")

    options = get_aggregate_options(context)
    for option in options:
        parse_keys(option.keys)
    print(f"\nAggregate presets: {len(options)} valid")

    print("\n" + "="*60)
    print("To change field names, set: GROUPING_DATE_FIELD / GROUPING_AMOUNT_FIELD")
    print("="*60)

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Multi-level grouping with subtotals",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python main.py group data.csv --keys year,quarter   Group by year then quarter
  python main.py presets                              List table structures
  python main.py setup                                Check configuration

Environment Variables:
  GROUPING_DATE_FIELD    Date field for year/month/quarter (default: date)
  GROUPING_AMOUNT_FIELD  Field summed into groups (default: price)
  GROUPING_LOCALE        Locale for month names (default: en-US)
  LOG_LEVEL              Logging level (default: INFO)
        """
    )

    subparsers = parser.add_subparsers(dest='command', help='Command to run')

    # Group command
    group_parser = subparsers.add_parser('group', help='Group a CSV or JSON record file')
    group_parser.add_argument('file', help='Record file (.csv or .json)')
    structure = group_parser.add_mutually_exclusive_group()
    structure.add_argument('--keys', help='Comma-separated grouping keys, e.g. year,month')
    structure.add_argument('--preset', help='Title of a configured aggregate preset')
    group_parser.add_argument('--locale', default=None, help='Locale tag for month names')
    group_parser.add_argument('--output', '-o', default=None, help='Write JSON to this file')
    group_parser.set_defaults(func=cmd_group)

    # Presets command
    presets_parser = subparsers.add_parser('presets', help='List aggregate presets')
    presets_parser.set_defaults(func=cmd_presets)

    # Setup command
    setup_parser = subparsers.add_parser('setup', help='Validate setup')
    setup_parser.set_defaults(func=cmd_setup)

    return parser

def main(argv=None) -> int:
    setup_environment()

    from config.settings import get_config
    configure_logging(get_config().log_level)

    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 1

    from src.core.error_taxonomy import classify_error

    try:
        args.func(args)
    except KeyboardInterrupt:
        logger.info("Shutting down...")
    except Exception as e:
        classified = classify_error(e, pipeline_stage=args.command)
        logger.error(f"{classified.category.name}: {classified.message}")
        logger.debug(json.dumps(classified.to_dict(), default=str))
        logger.debug(classified.stack_trace)
        print(f"Error: {classified.user_message}\n  {classified.message}", file=sys.stderr)
        return 1
    return 0

if __name__ == "__main__":
    sys.exit(main())
