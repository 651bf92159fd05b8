#!/usr/bin/env python3
"""
fantastical - command-line front end for the Fantastical calendar app.

Builds x-fantastical3:// URLs, drives Fantastical's AppleScript dictionary,
and queries the macOS calendar store through a compiled EventKit helper.
"""

import argparse
import logging
import sys

from fantastical_cli.commands import (
    AppleScriptCommand,
    EventKitCommand,
    ParseCommand,
    ShowCommand
)
from fantastical_cli.core.config import load_config
from fantastical_cli.core.paths import get_default_config_path
from fantastical_cli.core.exceptions import FantasticalError, UsageError
from fantastical_cli.eventkit.gateway import SORT_KEYS
from fantastical_cli.eventkit.render import LIST_FORMATS, STATUS_FORMATS
from fantastical_cli.utils.macos import set_process_name
from fantastical_cli.utils.system import ProcessRunner
from fantastical_cli.version import APP_NAME, version_string

VERBOSE_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


class CLIParser(argparse.ArgumentParser):
    """ArgumentParser that raises UsageError instead of exiting."""

    def error(self, message):
        raise UsageError(message)


def _add_global_flags(parser, suppress=False):
    # Sub-parsers use SUPPRESS so they don't overwrite a flag given before the command.
    default = argparse.SUPPRESS if suppress else False
    parser.add_argument('--verbose', '-v', action='store_true', default=default,
                        help='Verbose (debug) logging on stderr')
    parser.add_argument('--dry-run', action='store_true', default=default,
                        help='Log the commands that would run instead of running them')


def _add_delivery_flags(parser):
    parser.add_argument('--open', dest='open_url', action=argparse.BooleanOptionalAction,
                        default=None, help='Open the URL (default: on for macOS)')
    parser.add_argument('--print', dest='print_url', action=argparse.BooleanOptionalAction,
                        default=None, help='Print the URL to stdout')
    parser.add_argument('--copy', action=argparse.BooleanOptionalAction, default=None,
                        help='Copy the URL to the clipboard')
    parser.add_argument('--json', dest='as_json', action=argparse.BooleanOptionalAction,
                        default=None, help='Print a JSON object instead of the bare URL')


def _add_format_flags(parser, formats):
    parser.add_argument('--format', dest='format_name', metavar='FORMAT',
                        help=f"Output format ({'|'.join(formats)})")
    parser.add_argument('--json', dest='as_json', action='store_true',
                        help='Shortcut for --format json')
    parser.add_argument('--plain', dest='as_plain', action='store_true',
                        help='Shortcut for --format plain')


def build_parser():
    """Build the argument parser; returns ``(parser, {command name: sub-parser})``."""
    parser = CLIParser(
        prog=APP_NAME,
        description="CLI for the Fantastical URL handler, AppleScript and EventKit",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  fantastical parse "Lunch with Sam tomorrow at noon"
  fantastical parse --calendar Work --add "Standup 9am every weekday"
  fantastical show week 2026-01-05
  fantastical show set Work
  fantastical applescript --add "Dentist friday 3pm"
  fantastical eventkit events --this-week --format table

Notes:
  On macOS, --open defaults to on (uses "open <url>").
  On other systems it defaults to off, so the URL is printed.
        """
    )

    default_config = get_default_config_path()
    parser.add_argument(
        '--config',
        help=f'Path to configuration file (default: {default_config})',
        default=None
    )
    parser.add_argument('--version', action='version',
                        version=f'{APP_NAME} {version_string()}')
    _add_global_flags(parser)

    subparsers = parser.add_subparsers(dest='command', metavar='<command>', help='Commands')
    topics = {}

    # Parse command
    parse_parser = subparsers.add_parser(
        'parse', help='Build (and optionally open) x-fantastical3://parse?... URLs')
    _add_global_flags(parse_parser, suppress=True)
    parse_parser.add_argument('words', nargs='*', metavar='sentence',
                              help='Natural-language event text')
    parse_parser.add_argument('--stdin', dest='use_stdin', action='store_true',
                              help='Read the sentence from standard input')
    parse_parser.add_argument('--note', '-n', help='Attach a note')
    parse_parser.add_argument('--calendar', '--calendarName', dest='calendar',
                              help='Target calendar name')
    parse_parser.add_argument('--add', action=argparse.BooleanOptionalAction, default=None,
                              help='Add immediately without showing the mini window')
    parse_parser.add_argument('--param', dest='params', action='append', metavar='KEY=VALUE',
                              help='Extra query parameter (repeatable)')
    _add_delivery_flags(parse_parser)
    topics['parse'] = parse_parser

    # Show command
    show_parser = subparsers.add_parser(
        'show', help='Build (and optionally open) x-fantastical3://show/... URLs',
        description='Show a view (mini, calendar, day, week, month, year, ...) with an '
                    'optional date (YYYY-MM-DD, today, tomorrow, yesterday), '
                    'or a calendar set with "show set <name>".')
    _add_global_flags(show_parser, suppress=True)
    show_parser.add_argument('target', nargs='*', metavar='view',
                             help='View name and optional date, or "set <name>"')
    _add_delivery_flags(show_parser)
    topics['show'] = show_parser

    # AppleScript command
    as_parser = subparsers.add_parser(
        'applescript', aliases=['as'],
        help='Send "parse sentence" to Fantastical via osascript (macOS)')
    _add_global_flags(as_parser, suppress=True)
    as_parser.add_argument('words', nargs='*', metavar='sentence',
                           help='Natural-language event text')
    as_parser.add_argument('--stdin', dest='use_stdin', action='store_true',
                           help='Read the sentence from standard input')
    as_parser.add_argument('--add', action=argparse.BooleanOptionalAction, default=None,
                           help='Use "with add immediately"')
    as_parser.add_argument('--run', dest='run_script', action=argparse.BooleanOptionalAction,
                           default=None, help='Run the script with osascript (default: on for macOS)')
    as_parser.add_argument('--print', dest='print_script', action=argparse.BooleanOptionalAction,
                           default=None, help='Print the AppleScript')
    as_parser.add_argument('--json', dest='as_json', action=argparse.BooleanOptionalAction,
                           default=None, help='Print a JSON object describing the script')
    topics['applescript'] = topics['as'] = as_parser

    # EventKit command
    ek_parser = subparsers.add_parser(
        'eventkit', help='Query macOS calendars through the EventKit helper')
    _add_global_flags(ek_parser, suppress=True)
    ek_sub = ek_parser.add_subparsers(dest='eventkit_command', metavar='<subcommand>')
    topics['eventkit'] = ek_parser

    status_parser = ek_sub.add_parser('status', help='Show calendar authorization status')
    _add_global_flags(status_parser, suppress=True)
    _add_format_flags(status_parser, STATUS_FORMATS)

    calendars_parser = ek_sub.add_parser('calendars', help='List event calendars')
    _add_global_flags(calendars_parser, suppress=True)
    _add_format_flags(calendars_parser, LIST_FORMATS)
    calendars_parser.add_argument('--no-input', action='store_true',
                                  help='Fail instead of prompting for calendar access')

    events_parser = ek_sub.add_parser('events', help='List events in a date range')
    _add_global_flags(events_parser, suppress=True)
    _add_format_flags(events_parser, LIST_FORMATS)
    events_parser.add_argument('--calendar', dest='calendars', action='append', default=[],
                               metavar='NAME', help='Only this calendar (repeatable)')
    events_parser.add_argument('--calendar-id', dest='calendar_ids', action='append', default=[],
                               metavar='ID', help='Only this calendar identifier (repeatable)')
    events_parser.add_argument('--from', dest='from_value', metavar='DATE',
                               help='Start (YYYY-MM-DD or YYYY-MM-DDTHH:MM[:SS])')
    events_parser.add_argument('--to', dest='to_value', metavar='DATE',
                               help='End (YYYY-MM-DD or YYYY-MM-DDTHH:MM[:SS])')
    events_parser.add_argument('--days', type=int, help='Next N days from now')
    events_parser.add_argument('--today', action='store_true', help="Today's events")
    events_parser.add_argument('--tomorrow', action='store_true', help="Tomorrow's events")
    events_parser.add_argument('--this-week', action='store_true', help="This week's events")
    events_parser.add_argument('--next-week', action='store_true', help="Next week's events")
    events_parser.add_argument('--limit', type=int, help='Maximum number of events')
    events_parser.add_argument('--include-all-day', action=argparse.BooleanOptionalAction,
                               default=True, help='Include all-day events')
    events_parser.add_argument('--no-all-day', dest='include_all_day', action='store_false',
                               help='Exclude all-day events')
    events_parser.add_argument('--include-declined', action='store_true',
                               help='Include events you declined')
    events_parser.add_argument('--sort', choices=SORT_KEYS, default='start',
                               help='Sort order')
    events_parser.add_argument('--tz', help='Output time zone (IANA name, default: local)')
    events_parser.add_argument('--query', help='Case-insensitive match on title, location or notes')
    events_parser.add_argument('--no-input', action='store_true',
                               help='Fail instead of prompting for calendar access')

    # Help and version
    help_parser = subparsers.add_parser('help', help='Show help for a command')
    help_parser.add_argument('topic', nargs='?', help='Command name')
    subparsers.add_parser('version', help='Print version information')

    return parser, topics


def configure_logging(verbose: bool, dry_run: bool) -> None:
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format=VERBOSE_FORMAT)
    elif dry_run:
        logging.basicConfig(level=logging.INFO, format='%(message)s')
    else:
        logging.basicConfig(level=logging.WARNING, format='%(message)s')


def _print_help(parser, topics, topic):
    if not topic:
        parser.print_help()
        return
    sub = topics.get(topic.lower())
    if sub is None:
        raise UsageError(f"unknown help topic {topic!r}")
    sub.print_help()


def _run_eventkit(config, runner, args, parser):
    cmd = EventKitCommand(config, runner=runner, verbose=config.verbose)
    sub = args.eventkit_command
    if sub == 'status':
        return cmd.status(args.format_name, args.as_json, args.as_plain)
    if sub == 'calendars':
        return cmd.calendars(args.format_name, args.as_json, args.as_plain,
                             no_input=args.no_input)
    if sub == 'events':
        return cmd.events(
            args.format_name, args.as_json, args.as_plain,
            calendars=args.calendars,
            calendar_ids=args.calendar_ids,
            from_value=args.from_value,
            to_value=args.to_value,
            days=args.days,
            today=args.today,
            tomorrow=args.tomorrow,
            this_week=args.this_week,
            next_week=args.next_week,
            limit=args.limit,
            include_all_day=args.include_all_day,
            include_declined=args.include_declined,
            sort=args.sort,
            tz=args.tz,
            query=args.query,
            no_input=args.no_input,
        )
    parser.print_help(sys.stderr)
    raise UsageError("missing eventkit subcommand (status, calendars, events)")


def _normalize_command(argv, commands):
    """Lower-case the command word so `fantastical Parse ...` works."""
    argv = list(argv)
    index = 0
    while index < len(argv):
        token = argv[index]
        if token == '--config':
            index += 2
            continue
        if token.startswith('-'):
            index += 1
            continue
        if token.lower() in commands:
            argv[index] = token.lower()
        break
    return argv


def main(argv=None):
    """Main entry point for fantastical."""
    set_process_name(APP_NAME)

    parser, topics = build_parser()
    if argv is None:
        argv = sys.argv[1:]
    argv = _normalize_command(argv, set(topics) | {'help', 'version'})

    try:
        args = parser.parse_args(argv)
    except SystemExit as exc:
        # --help and --version
        return exc.code or 0
    except UsageError as e:
        print(f"Error: {e}", file=sys.stderr)
        return e.exit_code

    if not args.command:
        parser.print_help(sys.stderr)
        return 2

    try:
        if args.command == 'help':
            _print_help(parser, topics, args.topic)
            return 0
        if args.command == 'version':
            print(f"{APP_NAME} {version_string()}")
            return 0

        # Load configuration
        config = load_config(args.config)
        if getattr(args, 'verbose', False):
            config.output.verbose = True
        if getattr(args, 'dry_run', False):
            config.output.dry_run = True

        configure_logging(config.verbose, config.dry_run)
        logger = logging.getLogger(__name__)
        logger.debug("Using config: %s", args.config or get_default_config_path())
        logger.debug("Effective config: %s", config.to_dict())

        runner = ProcessRunner(dry_run=config.dry_run)

        if args.command == 'parse':
            cmd = ParseCommand(config, runner=runner, verbose=config.verbose)
            success = cmd.run(
                args.words,
                note=args.note,
                calendar=args.calendar,
                add=args.add,
                params=args.params,
                use_stdin=args.use_stdin,
                open_url=args.open_url,
                print_url=args.print_url,
                copy=args.copy,
                as_json=args.as_json,
            )

        elif args.command == 'show':
            cmd = ShowCommand(config, runner=runner, verbose=config.verbose)
            success = cmd.run(
                args.target,
                open_url=args.open_url,
                print_url=args.print_url,
                copy=args.copy,
                as_json=args.as_json,
            )

        elif args.command in ('applescript', 'as'):
            cmd = AppleScriptCommand(config, runner=runner, verbose=config.verbose)
            success = cmd.run(
                args.words,
                use_stdin=args.use_stdin,
                add=args.add,
                run_script=args.run_script,
                print_script=args.print_script,
                as_json=args.as_json,
            )

        elif args.command == 'eventkit':
            success = _run_eventkit(config, runner, args, topics['eventkit'])

        else:
            print(f"Error: unknown command {args.command!r}", file=sys.stderr)
            return 2

        return 0 if success else 1

    except KeyboardInterrupt:
        print("\nOperation cancelled by user.", file=sys.stderr)
        return 130
    except FantasticalError as e:
        print(f"Error: {e}", file=sys.stderr)
        return e.exit_code


if __name__ == '__main__':
    sys.exit(main())
