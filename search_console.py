"""
Prints clicks, impressions and CTR reports from Google Search Console.

Each command issues a single search analytics query, totals the rows and
prints a fixed-width table on stdout. Progress and error messages go to stderr.

Usage:
    search-console [-c <credentials_file>] <command> [args]

Example:
    search-console ls-sites
    search-console query-last example.com
    search-console query-day example.com -1
    search-console -c search-console-key.json query-all https://www.example.com/ 2024-01-01 --csv pages.csv
"""
import argparse
import sys

from gsc_analytics import aggregate, last_active_day, rows_for_day
from gsc_dates import DATE_FORMAT, check_range, days_ago, resolve_date, today, years_ago
from gsc_errors import GSCError, UsageError
from gsc_report import SEPARATOR, export_csv, format_header, format_rows
from gsc_service import SearchConsoleService, find_credentials_file
from gsc_sites import absolute_page_url, canonicalize_site, strip_site_prefix

# --- Configuration ---
DEFAULT_HISTORY_YEARS = 20
LAST_DAY_WINDOW = 10


class ArgumentParser(argparse.ArgumentParser):
    """Argument parser that exits with status 1 on usage errors."""

    def error(self, message):
        self.print_usage(sys.stderr)
        self.exit(1, f"{self.prog}: error: {message}\n")


def print_lines(lines):
    for line in lines:
        print(line)


def ls_sites(service):
    print_lines(service.list_sites())


def ls_sitemaps(service, site_url):
    print_lines(service.list_sitemaps(site_url))


def query_all(service, site_url, since=None, full=False, now=None):
    """Per-page report from ``since`` (default: 20 years ago) up to today."""
    end_date = today(now).strftime(DATE_FORMAT)
    start_date = resolve_date(since, now) if since else years_ago(DEFAULT_HISTORY_YEARS, now)
    check_range(start_date, end_date)

    df = service.query(site_url, ['page'], start_date, end_date)
    print(format_header(aggregate(df), 'Pages'))
    print_lines(format_rows(df, lambda row: strip_site_prefix(row['page'], site_url), full=full))
    return df


def query_last(service, site_url, now=None):
    """Per-page report for the most recent day with clicks."""
    # Stats are usually published around two days late; ten days is plenty.
    end_date = today(now).strftime(DATE_FORMAT)
    start_date = days_ago(LAST_DAY_WINDOW, now)

    df = service.query(site_url, ['date', 'page'], start_date, end_date)
    last_day = last_active_day(df)
    if last_day is None:
        print(f"No clicks between {start_date} and {end_date}.")
        return df.iloc[0:0]

    day_rows = rows_for_day(df, last_day)
    print(SEPARATOR)
    print(f"Last day: {last_day}")
    print(format_header(aggregate(df, last_day), 'Pages'))
    print_lines(format_rows(day_rows, lambda row: strip_site_prefix(row['page'], site_url)))
    return day_rows


def query_day(service, site_url, day=None, now=None):
    """Per-page report for a single day (default: today)."""
    day = resolve_date(day, now) if day else today(now).strftime(DATE_FORMAT)

    df = service.query(site_url, ['date', 'page'], day, day)
    day_rows = rows_for_day(df, day)
    print(SEPARATOR)
    print(f"Day: {day}")
    print(format_header(aggregate(df, day), 'Pages'))
    print_lines(format_rows(day_rows, lambda row: strip_site_prefix(row['page'], site_url)))
    return day_rows


def query_keywords_full(service, site_url, page, now=None):
    """Per-keyword report for one page over the whole available history."""
    page_url = absolute_page_url(page, site_url)
    end_date = today(now).strftime(DATE_FORMAT)
    start_date = years_ago(DEFAULT_HISTORY_YEARS, now)
    page_filter = {
        'dimension': 'page',
        'operator': 'equals',
        'expression': page_url
    }

    df = service.query(site_url, ['query'], start_date, end_date, filters=[page_filter])
    print(SEPARATOR)
    print(f"Page: {page_url}")
    print(format_header(aggregate(df), 'Keywords'))
    print_lines(format_rows(df, lambda row: row['query']))
    return df


def build_parser():
    parser = ArgumentParser(
        prog='search-console',
        description='Clicks, impressions and CTR reports from Google Search Console.',
        epilog='Dates are YYYY-MM-DD, or -N for N days ago (-1 is yesterday).'
    )
    parser.add_argument('-c', dest='credentials', metavar='FILE',
                        help='Service account key or OAuth client secret file.')
    subparsers = parser.add_subparsers(dest='command', metavar='<command>')

    subparsers.add_parser('ls-sites', help='List the sites registered under the account.')

    sitemaps = subparsers.add_parser('ls-sitemaps', help='List the sitemaps submitted for a site.')
    sitemaps.add_argument('site', help='Site URL; https:// is added if missing.')

    reports = [
        ('query-all', 'Per-page report since a date, stopping at the first page without clicks.'),
        ('query-full', 'Per-page report since a date, including pages without clicks.'),
    ]
    for name, help_text in reports:
        report = subparsers.add_parser(name, help=help_text)
        report.add_argument('site', help='Site URL; https:// is added if missing.')
        report.add_argument('since', nargs='?', help='First day to include (default: 20 years ago).')
        report.add_argument('--csv', metavar='FILE', help='Also write the rows to a CSV file.')

    last = subparsers.add_parser('query-last', help='Per-page report for the latest day with clicks.')
    last.add_argument('site', help='Site URL; https:// is added if missing.')
    last.add_argument('--csv', metavar='FILE', help='Also write the rows to a CSV file.')

    day = subparsers.add_parser('query-day', help='Per-page report for a single day.')
    day.add_argument('site', help='Site URL; https:// is added if missing.')
    day.add_argument('day', nargs='?', help='Day to report on (default: today).')
    day.add_argument('--csv', metavar='FILE', help='Also write the rows to a CSV file.')

    keywords = subparsers.add_parser('query-keywords-full', help='Per-keyword report for a single page.')
    keywords.add_argument('site', help='Site URL; https:// is added if missing.')
    keywords.add_argument('page', help='Page URL, or a path relative to the site.')
    keywords.add_argument('--csv', metavar='FILE', help='Also write the rows to a CSV file.')

    subparsers.add_parser('help', help='Show this message.')
    return parser


def run_command(service, args, now=None):
    """Runs the parsed command and returns the rows it reported, if any."""
    if args.command == 'ls-sites':
        ls_sites(service)
        return None

    if not args.site.strip():
        raise UsageError("site must not be empty")
    site_url = canonicalize_site(args.site)

    if args.command == 'ls-sitemaps':
        ls_sitemaps(service, site_url)
        return None
    if args.command == 'query-all':
        return query_all(service, site_url, args.since, full=False, now=now)
    if args.command == 'query-full':
        return query_all(service, site_url, args.since, full=True, now=now)
    if args.command == 'query-last':
        return query_last(service, site_url, now=now)
    if args.command == 'query-day':
        return query_day(service, site_url, args.day, now=now)
    if args.command == 'query-keywords-full':
        if not args.page.strip():
            raise UsageError("page must not be empty")
        return query_keywords_full(service, site_url, args.page, now=now)
    raise UsageError(f"unknown command: {args.command}")


def main(argv=None, service=None, now=None):
    """Command line entry point; returns the process exit status."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help(sys.stderr)
        return 1
    if args.command == 'help':
        parser.print_help()
        return 0

    try:
        if service is None:
            service = SearchConsoleService.from_credentials_file(find_credentials_file(args.credentials))
        df = run_command(service, args, now=now)
        csv_output_path = getattr(args, 'csv', None)
        if csv_output_path and df is not None:
            export_csv(df, csv_output_path)
            print(f"Successfully exported CSV to {csv_output_path}", file=sys.stderr)
    except GSCError as e:
        print(f"{parser.prog}: {args.command}: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == '__main__':
    sys.exit(main())
