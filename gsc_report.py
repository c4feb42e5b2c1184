"""
Fixed-width text rendering of Search Console reports.
"""
import os

from gsc_errors import ExportError

SEPARATOR = '-' * 34


def format_metrics(clicks, impressions, ctr, label):
    return f"{clicks:<10d} {impressions:<10d} {ctr * 100:<5.2f} {label}"


def format_header(report, label):
    """Renders the column titles and the totals line for an aggregate report."""
    lines = [
        SEPARATOR,
        f"{'Clicks':<10} {'Impr.':<10} {'Ctr.':<5} {label}",
        format_metrics(report['clicks'], report['impressions'], report['ctr'], 'Total'),
        SEPARATOR,
    ]
    return '\n'.join(lines)


def format_row(row, display_key):
    return format_metrics(int(row['clicks']), int(row['impressions']), float(row['ctr']), display_key)


def format_rows(df, display, full=True):
    """
    Renders one line per row, labelled by ``display(row)``.

    Unless ``full`` is set, output stops at the first row without clicks. This
    relies on the API returning rows sorted by descending clicks.
    """
    lines = []
    for _, row in df.iterrows():
        if not full and row['clicks'] == 0:
            break
        lines.append(format_row(row, display(row)))
    return lines


def export_csv(df, csv_output_path):
    """Writes the report rows to a CSV file."""
    output_dir = os.path.dirname(csv_output_path)
    try:
        if output_dir:
            os.makedirs(output_dir, exist_ok=True)
        df.to_csv(csv_output_path, index=False)
    except OSError as e:
        raise ExportError(f"could not write {csv_output_path}: {e}")
