"""Output projections — console table, JSON document, CSV document.

Each projection is a function from the filtered descriptors to a complete
string; nothing is written until the whole document exists.

CSV is lossy: license name, watcher and issue counts are dropped, topics are
flattened to one ``;``-joined cell (a topic containing ``;`` cannot be told
apart from two topics) and the default branch keeps only its name. Use JSON
when the full record is needed.
"""

import contextlib
import csv
import io
import json
import os
import shutil
import tempfile
from pathlib import Path
from typing import Callable, List, Optional, Sequence

import click

from .errors import OutputError
from .models import OutputMode, RepositoryDescriptor, format_timestamp

NO_RESULTS = "No repositories found."
TOPIC_SEPARATOR = ";"
NAME_WIDTH_CAP = 40

CSV_COLUMNS = (
    "Name", "FullName", "Description", "Visibility", "IsPrivate", "IsFork",
    "Archived", "Stars", "UpdatedAt", "CreatedAt", "DefaultBranch", "URL",
    "SSHUrl", "HomepageUrl", "License", "Topics",
)

CONSOLE_COLUMNS = ("NAME", "VISIBILITY", "FORK", "ARCHIVED", "STARS", "UPDATED", "URL")


def _truncate(text: str, width: int) -> str:
    if len(text) <= width:
        return text
    return text[: max(0, width - 1)] + "…"


def _yes_no(value: bool) -> str:
    return "yes" if value else "no"


def _console_row(r: RepositoryDescriptor) -> List[str]:
    return [
        _truncate(r.name, NAME_WIDTH_CAP),
        r.visibility.value,
        _yes_no(r.is_fork),
        _yes_no(r.archived),
        str(r.stargazer_count),
        r.updated_at.strftime("%Y-%m-%d"),
        r.url,
    ]


def sort_for_console(repos: Sequence[RepositoryDescriptor]) -> List[RepositoryDescriptor]:
    """Most recently updated first; equal timestamps keep fetch order (sorted is stable)."""
    return sorted(repos, key=lambda r: r.updated_at, reverse=True)


def format_console(repos: Sequence[RepositoryDescriptor]) -> str:
    """Human table. Empty input gives only the no-results notice."""
    if not repos:
        return click.style(NO_RESULTS, fg="yellow")

    ordered = sort_for_console(repos)
    rows = [_console_row(r) for r in ordered]
    widths = [
        max(len(CONSOLE_COLUMNS[i]), *(len(row[i]) for row in rows))
        for i in range(len(CONSOLE_COLUMNS))
    ]
    # Numbers right-aligned, everything else left
    def cell(i: int, text: str) -> str:
        return text.rjust(widths[i]) if CONSOLE_COLUMNS[i] == "STARS" else text.ljust(widths[i])

    header = " " + "  ".join(cell(i, h) for i, h in enumerate(CONSOLE_COLUMNS)).rstrip()
    body = [" " + "  ".join(cell(i, v) for i, v in enumerate(row)).rstrip() for row in rows]
    # Rules span the widest line, never the terminal width
    rule = "─" * (max(len(header), *(len(b) for b in body)) + 1)
    lines = [rule, click.style(header, bold=True), rule]
    for text, repo in zip(body, ordered):
        if repo.archived:
            lines.append(click.style(text, dim=True))
        elif repo.is_fork:
            lines.append(click.style(text, fg="cyan"))
        else:
            lines.append(text)
    lines.append(rule)
    count = len(rows)
    lines.append(click.style(f" {count} repositor{'y' if count == 1 else 'ies'}", dim=True))
    return "\n".join(lines)


def format_json(repos: Sequence[RepositoryDescriptor]) -> str:
    """Array of full documents in fetch order. Lossless: see RepositoryDescriptor.from_dict."""
    return json.dumps([r.to_dict() for r in repos], indent=2, ensure_ascii=False)


def _csv_bool(value: bool) -> str:
    return "true" if value else "false"


def _csv_row(r: RepositoryDescriptor) -> List[str]:
    return [
        r.name,
        r.full_name,
        r.description or "",
        r.visibility.value,
        _csv_bool(r.is_private),
        _csv_bool(r.is_fork),
        _csv_bool(r.archived),
        str(r.stargazer_count),
        format_timestamp(r.updated_at),
        format_timestamp(r.created_at),
        r.default_branch.name if r.default_branch else "",
        r.url,
        r.ssh_url,
        r.homepage_url or "",
        (r.license.spdx_id or "") if r.license else "",
        TOPIC_SEPARATOR.join(r.topics),
    ]


def format_csv(repos: Sequence[RepositoryDescriptor]) -> str:
    """Header row then one row per repository, in fetch order."""
    buf = io.StringIO()
    writer = csv.writer(buf, lineterminator="\n")
    writer.writerow(CSV_COLUMNS)
    for r in repos:
        writer.writerow(_csv_row(r))
    return buf.getvalue()


PROJECTIONS: dict[OutputMode, Callable[[Sequence[RepositoryDescriptor]], str]] = {
    OutputMode.CONSOLE: format_console,
    OutputMode.JSON: format_json,
    OutputMode.CSV: format_csv,
}


def render(repos: Sequence[RepositoryDescriptor], mode: OutputMode) -> str:
    return PROJECTIONS[mode](repos)


def _new_file_mode() -> int:
    umask = os.umask(0)
    os.umask(umask)
    return 0o666 & ~umask


def write_output(text: str, out_file: Optional[str]) -> None:
    """Write a finished document to out_file (UTF-8) or stdout.

    The file is written to a temporary sibling and renamed over out_file, so
    the target holds either its previous contents or the whole new document.
    """
    if not out_file:
        click.echo(text.rstrip("\n"))
        return
    path = Path(out_file)
    tmp_name = None
    try:
        with tempfile.NamedTemporaryFile(
            "w",
            encoding="utf-8",
            dir=path.parent,
            prefix=f".{path.name}.",
            suffix=".tmp",
            delete=False,
        ) as tmp:
            tmp_name = tmp.name
            tmp.write(text)
        if path.exists():
            shutil.copymode(path, tmp_name)
        else:
            os.chmod(tmp_name, _new_file_mode())
        os.replace(tmp_name, path)
    except OSError as e:
        if tmp_name is not None:
            with contextlib.suppress(OSError):
                os.unlink(tmp_name)
        raise OutputError(str(path), e.strerror or str(e)) from e
    click.echo(f"Wrote {path}", err=True)
