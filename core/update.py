"""Applying update candidates to manifest content."""

import difflib

from .models import UpdateCandidate, UpdateReport
from .parse_python import pin_requirement_line


def _update_line(line: str, candidate: UpdateCandidate) -> str:
    entry = candidate.entry
    if entry.datasource == "pypi":
        return pin_requirement_line(line, candidate.new_version)
    if not entry.current_value:
        return line

    start = max(line.find(entry.name), 0) + len(entry.name)
    index = line.find(entry.current_value, start)
    if index < 0:
        return line
    return line[:index] + candidate.new_version + line[index + len(entry.current_value):]


def apply_updates(content: str, candidates: list[UpdateCandidate]) -> str:
    """Rewrite each changed dependency on the line it was extracted from."""
    lines = content.splitlines(keepends=True)

    for candidate in candidates:
        line_number = candidate.entry.line_number
        if not candidate.has_change or line_number is None or line_number >= len(lines):
            continue
        raw = lines[line_number]
        body = raw.rstrip("\r\n")
        ending = raw[len(body):]
        lines[line_number] = _update_line(body, candidate) + ending

    return "".join(lines)


def format_diff(original: str, updated: str, filename: str) -> str:
    diff = difflib.unified_diff(
        original.splitlines(),
        updated.splitlines(),
        fromfile=filename,
        tofile=filename,
        lineterm="",
    )
    return "\n".join(diff)


def build_update_report(
    filename: str, manager: str, content: str, candidates: list[UpdateCandidate]
) -> UpdateReport:
    """Apply ``candidates`` and collect the result with a diff and notes."""
    updated = apply_updates(content, candidates)
    notes = [
        f"{candidate.entry.name}: {candidate.reason}"
        for candidate in candidates
        if candidate.new_version is None
    ]
    return UpdateReport(
        filename=filename,
        manager=manager,
        updated_content=updated,
        diff=format_diff(content, updated, filename),
        changes=candidates,
        notes=notes,
    )
