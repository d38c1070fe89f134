"""Snapshot comparison and change rendering."""

from dataclasses import dataclass
from typing import Iterator, List, Optional

from ..models.change import ChangeEvent, Created, Removed, Updated
from ..models.package import Snapshot, resolve_description

DIGEST_HEADER = "[插件市场更新]"

VERB_CREATED = "新增"
VERB_UPDATED = "更新"
VERB_REMOVED = "删除"


@dataclass(frozen=True)
class DiffOptions:
    """Verbosity switches for rendered change lines."""

    show_deletion: bool = False
    show_publisher: bool = False
    show_description: bool = False


def compute_changes(previous: Snapshot, current: Snapshot) -> Iterator[ChangeEvent]:
    """Yield change events between two snapshots.

    Args:
        previous: Snapshot from the last successful poll
        current: Freshly fetched snapshot

    Yields:
        One event per package whose presence or version differs
    """
    for name in set(previous) | set(current):
        old = previous.get(name)
        new = current.get(name)

        if old is None:
            yield Created(name, new)
        elif new is None:
            yield Removed(name)
        elif old.version != new.version:
            yield Updated(name, old.version, new.version)


def render_change(event: ChangeEvent, options: DiffOptions) -> Optional[str]:
    """Render one change event as a digest line.

    Args:
        event: Change event
        options: Verbosity switches

    Returns:
        Rendered line, or None if the event is not shown
    """
    if isinstance(event, Created):
        output = f"{VERB_CREATED}：{event.name}"
        if options.show_publisher and event.entry.publisher:
            output += f" (@{event.entry.publisher})"
        if options.show_description:
            description = resolve_description(event.entry.description)
            if description:
                output += f"\n  {description}"
        return output

    if isinstance(event, Updated):
        return f"{VERB_UPDATED}：{event.name} ({event.old_version} → {event.new_version})"

    if isinstance(event, Removed) and options.show_deletion:
        return f"{VERB_REMOVED}：{event.name}"

    return None


def diff_snapshots(
    previous: Snapshot,
    current: Snapshot,
    options: Optional[DiffOptions] = None
) -> List[str]:
    """Compute the sorted change lines between two snapshots.

    Lines are ordered by their rendered text, not by package name.

    Args:
        previous: Snapshot from the last successful poll
        current: Freshly fetched snapshot
        options: Verbosity switches (defaults hide deletions and extras)

    Returns:
        Sorted list of rendered lines, empty if nothing changed
    """
    options = options or DiffOptions()
    lines = (render_change(event, options) for event in compute_changes(previous, current))
    return sorted(line for line in lines if line)


def build_digest(lines: List[str]) -> str:
    """Join change lines under the digest header."""
    return "\n".join([DIGEST_HEADER, *lines])
