"""Reconcile a fresh socket sample against the displayed menu entries.

reconcile() is a pure function: it never touches the store or the UI.
It returns the new entry mapping together with the side effects the
poll loop must apply so the UI ends up showing exactly the new sample.
"""
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Dict, Iterable, List, Mapping, Tuple

from app.menu_state import MenuEntry
from config import UI
from monitor.sockets import ListeningSocket


class EffectKind(Enum):
    """UI change required for one entry."""
    CREATE = "create"   # create + show
    UPDATE = "update"   # update + show
    HIDE = "hide"


@dataclass(frozen=True)
class SideEffect:
    kind: EffectKind
    entry: MenuEntry


@dataclass
class ReconcileResult:
    entries: Dict[str, MenuEntry] = field(default_factory=dict)
    effects: List[SideEffect] = field(default_factory=list)

    @property
    def visible_count(self) -> int:
        return sum(1 for entry in self.entries.values() if entry.visible)


def entry_text(sock: ListeningSocket) -> Tuple[str, str]:
    """Title and tooltip displayed for a socket."""
    title = UI.ENTRY_TITLE_FORMAT.format(port=sock.port, name=sock.process_name)
    if sock.pid is None:
        tooltip = UI.UNKNOWN_PID_TOOLTIP
    else:
        tooltip = UI.ENTRY_TOOLTIP_FORMAT.format(pid=sock.pid)
    return title, tooltip


def reconcile(
    previous: Mapping[str, MenuEntry], sample: Iterable[ListeningSocket]
) -> ReconcileResult:
    """Compute the entries and UI effects for a new sample.

    - unseen identity: new visible entry, CREATE
    - known identity whose title, tooltip or visibility changed: UPDATE
    - known identity unchanged: no effect
    - visible entry missing from the sample: hidden entry, HIDE

    Duplicate identities in one sample keep the values of the last
    occurrence and produce at most one effect.
    """
    latest: Dict[str, ListeningSocket] = {}
    for sock in sample:
        # dict keeps first-seen order; later duplicates overwrite the value
        latest[sock.identity] = sock

    result = ReconcileResult(entries=dict(previous))

    for entry_id, sock in latest.items():
        title, tooltip = entry_text(sock)
        existing = previous.get(entry_id)

        if existing is None:
            entry = MenuEntry(id=entry_id, title=title, tooltip=tooltip, visible=True)
            result.effects.append(SideEffect(EffectKind.CREATE, entry))
        elif existing.visible and existing.title == title and existing.tooltip == tooltip:
            continue
        else:
            entry = replace(existing, title=title, tooltip=tooltip, visible=True)
            result.effects.append(SideEffect(EffectKind.UPDATE, entry))

        result.entries[entry_id] = entry

    for entry_id, existing in previous.items():
        if entry_id in latest or not existing.visible:
            continue
        hidden = replace(existing, visible=False)
        result.entries[entry_id] = hidden
        result.effects.append(SideEffect(EffectKind.HIDE, hidden))

    return result
