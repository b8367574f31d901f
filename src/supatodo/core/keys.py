# src/supatodo/core/keys.py

"""
Keyboard contract shared by the create and edit inputs.

Enter commits, but only unmodified: Shift+Enter inserts a newline and any
other modifier also suppresses the commit.
Escape aborts an active edit.
"""

from __future__ import annotations

from dataclasses import dataclass

ENTER = "Enter"
ESCAPE = "Escape"


@dataclass(slots=True, frozen=True)
class KeyEvent:
    key: str
    shift: bool = False
    ctrl: bool = False
    alt: bool = False
    meta: bool = False


def is_commit(event: KeyEvent) -> bool:
    return event.key == ENTER and not (event.shift or event.ctrl or event.alt or event.meta)


def is_cancel(event: KeyEvent) -> bool:
    return event.key == ESCAPE
