"""Entry routing and view state for the tournament front end."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional
from urllib.parse import parse_qs, urlsplit


class ViewMode(str, Enum):
    LANDING = "landing"
    ADMIN = "admin"
    LEADERBOARD = "leaderboard"
    SCORING = "scoring"


class AdminTab(str, Enum):
    PLAYERS = "players"
    FLIGHTS = "flights"
    COURSE = "course"
    RESULTS = "results"


ADMIN_PATHS: Dict[str, ViewMode] = {
    "/adminpage": ViewMode.ADMIN,
    "/adminscorepage": ViewMode.LEADERBOARD,
}

# Tabs whose content depends on live flight membership.
_ROSTER_TABS = {AdminTab.FLIGHTS}


@dataclass(frozen=True)
class EntryRoute:
    view: ViewMode
    token: Optional[str] = None


def resolve_entry(url: str) -> EntryRoute:
    parts = urlsplit(url or "")
    query = parse_qs(parts.query)
    token = (query.get("token") or [""])[0].strip()
    if token:
        return EntryRoute(ViewMode.SCORING, token)
    path = parts.path.rstrip("/") or "/"
    return EntryRoute(ADMIN_PATHS.get(path, ViewMode.LANDING))


@dataclass
class AppContext:
    view: ViewMode = ViewMode.LANDING
    admin_tab: AdminTab = AdminTab.PLAYERS
    token: Optional[str] = None

    @classmethod
    def from_url(cls, url: str) -> "AppContext":
        route = resolve_entry(url)
        return cls(view=route.view, token=route.token)

    def select_tab(self, tab: AdminTab) -> bool:
        """Switch admin tab; returns True when the roster must be reloaded."""

        changed = tab is not self.admin_tab
        self.admin_tab = tab
        return changed and tab in _ROSTER_TABS

    def enter_scoring(self, token: str) -> None:
        self.view = ViewMode.SCORING
        self.token = token


__all__ = [
    "ADMIN_PATHS",
    "AdminTab",
    "AppContext",
    "EntryRoute",
    "ViewMode",
    "resolve_entry",
]
