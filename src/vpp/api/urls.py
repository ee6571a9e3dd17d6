"""URL helpers for post-action navigation."""

from typing import Any, Mapping, Optional
from urllib.parse import urlencode

SOFTWARE_PATH = "/software/titles"
ENABLE_VPP_PATH = "/settings/integrations/vpp"


def build_query_string(params: Mapping[str, Any]) -> str:
    """Encode query parameters the way the web UI expects.

    Booleans render as ``true``/``false`` and ``None`` values are dropped.
    """
    encoded: list[tuple[str, str]] = []
    for key, value in params.items():
        if value is None:
            continue
        if isinstance(value, bool):
            value = "true" if value else "false"
        encoded.append((key, str(value)))
    return urlencode(encoded)


def software_titles_url(team_id: int, available_for_install: Optional[bool] = True) -> str:
    """Listing view filtered to a team's installable software."""
    query = build_query_string(
        {"team_id": team_id, "available_for_install": available_for_install}
    )
    return f"{SOFTWARE_PATH}?{query}" if query else SOFTWARE_PATH
