from __future__ import annotations

import copy
from typing import Any

from django.utils import timezone

from ..models import SystemSetting

DEFAULT_RULES_HTML = """
<div class="rules">
    <h5>Timing Rules</h5>
    <ul>
        <li>Curfew time is 9:00 PM for all students.</li>
        <li>Quiet hours: 10:00 PM to 6:00 AM.</li>
        <li>Late return permissions must be pre-approved by the warden.</li>
    </ul>
    <h5>Cleanliness &amp; Maintenance</h5>
    <ul>
        <li>Keep rooms and common areas clean.</li>
        <li>Report maintenance issues using the app.</li>
        <li>No cooking inside rooms.</li>
    </ul>
    <h5>Discipline &amp; Conduct</h5>
    <ul>
        <li>Be respectful to staff and fellow students.</li>
        <li>No smoking, alcohol, or prohibited substances.</li>
        <li>Visitors are allowed only during designated hours.</li>
    </ul>
</div>
""".strip()

DEFAULT_SETTINGS: dict[str, Any] = {
    "application": {
        "applications_open": True,
        "eligibility": {"min_cgpa": 0, "max_keam_rank": 999999},
    },
    "rooms": {
        "default_capacity": 2,
        "allowed_statuses": ["Vacant", "Occupied", "Under Maintenance"],
    },
    "rules": {
        "html": DEFAULT_RULES_HTML,
        "updated_at": None,
        "updated_by": None,
    },
}


def deep_merge(target: dict[str, Any], source: dict[str, Any]) -> dict[str, Any]:
    for key, value in source.items():
        if isinstance(value, dict):
            if not isinstance(target.get(key), dict):
                target[key] = {}
            deep_merge(target[key], value)
        else:
            target[key] = value
    return target


class SettingsService:
    """Global system settings stored as one JSON row, merged over defaults."""

    key = "global"

    def settings(self) -> dict[str, Any]:
        merged = copy.deepcopy(DEFAULT_SETTINGS)
        row = SystemSetting.objects.filter(key=self.key).first()
        if row and row.settings_json:
            deep_merge(merged, row.settings_json)
        return merged

    def get(self, section: str, default: Any = None) -> Any:
        return self.settings().get(section, default)

    def update(self, partial: dict[str, Any]) -> dict[str, Any]:
        merged = deep_merge(self.settings(), partial)
        SystemSetting.objects.update_or_create(key=self.key, defaults={"settings_json": merged})
        return merged

    def update_rules(self, html: str, user) -> dict[str, Any]:
        merged = self.update(
            {
                "rules": {
                    "html": html,
                    "updated_at": timezone.now().isoformat(),
                    "updated_by": getattr(user, "id", None),
                }
            }
        )
        return merged["rules"]
