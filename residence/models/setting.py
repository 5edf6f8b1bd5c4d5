from django.db import models


class SystemSetting(models.Model):
    key = models.CharField(max_length=50, unique=True)
    settings_json = models.JSONField(default=dict)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self) -> str:  # pragma: no cover - simple display helper
        return f"Settings ({self.key})"
