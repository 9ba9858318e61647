from datetime import datetime

from django.utils import timezone


class RelogioSistema:
    """Relógio real (timezone-aware quando USE_TZ está ligado)."""

    def agora(self) -> datetime:
        return timezone.now()
