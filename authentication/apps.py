import logging

from django.apps import AppConfig

logger = logging.getLogger(__name__)


class AuthenticationConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "authentication"

    def ready(self):
        """
        Initialize tracing once the app registry is ready.
        """
        from django.conf import settings

        from authentication.infra.observability.tracing import setup_tracing

        setup_tracing(
            service_name=getattr(settings, "OTEL_SERVICE_NAME", "secondhand-backend"),
            enable=getattr(settings, "OTEL_TRACING_ENABLED", False),
            export_to_console=getattr(settings, "DEBUG", False),
        )
