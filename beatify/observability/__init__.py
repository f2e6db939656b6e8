# noqa: D104 - package initialization
from .logging import configure_structured_logging  # noqa: F401
from .metrics import metrics_blueprint, record_fallback, record_provider_failure, record_provider_success  # noqa: F401
