"""mailgate: email address validation with multi-provider reputation checks."""

from .checks import (
    Check,
    DisposableEmailCheck,
    DomainCheck,
    FormatCheck,
    MxRecordCheck,
)
from .config import (
    ProviderConfigSet,
    ReputationProviderConfig,
    Settings,
    load_providers,
)
from .errors import (
    CacheError,
    ConfigurationError,
    MailgateError,
    MalformedResponseError,
    TransportError,
)
from .models import CheckResult, Verdict
from .pipeline import CheckPipeline
from .reputation import ReputationOrchestrator, ReputationQuery, SpamDatabaseCheck

__all__ = [
    "CacheError",
    "Check",
    "CheckPipeline",
    "CheckResult",
    "ConfigurationError",
    "DisposableEmailCheck",
    "DomainCheck",
    "FormatCheck",
    "MailgateError",
    "MalformedResponseError",
    "MxRecordCheck",
    "ProviderConfigSet",
    "ReputationOrchestrator",
    "ReputationProviderConfig",
    "ReputationQuery",
    "Settings",
    "SpamDatabaseCheck",
    "TransportError",
    "Verdict",
    "load_providers",
]
