# Core module for refmirror

from refmirror.core.exceptions import (
    ConfigError,
    MirrorError,
    RefMirrorError,
    RepositoryError,
)
from refmirror.core.models import (
    DEFAULT_BRANCH,
    HEAD_REF,
    MirrorResult,
    Ref,
    RefSpec,
)

__all__ = [
    # Exceptions
    "ConfigError",
    "MirrorError",
    "RefMirrorError",
    "RepositoryError",
    # Models
    "DEFAULT_BRANCH",
    "HEAD_REF",
    "MirrorResult",
    "Ref",
    "RefSpec",
]
