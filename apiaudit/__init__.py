"""apiaudit — REST API design audit for declared web-service endpoints."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("apiaudit")
except PackageNotFoundError:
    __version__ = "0.0.0.dev0"

from .engine import get_report, run_audit  # noqa: E402
from .report import Audit, AuditStatus, Report  # noqa: E402

__all__ = ["Audit", "AuditStatus", "Report", "get_report", "run_audit", "__version__"]
