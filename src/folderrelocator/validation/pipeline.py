"""Runs the pre-move checks in stages and collects every problem found."""

from ..config.models import RelocatorConfig
from ..core.request import MoveRequest
from ..utils.logging import get_logger
from .capacity import CapacityChecker
from .deep_scan import DeepPermissionScanner
from .existence import ExistenceChecker
from .path_format import PathFormatValidator
from .permissions import PermissionProbe
from .policy import PolicyGuard, default_denied_paths
from .report import ValidationReport

logger = get_logger(__name__)


class ValidationPipeline:
    """
    Validates a move request before anything destructive happens.

    Stages:
        1. path format, policy, existence
        2. permission probe
        3. capacity, deep permission scan (when requested)

    Problems within a stage are all collected. A stage only runs when every
    earlier stage came back clean, since it relies on what they establish.
    """

    def __init__(
        self,
        path_format: PathFormatValidator | None = None,
        policy: PolicyGuard | None = None,
        existence: ExistenceChecker | None = None,
        permissions: PermissionProbe | None = None,
        capacity: CapacityChecker | None = None,
        deep_scan: DeepPermissionScanner | None = None,
    ):
        self.path_format = path_format or PathFormatValidator()
        self.policy = policy or PolicyGuard()
        self.existence = existence or ExistenceChecker()
        self.permissions = permissions or PermissionProbe()
        self.capacity = capacity or CapacityChecker()
        self.deep_scan = deep_scan or DeepPermissionScanner()

    @classmethod
    def from_config(cls, config: RelocatorConfig) -> "ValidationPipeline":
        """Build a pipeline with checkers tuned by configuration."""
        denied = None
        if config.extra_denied_paths:
            denied = default_denied_paths() + [str(p) for p in config.extra_denied_paths]

        return cls(
            path_format=PathFormatValidator(config.path_pattern),
            policy=PolicyGuard(denied_paths=denied, match_subpaths=config.match_denied_subpaths),
            deep_scan=DeepPermissionScanner(config.deep_scan_workers),
        )

    def validate(self, request: MoveRequest) -> ValidationReport:
        """
        Check a request and return everything wrong with it.

        Args:
            request: The relocation to check

        Returns:
            ValidationReport; empty when the move may proceed
        """
        source, destination = request.source, request.destination
        report = ValidationReport()
        logger.info(f"Validating move {source} -> {destination}")

        report.extend(self.path_format.check(source, destination))
        report.extend(self.policy.check(source, request.safe_mode))
        report.extend(self.existence.check(source, destination))
        if report:
            return self._finish(report)

        report.extend(self.permissions.check(source, destination))
        if report:
            return self._finish(report)

        report.extend(self.capacity.check(source, destination))
        if request.deep_permission_check:
            report.extend(self.deep_scan.check(source))

        return self._finish(report)

    @staticmethod
    def _finish(report: ValidationReport) -> ValidationReport:
        if report.is_clean:
            logger.info("Validation passed")
        else:
            logger.warning(f"Validation found {len(report)} problem(s)")
        return report


def validate_request(request: MoveRequest, config: RelocatorConfig | None = None) -> ValidationReport:
    """Validate a request with a pipeline built from ``config`` (defaults when None)."""
    pipeline = ValidationPipeline.from_config(config or RelocatorConfig())
    return pipeline.validate(request)
