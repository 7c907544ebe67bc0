"""
Pod report aggregation.

Walks pods container by container, resolves every image, and assembles
PodReports. A container failure rejects its whole pod; at namespace or
cluster scope a rejected pod is skipped with a warning and the scan goes on.
"""

import logging
import threading
import time
from collections import defaultdict
from concurrent.futures import FIRST_COMPLETED, Future, ThreadPoolExecutor, wait
from typing import Optional

from constants import CANCEL_POLL_INTERVAL
from core.cancellation import CancellationToken
from core.config import ScanConfig
from core.error_classification import ErrorCategory, ErrorClassifier
from core.exceptions import (
    CONTAINER_ERRORS,
    ImageSizesException,
    NodeLookupFailed,
    PodReportFailed,
    ScanCancelled,
)
from core.interfaces import ClusterClient
from core.models import PodReport, PodSpec, ScanResult, ScanWarning
from core.resolver import ImageResolver
from utils.logging_helpers import log_warning_section

logger = logging.getLogger(__name__)


class ReportAggregator:
    """
    Builds pod reports from cluster listings.

    Pods are independent, so namespace and cluster scans resolve them on a
    bounded thread pool. Containers within a pod are resolved sequentially
    in declared order, init containers first.
    """

    def __init__(
        self,
        resolver: ImageResolver,
        cluster: ClusterClient,
        config: Optional[ScanConfig] = None,
    ):
        """
        Initialize aggregator.

        Args:
            resolver: Image resolver (owns the run's resolution cache)
            cluster: Cluster access for pods and node architectures
            config: Scan settings (defaults if omitted)
        """
        self.resolver = resolver
        self.cluster = cluster
        self.config = config or ScanConfig()

    def build_pod_report(
        self,
        pod: PodSpec,
        cancel_token: Optional[CancellationToken] = None,
    ) -> PodReport:
        """
        Resolve every container of a pod.

        Args:
            pod: Pod to report on
            cancel_token: Token that aborts outstanding inspections

        Returns:
            PodReport with one record per container, init containers first

        Raises:
            PodReportFailed: If any container fails; no partial report is returned
            ScanCancelled: If the scan was cancelled
        """
        containers = list(pod.all_containers)
        architecture, node_error = self._lookup_architecture(pod, containers, cancel_token)

        images = []
        for container in containers:
            try:
                record = self.resolver.resolve(
                    container.image,
                    container.name,
                    architecture,
                    cancel_token=cancel_token,
                )
            except NodeLookupFailed as e:
                # Report why the node had no architecture, not just that it was missing
                raise PodReportFailed(
                    pod.name, pod.namespace, container.name, container.image, node_error or e
                ) from e
            except CONTAINER_ERRORS as e:
                raise PodReportFailed(
                    pod.name, pod.namespace, container.name, container.image, e
                ) from e
            images.append(record)

        return PodReport(pod_name=pod.name, namespace=pod.namespace, images=tuple(images))

    def _lookup_architecture(
        self,
        pod: PodSpec,
        containers: list,
        cancel_token: Optional[CancellationToken],
    ) -> tuple[Optional[str], Optional[NodeLookupFailed]]:
        """
        Look up the node architecture once per pod.

        A failed lookup is not fatal by itself: digest-pinned and
        single-architecture images resolve without it.
        """
        if not containers:
            return None, None

        if not pod.node_name:
            return None, NodeLookupFailed(None, f"pod {pod.namespace}/{pod.name} is not scheduled")

        try:
            return self.cluster.get_node_architecture(pod.node_name, cancel_token=cancel_token), None
        except NodeLookupFailed as e:
            logger.debug(f"Node lookup failed for pod {pod.namespace}/{pod.name}: {e}")
            return None, e

    def report_pod(
        self,
        name: str,
        namespace: Optional[str] = None,
        cancel_token: Optional[CancellationToken] = None,
    ) -> PodReport:
        """
        Report on a single pod. Any failure is fatal.

        The configured timeout cancels the token, which aborts the
        inspection in flight.

        Raises:
            ClusterQueryFailed: If the pod cannot be fetched
            PodReportFailed: If any container fails to resolve
            ScanCancelled: If the token is cancelled or the timeout elapses
        """
        token = cancel_token or CancellationToken()
        timer = None
        if self.config.timeout:
            timer = threading.Timer(
                self.config.timeout,
                token.cancel,
                args=(f"report timed out after {self.config.timeout}s",),
            )
            timer.daemon = True
            timer.start()

        try:
            pod = self.cluster.get_pod(name, namespace, cancel_token=token)
            return self.build_pod_report(pod, token)
        finally:
            if timer is not None:
                timer.cancel()

    def scan(
        self,
        namespace: Optional[str] = None,
        all_namespaces: bool = False,
        cancel_token: Optional[CancellationToken] = None,
    ) -> ScanResult:
        """
        Report on every pod in a namespace or across the cluster.

        Failing pods are skipped with a warning. When the scan is cancelled
        (token set, or the configured timeout elapses) outstanding
        inspections are aborted and the reports completed so far are
        returned.

        Args:
            namespace: Namespace to scan (None for the current context's)
            all_namespaces: Scan every namespace
            cancel_token: Token that stops the scan when set

        Returns:
            ScanResult with reports sorted by (namespace, pod name)

        Raises:
            ClusterQueryFailed: If the pod listing itself fails
        """
        token = cancel_token or CancellationToken()
        pods = self.cluster.list_pods(namespace, all_namespaces, cancel_token=token)

        scope = "all namespaces" if all_namespaces else f"namespace {namespace or '(current)'}"
        logger.info(
            f"Resolving images for {len(pods)} pods in {scope} "
            f"with {self.config.max_workers} workers"
        )

        reports: list[PodReport] = []
        warnings: list[ScanWarning] = []
        deadline = time.monotonic() + self.config.timeout if self.config.timeout else None

        executor = ThreadPoolExecutor(max_workers=self.config.max_workers)
        future_to_pod = {
            executor.submit(self.build_pod_report, pod, token): pod
            for pod in pods
        }
        pending = set(future_to_pod)
        completed = 0

        try:
            while pending and not token.cancelled:
                done, pending = wait(
                    pending, timeout=CANCEL_POLL_INTERVAL, return_when=FIRST_COMPLETED
                )
                for future in done:
                    self._collect(future, future_to_pod[future], reports, warnings)
                    completed += 1
                    logger.debug(f"Progress: {completed}/{len(pods)} pods completed")

                if pending and deadline is not None and time.monotonic() >= deadline:
                    token.cancel(f"scan timed out after {self.config.timeout}s")
        finally:
            if pending:
                token.cancel()
                for future in pending:
                    future.cancel()
            executor.shutdown(wait=True)

        for future in pending:
            if not future.cancelled():
                self._collect(future, future_to_pod[future], reports, warnings)

        cancelled = token.cancelled and bool(pending)
        if cancelled:
            logger.warning(
                f"Scan cancelled ({token.reason}); returning {len(reports)} of {len(pods)} pod reports"
            )

        logger.info(f"Scan complete: {len(reports)} pods reported, {len(warnings)} skipped")
        self._display_failure_summary(warnings)

        reports.sort(key=lambda r: (r.namespace, r.pod_name))
        return ScanResult(
            reports=tuple(reports),
            warnings=tuple(warnings),
            cancelled=cancelled,
        )

    def _collect(
        self,
        future: Future,
        pod: PodSpec,
        reports: list[PodReport],
        warnings: list[ScanWarning],
    ) -> None:
        """Move a finished pod future into reports or warnings."""
        try:
            reports.append(future.result())
        except ScanCancelled:
            logger.debug(f"Pod {pod.namespace}/{pod.name} cancelled before completion")
        except ImageSizesException as e:
            classified = ErrorClassifier.classify(e)
            logger.warning(f"Skipping pod {pod.namespace}/{pod.name}: {e}")
            warnings.append(
                ScanWarning(
                    pod_name=pod.name,
                    namespace=pod.namespace,
                    message=str(e),
                    category=classified.category.value,
                )
            )

    def _display_failure_summary(self, warnings: list[ScanWarning]) -> None:
        """Display categorized summary of skipped pods."""
        if not warnings:
            return

        categories: dict[str, list[ScanWarning]] = defaultdict(list)
        for warning in warnings:
            categories[warning.category].append(warning)

        advice = {
            ErrorCategory.NOT_FOUND.value: "→ Verify image names and tags",
            ErrorCategory.AUTH.value: "→ Run: docker login <registry>",
            ErrorCategory.RATE_LIMIT.value: "→ Wait a few minutes and retry, or lower --max-workers",
            ErrorCategory.NETWORK.value: "→ Check registry connectivity or raise --inspection-timeout",
            ErrorCategory.ARCHITECTURE_MISMATCH.value: "→ Image is not published for the node's architecture",
            ErrorCategory.MALFORMED_MANIFEST.value: "→ Registry returned a manifest that is not valid JSON",
            ErrorCategory.NODE_LOOKUP.value: "→ Check that the pod is scheduled and its node is readable",
        }

        messages = []
        for category in sorted(categories):
            skipped = categories[category]
            messages.append(f"{category} ({len(skipped)} pods):")
            messages.extend(f"    {w.namespace}/{w.pod_name}" for w in skipped)
            if category in advice:
                messages.append(f"  {advice[category]}")
            messages.append("")

        log_warning_section(
            f"Failure Summary: {len(warnings)} pods skipped",
            messages[:-1],
            logger=logger,
        )


__all__ = ["ReportAggregator"]
