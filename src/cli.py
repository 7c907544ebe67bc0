"""
Command-line interface for image-sizes.

Reports the container images of Kubernetes pods with their manifest digest
and total layer size, for a single pod, a namespace, or the whole cluster.
Reports go to stdout (table, JSON or YAML); logs go to stderr.
"""

import argparse
import logging
import signal
import sys
from typing import Optional, TextIO

from constants import (
    DEFAULT_INSPECTOR_BACKEND,
    DEFAULT_MAX_WORKERS,
    DEFAULT_OUTPUT_FORMAT,
    INSPECTOR_BACKENDS,
    MANIFEST_INSPECT_TIMEOUT,
    OUTPUT_FORMATS,
)
from core.aggregator import ReportAggregator
from core.cache import ResolutionCache
from core.cancellation import CancellationToken
from core.config import ScanConfig
from core.error_classification import ErrorClassifier
from core.exceptions import (
    ClusterQueryFailed,
    ConfigurationException,
    ImageSizesException,
    PodReportFailed,
    ScanCancelled,
    ValidationException,
)
from core.resolver import ImageResolver
from integrations.kubernetes import KubectlCluster, KubernetesConfig
from outputs import get_generator
from utils.docker_utils import DockerManifestInspector
from utils.logging_helpers import log_error_section

logger = logging.getLogger(__name__)

EXIT_CANCELLED = 130


def setup_logging(verbose: bool = False):
    """Configure logging."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(levelname)s - %(message)s",
        datefmt="%H:%M:%S",
        stream=sys.stderr,
    )


def parse_args(args: Optional[list[str]] = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        prog="image-sizes",
        description="Show image digests and sizes for the containers of Kubernetes pods",
    )

    cluster_group = parser.add_argument_group("cluster options")
    scope_group = parser.add_argument_group("scope")
    scan_group = parser.add_argument_group("scan options")

    cluster_group.add_argument("--kubeconfig", default=None, help="Path to kubeconfig file.")
    cluster_group.add_argument("--context", default=None, help="Kubernetes context to use.")

    scope_group.add_argument("-n", "--namespace", default=None, help="Namespace to inspect.")
    scope_group.add_argument("-A", "--all-namespaces", action="store_true", help="Inspect pods in all namespaces.")
    scope_group.add_argument("-p", "--pod", default=None, help="Inspect a single pod.")

    parser.add_argument("-o", "--output", type=str.lower, choices=OUTPUT_FORMATS, default=DEFAULT_OUTPUT_FORMAT, help="Output format.")

    scan_group.add_argument("--max-workers", type=int, default=DEFAULT_MAX_WORKERS, help="Pods resolved in parallel.")
    scan_group.add_argument("--timeout", type=float, default=None, help="Overall scan timeout in seconds.")
    scan_group.add_argument("--inspection-timeout", type=float, default=MANIFEST_INSPECT_TIMEOUT, help="Timeout per manifest inspection.")
    scan_group.add_argument("--inspector", choices=INSPECTOR_BACKENDS, default=DEFAULT_INSPECTOR_BACKEND, help="Manifest inspection tool.")
    scan_group.add_argument("--no-cache", action="store_true", help="Disable the resolution cache.")

    parser.add_argument("-v", "--verbose", action="store_true", help="Enable verbose logging.")

    parsed = parser.parse_args(args)
    if parsed.all_namespaces and parsed.pod:
        parser.error("--all-namespaces cannot be combined with --pod")
    return parsed


def run(args: argparse.Namespace, stream: Optional[TextIO] = None) -> int:
    """
    Run a report for the parsed arguments.

    Args:
        args: Parsed arguments
        stream: Where the rendered report is written (stdout by default)

    Returns:
        Process exit code
    """
    config = ScanConfig(
        max_workers=args.max_workers,
        timeout=args.timeout,
        inspection_timeout=args.inspection_timeout,
        inspector_backend=args.inspector,
    )

    try:
        config.validate()
        generator = get_generator(args.output)
        inspector = DockerManifestInspector(config.inspector_backend, config.inspection_timeout)
    except (ValidationException, ConfigurationException) as e:
        log_error_section("Invalid configuration.", [str(e)], logger=logger)
        return 1

    cache = ResolutionCache(enabled=not args.no_cache)
    resolver = ImageResolver(inspector, cache)
    cluster = KubectlCluster(KubernetesConfig(kubeconfig=args.kubeconfig, context=args.context))
    aggregator = ReportAggregator(resolver, cluster, config)

    token = CancellationToken()

    def handle_interrupt(signum, frame):
        logger.warning("Interrupted; stopping outstanding inspections")
        token.cancel("interrupted")

    previous_handler = signal.signal(signal.SIGINT, handle_interrupt)
    try:
        if args.pod:
            reports = [aggregator.report_pod(args.pod, args.namespace, cancel_token=token)]
            cancelled = False
        else:
            result = aggregator.scan(args.namespace, args.all_namespaces, cancel_token=token)
            reports = result.sorted_reports()
            cancelled = result.cancelled
    except PodReportFailed as e:
        classified = ErrorClassifier.classify(e)
        log_error_section(
            f"Failed to report on pod {e.namespace}/{e.pod_name}.",
            [str(e), f"Category: {classified.category.value}"],
            logger=logger,
        )
        return 1
    except ClusterQueryFailed as e:
        log_error_section("Cluster query failed.", [str(e)], logger=logger)
        return 1
    except ScanCancelled as e:
        logger.warning(f"Cancelled: {e}")
        return EXIT_CANCELLED
    except ImageSizesException as e:
        logger.error(f"image-sizes failed: {e}")
        return 1
    finally:
        signal.signal(signal.SIGINT, previous_handler)

    generator.generate(reports, stream or sys.stdout)
    logger.info(cache.summary())
    logger.debug(f"Manifest inspections: {inspector.inspection_count}")

    return EXIT_CANCELLED if cancelled else 0


def main():
    """Main entry point."""
    args = parse_args()
    setup_logging(args.verbose)
    sys.exit(run(args))


if __name__ == "__main__":
    main()
