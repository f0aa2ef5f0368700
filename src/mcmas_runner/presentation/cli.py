"""CLI interface for batch model verification."""
import sys
import logging
import argparse
from pathlib import Path
from typing import List, Optional, Sequence

from mcmas_runner import __version__
from mcmas_runner.application.orchestrator import BatchOrchestrator
from mcmas_runner.domain.exceptions import DomainException
from mcmas_runner.domain.protocols import ICatalogScanner
from mcmas_runner.infrastructure.catalog import ModelScanner
from mcmas_runner.infrastructure.config import ConfigLoader, VerifierConfig, ResolvedPaths, resolve_paths
from mcmas_runner.infrastructure.process import ProcessRunner
from mcmas_runner.infrastructure.storage import CaptureStorage, VerificationRecordStore
from mcmas_runner.shared.logging import setup_logger, LoggerAdapter, get_logger
from mcmas_runner.shared.metrics import MetricsCollector

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_INTERRUPTED = 130


def create_orchestrator_from_config(
    config: VerifierConfig,
    paths: ResolvedPaths,
    store: VerificationRecordStore
) -> BatchOrchestrator:
    """Create orchestrator with all dependencies from config."""
    runner = ProcessRunner(
        capture_storage=CaptureStorage(config.scratch_dir),
        settle_seconds=config.settle_seconds,
    )

    return BatchOrchestrator(
        executable=paths.executable,
        runner=runner,
        store=store,
        logger=LoggerAdapter(get_logger('mcmas_runner.orchestrator')),
        metrics=MetricsCollector(),
    )


def parse_selection(text: str, count: int) -> List[int]:
    """
    Turn a 1-based selection such as ``"1,3-5"`` into sorted 0-based indices.

    Raises:
        ValueError: On malformed input or numbers outside 1..count
    """
    indices = set()
    for part in text.split(','):
        part = part.strip()
        if not part:
            continue
        if '-' in part:
            low_text, high_text = part.split('-', 1)
            low, high = int(low_text), int(high_text)
            if low > high:
                raise ValueError(f"Invalid range: {part}")
        else:
            low = high = int(part)
        if low < 1 or high > count:
            raise ValueError(f"Please enter a number between 1 and {count}")
        indices.update(range(low - 1, high))
    return sorted(indices)


def load_catalog(
    config: VerifierConfig,
    paths: ResolvedPaths,
    scanner: Optional[ICatalogScanner] = None
) -> VerificationRecordStore:
    """Scan the models folder into a fresh record store."""
    scanner = scanner or ModelScanner(config.file_extension)
    store = VerificationRecordStore()
    store.reconcile(scanner.scan(paths.models_dir))
    return store


def apply_selection(store: VerificationRecordStore, args: argparse.Namespace) -> None:
    """Mark the items chosen on the command line as selected."""
    if args.all:
        store.select_all()
        return

    items = store.items()
    if args.select:
        for index in parse_selection(args.select, len(items)):
            store.set_selected(items[index].item_id, True)

    if args.files:
        by_name = {item.name: item for item in items}
        for name in args.files:
            item = by_name.get(Path(name).name)
            if item is None:
                raise DomainException(f"Model file not found in catalog: {name}")
            store.set_selected(item.item_id, True)


def build_parser() -> argparse.ArgumentParser:
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument('--config', type=Path, help='Config YAML file (default: ./mcmas.yaml)')
    common.add_argument('--models-dir', type=Path, help='Folder containing model files')
    common.add_argument('--executable', type=Path, help='Verifier binary')
    common.add_argument('--extension', help='Model file extension (default: .ispl)')
    common.add_argument('--log-file', type=Path, help='Also write logs to this file')
    common.add_argument('--verbose', '-v', action='store_true', help='Verbose')

    parser = argparse.ArgumentParser(
        prog='mcmas-batch',
        description="Batch verification of model files with an external model checker",
    )
    parser.add_argument('--version', action='version', version=f'%(prog)s {__version__}')
    commands = parser.add_subparsers(dest='command', required=True)

    commands.add_parser('list', parents=[common], help='List available model files')

    run = commands.add_parser('run', parents=[common], help='Verify model files')
    run.add_argument('files', nargs='*', help='Model file names to verify')
    run.add_argument('--all', '-a', action='store_true', help='Verify every model file')
    run.add_argument('--select', '-s', help='Numbers from "list", e.g. 1,3-5')
    run.add_argument('--timeout', type=float, help='Per-file timeout in seconds (default: 10)')
    run.add_argument('--success-marker', help='Output text required for a pass')
    run.add_argument('--failure-marker', help='Output text that forces a failure')
    run.add_argument('--quiet', '-q', action='store_true', help='Only print the final summary')

    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    log_level = logging.DEBUG if args.verbose else logging.INFO
    setup_logger('mcmas_runner', level=log_level, log_file=args.log_file)
    logger = get_logger('mcmas_runner.cli')

    try:
        overrides = {
            'executable': args.executable,
            'models_dir': args.models_dir,
            'file_extension': args.extension,
            'log_file': args.log_file,
            'timeout_seconds': getattr(args, 'timeout', None),
            'success_marker': getattr(args, 'success_marker', None),
            'failure_marker': getattr(args, 'failure_marker', None),
        }
        config = ConfigLoader(config_path=args.config).load(overrides=overrides)
        if config.log_file and not args.log_file:
            setup_logger('mcmas_runner', level=log_level, log_file=config.log_file)

        paths = resolve_paths(config)
        store = load_catalog(config, paths)

        if args.command == 'list':
            items = store.items()
            if not items:
                print(f"No *{config.file_extension} files in {paths.models_dir}")
            for number, item in enumerate(items, start=1):
                print(f"{number:2d}) {item.name}")
            return EXIT_OK

        apply_selection(store, args)

        logger.info("=" * 60)
        logger.info(f"MCMAS batch runner v{__version__}")
        logger.info(f"Verifier: {paths.executable}")
        logger.info(f"Models: {paths.models_dir}")
        logger.info(f"Selected: {store.selected_count} of {len(store)}")
        logger.info("=" * 60)

        if not args.quiet:
            store.add_listener(lambda text: print(text, end='', flush=True))

        orchestrator = create_orchestrator_from_config(config, paths, store)
        summary = orchestrator.run_batch(store.selected(), config.to_batch_config())

        if args.quiet and not summary.is_empty:
            print(
                f"Passed: {summary.passed} | Failed: {summary.failed} | "
                f"Timeout: {summary.timed_out} ({summary.elapsed_seconds:.2f}s)"
            )

        if summary.cancelled:
            return EXIT_INTERRUPTED
        if summary.is_empty or summary.all_passed:
            return EXIT_OK
        return EXIT_FAILURE

    except DomainException as e:
        logger.error(f"Error: {e}")
        return EXIT_FAILURE
    except ValueError as e:
        logger.error(f"❌ Error: {e}")
        return EXIT_FAILURE
    except KeyboardInterrupt:
        logger.warning("Interrupted")
        return EXIT_INTERRUPTED


if __name__ == '__main__':
    sys.exit(main())
