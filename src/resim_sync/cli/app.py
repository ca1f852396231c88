"""CLI app entrypoint and error mapping."""

from __future__ import annotations

import sys

from resim_sync import (
    ApiError,
    ApplyError,
    ApplyPhaseError,
    AuthenticationError,
    ConfigError,
    FetchError,
    PlanningError,
    SyncCancelledError,
)

EXIT_OK = 0
EXIT_REJECTED = 1
EXIT_APPLY_FAILED = 2
EXIT_CANCELLED = 3


def main(argv: list[str] | None = None) -> int:
    import resim_sync.cli as cli

    parser = cli.build_parser()
    args = parser.parse_args(argv)

    level = cli.logging.INFO if args.verbose else cli.logging.WARNING
    cli.logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s", stream=sys.stderr)

    try:
        cli.asyncio.run(cli._run_sync(args))
        return EXIT_OK
    except (ConfigError, AuthenticationError, FetchError, PlanningError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return EXIT_REJECTED
    except (ApplyPhaseError, ApplyError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        print("error: the project was partially updated; re-run to apply the remaining changes", file=sys.stderr)
        return EXIT_APPLY_FAILED
    except SyncCancelledError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return EXIT_CANCELLED
    except KeyboardInterrupt:
        print("error: interrupted", file=sys.stderr)
        return EXIT_CANCELLED
    except ApiError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return EXIT_REJECTED
    except Exception as exc:  # pragma: no cover - defensive fallback
        print(f"error: {exc}", file=sys.stderr)
        return EXIT_REJECTED


__all__ = ["EXIT_APPLY_FAILED", "EXIT_CANCELLED", "EXIT_OK", "EXIT_REJECTED", "main"]
