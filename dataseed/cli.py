from __future__ import annotations

import argparse
import json
import sys
from typing import Any, List, Optional

from .infra.config import load_runtime_profile
from .infra.errors import InfraError, StepExecutionError
from .infra.factory import build_seed_infra
from .infra.models import IgnoreSettings, Response

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_CONFIG = 2


def _ignore_settings(args: argparse.Namespace) -> IgnoreSettings:
    return IgnoreSettings(
        hash_mismatch=bool(getattr(args, "ignore_hash_mismatch", False)),
        out_of_order=bool(getattr(args, "ignore_out_of_order", False)),
    )


def _echo_stderr(msg: str) -> None:
    print(msg, file=sys.stderr)


def _runner(args: argparse.Namespace):
    profile = load_runtime_profile(args.profile)
    return build_seed_infra(profile).runner(echo=_echo_stderr)


def _to_jsonable(data: Any) -> Any:
    if isinstance(data, list):
        return [_to_jsonable(x) for x in data]
    if hasattr(data, "to_dict"):
        return data.to_dict()
    return data


def _finish(res: Response) -> int:
    if not res.success:
        for e in res.errors:
            print(e.render(), file=sys.stderr)
        return EXIT_FAILED
    if res.data is not None:
        print(json.dumps(_to_jsonable(res.data), indent=2, ensure_ascii=False))
    return EXIT_OK


def cmd_status(args: argparse.Namespace) -> int:
    return _finish(_runner(args).get_step_summaries())


def cmd_validate(args: argparse.Namespace) -> int:
    return _finish(_runner(args).validate_steps(_ignore_settings(args)))


def cmd_validate_step(args: argparse.Namespace) -> int:
    return _finish(_runner(args).validate_step(args.order, _ignore_settings(args)))


def cmd_run(args: argparse.Namespace) -> int:
    return _finish(_runner(args).run())


def cmd_run_step(args: argparse.Namespace) -> int:
    return _finish(_runner(args).run_step(args.order, _ignore_settings(args)))


def _add_ignore_flags(sp: argparse.ArgumentParser) -> None:
    sp.add_argument("--ignore-hash-mismatch", action="store_true", help="Do not fail on content changed after a step ran")
    sp.add_argument("--ignore-out-of-order", action="store_true", help="Do not fail on steps older than the latest completed one")


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="dataseed")
    p.add_argument("--profile", default=None, help="Runtime profile YAML (default: $DATASEED_PROFILE or ./dataseed.yml)")
    sub = p.add_subparsers(dest="cmd", required=True)

    sp = sub.add_parser("status", help="Show every step with its status")
    sp.set_defaults(func=cmd_status)

    sp = sub.add_parser("validate", help="Validate all step definitions without running them")
    _add_ignore_flags(sp)
    sp.set_defaults(func=cmd_validate)

    sp = sub.add_parser("validate-step", help="Validate a single step")
    sp.add_argument("order", type=int)
    _add_ignore_flags(sp)
    sp.set_defaults(func=cmd_validate_step)

    sp = sub.add_parser("run", help="Run every pending step in order")
    sp.set_defaults(func=cmd_run)

    sp = sub.add_parser("run-step", help="Run a single pending step")
    sp.add_argument("order", type=int)
    _add_ignore_flags(sp)
    sp.set_defaults(func=cmd_run_step)

    return p


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        return int(args.func(args) or 0)
    except StepExecutionError as e:
        print(f"[dataseed] step {e.order} failed: {e}", file=sys.stderr)
        return EXIT_FAILED
    except InfraError as e:
        print(f"[dataseed] ERROR: {e}", file=sys.stderr)
        return EXIT_CONFIG


if __name__ == "__main__":
    raise SystemExit(main())
