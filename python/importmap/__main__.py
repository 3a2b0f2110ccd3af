"""CLI entry point: python3 -m importmap

Modes:
  --command/--project/--args  Single-shot run against the project's JSON cache
  --sidecar                   Persistent stdin/stdout JSON-RPC loop with an
                              in-memory cache shared across requests
"""

import argparse
import json
import logging
import sys
import traceback


def main():
    parser = argparse.ArgumentParser(
        prog="importmap",
        description="Incremental import dependency extraction",
    )
    parser.add_argument("--sidecar", action="store_true",
                        help="Run as persistent sidecar (stdin/stdout JSON-RPC)")
    parser.add_argument("--command", help="Command to run (process, imports)")
    parser.add_argument("--project", help="Project path")
    parser.add_argument("--args", default="{}", help="JSON-encoded arguments")
    parser.add_argument("-v", "--verbose", action="store_true",
                        help="Log per-file progress to stderr")
    args = parser.parse_args()

    logging.basicConfig(
        stream=sys.stderr,
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.sidecar:
        _run_sidecar()
    else:
        if not args.command or not args.project:
            parser.error("--command and --project are required (or use --sidecar)")
        _run_single(args)


def _run_single(args):
    """Single-shot mode."""
    try:
        extra_args = json.loads(args.args)
    except json.JSONDecodeError as e:
        _error_exit("InvalidArgs", f"Failed to parse --args JSON: {e}")

    try:
        from .analyze import dispatch
        result = dispatch(args.command, args.project, extra_args)
        json.dump(result, sys.stdout)
        sys.stdout.write("\n")
    except FileNotFoundError as e:
        _error_exit("FileNotFoundError", str(e))
    except SyntaxError as e:
        _error_exit("SyntaxError", f"{e.filename}:{e.lineno}: {e.msg}")
    except Exception as e:
        _error_exit(type(e).__name__, str(e))


def _run_sidecar():
    """Persistent sidecar: read JSON requests from stdin, write responses to stdout."""
    from .analyze import dispatch
    from .cache_store import InMemoryCacheManager

    # One cache per project, kept for the lifetime of the sidecar
    caches: dict[str, InMemoryCacheManager] = {}

    # Signal readiness
    sys.stdout.write('{"status":"ready"}\n')
    sys.stdout.flush()

    for line in sys.stdin:
        line = line.strip()
        if not line:
            continue

        try:
            req = json.loads(line)
        except json.JSONDecodeError as e:
            resp = {"id": None, "error": {"type": "InvalidJSON", "message": str(e)}}
            sys.stdout.write(json.dumps(resp) + "\n")
            sys.stdout.flush()
            continue

        req_id = req.get("id")
        command = req.get("command", "")
        project = req.get("project", "")
        extra_args = req.get("args", {})
        cache_manager = caches.setdefault(project, InMemoryCacheManager())

        try:
            result = dispatch(command, project, extra_args, cache_manager=cache_manager)
            resp = {"id": req_id, "result": result}
        except Exception as e:
            resp = {"id": req_id, "error": {"type": type(e).__name__, "message": str(e)}}

        sys.stdout.write(json.dumps(resp) + "\n")
        sys.stdout.flush()


def _error_exit(error_type: str, message: str):
    """Write structured error to stderr and exit."""
    error = {
        "error": error_type,
        "message": message,
        "traceback": traceback.format_exc(),
    }
    json.dump(error, sys.stderr)
    sys.stderr.write("\n")
    sys.exit(1)


if __name__ == "__main__":
    main()
