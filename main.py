"""Console entry point: manage tasks ranked by urgency and import Trello cards."""
from __future__ import annotations

import argparse
import sys
from datetime import datetime
from typing import Optional, Sequence

from core.errors import TaskrankError
from core.log import enable_console, get_logger
from core.priorities import Effort, Priority, priority_label
from services.task_store import TaskStore
from services.tasks import TaskService
from services.trello import TrelloClient
from storage.config import load_config, update_config, with_env_overrides
from storage.db import init_db
from utils.datetime_utils import UTC


def _parse_due(value: str) -> datetime:
    for fmt in ("%Y-%m-%d %H:%M", "%Y-%m-%dT%H:%M", "%Y-%m-%d"):
        try:
            return datetime.strptime(value.strip(), fmt).replace(tzinfo=UTC)
        except ValueError:
            continue
    raise argparse.ArgumentTypeError(f"invalid date {value!r}, expected YYYY-MM-DD[ HH:MM]")


def _cmd_login(args, service: TaskService) -> int:
    update_config(owner_id=args.owner)
    print(f"Signed in as {args.owner}")
    return 0


def _cmd_trello_auth(args, service: TaskService) -> int:
    update_config(trello_api_key=args.key, trello_token=args.token)
    print("Trello credentials saved")
    return 0


def _cmd_add(args, service: TaskService) -> int:
    task = service.add(args.name, args.due, args.effort, args.description)
    print(f"Created task {task.id}: {task.priority} ({task.priority_score}/10)")
    return 0


def _cmd_list(args, service: TaskService) -> int:
    tasks = service.list(args.priority)
    if not tasks:
        print("No tasks")
        return 0
    for task in tasks:
        mark = "x" if task.status == "COMPLETED" else " "
        print(
            f"[{mark}] {task.id:>4}  {task.due_date:%Y-%m-%d}  "
            f"{priority_label(task.priority, short=True):<4} {task.priority_score:>2}  "
            f"{task.effort:<6}  {task.name}"
        )
    return 0


def _cmd_complete(args, service: TaskService) -> int:
    if service.complete(args.task_id) is None:
        print(f"Task {args.task_id} not found", file=sys.stderr)
        return 1
    print(f"Task {args.task_id} completed")
    return 0


def _cmd_delete(args, service: TaskService) -> int:
    if not service.delete(args.task_id):
        print(f"Task {args.task_id} not found", file=sys.stderr)
        return 1
    print(f"Task {args.task_id} deleted")
    return 0


def _cmd_import(args, service: TaskService) -> int:
    client = TrelloClient.from_config(with_env_overrides(load_config()))
    report = service.import_from(client)
    if report.nothing_to_import:
        print("No tasks found to import from Trello")
    else:
        print(f"Successfully imported {report.imported} tasks from Trello")
        if report.dropped:
            print(f"Skipped {report.dropped} card(s) that could not be read")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="taskrank", description=__doc__ or "")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log to the console as well")
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("login", help="Set the owner of new tasks")
    p.add_argument("owner")
    p.set_defaults(func=_cmd_login)

    p = sub.add_parser("trello-auth", help="Store Trello API key and token")
    p.add_argument("key")
    p.add_argument("token")
    p.set_defaults(func=_cmd_trello_auth)

    p = sub.add_parser("add", help="Create a task")
    p.add_argument("name")
    p.add_argument("--due", type=_parse_due, required=True, help="YYYY-MM-DD[ HH:MM], UTC")
    p.add_argument(
        "--effort",
        type=str.upper,
        choices=[effort.value for effort in Effort],
        default=Effort.MEDIUM.value,
    )
    p.add_argument("--description", default="")
    p.set_defaults(func=_cmd_add)

    p = sub.add_parser("list", help="List tasks by due date")
    p.add_argument(
        "--priority",
        type=str.upper,
        choices=["ALL"] + [priority.value for priority in Priority],
        default="ALL",
    )
    p.set_defaults(func=_cmd_list)

    p = sub.add_parser("complete", help="Mark a task as completed")
    p.add_argument("task_id", type=int)
    p.set_defaults(func=_cmd_complete)

    p = sub.add_parser("delete", help="Delete a task")
    p.add_argument("task_id", type=int)
    p.set_defaults(func=_cmd_delete)

    p = sub.add_parser("import-trello", help="Import all cards of the Trello member")
    p.set_defaults(func=_cmd_import)
    return parser


def main(argv: Optional[Sequence[str]] = None, *, service: Optional[TaskService] = None) -> int:
    args = build_parser().parse_args(argv)
    if args.verbose:
        enable_console()
    logger = get_logger("cli")

    if service is None:
        init_db()
        service = TaskService(TaskStore())
    try:
        return args.func(args, service)
    except (TaskrankError, ValueError) as exc:
        logger.error("%s failed: %s", args.command, exc)
        print(f"Error: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":  # pragma: no cover - CLI entry point
    sys.exit(main())
