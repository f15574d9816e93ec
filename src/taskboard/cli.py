from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Any, Optional

from .domain.errors import TaskboardError
from .logging_utils import configure_logging
from .storage.container import Container


def _resolve_project_dir(project_dir: Optional[str]) -> Path:
    return Path(project_dir).expanduser().resolve() if project_dir else Path.cwd().resolve()


def _ctx(project_dir: Optional[str]) -> Container:
    container = Container(_resolve_project_dir(project_dir))
    configure_logging(container.config.log_level)
    return container


def _emit(payload: Any) -> None:
    sys.stdout.write(json.dumps(payload, indent=2) + '\n')


def _project_create(args: argparse.Namespace) -> int:
    project = _ctx(args.project_dir).service.create_project(args.user_id, args.title, args.description)
    _emit({'project': project.to_wire(include_tasks=False)})
    return 0


def _project_list(args: argparse.Namespace) -> int:
    projects = _ctx(args.project_dir).service.list_projects(args.user_id)
    _emit({'projects': [p.to_wire(include_tasks=False) for p in projects]})
    return 0


def _project_delete(args: argparse.Namespace) -> int:
    removed = _ctx(args.project_dir).service.delete_project(args.project_id)
    _emit({'deletedCount': removed})
    return 0


def _task_create(args: argparse.Namespace) -> int:
    task = _ctx(args.project_dir).service.create_task(args.project_id, args.title, args.description)
    _emit({'task': task.to_wire()})
    return 0


def _task_remove(args: argparse.Namespace) -> int:
    removed = _ctx(args.project_dir).service.remove_task(args.project_id, args.task_id)
    _emit({'deletedCount': removed})
    return 0


def _board_show(args: argparse.Namespace) -> int:
    columns = _ctx(args.project_dir).service.get_board(args.project_id)
    _emit({'columns': {stage: [t.to_wire() for t in tasks] for stage, tasks in columns.items()}})
    return 0


def _board_reorder(args: argparse.Namespace) -> int:
    raw = Path(args.board_file).read_text(encoding='utf-8') if args.board_file != '-' else sys.stdin.read()
    try:
        payload = json.loads(raw)
    except json.JSONDecodeError as exc:
        sys.stderr.write(f"Invalid board JSON: {exc}\n")
        return 1
    if not isinstance(payload, dict):
        sys.stderr.write("Board JSON must be an object keyed by column\n")
        return 1
    updates = _ctx(args.project_dir).service.reorder_board_payload(args.project_id, payload, strict=args.strict)
    _emit([u.to_wire() for u in updates])
    return 0


def _server(args: argparse.Namespace) -> int:
    try:
        import uvicorn
    except ImportError:
        sys.stderr.write("Install server extras: pip install 'taskboard-service[server]'\n")
        return 1

    from .server import create_app

    container = _ctx(args.project_dir)
    app = create_app(project_dir=container.project_dir, config=container.config)
    uvicorn.run(app, host=args.host, port=args.port)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description='Taskboard service CLI')
    parser.add_argument('--project-dir', default=None, help='Directory holding .taskboard/ state (default: current working directory)')
    subparsers = parser.add_subparsers(dest='command', required=True)

    server = subparsers.add_parser('server', help='Start the web server')
    server.add_argument('--host', default='127.0.0.1')
    server.add_argument('--port', default=8000, type=int)
    server.set_defaults(func=_server)

    project = subparsers.add_parser('project', help='Manage projects')
    project_sub = project.add_subparsers(dest='project_cmd', required=True)
    pcreate = project_sub.add_parser('create', help='Create a project')
    pcreate.add_argument('title')
    pcreate.add_argument('--user-id', required=True)
    pcreate.add_argument('--description', required=True)
    pcreate.set_defaults(func=_project_create)
    plist = project_sub.add_parser('list', help='List projects')
    plist.add_argument('--user-id', default=None)
    plist.set_defaults(func=_project_list)
    pdelete = project_sub.add_parser('delete', help='Delete a project')
    pdelete.add_argument('project_id')
    pdelete.set_defaults(func=_project_delete)

    task = subparsers.add_parser('task', help='Manage tasks')
    task_sub = task.add_subparsers(dest='task_cmd', required=True)
    tcreate = task_sub.add_parser('create', help='Create a task')
    tcreate.add_argument('project_id')
    tcreate.add_argument('title')
    tcreate.add_argument('--description', required=True)
    tcreate.set_defaults(func=_task_create)
    tremove = task_sub.add_parser('remove', help='Remove a task')
    tremove.add_argument('project_id')
    tremove.add_argument('task_id')
    tremove.set_defaults(func=_task_remove)

    board = subparsers.add_parser('board', help='Inspect or reorder a board')
    board_sub = board.add_subparsers(dest='board_cmd', required=True)
    bshow = board_sub.add_parser('show', help='Show tasks grouped by stage')
    bshow.add_argument('project_id')
    bshow.set_defaults(func=_board_show)
    breorder = board_sub.add_parser('reorder', help='Apply a full board from a JSON file ("-" for stdin)')
    breorder.add_argument('project_id')
    breorder.add_argument('board_file')
    breorder.add_argument('--strict', action='store_true', help='Fail when the board names unknown tasks')
    breorder.set_defaults(func=_board_reorder)

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    handler = getattr(args, 'func', None)
    if handler is None:
        parser.print_help()
        return 1
    try:
        return int(handler(args) or 0)
    except TaskboardError as exc:
        sys.stderr.write(str(exc) + '\n')
        return 1


if __name__ == '__main__':
    raise SystemExit(main())
