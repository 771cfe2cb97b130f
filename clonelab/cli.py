"""Thin CLI router, dispatches to commands."""
from __future__ import annotations

import os
import sys

USAGE = """\
clonelab - clone analysis workflow for DNA sequencing coursework

Usage:
  clonelab init                                 Create .clonelab/ with config and sample questions
  clonelab check                                Validate the question bank, output status diagram
  clonelab assign <student> <clone>             Open a clone for a student
  clonelab status <student> <clone>             Status, progress and visible feedback
  clonelab answer <student> <clone> <q> <value> Record an answer and save
  clonelab submit <student> <clone>             Submit a clone for review
  clonelab review <student> <clone> approved|rejected [comments.yaml]
                                                Record an instructor review
  clonelab set-status <student> <clone> <status>
                                                Director status change
  clonelab history <student> <clone>            Status history
  clonelab stats                                Review queue and status counts

Clone commands accept --practice for practice clones.

Internal:
  clonelab mcp-server                           Start MCP Server
"""

# command -> (minimum positional args, usage line)
_ARITY = {
    "assign": (2, "clonelab assign <student> <clone>"),
    "status": (2, "clonelab status <student> <clone>"),
    "answer": (4, "clonelab answer <student> <clone> <question> <value>"),
    "submit": (2, "clonelab submit <student> <clone>"),
    "review": (3, "clonelab review <student> <clone> approved|rejected [comments.yaml]"),
    "set-status": (3, "clonelab set-status <student> <clone> <status>"),
    "history": (2, "clonelab history <student> <clone>"),
}


def main():
    args = sys.argv[1:]
    practice = "--practice" in args
    args = [a for a in args if a != "--practice"]
    cwd = os.getcwd()
    command = args[0] if args else None
    params = args[1:]

    if command in _ARITY and len(params) < _ARITY[command][0]:
        print(f"Usage: {_ARITY[command][1]}", file=sys.stderr)
        sys.exit(1)

    if command not in ("help", "--help", "-h", None, "init"):
        from clonelab.logging_utils import configure_logging
        from clonelab.settings import load_settings
        try:
            settings = load_settings(cwd)
        except ValueError as e:
            print(e, file=sys.stderr)
            sys.exit(1)
        configure_logging(settings.log_level, settings.log_format)

    if command == "init":
        from clonelab.commands.init import cmd_init
        cmd_init(cwd)

    elif command == "check":
        from clonelab.commands.check import cmd_check
        cmd_check(cwd)

    elif command == "assign":
        from clonelab.commands.assign import cmd_assign
        cmd_assign(params[0], params[1], cwd, practice)

    elif command == "status":
        from clonelab.commands.status import cmd_status
        cmd_status(params[0], params[1], cwd, practice)

    elif command == "answer":
        from clonelab.commands.answer import cmd_answer
        cmd_answer(params[0], params[1], params[2], params[3], cwd, practice)

    elif command == "submit":
        from clonelab.commands.submit import cmd_submit
        cmd_submit(params[0], params[1], cwd, practice)

    elif command == "review":
        from clonelab.commands.review import cmd_review
        comments_file = params[3] if len(params) > 3 else None
        cmd_review(params[0], params[1], params[2], cwd, comments_file, practice)

    elif command == "set-status":
        from clonelab.commands.set_status import cmd_set_status
        cmd_set_status(params[0], params[1], " ".join(params[2:]), cwd, practice)

    elif command == "history":
        from clonelab.commands.history import cmd_history
        cmd_history(params[0], params[1], cwd, practice)

    elif command == "stats":
        from clonelab.commands.stats import cmd_stats
        cmd_stats(cwd)

    elif command == "mcp-server":
        from clonelab.integrations.mcp_server import run_server
        run_server()

    elif command in ("help", "--help", "-h", None):
        print(USAGE)

    else:
        print(f"Unknown command: {command}", file=sys.stderr)
        print(USAGE)
        sys.exit(1)
