"""MCP Server, exposes clone_* tools for assistants working alongside students and staff."""
from __future__ import annotations

import json
import os
from typing import Any

from mcp.server.fastmcp import FastMCP

from clonelab.engine.review import ReviewDesk
from clonelab.session import make_ref, open_store, open_workflow, parse_status
from clonelab.settings import load_settings
from clonelab.types import ReviewComment

mcp = FastMCP("clonelab")


def _settings():
    return load_settings(os.getcwd())


@mcp.tool()
async def clone_get_status(student_id: str, clone_id: str, practice: bool = False) -> str:
    """Get a clone's status, progress per step and allowed actions."""
    settings = _settings()
    store = open_store(settings)
    try:
        workflow = await open_workflow(make_ref(student_id, clone_id, practice), settings, store)
        st = workflow.get_status()
        st["reminder"] = st["summary"]
        return json.dumps(st, ensure_ascii=False, indent=2)
    except Exception as e:
        return json.dumps({"error": str(e)}, ensure_ascii=False)
    finally:
        store.close()


@mcp.tool()
async def clone_get_questions(student_id: str, clone_id: str, step: str | None = None, practice: bool = False) -> str:
    """List the visible questions of a step (default: current step) with answers and help topics."""
    settings = _settings()
    store = open_store(settings)
    try:
        workflow = await open_workflow(make_ref(student_id, clone_id, practice), settings, store)
        if step:
            workflow.change_step(step)
        questions = []
        for q in workflow.current_step_questions():
            topic = workflow.help_topic_for(q.id)
            questions.append({
                "id": q.id,
                "type": q.type,
                "text": q.text,
                "group": q.group,
                "required": q.required,
                "answer": workflow.answers.get(q.id),
                "answered": workflow.is_answered(q),
                "help": topic.title if topic else None,
            })
        return json.dumps({
            "step": workflow.current_step,
            "progress": workflow.step_progress(workflow.current_step),
            "questions": questions,
        }, ensure_ascii=False, indent=2)
    except Exception as e:
        return json.dumps({"error": str(e)}, ensure_ascii=False)
    finally:
        store.close()


@mcp.tool()
async def clone_set_answer(student_id: str, clone_id: str, question_id: str, value: Any, practice: bool = False) -> str:
    """Record one answer and save progress."""
    settings = _settings()
    store = open_store(settings)
    try:
        workflow = await open_workflow(make_ref(student_id, clone_id, practice), settings, store)
        if not workflow.set_answer(question_id, value):
            return f'Answer rejected: status "{workflow.status}" is read-only.'
        result = await workflow.save()
        msg = result.message
        msg += f"\n\n[Reminder] {workflow.get_status()['summary']}"
        return msg
    except Exception as e:
        return f"Answer failed: {e}"
    finally:
        store.close()


@mcp.tool()
async def clone_submit_for_review(student_id: str, clone_id: str, practice: bool = False) -> str:
    """Submit a clone for instructor review."""
    settings = _settings()
    store = open_store(settings)
    try:
        workflow = await open_workflow(make_ref(student_id, clone_id, practice), settings, store)
        result = await workflow.submit_for_review(enforce_transitions=settings.enforce_transitions)
        return result.message
    except Exception as e:
        return f"Submit failed: {e}"
    finally:
        store.close()


@mcp.tool()
async def clone_get_feedback(student_id: str, clone_id: str, practice: bool = False) -> str:
    """Get visible instructor feedback per question."""
    settings = _settings()
    store = open_store(settings)
    try:
        workflow = await open_workflow(make_ref(student_id, clone_id, practice), settings, store)
        if not workflow.should_show_feedback():
            return json.dumps({"status": workflow.status, "feedback": {}}, ensure_ascii=False)
        feedback = {}
        for q in workflow.questions:
            comments = workflow.question_comments(q.id)
            if comments:
                feedback[q.id] = {
                    "correct": workflow.is_question_correct(q.id),
                    "comments": [c.feedback for c in comments],
                }
        return json.dumps({"status": workflow.status, "feedback": feedback}, ensure_ascii=False, indent=2)
    except Exception as e:
        return json.dumps({"error": str(e)}, ensure_ascii=False)
    finally:
        store.close()


@mcp.tool()
async def clone_review(
    student_id: str,
    clone_id: str,
    decision: str,
    comments: list[dict] | None = None,
    practice: bool = False,
) -> str:
    """Record an instructor review: decision is "approved" or "rejected"."""
    store = open_store(_settings())
    try:
        parsed = [ReviewComment.from_dict(c) for c in comments] if comments is not None else None
        status = await ReviewDesk(store).submit_review(make_ref(student_id, clone_id, practice), decision, parsed)
        return f'Review recorded: "{status}"'
    except Exception as e:
        return f"Review failed: {e}"
    finally:
        store.close()


@mcp.tool()
async def clone_set_status(student_id: str, clone_id: str, status: str, practice: bool = False) -> str:
    """Director status change (e.g. "To be submitted to NCBI")."""
    store = open_store(_settings())
    try:
        target = parse_status(status)
        desk = ReviewDesk(store, reviewer="director")
        previous = await desk.change_status(make_ref(student_id, clone_id, practice), target)
        return f'Status changed: "{previous}" -> "{target}"'
    except Exception as e:
        return f"Status change failed: {e}"
    finally:
        store.close()


@mcp.tool()
def clone_get_history(student_id: str, clone_id: str, limit: int = 20, practice: bool = False) -> str:
    """Get a clone's status history, newest first."""
    store = open_store(_settings())
    try:
        return json.dumps(store.get_history(make_ref(student_id, clone_id, practice), limit), ensure_ascii=False, indent=2)
    except Exception as e:
        return json.dumps({"error": str(e)}, ensure_ascii=False)
    finally:
        store.close()


def run_server():
    from clonelab.logging_utils import configure_logging

    settings = _settings()
    configure_logging(settings.log_level, settings.log_format)
    mcp.run(transport="stdio")
