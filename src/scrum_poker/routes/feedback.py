"""
Feedback API routes.

Stores user feedback in memory and forwards it by email in the background.
"""

from fastapi import APIRouter, BackgroundTasks, Depends
from fastapi.responses import HTMLResponse
import logging

from ..schemas.feedback import FeedbackCreate, FeedbackList, FeedbackResponse, FeedbackSubmitted
from ..services.feedback_store import FeedbackStore, get_feedback_store
from ..services.notifier import FeedbackNotifier, get_feedback_notifier
from ..services.sanitizer import sanitize

logger = logging.getLogger(__name__)

router = APIRouter()
views_router = APIRouter()


@router.post("/feedback", response_model=FeedbackSubmitted)
async def submit_feedback(
    data: FeedbackCreate,
    background_tasks: BackgroundTasks,
    store: FeedbackStore = Depends(get_feedback_store),
    notifier: FeedbackNotifier = Depends(get_feedback_notifier),
):
    """
    Submit feedback.

    Returns as soon as the entry is stored; the email notification is sent
    after the response and never affects it.
    """
    logger.info(
        f"New feedback received: rating={data.rating}/5 room={data.room!r} "
        f"email={data.email!r} timestamp={data.timestamp}"
    )
    entry = store.add(data)
    background_tasks.add_task(notifier.notify, entry)
    return FeedbackSubmitted()


@router.get("/feedbacks", response_model=FeedbackList)
async def list_feedbacks(store: FeedbackStore = Depends(get_feedback_store)):
    """List all stored feedback."""
    entries = store.list_all()
    return FeedbackList(
        total=len(entries),
        feedbacks=[FeedbackResponse.model_validate(e.to_dict()) for e in entries],
    )


@views_router.get("/feedbacks", response_class=HTMLResponse)
async def feedback_dashboard(store: FeedbackStore = Depends(get_feedback_store)):
    """
    Render a plain feedback dashboard, newest first.
    """
    entries = sorted(store.list_all(), key=lambda e: e.timestamp, reverse=True)
    average = store.average_rating

    if entries:
        cards = "\n".join(
            "<article class=\"feedback\">"
            f"<header>{'⭐' * e.rating} <time>{sanitize(e.timestamp)}</time></header>"
            f"<p>📧 {sanitize(e.email)} · 🏠 {sanitize(e.room)}</p>"
            f"<pre>{sanitize(e.message)}</pre>"
            "</article>"
            for e in entries
        )
    else:
        cards = "<p class=\"empty\">📭 No feedbacks yet</p>"

    return (
        "<!DOCTYPE html>\n"
        "<html lang=\"en\"><head><meta charset=\"UTF-8\">"
        "<title>Feedback Dashboard - Scrum Poker</title></head><body>"
        "<h1>📬 Feedback Dashboard</h1>"
        "<p>⚠️ Feedbacks are stored in memory and will be cleared on server restart</p>"
        f"<p>Total Feedbacks: <strong>{store.total}</strong> · "
        f"Average Rating: <strong>{(average or 0):.1f}</strong></p>"
        f"{cards}"
        "</body></html>"
    )
