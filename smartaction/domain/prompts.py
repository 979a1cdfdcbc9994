"""Prompt builders for the summarize, propose and refine requests."""

from datetime import datetime
from typing import Iterable, Optional

from smartaction.domain.date_normalizer import FIXED_TIMEZONE, format_datetime, format_display
from smartaction.domain.models import Action, ChatMessage, ChatRole


def build_summarize_prompt(text: str) -> str:
    return (
        "You are a careful editor. Fix typos in the text below, organize it "
        "logically and condense it to its key points. Make dates, times, "
        "places, names and contact details easy to find.\n\n"
        "Date and time notation:\n"
        "- Dates as YYYY/MM/DD\n"
        "- Times as HH:MM in 24-hour format\n"
        "- Example: 2025/10/15 14:30\n\n"
        "Reply with the corrected summary only, with no preface or explanation.\n\n"
        "---\n"
        "[Original text]\n"
        f"{text}\n"
        "---"
    )


def build_action_prompt(summary: str, now: Optional[datetime] = None) -> str:
    """Instructions for turning a summary into action lines."""
    now = (now or datetime.now(FIXED_TIMEZONE)).astimezone(FIXED_TIMEZONE)
    return (
        "You are a helpful assistant.\n\n"
        "[Task]\n"
        "Extract information from the summary below and propose actions using "
        "exactly the output format. If there is nothing to do, output nothing. "
        "Use the concrete names from the summary, never the sample values.\n\n"
        "[Current date and time]\n"
        f"- Today: {now:%Y-%m-%d} ({now:%A})\n"
        f"- Time: {now:%H:%M}\n\n"
        "[Date rules]\n"
        "1. Interpret past and future dates exactly as written.\n"
        "2. Resolve relative dates (today, tomorrow, next week) against the current date.\n"
        "3. If the end time is unknown, use one hour after the start.\n"
        "4. Always write dates as YYYY-MM-DDTHH:mm.\n\n"
        "[Calendar rules]\n"
        "- Write the event name as 'Place: summary', e.g. 'Tokyo Chapel: Ceremony'.\n\n"
        "[Examples]\n"
        "- 'Product meeting at Aoyama Center next Tuesday 14:00-15:00' -> "
        "calendar registration: Aoyama Center: Product meeting; 2025-10-14T14:00; 2025-10-14T15:00\n"
        "- 'Yoshida mobile: 080-9999-8888' -> contact registration: Yoshida, 080-9999-8888,\n\n"
        "[Output format] (every line starts with '- ')\n"
        "- calendar registration: [Place: event name]; [start YYYY-MM-DDTHH:mm]; [end YYYY-MM-DDTHH:mm]\n"
        "- route search: [address or place name]\n"
        "- contact registration: [name], [phone], [email]\n"
        "- open URL: [URL]\n"
        "- call: [phone number]\n"
        "- add to note: [short title taken from the start of the text]\n\n"
        "---\n"
        "[Summary]\n"
        f"{summary}\n"
        "---"
    )


def build_opening_message(action: Action) -> str:
    """First model message of a refinement session."""
    return (
        "I'll add this to your calendar:\n\n"
        f"Event name: {action.primary}\n"
        f"Date/time: {format_display(action.start_at)}\n\n"
        "Does this look right? Tell me anything you'd like to change "
        "(e.g. 'move it to 15:00', 'rename it to ...')."
    )


def _render_history(history: Iterable[ChatMessage]) -> str:
    lines = []
    for message in history:
        speaker = "User" if message.role is ChatRole.USER else "Assistant"
        lines.append(f"{speaker}: {message.content}")
    return "\n".join(lines)


def build_refinement_prompt(action: Action, history: Iterable[ChatMessage], user_input: str) -> str:
    """Chat prompt asking the model to amend one calendar action."""
    start = format_datetime(action.start_at) if action.start_at else "unset"
    end = format_datetime(action.end_at) if action.end_at else "unset"
    return (
        "You help the user adjust a calendar event before it is saved.\n\n"
        "[Current event]\n"
        f"event name: {action.primary}\n"
        f"date/time: {start}\n"
        f"end date/time: {end}\n\n"
        "[Conversation so far]\n"
        f"{_render_history(history)}\n\n"
        "[Latest user message]\n"
        f"{user_input}\n\n"
        "[Reply rules]\n"
        "- Answer the user briefly.\n"
        "- If something changes, finish with a block that starts with the line "
        "[changes] followed by only the changed fields:\n"
        "  event name: <new name>\n"
        "  date/time: <YYYY-MM-DDTHH:mm>\n"
        "  end date/time: <YYYY-MM-DDTHH:mm>\n"
        "- If you need to ask a question instead, do not include [changes]."
    )
