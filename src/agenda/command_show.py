"""Show command – detail page for one event."""

from __future__ import annotations

import json
import sys

from agenda.dates import format_full_date, format_price, format_time
from agenda.event_store import CacheError, EventStore, event_start
from agenda.models import Event


def format_details(event: Event) -> str:
    start = event_start(event)
    if start is None:
        when = event.date
    elif event.time or len(event.date.strip()) > 10:
        when = f"{format_full_date(start)} às {format_time(start)}"
    else:
        when = format_full_date(start)

    lines = [
        event.title,
        f"[{event.category.label}]",
        "",
        "Data e horário",
        f"  {when}",
        "Local",
        f"  {event.location or '-'}",
    ]
    if event.address:
        lines.append(f"  {event.address}")
    lines += [
        "Valor",
        f"  {format_price(event.price)}",
    ]
    if event.description:
        lines += ["", "Sobre o evento", f"  {event.description}"]
    if event.ticket_url:
        lines += ["", f"Ingressos: {event.ticket_url}"]
    return "\n".join(lines)


def run(event_id: str, store: EventStore, *, json_output: bool = False) -> int:
    try:
        event = store.get_by_id(event_id)
    except CacheError as e:
        print(str(e), file=sys.stderr)
        return 1

    if event is None:
        print("Evento não encontrado", file=sys.stderr)
        print("O evento que você está procurando não existe ou foi removido.", file=sys.stderr)
        return 1

    if json_output:
        print(json.dumps({"type": "event", "event": event.to_dict()}, indent=2, ensure_ascii=False))
        return 0
    print(format_details(event))
    return 0
