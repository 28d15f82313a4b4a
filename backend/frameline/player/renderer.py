"""Turns frame line rows, or the SSE stream carrying them, into displayable text."""

import json
import sys
from typing import AsyncIterable, AsyncIterator, Iterable, TextIO

CLEAR_SCREEN = "\x1b[H\x1b[2J"


def render_rows(rows: Iterable[dict]) -> str:
    """Sort rows by line number and join their content with newlines."""
    ordered = sorted(rows, key=lambda row: row["lineNumber"])
    return "\n".join(row["lineContent"] for row in ordered)


async def parse_sse_lines(lines: AsyncIterable[str]) -> AsyncIterator[dict]:
    """
    Group raw SSE lines into events: {"event": name, "data": decoded json or text}.
    Comment lines (heartbeats) are dropped.
    """
    event_name = "message"
    data_lines: list[str] = []

    async for line in lines:
        if line == "":
            if data_lines:
                raw = "\n".join(data_lines)
                try:
                    data = json.loads(raw)
                except ValueError:
                    data = raw
                yield {"event": event_name, "data": data}
            event_name = "message"
            data_lines = []
            continue
        if line.startswith(":"):
            continue

        field, _, value = line.partition(":")
        if value.startswith(" "):
            value = value[1:]
        if field == "event":
            event_name = value
        elif field == "data":
            data_lines.append(value)


class TerminalRenderer:
    """Redraws the whole frame in place on each update."""

    def __init__(self, out: TextIO = sys.stdout, clear: bool = True):
        self.out = out
        self.clear = clear
        self.frames_drawn = 0

    def draw(self, text: str, status: str = "") -> None:
        if self.clear:
            self.out.write(CLEAR_SCREEN)
        self.out.write(text)
        self.out.write("\n")
        if status:
            self.out.write(status + "\n")
        self.out.flush()
        self.frames_drawn += 1
