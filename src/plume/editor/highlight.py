import logging

logger = logging.getLogger(__name__)


class Highlighter:
    """Tracks which lines of a document need their syntax information rebuilt.

    Edits only mark lines stale; refresh() rebuilds everything stale in one pass. Scripts that make many
    edits in a row therefore cost a single refresh.
    """

    def __init__(self, file_type: str):
        self.file_type = file_type
        self.stale: set[int] = set()
        self.line_tokens: dict[int, list[str]] = {}
        self.refreshes = 0

    def edit(self, y: int):
        self.stale.add(y)

    def invalidate_all(self, line_count: int):
        self.stale.update(range(line_count))

    def refresh(self, lines: list[str]):
        if not self.stale:
            return
        for y in sorted(self.stale):
            if y < len(lines):
                self.line_tokens[y] = lines[y].split()
            else:
                self.line_tokens.pop(y, None)
        self.stale.clear()
        self.refreshes += 1
