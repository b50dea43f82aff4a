"""Display utilities mixin for TUI - text width, trimming, padding, wrapping."""

from typing import List

from wcwidth import wcwidth


class DisplayMixin:
    """Mixin providing text display utilities with proper Unicode width handling."""

    @staticmethod
    def _char_width(ch: str) -> int:
        w = wcwidth(ch)
        if w is None or w < 0:
            return 0
        return w

    @classmethod
    def _display_width(cls, text: str) -> int:
        """Return visual width of text accounting for wide/narrow characters."""
        return sum(cls._char_width(ch) for ch in text)

    def _trim_display(self, text: str, width: int) -> str:
        """Trim text so visible width doesn't exceed specified width."""
        acc = []
        used = 0
        for ch in text:
            w = self._char_width(ch)
            if used + w > width:
                break
            acc.append(ch)
            used += w
        return "".join(acc)

    def _ellipsize(self, text: str, width: int) -> str:
        """Trim to width, marking the cut with an ellipsis."""
        if width <= 0:
            return ""
        if self._display_width(text) <= width:
            return text
        return self._trim_display(text, width - 1) + "…"

    def _pad_display(self, text: str, width: int) -> str:
        """Trim and pad with spaces to exact visible width."""
        trimmed = self._trim_display(text, width)
        trimmed_width = self._display_width(trimmed)
        if trimmed_width < width:
            trimmed += " " * (width - trimmed_width)
        return trimmed

    def _wrap_display(self, text: str, width: int) -> List[str]:
        """Wrap text into lines of at most `width` visible columns, breaking on spaces when possible."""
        if width <= 0:
            return [text]
        lines: List[str] = []
        current = ""
        for word in text.split(" "):
            candidate = f"{current} {word}" if current else word
            if self._display_width(candidate) <= width:
                current = candidate
                continue
            if current:
                lines.append(current)
            # a single word wider than the line is split by characters
            while self._display_width(word) > width:
                head = self._trim_display(word, width)
                if not head:
                    break
                lines.append(head)
                word = word[len(head):]
            current = word
        lines.append(current)
        return lines
