"""Shared helpers for the .tests data files."""

from pathlib import Path


def parse_test_file(path: Path) -> list[tuple[str, str, str]]:
    """Parse a .tests file into (name, input, expected) tuples."""
    lines = path.read_text().split("\n")
    result: list[tuple[str, str, str]] = []
    i = 0
    while i < len(lines):
        line = lines[i]
        if line.startswith("=== "):
            test_name = line[4:].strip()
            i += 1
            input_lines: list[str] = []
            while i < len(lines) and not lines[i].startswith("---"):
                input_lines.append(lines[i])
                i += 1
            if i < len(lines) and lines[i] == "---":
                i += 1
            expected_lines: list[str] = []
            while i < len(lines) and not lines[i].startswith("---"):
                expected_lines.append(lines[i])
                i += 1
            if i < len(lines) and lines[i] == "---":
                i += 1
            test_input = "\n".join(input_lines)
            expected = "\n".join(expected_lines).strip()
            result.append((test_name, test_input, expected))
        else:
            i += 1
    return result


class Console:
    """Host I/O double: collects output, serves queued input lines."""

    def __init__(self, stdin: list[str] | None = None):
        self.out: list[str] = []
        self._stdin = list(stdin) if stdin is not None else []

    def write(self, text: str) -> None:
        self.out.append(text)

    def read_line(self) -> str:
        if not self._stdin:
            return ""
        return self._stdin.pop(0) + "\n"

    @property
    def text(self) -> str:
        return "".join(self.out)
