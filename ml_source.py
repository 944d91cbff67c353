INDENT = '\t'


class LineCursor:
    """
    Line Source over a whole ML program. Lines come back with the line ending
    and trailing blanks removed (a lone tab is trailing blank too). The cursor
    can peek ahead without consuming and can be rewound for the second pass.
    """

    def __init__(self, lines):
        self.lines = [line.rstrip() for line in lines]
        self.pos = 0

    @classmethod
    def from_text(cls, text):
        return cls(text.splitlines())

    @property
    def lineno(self):
        """1-based number of the line most recently returned by next_line()."""
        return self.pos

    def at_end(self):
        return self.pos >= len(self.lines)

    def next_line(self):
        if self.at_end():
            return None
        line = self.lines[self.pos]
        self.pos += 1
        return line

    def peek(self, offset=0):
        """Returns the line `offset` places past the cursor, or None past the end."""
        idx = self.pos + offset
        if idx < len(self.lines):
            return self.lines[idx]
        return None

    def seek(self, pos):
        self.pos = max(0, min(pos, len(self.lines)))

    def rewind(self):
        self.pos = 0


def is_indented(line):
    return line is not None and line.startswith(INDENT)


def read_program(filename):
    """Reads an ML source file into a LineCursor. Raises OSError if it cannot be read."""
    with open(filename, 'r', encoding='utf-8', errors='replace') as f:
        source_code = f.read()
    return LineCursor.from_text(source_code)
