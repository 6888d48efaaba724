import sys
from typing import Optional, TextIO


class Console:
    """Line-oriented access to the program's input stream."""
    def __init__(self, stream: Optional[TextIO] = None):
        self.stream = stream

    def read_line(self) -> str:
        stream = self.stream if self.stream is not None else sys.stdin
        line = stream.readline()
        if line == '' or not line.endswith('\n'):
            # end of input, including a final line with no newline
            return ''
        return line.replace('\n', '').replace('"', '')
