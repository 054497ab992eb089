"""
Folding a server-sent-event byte stream into generated text.

The stream is consumed lazily. State carried between chunks is the
undecoded byte tail (held by the incremental decoder), the pending partial
line, and the text accumulated so far.
"""
import codecs
import json
import logging
from dataclasses import dataclass
from typing import Any, Callable, Iterable, Optional

logger = logging.getLogger(__name__)

DATA_PREFIX = 'data: '
DONE_MARKER = '[DONE]'


def extract_content(payload: Any) -> str:
    """Text carried by one completion chunk, or ''.

    Checked in order: choices[0].delta.content, choices[0].message.content,
    choices[0].content.
    """
    if not isinstance(payload, dict):
        return ''
    choices = payload.get('choices')
    if not isinstance(choices, list) or not choices or not isinstance(choices[0], dict):
        return ''
    choice = choices[0]

    for container in (choice.get('delta'), choice.get('message')):
        if isinstance(container, dict) and container.get('content'):
            return str(container['content'])
    if choice.get('content'):
        return str(choice['content'])
    return ''


@dataclass
class StreamState:
    """Fold state between byte chunks."""
    pending: str = ''
    text: str = ''
    done: bool = False


class StreamFolder:
    """Accumulates SSE chunks into text, one byte chunk at a time."""

    def __init__(self, on_chunk: Optional[Callable[[str], None]] = None):
        self.on_chunk = on_chunk
        self.state = StreamState()
        self._decoder = codecs.getincrementaldecoder('utf-8')(errors='replace')

    def feed(self, chunk: bytes) -> StreamState:
        """Fold one byte chunk into the state."""
        if self.state.done:
            return self.state

        buffer = self.state.pending + self._decoder.decode(chunk)
        lines = buffer.split('\n')
        self.state.pending = lines.pop()

        for line in lines:
            self._process_line(line)
            if self.state.done:
                break
        return self.state

    def finish(self) -> str:
        """Flush the decoder and the trailing partial line."""
        if not self.state.done:
            remainder = self.state.pending + self._decoder.decode(b'', final=True)
            self.state.pending = ''
            if remainder:
                self._process_line(remainder)
        self.state.done = True
        return self.state.text

    def _process_line(self, line: str):
        line = line.rstrip('\r')
        if not line.startswith(DATA_PREFIX):
            return

        data = line[len(DATA_PREFIX):]
        if data.strip() == DONE_MARKER:
            self.state.done = True
            return

        try:
            payload = json.loads(data)
        except json.JSONDecodeError as e:
            logger.warning("Error parsing stream data: %s (line: %r)", e, line)
            return

        content = extract_content(payload)
        if content:
            self.state.text += content
            if self.on_chunk:
                self.on_chunk(content)


def fold_stream(chunks: Iterable[bytes], on_chunk: Optional[Callable[[str], None]] = None) -> str:
    """Consume an SSE byte stream and return the accumulated text."""
    folder = StreamFolder(on_chunk)
    for chunk in chunks:
        if not chunk:
            continue
        if folder.feed(chunk).done:
            break
    return folder.finish()


def read_document(body: Any, on_chunk: Optional[Callable[[str], None]] = None) -> str:
    """Text of a non-streaming JSON response."""
    content = extract_content(body)
    if content and on_chunk:
        on_chunk(content)
    return content
