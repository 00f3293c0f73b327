import asyncio
from typing import Iterator, List, Optional

import pytest
from loguru import logger

from blogsearch.connectors.base_connector import BaseConnector
from blogsearch.parsers.base_parser import IndexedDocument

POST_HTML = """<!DOCTYPE html>
<html>
<head><title>Hello World</title></head>
<body>
<div id="content">
  <div class="post-date">2024-03-01</div>
  <h1 class="post-title"><a href="hello.html">Hello
      World</a></h1>
  <div id="table-of-contents">
    <h2>Table of Contents</h2>
    <ul><li><a href="#org-setup">Setup</a></li></ul>
  </div>
  <p>Some intro text about the blog.</p>
  <h2 id="org-setup">Setup</h2>
  <p>Install the tool, then the   search term here
     shows up in the index.</p>
  <h3 id="org-details">Details <code>v2</code></h3>
  <p>Final words.</p>
  <div class="taglist"><a href="tag-python.html">python</a></div>
  <div id="postamble">Generated by Emacs Org-mode</div>
</div>
</body>
</html>
"""


@pytest.fixture
def warnings_logged() -> Iterator[List[str]]:
    messages: List[str] = []
    handler_id = logger.add(lambda m: messages.append(m.record["message"]), level="WARNING")
    yield messages
    logger.remove(handler_id)


class FakeConnector(BaseConnector):
    """Connector serving fixed documents, optionally held back by `gate`."""

    def __init__(self, docs: List[IndexedDocument], gate: Optional[asyncio.Event] = None) -> None:
        self.docs = docs
        self.gate = gate
        self.calls = 0

    async def fetch_content(self) -> List[IndexedDocument]:
        self.calls += 1
        if self.gate is not None:
            await self.gate.wait()
        return list(self.docs)
