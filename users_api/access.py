"""
HTTP access recording middleware
"""
import time
from datetime import datetime, timezone

from logrouter import AccessRecord, LogRouter


class AccessRecorder:
    """
    ASGI middleware that submits one access record per HTTP request.

    The record is submitted once the final body chunk has been sent. If the
    wrapped app raises first, a 500 record is submitted and the error re-raised.
    """

    def __init__(self, app, router: LogRouter):
        self.app = app
        self.router = router

    async def __call__(self, scope, receive, send):
        if scope['type'] != 'http':
            await self.app(scope, receive, send)
            return

        start = time.perf_counter()
        status = 500
        completed = False

        async def send_wrapper(message):
            nonlocal status, completed
            if message['type'] == 'http.response.start':
                status = message['status']
            await send(message)
            if message['type'] == 'http.response.body' and not message.get('more_body', False):
                completed = True
                self._record(scope, status, start)

        try:
            await self.app(scope, receive, send_wrapper)
        finally:
            if not completed:
                self._record(scope, status, start)

    def _record(self, scope, status: int, start: float) -> None:
        elapsed_ms = (time.perf_counter() - start) * 1000
        self.router.submit(AccessRecord(
            status=status,
            elapsed_ms=elapsed_ms,
            method=scope['method'],
            url=request_url(scope),
            timestamp=datetime.now(timezone.utc),
        ))


def request_url(scope) -> str:
    """
    Request target as sent, still percent-encoded, including the query string.

    The decoded path can contain newlines and spaces, which would split or
    garble the access line.
    """
    raw_path = scope.get('raw_path')
    if raw_path:
        # Some servers include the query in raw_path
        path = raw_path.split(b'?', 1)[0].decode('latin-1')
    else:
        path = scope['path']
    query = scope.get('query_string', b'')
    if query:
        return f"{path}?{query.decode('latin-1')}"
    return path
