"""
Runnable fake SES server for test suites.

    server = FakeSESServer()
    host_port = server.bootstrap()          # e.g. "127.0.0.1:53417"
    ... point the SES client at http://{host_port} and send ...
    server.wait_for_emails(2)
    emails = server.get_emails()            # newest first
    server.close()

The HTTP listener runs uvicorn on a daemon thread; the methods above act
on the same in-memory state the HTTP routes use.
"""

import socket
import sys
import threading
import time
from typing import Iterable, List, Optional

import uvicorn

from fake_ses.config import FAKE_SES_HOST, FAKE_SES_PORT, FAKE_SES_STARTUP_TIMEOUT
from fake_ses.main import create_app
from fake_ses.models.schemas import ParsedEmail
from fake_ses.services.state import SESState
from fake_ses.utils.logging import logger


class ServerClosedError(RuntimeError):
    """Raised when bootstrapping a server that has already been closed."""
    pass


class FakeSESServer:
    def __init__(self, port: Optional[int] = None, host: Optional[str] = None):
        self.host = host or FAKE_SES_HOST
        self.port = FAKE_SES_PORT if port is None else port
        self.host_port: Optional[str] = None

        self.state = SESState()
        self.app = create_app(self.state)

        self._server: Optional[uvicorn.Server] = None
        self._thread: Optional[threading.Thread] = None
        self._socket: Optional[socket.socket] = None
        self._closed = False

    def __enter__(self) -> "FakeSESServer":
        self.bootstrap()
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    @property
    def closed(self) -> bool:
        return self._closed

    def _bind(self) -> socket.socket:
        family = socket.AF_INET6 if ":" in self.host else socket.AF_INET
        sock = socket.socket(family, socket.SOCK_STREAM)
        sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        try:
            sock.bind((self.host, self.port))
        except OSError:
            sock.close()
            raise
        return sock

    def bootstrap(self) -> str:
        """
        Bind the listening socket and start serving.

        Returns the "host:port" string clients should use. Bind failures
        propagate as OSError; a closed server cannot be started again.
        """
        if self._closed:
            raise ServerClosedError("cannot bootstrap closed server")

        if self.host_port is not None:
            return self.host_port

        sock = self._bind()
        port = sock.getsockname()[1]

        config = uvicorn.Config(self.app, log_level="warning", lifespan="off")
        server = uvicorn.Server(config)
        thread = threading.Thread(
            target=server.run,
            kwargs={"sockets": [sock]},
            name=f"fake-ses-{port}",
            daemon=True,
        )
        thread.start()

        deadline = time.monotonic() + FAKE_SES_STARTUP_TIMEOUT
        while not server.started:
            if not thread.is_alive() or time.monotonic() > deadline:
                server.should_exit = True
                thread.join(FAKE_SES_STARTUP_TIMEOUT)
                sock.close()
                raise RuntimeError(f"fake SES server failed to start on {self.host}:{port}")
            time.sleep(0.01)

        self._server = server
        self._thread = thread
        self._socket = sock
        self.port = port
        self.host_port = f"{self.host}:{port}"

        logger.info(f"Fake SES listening on {self.host_port}")
        return self.host_port

    def close(self) -> None:
        """Stop serving and release the socket. Safe to call more than once."""
        if self._closed:
            return
        self._closed = True

        if self._server is not None:
            self._server.should_exit = True
            self._thread.join()
            self._socket.close()
            logger.info(f"Fake SES on {self.host_port} stopped")

        self._server = None
        self._thread = None
        self._socket = None

    # -------------------------------------------------------------------------
    # In-process access for test code
    # -------------------------------------------------------------------------
    def get_emails(self) -> List[ParsedEmail]:
        return self.state.retrieval.list_accepted()

    def clear_emails(self) -> None:
        self.state.retrieval.clear()

    def set_email_errors(self, errors: Iterable[bool]) -> None:
        self.state.retrieval.push_failures(errors)

    def wait_for_emails(self, count: int) -> None:
        """
        Block until `count` emails have been accepted since the last clear.

        There is no timeout; run it in a thread or under the test runner's
        timeout if the senders might never deliver.
        """
        self.state.wait_for_emails(count)


def run(port: Optional[int] = None) -> None:
    """Serve in the foreground until interrupted."""
    server = FakeSESServer(port=port)
    host_port = server.bootstrap()
    print(f"[FAKE-SES] Running on {host_port}")
    try:
        while not server.closed:
            time.sleep(1)
    except KeyboardInterrupt:
        pass
    finally:
        server.close()


if __name__ == "__main__":
    run(int(sys.argv[1]) if len(sys.argv) > 1 else None)
