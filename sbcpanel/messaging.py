"""Message service over ZeroMQ push/pull sockets with per-endpoint callbacks."""

import threading
import time
from typing import Callable, Dict, List, Optional

import zmq

from .log import get_logger

POLL_TIMEOUT_MS = 10
MAX_MESSAGE_BYTES = 1023

Callback = Callable[[str], None]


def _decode(frame: bytes) -> str:
    text = frame[:MAX_MESSAGE_BYTES].split(b"\0", 1)[0]
    return text.decode("utf-8", errors="replace")


class ZmqService:
    """Pull sockets for input, push sockets for output, keyed by endpoint.

    ``run`` starts a background thread that hands every received message to
    the callback registered for its endpoint.
    """

    def __init__(self):
        self._context = zmq.Context()
        self._inputs: Dict[str, zmq.Socket] = {}
        self._outputs: Dict[str, zmq.Socket] = {}
        self._retired: List[zmq.Socket] = []
        self._callbacks: Dict[str, Callback] = {}
        self._running = threading.Event()
        self._thread: Optional[threading.Thread] = None
        self._closed = False
        get_logger().info("[ZmqService] Context created")

    @property
    def input_endpoints(self) -> tuple:
        return tuple(self._inputs)

    @property
    def output_endpoints(self) -> tuple:
        return tuple(self._outputs)

    def _connect(self, socket_type: int, endpoint: str, kind: str) -> Optional[zmq.Socket]:
        log = get_logger()
        sock = self._context.socket(socket_type)
        try:
            sock.connect(endpoint)
        except zmq.ZMQError as exc:
            log.error("[ZmqService] Failed to connect %s socket to %s: %s", kind, endpoint, exc)
            sock.close(linger=0)
            return None
        log.info("[ZmqService] %s connected: %s", kind.capitalize(), endpoint)
        return sock

    def _register(self, sockets: Dict[str, zmq.Socket], endpoint: str, sock: zmq.Socket) -> None:
        previous = sockets.get(endpoint)
        if previous is not None:
            self._retired.append(previous)
        sockets[endpoint] = sock

    def add_input(self, endpoint: str) -> None:
        """Connect a pull socket; failures are logged and the endpoint skipped."""
        sock = self._connect(zmq.PULL, endpoint, "input")
        if sock is not None:
            self._register(self._inputs, endpoint, sock)

    def add_output(self, endpoint: str) -> None:
        """Connect a push socket; failures are logged and the endpoint skipped."""
        sock = self._connect(zmq.PUSH, endpoint, "output")
        if sock is not None:
            self._register(self._outputs, endpoint, sock)

    def send(self, endpoint: str, message: str) -> None:
        """Send ``message`` to an output endpoint; unknown endpoints are logged."""
        log = get_logger()
        sock = self._outputs.get(endpoint)
        if sock is None:
            log.warning("[ZmqService] Tried to send to unknown endpoint: %s", endpoint)
            return
        sock.send(message.encode("utf-8"))
        log.debug("[ZmqService] Sent message to %s: %s", endpoint, message)

    def add_callback(self, endpoint: str, callback: Callback) -> None:
        """Register the handler for messages arriving on ``endpoint``."""
        self._callbacks[endpoint] = callback
        get_logger().info("[ZmqService] Callback added for endpoint: %s", endpoint)

    def run(self) -> None:
        """Start the receiving thread."""
        if self._thread is not None and self._thread.is_alive():
            raise RuntimeError("ZmqService polling loop is already running")
        self._running.set()
        self._thread = threading.Thread(target=self._polling_loop, name="zmq-poll", daemon=True)
        self._thread.start()
        get_logger().info("[ZmqService] Polling loop started")

    def stop(self) -> None:
        """Stop the receiving thread and wait for it to finish."""
        self._running.clear()
        if self._thread is not None:
            self._thread.join()
            self._thread = None
            get_logger().info("[ZmqService] Polling loop stopped")

    def _polling_loop(self) -> None:
        log = get_logger()
        while self._running.is_set():
            inputs = list(self._inputs.items())
            if not inputs:
                time.sleep(POLL_TIMEOUT_MS / 1000)
                continue
            for endpoint, sock in inputs:
                if not sock.poll(POLL_TIMEOUT_MS, zmq.POLLIN):
                    continue
                try:
                    frame = sock.recv(zmq.NOBLOCK)
                except zmq.Again:
                    continue
                data = _decode(frame)
                log.debug("[ZmqService] Received message from %s: %s", endpoint, data)
                callback = self._callbacks.get(endpoint)
                if callback is None:
                    continue
                try:
                    callback(data)
                except Exception:
                    log.exception("[ZmqService] Callback for %s failed", endpoint)

    def close(self) -> None:
        """Stop the loop, close every socket and terminate the context."""
        if self._closed:
            return
        self._closed = True
        self.stop()
        for sock in [*self._inputs.values(), *self._outputs.values(), *self._retired]:
            sock.close()
        self._inputs.clear()
        self._outputs.clear()
        self._retired.clear()
        self._context.term()
        get_logger().info("[ZmqService] Context destroyed")

    def __enter__(self) -> "ZmqService":
        return self

    def __exit__(self, *args) -> None:
        self.close()