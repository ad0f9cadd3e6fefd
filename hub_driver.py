import os
import socket
from dotenv import load_dotenv

load_dotenv()

HOST = os.getenv("HUB_HOST", "192.168.1.248")
PORT = int(os.getenv("HUB_PORT", "9990"))
CONNECT_TIMEOUT = float(os.getenv("HUB_CONNECT_TIMEOUT", "3.0"))

# settimeout(0) would make the socket non-blocking
MIN_WAIT = 0.01


def env_wait(name: str, default: str) -> float:
    return max(MIN_WAIT, float(os.getenv(name, default)))


# idle-timeout framing: first byte may take a while, the rest of a burst follows quickly
INITIAL_WAIT = env_wait("HUB_INITIAL_WAIT", "0.25")
FOLLOWUP_WAIT = env_wait("HUB_FOLLOWUP_WAIT", "0.08")
FETCH_INITIAL_WAIT = env_wait("HUB_FETCH_INITIAL_WAIT", "0.5")
CHUNK_SIZE = int(os.getenv("HUB_CHUNK_SIZE", "8192"))


class HubError(Exception):
    """Base class for everything that can go wrong talking to the hub."""


class ConnectError(HubError):
    pass


class SendError(HubError):
    pass


class HubConnection:
    """
    One TCP session with the hub. Opened per operation and closed before the
    operation returns; use it as a context manager.
    """

    def __init__(self, sock: socket.socket, host: str, port: int):
        self.sock = sock
        self.host = host
        self.port = port

    # ---------------- open/close ----------------

    @classmethod
    def open(cls, host: str, port: int, timeout: float = CONNECT_TIMEOUT) -> "HubConnection":
        print(f"[TCP] Opening {host}:{port}")
        try:
            sock = socket.create_connection((host, port), timeout=timeout)
        except OSError as e:
            raise ConnectError(f"Cannot connect to {host}:{port}: {e}") from e
        print("[TCP] Opened")
        return cls(sock, host, port)

    def close(self):
        if self.sock is None:
            return
        try:
            self.sock.close()
            print("[TCP] Closed")
        except OSError as e:
            print("[TCP] Close error:", e)
        finally:
            self.sock = None

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()

    # ---------------- send ----------------

    def send(self, payload: bytes):
        """
        Push every byte of payload. socket.send may accept only part of the
        buffer, so keep going until the whole thing is written.
        """
        if self.sock is None:
            raise SendError("Connection not open")

        view = memoryview(payload)
        total = 0
        while total < len(view):
            try:
                sent = self.sock.send(view[total:])
            except OSError as e:
                raise SendError(f"Send failed after {total}/{len(view)} bytes: {e}") from e
            if sent == 0:
                raise SendError(f"Connection closed after {total}/{len(view)} bytes")
            total += sent

    # ---------------- receive ----------------

    def receive_until_idle(self, initial_wait: float = INITIAL_WAIT,
                           followup_wait: float = FOLLOWUP_WAIT,
                           chunk_size: int = CHUNK_SIZE) -> bytes:
        """
        Read one reply burst. The protocol has no length prefix or terminator,
        so a reply ends when the hub goes quiet for a wait period or closes.

        Nothing within initial_wait means the hub had nothing to say: b"" is
        returned, not an error. Once bytes arrive the window shrinks to
        followup_wait.
        """
        if self.sock is None:
            raise ConnectError("Connection not open")

        chunks = []
        wait = initial_wait
        while True:
            self.sock.settimeout(wait)
            try:
                data = self.sock.recv(chunk_size)
            except socket.timeout:
                break
            except OSError as e:
                raise ConnectError(f"Receive failed: {e}") from e
            if not data:
                # peer closed
                break
            chunks.append(data)
            wait = followup_wait

        return b"".join(chunks)

    def read_once(self, chunk_size: int = CHUNK_SIZE, timeout: float = INITIAL_WAIT) -> bytes:
        """
        Single bounded read for acknowledgement text. A missing or unreadable
        ack yields b"".
        """
        if self.sock is None:
            return b""
        self.sock.settimeout(timeout)
        try:
            return self.sock.recv(chunk_size)
        except socket.timeout:
            return b""
        except OSError as e:
            print(f"[TCP] (warn) ack read error: {e}")
            return b""
