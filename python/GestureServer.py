import json
import socket


def snapshot_message(result, sentence="", fps=None) -> bytes:
    """One newline-terminated JSON document per published frame."""
    doc = {"classification": result.to_dict(), "sentence": sentence, "fps": fps}
    return (json.dumps(doc) + "\n").encode("utf-8")


class GestureServer:
    """
    Publishes classification snapshots to a single TCP client.
    The frame loop calls update() to pick up a waiting client and
    send_result() once per frame; neither call waits on the consumer
    for longer than send_timeout.
    """

    def __init__(self, host="127.0.0.1", port=5555, send_timeout=0.05):
        self.send_timeout = send_timeout
        self.sock = self._listen(host, port)
        self.conn = None

    @staticmethod
    def _listen(host, port):
        try:
            sock = socket.create_server((host, port))
        except OSError as e:
            print(f"[NET] Cannot listen on {host}:{port}: {e}")
            return None
        sock.setblocking(False)
        print(f"[NET] Listening on {sock.getsockname()}")
        return sock

    @property
    def address(self):
        return self.sock.getsockname() if self.sock else None

    @property
    def connected(self) -> bool:
        return self.conn is not None

    def update(self):
        if self.sock is None or self.conn is not None:
            return
        try:
            conn, addr = self.sock.accept()
        except BlockingIOError:
            return
        conn.settimeout(self.send_timeout)
        self.conn = conn
        print(f"[NET] Client connected: {addr}")

    def send_result(self, result, sentence="", fps=None) -> bool:
        if self.conn is None:
            return False
        try:
            self.conn.sendall(snapshot_message(result, sentence, fps))
        except (BrokenPipeError, ConnectionResetError):
            print("[NET] Client disconnected")
            self._drop_client()
            return False
        except socket.timeout:
            print("[NET] Client too slow, dropping it")
            self._drop_client()
            return False
        return True

    def _drop_client(self):
        if self.conn is not None:
            self.conn.close()
            self.conn = None

    def close(self):
        self._drop_client()
        if self.sock is not None:
            self.sock.close()
            self.sock = None
