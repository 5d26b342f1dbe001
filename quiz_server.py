"""
TCP quiz server.

Responsibilities:
- Listen on HOST:PORT.
- Start one thread per connection (accept loop).
- Give every connection its own QuizShell over a SocketConsole, so each
  client has an independent command stream and play session.
- Share a single engine (and therefore a single store) between clients.

Try it with: nc localhost 3030
"""

import socket
import threading

import config
from quiz_log import log_action
from quiz_shell import QuizShell, SocketConsole

ACCEPT_TIMEOUT = 0.5  # seconds between checks of the running flag


class QuizServer:
    def __init__(self, engine, host=None, port=None):
        self.engine = engine
        self.host = config.HOST if host is None else host
        self.port = config.PORT if port is None else port
        self.sock = None
        self.running = False
        self.clients_lock = threading.Lock()
        self.clients = set()

    @property
    def address(self):
        return self.sock.getsockname()[:2] if self.sock else (self.host, self.port)

    def bind(self):
        self.sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        self.sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        self.sock.bind((self.host, self.port))
        self.sock.listen()
        self.sock.settimeout(ACCEPT_TIMEOUT)
        host, port = self.address
        log_action("START", f"listening on {host}:{port}")
        return self.address

    def serve_forever(self):
        if self.sock is None:
            self.bind()
        sock = self.sock
        self.running = True
        while self.running:
            try:
                conn, addr = sock.accept()
            except socket.timeout:
                continue
            except OSError:
                # listening socket closed by shutdown()
                break
            t = threading.Thread(target=self.handle_client, args=(conn, addr), daemon=True)
            t.start()

    def handle_client(self, conn, addr):
        peer = f"{addr[0]}:{addr[1]}"
        log_action("CONNECT", peer, user=peer)
        io = SocketConsole(conn)
        with self.clients_lock:
            self.clients.add(io)
        try:
            QuizShell(self.engine, io, user=peer).run()
        finally:
            with self.clients_lock:
                self.clients.discard(io)
            io.close()
            log_action("DISCONNECT", peer, user=peer)

    def shutdown(self):
        self.running = False
        if self.sock is not None:
            self.sock.close()
            self.sock = None
        # each client thread sees EOF and closes its own console
        with self.clients_lock:
            for io in list(self.clients):
                io.disconnect()
