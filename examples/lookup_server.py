from __future__ import annotations

import json
from http.server import BaseHTTPRequestHandler, HTTPServer


class Handler(BaseHTTPRequestHandler):
    def _reply(self, status: int, payload: object) -> None:
        body = json.dumps(payload).encode("utf-8")
        self.send_response(status)
        self.send_header("content-type", "application/json")
        self.send_header("content-length", str(len(body)))
        self.end_headers()
        self.wfile.write(body)

    def do_GET(self) -> None:
        parts = self.path.split("?", 1)[0].strip("/").split("/")
        if len(parts) == 2 and parts[0] == "users" and parts[1].isdigit():
            self._reply(200, {"id": int(parts[1]), "name": f"user-{parts[1]}"})
            return
        self._reply(404, {"error": "not found"})

    def do_POST(self) -> None:
        length = int(self.headers.get("content-length", "0"))
        raw = self.rfile.read(length).decode("utf-8")
        try:
            payload = json.loads(raw)
        except Exception:
            payload = raw
        print(payload)
        self._reply(200, {"received": payload, "path": self.path})


def main() -> None:
    server = HTTPServer(("127.0.0.1", 9000), Handler)
    print("lookup server listening on http://127.0.0.1:9000/users/<id>")
    server.serve_forever()


if __name__ == "__main__":
    main()
