"""Very small local HTTP server around the proxy Lambda handler.

Run this when testing a static front end against the proxy without deploying.
Requests to /api/github/<path> are turned into API Gateway v2 events and passed
to the handler in-process.
"""

from http.server import BaseHTTPRequestHandler, HTTPServer
from urllib.parse import urlsplit
import os

from ghproxy.lambda_handler import lambda_handler


HOST = os.environ.get("HOST", "127.0.0.1")
PORT = int(os.environ.get("PORT", "8787"))


def build_event(method, raw_url, headers, body):
    parts = urlsplit(raw_url)
    return {
        "version": "2.0",
        "rawPath": parts.path,
        "rawQueryString": parts.query,
        "headers": dict(headers),
        "requestContext": {"http": {"method": method}},
        "body": body.decode("utf-8") if body else None,
        "isBase64Encoded": False,
    }


class ProxyHandler(BaseHTTPRequestHandler):
    def _dispatch(self):
        length = int(self.headers.get("content-length", 0))
        body = self.rfile.read(length) if length else b""

        event = build_event(self.command, self.path, self.headers.items(), body)
        result = lambda_handler(event, None)

        self.send_response(result["statusCode"])
        for k, v in result["headers"].items():
            self.send_header(k, v)
        self.end_headers()
        self.wfile.write(result["body"].encode("utf-8"))

    def do_OPTIONS(self):  # noqa: N802
        self._dispatch()

    def do_GET(self):  # noqa: N802
        self._dispatch()

    def do_POST(self):  # noqa: N802
        self._dispatch()

    def log_message(self, format, *args):  # noqa: A003
        # Terse logging
        return


def run():
    server = HTTPServer((HOST, PORT), ProxyHandler)
    print(f"Local GitHub proxy listening on http://{HOST}:{PORT}/api/github/")
    server.serve_forever()


if __name__ == "__main__":
    run()
