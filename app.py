#!/usr/bin/env python3
"""
Pi-hole Toggle Proxy

Serves a small web page with one button per Pi-hole regex deny rule plus the
global blocking switch, and forwards the page's /api calls to the Pi-hole API.
"""

import os
import sys
import json
import mimetypes
from datetime import datetime
from http.server import HTTPServer, BaseHTTPRequestHandler
from typing import Any, Dict, Optional
from urllib.parse import urlsplit, parse_qs, unquote

from config import Config
from pihole_client import PiholeClient
from store import StatusStore
from toggle_service import ToggleService
from health import HealthChecker
from logger import logger
from exceptions import ConfigurationError, UpstreamError, ValidationError


CORS_HEADERS = {
    'Access-Control-Allow-Origin': '*',
    'Access-Control-Allow-Methods': 'GET, POST, PUT, DELETE, OPTIONS',
    'Access-Control-Allow-Headers': 'Origin, X-Requested-With, Content-Type, Accept, Authorization',
}


class ProxyRequestHandler(BaseHTTPRequestHandler):
    """Routes /api calls to the ToggleService and serves the web client"""

    server_version = "PiholeToggle/1.0"

    def end_headers(self):
        for name, value in CORS_HEADERS.items():
            self.send_header(name, value)
        super().end_headers()

    def do_OPTIONS(self):
        self.send_response(200)
        self.send_header('Content-Length', '0')
        self.end_headers()
        logger.request_handled('OPTIONS', self.path, 200)

    def do_GET(self):
        url = urlsplit(self.path)
        service = self.server.app.service

        if url.path == '/api/config':
            self._send_json(200, service.get_config())
        elif url.path == '/api/getDomainStatusAll':
            num = parse_qs(url.query).get('num', [None])[0]
            self._call(lambda: service.get_domain_status_all(num), 'Failed to get domain status all')
        elif url.path == '/api/getBlockingStatus':
            self._call(lambda: service.get_blocking_status().to_dict(), 'Failed to get blocking status')
        elif url.path == '/health':
            self._send_health()
        elif url.path.startswith('/api/'):
            self._send_json(404, {"error": "Not found", "message": f"No route for GET {url.path}"})
        else:
            self._send_static(url.path)

    def do_POST(self):
        url = urlsplit(self.path)
        service = self.server.app.service
        raw = self._read_raw_body()
        if raw is None:
            return

        if url.path == '/api/setDomainStatus':
            handler, failure = service.set_domain_status, 'Failed to set domain status'
        elif url.path == '/api/setBlockingStatus':
            handler, failure = service.set_blocking_status, 'Failed to set blocking status'
        else:
            self._send_json(404, {"error": "Not found", "message": f"No route for POST {url.path}"})
            return

        body = self._parse_json_body(raw)
        if body is None:
            return
        self._call(lambda: handler(body), failure)

    def _call(self, operation, failure_message: str):
        """Run a service operation and translate its outcome into a response"""
        try:
            result = operation()
        except ValidationError as e:
            self._send_json(400, {"error": "Missing required parameters", "message": str(e)})
            return
        except UpstreamError as e:
            logger.error(f"{failure_message}: {e}", status_code=e.status_code)
            self._send_json(e.status_code or 500, {"error": failure_message, "message": str(e)})
            return
        except Exception as e:
            logger.error(f"{failure_message}: unexpected error {e}")
            self._send_json(500, {"error": failure_message, "message": str(e)})
            return

        if result is None:
            self._send_empty(204)
        else:
            self._send_json(200, result)

    def _read_raw_body(self) -> Optional[bytes]:
        """Read the request body; sends a 400 and returns None on a bad Content-Length"""
        header = self.headers.get('Content-Length') or '0'
        try:
            length = int(header)
        except ValueError:
            self.close_connection = True
            self._send_json(400, {"error": "Invalid request", "message": f"Invalid Content-Length header: {header!r}"})
            return None
        return self.rfile.read(length) if length > 0 else b''

    def _parse_json_body(self, raw: bytes) -> Optional[Dict]:
        """Decode the request body; sends a 400 and returns None when it is unusable"""
        if not raw.strip():
            return {}

        try:
            body = json.loads(raw)
        except (ValueError, UnicodeDecodeError) as e:
            self._send_json(400, {"error": "Invalid request", "message": f"Malformed JSON body: {e}"})
            return None

        if not isinstance(body, dict):
            self._send_json(400, {"error": "Invalid request", "message": "Request body must be a JSON object"})
            return None
        return body

    def _send_health(self):
        try:
            health_data = self.server.app.health_checker.get_health_status()
            self._send_json(200 if health_data["status"] == "healthy" else 503, health_data)
        except Exception as e:
            logger.error(f"Health check error: {e}")
            self._send_json(500, {
                "status": "error",
                "timestamp": datetime.now().isoformat(),
                "error": str(e)
            })

    def _send_static(self, path: str):
        static_root = os.path.realpath(self.server.app.config.static_dir)
        relative = unquote(path).lstrip('/') or 'index.html'
        file_path = os.path.realpath(os.path.join(static_root, relative))

        if os.path.commonpath([static_root, file_path]) != static_root or not os.path.isfile(file_path):
            self._send_json(404, {"error": "Not found", "message": path})
            return

        content_type = mimetypes.guess_type(file_path)[0] or 'application/octet-stream'
        with open(file_path, 'rb') as f:
            content = f.read()

        self.send_response(200)
        self.send_header('Content-Type', content_type)
        self.send_header('Content-Length', str(len(content)))
        self.end_headers()
        self.wfile.write(content)
        logger.request_handled(self.command, path, 200)

    def _send_json(self, status: int, data: Any):
        content = json.dumps(data).encode()
        self.send_response(status)
        self.send_header('Content-Type', 'application/json')
        self.send_header('Content-Length', str(len(content)))
        self.end_headers()
        self.wfile.write(content)
        logger.request_handled(self.command, self.path, status)

    def _send_empty(self, status: int):
        self.send_response(status)
        self.send_header('Content-Length', '0')
        self.end_headers()
        logger.request_handled(self.command, self.path, status)

    def log_message(self, format, *args):
        pass  # request_handled covers access logging


class PiholeToggleApp:
    """Wires the Pi-hole client, the status store and the HTTP server together"""

    def __init__(self, config: Config, client: PiholeClient = None, store: StatusStore = None):
        self.config = config
        self.client = client or PiholeClient(config.pihole_api_url, config.request_timeout)
        self.store = store or StatusStore()
        self.service = ToggleService(config, self.client, self.store)
        self.health_checker = HealthChecker(self.client, self.store, config.health_cache_duration)
        self.server = None

        logger.set_start_time()
        logger.info("Pi-hole toggle proxy initialized")

    def create_server(self, port: int = None) -> HTTPServer:
        """Bind the HTTP server; port 0 picks a free port"""
        bind_port = self.config.app_port if port is None else port
        server = HTTPServer((self.config.app_host, bind_port), ProxyRequestHandler)
        server.app = self
        self.server = server
        return server

    def run(self) -> int:
        """Check the Pi-hole API, then serve until interrupted"""
        if not self.health_checker.startup_check():
            logger.error("Startup check failed. Exiting...")
            return 1

        server = self.create_server()
        logger.info(f"Server running on http://localhost:{server.server_address[1]}")
        logger.info(f"PIHOLE API URL: {self.config.pihole_api_url}")

        try:
            server.serve_forever()
        except KeyboardInterrupt:
            logger.info("Received interrupt signal, shutting down...")
        finally:
            server.server_close()
        return 0


def main() -> int:
    """Main entry point"""
    try:
        config = Config.from_env()
    except ConfigurationError as e:
        logger.error(f"Configuration error: {e}")
        return 1

    try:
        app = PiholeToggleApp(config)
        return app.run()
    except OSError as e:
        logger.error(f"Failed to start server on port {config.app_port}: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
