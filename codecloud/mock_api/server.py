"""
Mock project-store API server for local development and testing.

This simple server keeps projects in memory and implements the same JSON
contract as the real backend. Use it for local development without needing
a deployed API.

Usage:
    python -m codecloud.mock_api.server [--port 3001]

Endpoints:
    POST   /api/projects                 - Save a project
    GET    /api/projects/user/<userId>   - List a user's projects
    GET    /api/projects/<id>?userId=    - Fetch a project
    PUT    /api/projects/<id>            - Update a project
    DELETE /api/projects/<id>?userId=    - Delete a project
    GET    /health                       - Health check
"""

import argparse
import json
import logging
import threading
from datetime import datetime
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from typing import Any, Dict, Optional
from urllib.parse import parse_qs, unquote, urlparse

logger = logging.getLogger(__name__)


class ProjectStore:
    """In-memory project table with server-assigned ids and timestamps."""

    def __init__(self):
        self._projects: Dict[int, Dict[str, Any]] = {}
        self._next_id = 1
        self._lock = threading.Lock()

    @staticmethod
    def _now() -> str:
        return datetime.utcnow().isoformat() + 'Z'

    def create(self, user_id: str, project_name: str, project_data: str) -> Dict[str, Any]:
        with self._lock:
            project_id = self._next_id
            self._next_id += 1
            now = self._now()
            self._projects[project_id] = {
                'id': project_id,
                'user_id': user_id,
                'project_name': project_name,
                'project_data': project_data,
                'created_at': now,
                'updated_at': now
            }
            return dict(self._projects[project_id])

    def get(self, project_id: int, user_id: str) -> Optional[Dict[str, Any]]:
        with self._lock:
            project = self._projects.get(project_id)
            if project is None or project['user_id'] != user_id:
                return None
            return dict(project)

    def list_for_user(self, user_id: str) -> list:
        with self._lock:
            return [
                {
                    'id': p['id'],
                    'project_name': p['project_name'],
                    'created_at': p['created_at'],
                    'updated_at': p['updated_at']
                }
                for p in sorted(self._projects.values(), key=lambda p: p['id'])
                if p['user_id'] == user_id
            ]

    def update(self, project_id: int, user_id: str, changes: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        with self._lock:
            project = self._projects.get(project_id)
            if project is None or project['user_id'] != user_id:
                return None
            project.update(changes)
            project['updated_at'] = self._now()
            return dict(project)

    def delete(self, project_id: int, user_id: str) -> bool:
        with self._lock:
            project = self._projects.get(project_id)
            if project is None or project['user_id'] != user_id:
                return False
            del self._projects[project_id]
            return True


class MockAPIHandler(BaseHTTPRequestHandler):
    """HTTP request handler for the mock project-store API."""

    store: ProjectStore = ProjectStore()

    def _send_json_response(self, status_code: int, data: Any):
        """Send a JSON response."""
        body = json.dumps(data).encode('utf-8')
        self.send_response(status_code)
        self.send_header('Content-Type', 'application/json')
        self.send_header('Content-Length', str(len(body)))
        self.end_headers()
        self.wfile.write(body)

    def _read_json(self) -> Optional[Dict[str, Any]]:
        content_length = int(self.headers.get('Content-Length', 0))
        body = self.rfile.read(content_length)
        try:
            data = json.loads(body.decode('utf-8') or '{}')
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            logger.error(f"Invalid JSON: {e}")
            return None
        return data if isinstance(data, dict) else None

    def _route(self):
        parsed = urlparse(self.path)
        parts = [unquote(p) for p in parsed.path.strip('/').split('/') if p]
        query = {k: v[0] for k, v in parse_qs(parsed.query).items()}
        return parts, query

    @staticmethod
    def _project_id(parts) -> Optional[int]:
        if len(parts) == 3 and parts[:2] == ['api', 'projects']:
            try:
                return int(parts[2])
            except ValueError:
                return None
        return None

    def do_GET(self):
        """Handle GET requests."""
        parts, query = self._route()

        if parts == ['health']:
            self._send_json_response(200, {
                'status': 'healthy',
                'timestamp': datetime.utcnow().isoformat() + 'Z'
            })
        elif len(parts) == 4 and parts[:3] == ['api', 'projects', 'user']:
            self._send_json_response(200, self.store.list_for_user(parts[3]))
        elif self._project_id(parts) is not None:
            user_id = query.get('userId')
            if not user_id:
                self._send_json_response(400, {'error': 'userId is required'})
                return
            project = self.store.get(self._project_id(parts), user_id)
            if project is None:
                self._send_json_response(404, {'error': 'Project not found'})
            else:
                self._send_json_response(200, project)
        else:
            self._send_json_response(404, {'error': 'Not found'})

    def do_POST(self):
        """Handle POST requests."""
        parts, _ = self._route()
        if parts != ['api', 'projects']:
            self._send_json_response(404, {'error': 'Not found'})
            return

        data = self._read_json()
        if data is None:
            self._send_json_response(400, {'error': 'Invalid JSON'})
            return

        missing = [k for k in ('userId', 'projectName', 'projectData') if not data.get(k)]
        if missing:
            self._send_json_response(400, {'error': f"Missing required fields: {', '.join(missing)}"})
            return

        project = self.store.create(data['userId'], data['projectName'], data['projectData'])
        logger.info(f"Saved project {project['id']} '{project['project_name']}' for {project['user_id']}")
        self._send_json_response(201, {
            'success': True,
            'id': project['id'],
            'createdAt': project['created_at']
        })

    def do_PUT(self):
        """Handle PUT requests."""
        parts, _ = self._route()
        project_id = self._project_id(parts)
        if project_id is None:
            self._send_json_response(404, {'error': 'Not found'})
            return

        data = self._read_json()
        if data is None:
            self._send_json_response(400, {'error': 'Invalid JSON'})
            return
        if not data.get('userId'):
            self._send_json_response(400, {'error': 'userId is required'})
            return

        changes = {}
        if 'projectName' in data:
            changes['project_name'] = data['projectName']
        if 'projectData' in data:
            changes['project_data'] = data['projectData']
        if not changes:
            self._send_json_response(400, {'error': 'Nothing to update'})
            return

        project = self.store.update(project_id, data['userId'], changes)
        if project is None:
            self._send_json_response(404, {'error': 'Project not found'})
            return

        self._send_json_response(200, {
            'success': True,
            'id': project['id'],
            'updatedAt': project['updated_at']
        })

    def do_DELETE(self):
        """Handle DELETE requests."""
        parts, query = self._route()
        project_id = self._project_id(parts)
        if project_id is None:
            self._send_json_response(404, {'error': 'Not found'})
            return

        user_id = query.get('userId')
        if not user_id:
            self._send_json_response(400, {'error': 'userId is required'})
            return

        if not self.store.delete(project_id, user_id):
            self._send_json_response(404, {'error': 'Project not found'})
            return

        self._send_json_response(200, {'success': True, 'id': project_id})

    def log_message(self, format, *args):
        """Override to use Python logging instead of stderr."""
        logger.debug(f"{self.address_string()} - {format % args}")


def create_server(host: str = '127.0.0.1', port: int = 3001,
                  store: Optional[ProjectStore] = None) -> ThreadingHTTPServer:
    """
    Create a server with its own project store.

    Pass port 0 to bind an ephemeral port; the bound address is available
    as ``server.server_address``.
    """
    handler = type('BoundMockAPIHandler', (MockAPIHandler,), {'store': store or ProjectStore()})
    return ThreadingHTTPServer((host, port), handler)


def run_server(host: str = '0.0.0.0', port: int = 3001):
    """Run the mock API server."""
    httpd = create_server(host, port)
    logger.info(f"Mock project-store API running on http://{host}:{port}")
    try:
        httpd.serve_forever()
    except KeyboardInterrupt:
        logger.info("Server shutting down...")
    finally:
        httpd.server_close()


def main():
    parser = argparse.ArgumentParser(description="Mock project-store API server")
    parser.add_argument('--host', default='0.0.0.0')
    parser.add_argument('--port', type=int, default=3001)
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(levelname)s - %(message)s'
    )
    run_server(args.host, args.port)


if __name__ == '__main__':
    main()
