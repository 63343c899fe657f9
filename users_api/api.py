"""
Users API - FastAPI application serving a fixed user record with access logging
"""
import socket
from typing import List, Optional

import click
import uvicorn
from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

from logrouter import LogRouter
from users_api.access import AccessRecorder


USER = {
    'name': {
        'first': 'Matthew',
        'last': 'Setter',
    },
    'id': 7,
    'employment': 'Freelance Technical Writer',
    'country': 'Germany',
    'languages': ['PHP', 'Node.js', 'Bash', 'Ruby', 'Python', 'Go'],
}


# Models
class Name(BaseModel):
    first: str
    last: str


class User(BaseModel):
    name: Name
    id: int
    employment: str
    country: str
    languages: List[str]


class UsersResponse(BaseModel):
    success: bool
    error: Optional[str]
    data: User


def get_log_router(request: Request) -> LogRouter:
    return request.app.state.log_router


def create_app(router: LogRouter) -> FastAPI:
    """
    Build the application around an already configured log router

    Every request is access-logged through the router; CORS allows any origin.
    """
    app = FastAPI(title="Users API", description="Fixed user record with access logging")
    app.state.log_router = router

    app.add_middleware(
        CORSMiddleware,
        allow_origins=['*'],
        allow_methods=['*'],
        allow_headers=['*'],
    )
    # Added last so it wraps CORS and records preflight requests too
    app.add_middleware(AccessRecorder, router=router)

    @app.get('/api/v1/users', response_model=UsersResponse)
    def users(log_router: LogRouter = Depends(get_log_router)):
        """Return the fixed user record"""
        log_router.info(USER)
        return {'success': True, 'error': None, 'data': USER}

    return app


def bind_socket(host: str, port: int) -> socket.socket:
    """
    Bind the listening socket

    Raises:
        OSError: If the address cannot be bound
    """
    family = socket.AF_INET6 if ':' in host else socket.AF_INET
    sock = socket.socket(family, socket.SOCK_STREAM)
    try:
        sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        sock.bind((host, port))
    except OSError:
        sock.close()
        raise
    sock.set_inheritable(True)
    return sock


def build_server(app: FastAPI) -> uvicorn.Server:
    # uvicorn's own access log is replaced by AccessRecorder
    config = uvicorn.Config(app, access_log=False, log_level='warning')
    return uvicorn.Server(config)


def run_server(app: FastAPI, host: str = '0.0.0.0', port: int = 4000):
    """Bind, announce the port, then serve until interrupted"""
    sock = bind_socket(host, port)
    click.echo(f'Listening on port: {port}')
    build_server(app).run(sockets=[sock])
