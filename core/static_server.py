import html
import os
import socket
import stat
import time
from contextlib import asynccontextmanager
from typing import Optional
from urllib.parse import quote

import uvicorn
from fastapi import FastAPI, Request
from fastapi.staticfiles import StaticFiles
from starlette.concurrency import run_in_threadpool
from starlette.datastructures import URL
from starlette.exceptions import HTTPException
from starlette.responses import HTMLResponse, RedirectResponse, Response
from starlette.types import Scope

from utils.config import Config
from utils.error_handler import ServerBindError
from utils.logger import setup_logger, UVICORN_LOG_CONFIG

logger = setup_logger('static_server')


def render_directory_listing(directory: str) -> str:
    """디렉토리 목록을 <pre> 링크 목록 HTML로 생성 (하위 디렉토리는 '/' 접미사)"""
    entries = []
    with os.scandir(directory) as it:
        for entry in it:
            name = entry.name + "/" if entry.is_dir() else entry.name
            entries.append(name)

    lines = ['<!doctype html>', '<meta name="viewport" content="width=device-width">', '<pre>']
    for name in sorted(entries):
        lines.append(f'<a href="{quote(name)}">{html.escape(name)}</a>')
    lines.append('</pre>')
    return "\n".join(lines) + "\n"


class DirectoryStaticFiles(StaticFiles):
    """index.html이 없는 디렉토리는 목록을 생성해서 보여주는 StaticFiles"""

    async def check_config(self) -> None:
        # 루트 디렉토리가 없어도 기동은 하고 모든 요청에 404 응답
        if self.directory is not None and not os.path.isdir(self.directory):
            logger.warning(f"Document root does not exist: {self.directory}")
            return
        await super().check_config()

    async def get_response(self, path: str, scope: Scope) -> Response:
        try:
            return await super().get_response(path, scope)
        except HTTPException as e:
            if e.status_code != 404:
                raise
            full_path, stat_result = await run_in_threadpool(self.lookup_path, path)
            if stat_result is None or not stat.S_ISDIR(stat_result.st_mode):
                raise

        if not scope["path"].endswith("/"):
            url = URL(scope=scope)
            url = url.replace(path=url.path + "/")
            return RedirectResponse(url=url)

        body = await run_in_threadpool(render_directory_listing, full_path)
        return HTMLResponse(body)


def create_app(document_root: Optional[str] = None) -> FastAPI:
    """
    document_root 아래 파일을 그대로 서빙하는 FastAPI 앱을 생성합니다.

    Args:
        document_root: 서빙할 디렉토리 (기본값: Config.DOCUMENT_ROOT)

    Returns:
        FastAPI: 정적 파일 마운트와 요청 로깅 미들웨어가 설정된 앱
    """
    root = document_root or Config.DOCUMENT_ROOT

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info(f"Application startup - serving {os.path.abspath(root)}")
        try:
            yield
        finally:
            logger.info("Application shutdown")

    app = FastAPI(lifespan=lifespan, docs_url=None, redoc_url=None, openapi_url=None)

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        start_time = time.time()
        client_host = request.client.host if request.client else "-"

        logger.debug(f"Request started - {client_host} - {request.method} {request.url.path}")

        try:
            response = await call_next(request)

            process_time = (time.time() - start_time) * 1000
            logger.info(
                f"Request completed - {client_host} - {request.method} {request.url.path} - "
                f"{response.status_code} - {process_time:.2f}ms"
            )
            return response
        except Exception as e:
            process_time = (time.time() - start_time) * 1000
            logger.error(
                f"Request failed - {client_host} - {request.method} {request.url.path} - "
                f"{str(e)} - {process_time:.2f}ms"
            )
            raise

    app.mount("/", DirectoryStaticFiles(directory=root, html=True, check_dir=False), name="static")
    return app


def bind_socket(host: str = Config.HOST, port: int = Config.PORT) -> socket.socket:
    """
    리스닝 소켓 생성. 실패하면 ServerBindError (재시도 없음)

    host가 빈 문자열이면 가능한 경우 IPv4/IPv6 모두 수신 (듀얼 스택)
    """
    try:
        if host == "" and socket.has_dualstack_ipv6():
            sock = socket.create_server(("::", port), family=socket.AF_INET6, dualstack_ipv6=True)
        else:
            sock = socket.create_server((host, port))
    except OSError as e:
        raise ServerBindError(host, port, e) from e
    sock.set_inheritable(True)
    return sock


def build_server(app: FastAPI) -> uvicorn.Server:
    config = uvicorn.Config(app, log_level="info", log_config=UVICORN_LOG_CONFIG)
    return uvicorn.Server(config)


def run_server(app: FastAPI, host: str = Config.HOST, port: int = Config.PORT) -> None:
    """소켓을 바인딩한 뒤 프로세스가 종료될 때까지 블로킹"""
    sock = bind_socket(host, port)
    logger.info(f"Serving HTTP on {host or '*'}:{port}")
    build_server(app).run(sockets=[sock])
