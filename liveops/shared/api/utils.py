from typing import Any, Literal
from pydantic import BaseModel, ConfigDict, Field
from os import environ
from uuid import uuid4
from fastapi import FastAPI
from fastapi.responses import ORJSONResponse
from functools import lru_cache
from pathlib import Path
from importlib import import_module
from loguru import logger

from liveops import __version__
from .errors import E_INTERNAL


# package folder -> URL prefix
ROUTE_FOLDERS = {
    'liveops.shared.api': '/api',
    'liveops.api.v1': '/api/v1',
}


def format_error(ex: BaseException) -> str:
    from traceback import TracebackException
    return ''.join(TracebackException.from_exception(ex).format())


def get_build_version() -> str:
    return environ.get('BUILD_COMMIT') or __version__


class ApiResponse(BaseModel):
    version: str | None = Field(default_factory=get_build_version)


class ApiSuccess(ApiResponse):
    success: Literal[True] = True
    results: Any = "OK"


class ApiFailure(ApiResponse):
    model_config = ConfigDict(populate_by_name=True)

    success: Literal[False] = False
    errcode: str = E_INTERNAL
    erresid: str = Field(default_factory=lambda: uuid4().hex[:10])
    errmesg: str = Field(default='We are sorry, an error occurred.', alias='errorMessage')


def api_failure(errcode: str | None = None, errmesg: Exception | str | None = None, *, trace: Any = None):
    import inspect

    if not errcode:
        errcode = ApiFailure.model_fields['errcode'].default

    if isinstance(errmesg, Exception):
        errmesg = format_error(errmesg)

    if not errmesg:
        errmesg = ApiFailure.model_fields['errmesg'].default

    failure = ApiFailure(errcode=errcode, errmesg=errmesg)

    caller_frame = inspect.stack()[1]
    module = inspect.getmodule(caller_frame.frame)
    module_name = module.__name__ if module and getattr(module, "__name__", None) else caller_frame.filename
    caller_info = f"{module_name}:{caller_frame.function}:{caller_frame.lineno}"

    logger.warning(
        f'{failure.errcode} {failure.erresid}\n{failure.errmesg} '
        f'caller={caller_info} trace={trace}'
    )

    return failure


def check_error(results: ApiFailure | dict) -> tuple[bool, bool]:
    if isinstance(results, ApiFailure):
        return True, results.errcode == E_INTERNAL

    if isinstance(results, dict) and 'errcode' in results:
        return True, results['errcode'] == E_INTERNAL

    return False, False


def make_response(results, *, status_code: int | None = None):
    if isinstance(results, Exception):
        response = api_failure(errmesg=format_error(results))
        if status_code is None:
            status_code = 500
    else:
        response = results
        is_error, is_internal = check_error(results)
        if status_code is None:
            if is_error:
                status_code = 500 if is_internal else 400
            else:
                status_code = 200

    return ORJSONResponse(
        status_code=status_code,
        content=response.model_dump(by_alias=True) if hasattr(response, 'model_dump') else response
    )


def load_routes(app: FastAPI):
    for package, prefix in ROUTE_FOLDERS.items():
        load_routes_in_package(app, package, prefix)

    for route_info in get_all_routes_info(app):
        methods = ','.join(sorted(route_info['methods']))
        logger.info('Loaded route: {:<12} {:<60} {}', methods, route_info['path'], route_info['endpoint'])


def load_routes_in_package(app: FastAPI, package: str, prefix: str):
    from ..config import config
    disabled_routes = [x.strip() for x in (config.get('API_DISABLED') or '').split(',') if x.strip()]
    logger.debug('disabled routes: {}', disabled_routes)

    folder = Path(import_module(package).__file__).parent
    for x in sorted(folder.rglob('*.py')):
        if x.name == '__init__.py':
            continue

        relative_path = x.relative_to(folder).with_suffix('')
        name = '.'.join((package, *relative_path.parts))
        if any(f'.{disabled_route}' in name for disabled_route in disabled_routes):
            logger.warning('disabled route in {}', name)
            continue

        try:
            module = import_module(name)
        except ImportError as e:
            logger.warning('Failed to import {}: {}', name, e)
            continue

        if hasattr(module, "router"):
            app.include_router(module.router, prefix=prefix)
            paths = [prefix + route.path for route in module.router.routes if hasattr(route, 'path')]
            logger.info('Added routes in {}: {}', name, ', '.join(paths))


def get_all_routes_info(app: FastAPI):
    routes_info = []

    for route in app.routes:
        # mounts and included-router wrappers carry no path/endpoint of their own
        if not all(hasattr(route, attr) for attr in ('methods', 'path', 'endpoint')):
            continue

        endpoint_name = route.endpoint.__name__ if hasattr(route.endpoint, '__name__') else str(route.endpoint)
        routes_info.append(
            {
                "methods": sorted(route.methods or ()),
                "path": route.path,
                "name": getattr(route, 'name', None),
                "endpoint": endpoint_name,
            }
        )

    return routes_info


@lru_cache
def get_worker_info():
    project_root = Path(__file__).parent.parent.parent.parent
    worker_name = environ.get('WORKER_NAME', project_root.name)

    parts = environ.get('BUILD_COMMIT', '').split('-')
    commit_id = parts[1] if len(parts) > 1 else 'dev'

    return worker_name, commit_id, uuid4().hex[:8]


def init_logger():
    import sys
    import logging
    from ..config import config

    for name in ('azure', 'azure.core.pipeline.policies.http_logging_policy', 'azure.identity'):
        logging.getLogger(name).setLevel(logging.WARNING)

    logger.remove()

    worker_name, commit_id, _ = get_worker_info()

    if (config.get('DEBUG') or '').lower() == 'true':
        logger_level = 'DEBUG'
        logger_format = (
            f'<yellow>{worker_name}:{commit_id}</yellow> | '
            '<green>{time:MM-DD HH:mm:ss.SSS}</green> | '
            '<level>{level: <8}</level> | '
            '<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | '
            '<level>{message}</level>'
        )
    else:
        logger_level = 'INFO'
        logger_format = (
            f'{worker_name}:{commit_id} | '
            '{time:MM-DD HH:mm:ss.SSS} | '
            '{level: <8} | '
            '{name}:{function}:{line} | '
            '{message}'
        )
    logger.add(sys.stderr, level=logger_level, format=logger_format)
