"""HTTP trigger blueprint — health check, render and save endpoints."""

import json
import logging

import azure.functions as func

from vlisp_project import __version__
from vlisp_project.config import load_config
from vlisp_project.orchestration.saver import ProjectComposeError, project_saver_from_config
from vlisp_project.project.models import project_tree_from_dict
from vlisp_project.project.render import generate_project_text

logger = logging.getLogger(__name__)

bp = func.Blueprint()


def _json_response(payload: dict, status_code: int) -> func.HttpResponse:
    return func.HttpResponse(
        json.dumps(payload), status_code=status_code, mimetype="application/json"
    )


def _error_response(message: str, status_code: int) -> func.HttpResponse:
    return _json_response({"status": "error", "message": message}, status_code)


@bp.route(route="health", methods=["GET"], auth_level=func.AuthLevel.ANONYMOUS)
def health_check(req: func.HttpRequest) -> func.HttpResponse:
    """Health check endpoint. Returns service status and version."""
    logger.info("[health_check] health check requested")

    try:
        return _json_response({"status": "ok", "version": __version__}, 200)

    except Exception:
        logger.error("[health_check] health check failed", exc_info=True)
        return _error_response("Internal server error", 500)


@bp.route(route="render", methods=["POST"], auth_level=func.AuthLevel.FUNCTION)
def render_project(req: func.HttpRequest) -> func.HttpResponse:
    """Return the raw project file text for the project tree in the request body."""
    logger.info("[render_project] render requested")

    try:
        tree = project_tree_from_dict(req.get_json())
    except ValueError as exc:
        logger.warning("[render_project] invalid payload; error:%s", exc)
        return _error_response(str(exc), 400)

    try:
        result = generate_project_text(tree)
        if not result:
            return _error_response(f"Failed to compose project text: {result.error}", 422)

        return func.HttpResponse(result.text, status_code=200, mimetype="text/plain")

    except Exception:
        logger.error("[render_project] render failed", exc_info=True)
        return _error_response("Internal server error", 500)


@bp.route(route="save", methods=["POST"], auth_level=func.AuthLevel.FUNCTION)
def save_project(req: func.HttpRequest) -> func.HttpResponse:
    """Render the project tree in the request body and store it in blob storage.

    Requires a function key. The stored file replaces any previous version
    at the same project file path.
    """
    logger.info("[save_project] save requested")

    try:
        tree = project_tree_from_dict(req.get_json())
    except ValueError as exc:
        logger.warning("[save_project] invalid payload; error:%s", exc)
        return _error_response(str(exc), 400)

    try:
        config = load_config()
        saver = project_saver_from_config(config)
        saved_text = saver.save(tree)
        chars = len(saved_text or "")
        logger.info(
            "[save_project] project saved; path:%s;chars:%d", tree.project_file_path, chars
        )
        return _json_response(
            {"status": "ok", "project_file_path": tree.project_file_path, "chars": chars}, 200
        )

    except ProjectComposeError as exc:
        logger.warning("[save_project] compose failed; error:%s", exc)
        return _error_response(str(exc), 422)

    except Exception:
        logger.error("[save_project] save failed", exc_info=True)
        return _error_response("Internal server error", 500)
