"""Smoke tests — validate the function app endpoints end-to-end."""

import json
from unittest.mock import MagicMock, patch

import azure.functions as func

from vlisp_project.orchestration.saver import ProjectComposeError

_PAYLOAD = {
    "project_name": "demo",
    "project_directory": "C:\\proj",
    "project_file_path": "C:\\proj\\demo.prj",
    "source_files": [{"file_path": "C:\\proj\\main.lsp"}],
    "metadata": {":NAME": "demo"},
}


def _request(body: bytes, route: str) -> func.HttpRequest:
    return func.HttpRequest(method="POST", url=f"/api/{route}", body=body)


def test_health_check_returns_status() -> None:
    """Health endpoint returns ok status with version from the package."""
    from vlisp_project.functions.http_trigger import health_check

    response = health_check(MagicMock(spec=func.HttpRequest))

    assert response.status_code == 200
    body = json.loads(response.get_body())
    assert body["status"] == "ok"
    assert body["version"] == "0.1.0"


def test_render_returns_project_text() -> None:
    from vlisp_project.functions.http_trigger import render_project

    response = render_project(_request(json.dumps(_PAYLOAD).encode(), "render"))

    assert response.status_code == 200
    text = response.get_body().decode("utf-8")
    assert text.startswith(";;; VLisp project file [V2.0] demo saved to:[C:\\proj]")
    assert ':OWN-LIST\r\n ("main") \r\n' in text
    assert text.endswith(";;; EOF")


def test_render_rejects_invalid_json() -> None:
    from vlisp_project.functions.http_trigger import render_project

    response = render_project(_request(b"{not json", "render"))

    assert response.status_code == 400
    assert json.loads(response.get_body())["status"] == "error"


def test_render_rejects_incomplete_payload() -> None:
    from vlisp_project.functions.http_trigger import render_project

    payload = {k: v for k, v in _PAYLOAD.items() if k != "project_directory"}
    response = render_project(_request(json.dumps(payload).encode(), "render"))

    assert response.status_code == 400
    assert "project_directory" in json.loads(response.get_body())["message"]


def test_render_rejects_non_array_source_files() -> None:
    from vlisp_project.functions.http_trigger import render_project

    payload = {**_PAYLOAD, "source_files": 5}
    response = render_project(_request(json.dumps(payload).encode(), "render"))

    assert response.status_code == 400
    assert "source_files" in json.loads(response.get_body())["message"]


def test_render_reports_compose_failure() -> None:
    from vlisp_project.functions.http_trigger import render_project

    payload = {**_PAYLOAD, "project_name": ""}
    response = render_project(_request(json.dumps(payload).encode(), "render"))

    assert response.status_code == 422
    assert "project name is missing" in json.loads(response.get_body())["message"]


def test_save_stores_project() -> None:
    from vlisp_project.functions.http_trigger import save_project

    mock_saver = MagicMock()
    mock_saver.save.return_value = "saved text"

    with (
        patch("vlisp_project.functions.http_trigger.load_config"),
        patch(
            "vlisp_project.functions.http_trigger.project_saver_from_config",
            return_value=mock_saver,
        ),
    ):
        response = save_project(_request(json.dumps(_PAYLOAD).encode(), "save"))

    assert response.status_code == 200
    body = json.loads(response.get_body())
    assert body == {"status": "ok", "project_file_path": "C:\\proj\\demo.prj", "chars": 10}
    mock_saver.save.assert_called_once()
    assert mock_saver.save.call_args[0][0].project_name == "demo"


def test_save_reports_compose_failure() -> None:
    from vlisp_project.functions.http_trigger import save_project

    mock_saver = MagicMock()
    mock_saver.save.side_effect = ProjectComposeError("Failed to compose project text: boom")

    with (
        patch("vlisp_project.functions.http_trigger.load_config"),
        patch(
            "vlisp_project.functions.http_trigger.project_saver_from_config",
            return_value=mock_saver,
        ),
    ):
        response = save_project(_request(json.dumps(_PAYLOAD).encode(), "save"))

    assert response.status_code == 422


def test_save_returns_500_on_unexpected_error() -> None:
    from vlisp_project.functions.http_trigger import save_project

    with patch(
        "vlisp_project.functions.http_trigger.load_config",
        side_effect=KeyError("AzureWebJobsStorage"),
    ):
        response = save_project(_request(json.dumps(_PAYLOAD).encode(), "save"))

    assert response.status_code == 500
    assert json.loads(response.get_body())["message"] == "Internal server error"
