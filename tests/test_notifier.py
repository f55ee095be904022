import json
from types import SimpleNamespace

import requests

from task_process import Config, Notifier


class FakeResponse:
    def __init__(self, status_code=200, text=""):
        self.status_code = status_code
        self.text = text


def test_send_failure_posts_json_payload(monkeypatch):
    sent = {}

    def fake_post(url, headers=None, data=None, verify=None, timeout=None):
        sent.update(url=url, payload=json.loads(data.decode("utf-8")), timeout=timeout)
        return FakeResponse()

    monkeypatch.setattr(requests, "post", fake_post)
    notifier = Notifier("https://notify.example.com/push", timeout=5)

    assert notifier.send_failure("deploy", "step 2 failed") is True
    assert sent["url"] == "https://notify.example.com/push"
    assert sent["timeout"] == 5
    assert sent["payload"]["title"] == "deploy失败"
    assert sent["payload"]["description"] == "step 2 failed"
    assert sent["payload"]["status"] == "failure"


def test_send_success_posts_details_as_description(monkeypatch):
    sent = {}

    def fake_post(url, headers=None, data=None, verify=None, timeout=None):
        sent.update(payload=json.loads(data.decode("utf-8")))
        return FakeResponse()

    monkeypatch.setattr(requests, "post", fake_post)

    assert Notifier("https://notify.example.com/push").send_success("deploy", "3 tasks done") is True
    assert sent["payload"]["title"] == "deploy成功"
    assert sent["payload"]["body"] == "deploy执行成功"
    assert sent["payload"]["description"] == "3 tasks done"
    assert sent["payload"]["status"] == "success"


def test_non_200_response_returns_false(monkeypatch):
    monkeypatch.setattr(requests, "post", lambda *args, **kwargs: FakeResponse(500, "oops"))
    assert Notifier("https://notify.example.com/push").send_success("deploy") is False


def test_timeout_returns_false(monkeypatch):
    def fake_post(*args, **kwargs):
        raise requests.exceptions.Timeout()

    monkeypatch.setattr(requests, "post", fake_post)
    logger = SimpleNamespace(messages=[])
    logger.info = logger.messages.append
    logger.error = logger.messages.append
    assert Notifier("https://notify.example.com/push", logger=logger).send_success("deploy") is False
    assert any("超时" in msg for msg in logger.messages)


def test_from_config_requires_api_url(tmp_path):
    assert Notifier.from_config(Config(None)) is None

    path = tmp_path / "config.yaml"
    path.write_text("notifier:\n  api_url: https://notify.example.com/push\n  timeout: 3\n", encoding="utf-8")
    notifier = Notifier.from_config(Config(str(path)))
    assert notifier.api_url == "https://notify.example.com/push"
    assert notifier.timeout == 3
