import json

import cli


class _Resp:
    def __init__(self, payload, ok=True):
        self._payload = payload
        self.ok = ok

    def json(self):
        return self._payload


def test_preview_posts_file_with_flags(tmp_path, monkeypatch, capsys):
    path = tmp_path / "cycle.json"
    path.write_text(json.dumps({"configs": {"text": {"type": "text_block"}}, "data": {}}), encoding="utf-8")
    sent = {}

    def fake_post(url, json=None, timeout=None):
        sent["url"] = url
        sent["json"] = json
        return _Resp({"data": {}})

    monkeypatch.setattr(cli.requests, "post", fake_post)

    rc = cli.main(["--api", "http://api/", "preview", "--file", str(path), "--allow-add", "--discriminator", "kind"])

    assert rc == 0
    assert sent["url"] == "http://api/preview"
    assert sent["json"]["options"] == {"allow_add": True}
    assert sent["json"]["discriminator"] == "kind"
    assert '"data": {}' in capsys.readouterr().out


def test_health_returns_nonzero_on_failure(monkeypatch):
    monkeypatch.setattr(cli.requests, "get", lambda url, timeout=None: _Resp({"detail": "down"}, ok=False))
    assert cli.main(["health"]) == 1
