import errno
import socket
import sys

import pytest

import main
from core.browser import OSFamily, open_browser_async
from core.static_server import run_server
from utils.config import Config
from utils.error_handler import ServerBindError


class TestShouldOpenBrowser:

    @pytest.mark.parametrize("argv, expected", [
        (["main.py", "-o"], True),
        (["main.py", "-o", "--extra"], True),
        (["main.py"], False),
        ([], False),
        (["main.py", "--open"], False),
        (["main.py", "-oo"], False),
        (["main.py", "-x", "-o"], False),
    ])
    def test_only_first_argument_is_checked(self, argv, expected):
        assert main.should_open_browser(argv) is expected


class TestMain:
    """main 실행 흐름 테스트 (서버는 실제로 띄우지 않음)"""

    @pytest.fixture
    def calls(self, monkeypatch):
        calls = {"launch": [], "serve": []}

        def fake_run_server(app, host, port):
            calls["serve"].append((app, host, port))

        monkeypatch.setattr(main, "run_server", fake_run_server)
        monkeypatch.setattr(main, "open_browser_async", lambda url: calls["launch"].append(url))
        return calls

    def test_open_flag_launches_browser(self, calls):
        main.main(["main.py", "-o"])

        assert calls["launch"] == ["http://localhost:8080/"]
        assert len(calls["serve"]) == 1
        _, host, port = calls["serve"][0]
        assert (host, port) == ("", 8080)

    def test_no_arguments(self, calls):
        main.main(["main.py"])

        assert calls["launch"] == []
        assert len(calls["serve"]) == 1

    def test_other_argument(self, calls):
        main.main(["main.py", "--verbose"])

        assert calls["launch"] == []
        assert len(calls["serve"]) == 1

    def test_unix_launch_command(self, monkeypatch):
        launched = []
        threads = []

        def launch(url):
            threads.append(open_browser_async(url, os_family=OSFamily.OTHER, launcher=launched.append))

        monkeypatch.setattr(main, "open_browser_async", launch)
        monkeypatch.setattr(main, "run_server", lambda app, host, port: None)

        main.main(["main.py", "-o"])
        threads[0].join(timeout=5)

        assert launched == [["xdg-open", "http://localhost:8080/"]]

    def test_bind_failure_ends_with_status_zero(self, monkeypatch, capsys):
        def fail(app, host, port):
            raise ServerBindError(host, port, OSError(errno.EADDRINUSE, "Address already in use"))

        monkeypatch.setattr(main, "run_server", fail)

        # 콘솔 스크립트처럼 반환값으로 종료
        with pytest.raises(SystemExit) as exc_info:
            sys.exit(main.main(["main.py"]))

        assert exc_info.value.code in (0, None)
        assert "SYS_001" in capsys.readouterr().err

    def test_occupied_port_is_not_retried(self, monkeypatch, capsys):
        occupied = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        occupied.bind(("127.0.0.1", 0))
        occupied.listen(1)
        port = occupied.getsockname()[1]
        attempts = []

        def serve_on_occupied_port(app, host, port_):
            attempts.append(port)
            run_server(app, "127.0.0.1", port)

        monkeypatch.setattr(main, "run_server", serve_on_occupied_port)
        try:
            assert main.main(["main.py"]) is None
        finally:
            occupied.close()

        assert attempts == [port]
        assert f"cannot bind 127.0.0.1:{port}" in capsys.readouterr().err

def test_fixed_configuration():
    assert Config.PORT == 8080
    assert Config.DOCUMENT_ROOT == "app"
    assert Config.OPEN_FLAG == "-o"
    assert Config.BROWSER_URL == "http://localhost:8080/"
