import pytest

import main
from services.task_store import TaskStore
from services.tasks import TaskService
from storage import config as config_module


@pytest.fixture()
def config_path(tmp_path, monkeypatch):
    path = tmp_path / "config.json"
    monkeypatch.setattr(config_module, "CONFIG_PATH", path)
    monkeypatch.delenv("TRELLO_API_KEY", raising=False)
    monkeypatch.delenv("TRELLO_TOKEN", raising=False)
    return path


@pytest.fixture()
def service(session_factory, config_path, now):
    return TaskService(TaskStore(session_factory), clock=lambda: now)


def test_commands_require_login(service, capsys):
    code = main.main(["add", "Report", "--due", "2024-03-02"], service=service)
    assert code == 1
    assert "please sign in" in capsys.readouterr().err


def test_login_add_list_complete_delete(service, config_path, capsys):
    assert main.main(["login", "alice"], service=service) == 0
    assert config_module.load_config(config_path).owner_id == "alice"

    assert main.main(["add", "Report", "--due", "2024-03-04", "--effort", "short"], service=service) == 0
    out = capsys.readouterr().out
    assert "Created task 1: MEDIUM (4/10)" in out

    assert main.main(["list"], service=service) == 0
    listing = capsys.readouterr().out
    assert "Report" in listing
    assert "[ ]" in listing

    assert main.main(["complete", "1"], service=service) == 0
    assert main.main(["list", "--priority", "low"], service=service) == 0
    assert "[x]" in capsys.readouterr().out

    assert main.main(["delete", "1"], service=service) == 0
    assert main.main(["delete", "1"], service=service) == 1
    capsys.readouterr()
    assert main.main(["list"], service=service) == 0
    assert "No tasks" in capsys.readouterr().out


def test_trello_auth_then_import_reports_bad_credentials(service, config_path, capsys):
    main.main(["login", "alice"], service=service)
    assert main.main(["import-trello"], service=service) == 1
    assert "invalid credentials" in capsys.readouterr().err

    assert main.main(["trello-auth", "k", "t"], service=service) == 0
    cfg = config_module.load_config(config_path)
    assert (cfg.trello_api_key, cfg.trello_token) == ("k", "t")


def test_invalid_due_date_is_rejected(service):
    with pytest.raises(SystemExit):
        main.main(["add", "Report", "--due", "tomorrow"], service=service)
