import pytest

import app as app_module


@pytest.fixture
def stores(tmp_path, monkeypatch):
    stores = app_module.create_stores(str(tmp_path))
    monkeypatch.setattr(app_module, "stores", stores)
    return stores


@pytest.fixture
def client(stores):
    app_module.app.config["TESTING"] = True
    with app_module.app.test_client() as client:
        yield client


@pytest.fixture
def agent(monkeypatch):
    """Replace the agent call with a recorder returning a canned envelope."""
    calls = []
    state = {"envelope": None, "error": None}

    def fake_call_agent(message, agent, session_id=None, size=None):
        calls.append({"message": message, "agent": agent, "session_id": session_id, "size": size})
        if state["error"] is not None:
            raise state["error"]
        return state["envelope"]

    monkeypatch.setattr(app_module, "call_agent", fake_call_agent)
    state["calls"] = calls
    return state
