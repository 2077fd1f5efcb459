# tests/test_server.py
import pytest
from gridclaim.ledger import Claim, Ledger
from gridclaim.server import create_app


@pytest.fixture
def ledger():
    return Ledger()

@pytest.fixture
def client(ledger):
    app = create_app(ledger)
    app.testing = True
    return app.test_client()


def test_health(client):
    r = client.get("/health")
    assert r.status_code == 200
    assert r.get_json() == {"status": "ok"}

def test_apps_do_not_share_ledgers():
    a, b = create_app(), create_app()
    assert a.config["LEDGER"] is not b.config["LEDGER"]

def test_api_claim_and_list(client, ledger):
    r = client.post("/claim", json={"owner": "Alice", "color": "red", "cells": ["0 0", [0, 1]]})
    assert r.status_code == 200
    assert r.get_json()["claimed"] == ["0 0", "0 1"]

    data = client.get("/claims").get_json()
    assert [c["coordinates"] for c in data["claims"]] == ["0 0", "0 1"]
    assert data["claims"][0]["color"] == "Red"
    assert len(ledger) == 2

def test_api_claim_conflict(client, ledger):
    ledger.try_claim([Claim("0 0", "Alice", "Red")])
    r = client.post("/claim", json={"owner": "Bob", "color": "Blue", "cells": ["0 0", "0 1"]})
    assert r.status_code == 409
    body = r.get_json()
    assert body["status"] == "conflict"
    assert body["occupied"] == ["0 0"]
    assert ledger.snapshot() == [Claim("0 0", "Alice", "Red")]

@pytest.mark.parametrize("payload", [
    {"owner": "", "color": "Red", "cells": ["0 0"]},
    {"owner": "A", "color": "Pink", "cells": ["0 0"]},
    {"owner": "A", "color": "Red", "cells": "0 0"},
    {"owner": "A", "color": "Red", "cells": ["x"]},
    {"owner": "A", "color": "Red"},
    {"owner": "A", "color": "Red", "cells": [[0.9, 1.7], [True, False]]},
    {"owner": "A", "color": "Red", "cells": [[True, False]]},
    {"owner": ["x"], "color": "Red", "cells": ["0 0"]},
    ["not", "an", "object"],
])
def test_api_claim_invalid(client, ledger, payload):
    r = client.post("/claim", json=payload)
    assert r.status_code == 400
    assert r.get_json()["status"] == "error"
    assert len(ledger) == 0

def test_api_claim_not_json(client):
    r = client.post("/claim", data="owner=A", content_type="text/plain")
    assert r.status_code == 400

def test_index_renders_grid(client, ledger):
    ledger.try_claim([Claim("3 3", "Carol", "Purple")])
    r = client.get("/")
    assert r.status_code == 200
    html = r.get_data(as_text=True)
    assert "Carol" in html
    assert 'value="0 0"' in html
    assert 'value="3 3"' not in html
    assert html.count('type="checkbox"') == 99

def test_form_claim(client, ledger):
    r = client.post("/", data={"owner": "Dave", "color": "yellow", "cells": ["1 1", "1 2"]})
    assert r.status_code == 200
    assert "Dave claimed 2 cell(s) in Yellow" in r.get_data(as_text=True)
    assert ledger.owner_of("1 2") == Claim("1 2", "Dave", "Yellow")

def test_form_conflict(client, ledger):
    ledger.try_claim([Claim("1 1", "Alice", "Red")])
    r = client.post("/", data={"owner": "Dave", "color": "Red", "cells": ["1 1"]})
    assert r.status_code == 409
    assert "Some cells are already occupied" in r.get_data(as_text=True)

def test_form_requires_owner(client, ledger):
    r = client.post("/", data={"owner": " ", "color": "Red", "cells": ["1 1"]})
    assert r.status_code == 400
    assert "owner must not be empty" in r.get_data(as_text=True)
    assert len(ledger) == 0
