from comicscript.models import Character, Panel


def script_of(client, issue_id):
    response = client.get(f"/api/issues/{issue_id}/script")
    assert response.status_code == 200
    return response.json()


def first_panel_id(client, issue_id):
    return script_of(client, issue_id)["pages"][0]["panels"][0]["id"]


def test_issue_script_tree(client, issue):
    data = script_of(client, issue.id)

    assert data["issue"]["title"] == "The Long Night"
    assert [p["page_number"] for p in data["pages"]] == [1]
    assert [p["panel_number"] for p in data["pages"][0]["panels"]] == [1]


def test_update_issue_fields(client, issue):
    response = client.put(f"/api/issues/{issue.id}",
                          json={"synopsis": "Blackout", "writer": None, "show_cover_title": False})

    assert response.status_code == 200
    data = response.json()
    assert data["synopsis"] == "Blackout"
    assert data["writer"] is None
    assert data["show_cover_title"] is False
    assert data["title"] == "The Long Night"


def test_add_and_insert_pages(client, issue):
    appended = client.post(f"/api/issues/{issue.id}/pages").json()
    assert appended["page_number"] == 2
    assert [p["panel_number"] for p in appended["panels"]] == [1]

    inserted = client.post(f"/api/issues/{issue.id}/pages", json={"page_number": 1}).json()
    assert inserted["page_number"] == 1

    pages = script_of(client, issue.id)["pages"]
    assert [p["page_number"] for p in pages] == [1, 2, 3]
    assert pages[0]["id"] == inserted["id"]


def test_delete_page_renumbers(client, issue):
    client.post(f"/api/issues/{issue.id}/pages")
    client.post(f"/api/issues/{issue.id}/pages")
    pages = script_of(client, issue.id)["pages"]

    assert client.delete(f"/api/pages/{pages[0]['id']}").status_code == 200

    remaining = script_of(client, issue.id)["pages"]
    assert [p["page_number"] for p in remaining] == [1, 2]
    assert [p["id"] for p in remaining] == [pages[1]["id"], pages[2]["id"]]


def test_panel_lifecycle(client, db, issue):
    page_id = script_of(client, issue.id)["pages"][0]["id"]

    second = client.post(f"/api/pages/{page_id}/panels").json()
    assert second["panel_number"] == 2

    first_id = first_panel_id(client, issue.id)
    client.put(f"/api/panels/{first_id}", json={"details": "Establishing shot."})
    client.post(f"/api/panels/{first_id}/characters", json={"name": "BOB", "dialogue": "Hi"})
    client.post(f"/api/panels/{first_id}/characters", json={"name": "CAPTION", "dialogue": "Night."})

    copy = client.post(f"/api/panels/{first_id}/duplicate").json()
    assert copy["panel_number"] == 3
    assert copy["details"] == "Establishing shot."
    assert [(c["name"], c["dialogue"]) for c in copy["characters"]] == [("BOB", "Hi"), ("CAPTION", "Night.")]

    assert client.delete(f"/api/panels/{first_id}").status_code == 200

    panels = script_of(client, issue.id)["pages"][0]["panels"]
    assert [p["panel_number"] for p in panels] == [1, 2]
    assert panels[1]["id"] == copy["id"]
    assert db.query(Character).filter(Character.panel_id == first_id).count() == 0


def test_move_and_delete_characters(client, issue):
    panel_id = first_panel_id(client, issue.id)
    ids = [client.post(f"/api/panels/{panel_id}/characters", json={"name": name}).json()["id"]
           for name in ("A", "B", "C")]

    moved = client.post(f"/api/panels/{panel_id}/characters/move", json={"from_index": 2, "to_index": 0})
    assert moved.status_code == 200
    assert [c["name"] for c in moved.json()] == ["C", "A", "B"]
    assert [c["sequence"] for c in moved.json()] == [1, 2, 3]

    bad = client.post(f"/api/panels/{panel_id}/characters/move", json={"from_index": 0, "to_index": 7})
    assert bad.status_code == 400

    client.put(f"/api/characters/{ids[0]}", json={"dialogue": "First line"})
    client.delete(f"/api/characters/{ids[1]}")

    characters = script_of(client, issue.id)["pages"][0]["panels"][0]["characters"]
    assert [(c["name"], c["dialogue"]) for c in characters] == [("C", ""), ("A", "First line")]


def test_character_names(client, issue):
    panel_id = first_panel_id(client, issue.id)
    for name in ("BOB", "SFX", "ALICE"):
        client.post(f"/api/panels/{panel_id}/characters", json={"name": name})

    assert client.get(f"/api/issues/{issue.id}/character-names").json() == ["ALICE", "BOB"]


def test_delete_issue(client, db, issue):
    assert client.delete(f"/api/issues/{issue.id}").status_code == 200
    assert client.get(f"/api/issues/{issue.id}").status_code == 404
    assert db.query(Panel).count() == 0


def test_update_issue_rejects_blank_title(client, issue):
    response = client.put(f"/api/issues/{issue.id}", json={"title": "  "})

    assert response.status_code == 400
    assert client.get(f"/api/issues/{issue.id}").json()["title"] == "The Long Night"


def test_update_character_rejects_blank_name(client, issue):
    panel_id = first_panel_id(client, issue.id)
    bob = client.post(f"/api/panels/{panel_id}/characters", json={"name": "BOB", "dialogue": "hi"}).json()

    response = client.put(f"/api/characters/{bob['id']}", json={"name": "   "})

    assert response.status_code == 400
    characters = script_of(client, issue.id)["pages"][0]["panels"][0]["characters"]
    assert [(c["name"], c["dialogue"]) for c in characters] == [("BOB", "hi")]
