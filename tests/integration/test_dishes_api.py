import pytest


async def _register(client, username, name="Chef"):
    resp = await client.post(
        "/chefs", json={"name": name, "username": username, "password": "secret123"}
    )
    assert resp.status_code == 201, resp.text
    return resp.json()["data"]["id"]


async def _ingredient(client, name, unit):
    resp = await client.post("/ingredients", json={"name": name, "unit": unit})
    assert resp.status_code == 201, resp.text
    return resp.json()["data"]["id"]


@pytest.fixture
async def kitchen(client):
    john = await _register(client, "chef_john", "Chef John")
    mary = await _register(client, "chef_mary", "Chef Mary")
    rice = await _ingredient(client, "Rice", "g")
    egg = await _ingredient(client, "Egg", "pcs")
    scallion = await _ingredient(client, "Scallion", "g")
    return {"john": john, "mary": mary, "rice": rice, "egg": egg, "scallion": scallion}


def _headers(chef_id):
    return {"X-Chef-Id": str(chef_id)}


@pytest.mark.asyncio
async def test_create_revise_read_history(client, kitchen):
    create = await client.post(
        "/dishes",
        headers=_headers(kitchen["john"]),
        json={
            "name": "Fried Rice",
            "ingredients": [
                {"ingredientId": kitchen["rice"], "ingredientAmount": 300},
                {"ingredientId": kitchen["egg"], "ingredientAmount": 2},
            ],
        },
    )
    assert create.status_code == 201, create.text
    body = create.json()
    assert body["success"] is True
    assert body["message"] == "Dish created successfully"
    dish = body["data"]
    assert dish["versionNumber"] == 1
    assert dish["chefId"] == kitchen["john"]
    assert {"createdAt", "updatedAt"} <= set(dish)
    assert dish["ingredients"][0] == {
        "ingredientId": kitchen["rice"],
        "ingredientName": "Rice",
        "ingredientUnit": "g",
        "ingredientAmount": 300.0,
    }
    dish_id = dish["id"]

    revise = await client.put(
        f"/dishes/{dish_id}/ingredients",
        headers=_headers(kitchen["john"]),
        json={
            "ingredients": [
                {"ingredientId": kitchen["rice"], "ingredientAmount": 320},
                {"ingredientId": kitchen["egg"], "ingredientAmount": 2},
                {"ingredientId": kitchen["scallion"], "ingredientAmount": 10},
            ]
        },
    )
    assert revise.status_code == 200, revise.text
    revised = revise.json()["data"]
    assert revised["versionNumber"] == 2
    assert revised["name"] == "Fried Rice"
    assert "createdAt" not in revised
    assert len(revised["ingredients"]) == 3

    current = await client.get(f"/dishes/{dish_id}/ingredients")
    assert current.status_code == 200
    assert [i["ingredientAmount"] for i in current.json()["data"]["ingredients"]] == [320.0, 2.0, 10.0]

    history = await client.get(f"/dishes/{dish_id}/ingredients/history", params={"current": 1, "pageSize": 10})
    assert history.status_code == 200
    payload = history.json()
    assert payload["total"] == 2
    assert payload["current"] == 1
    assert payload["pageSize"] == 10
    assert payload["data"]["dish"]["currentVersionNumber"] == 2
    assert [h["versionNumber"] for h in payload["data"]["histories"]] == [2, 1]
    assert len(payload["data"]["histories"][1]["ingredients"]) == 2


@pytest.mark.asyncio
async def test_create_requires_chef_header(client, kitchen):
    payload = {"name": "Soup", "ingredients": [{"ingredientId": kitchen["rice"], "ingredientAmount": 1}]}

    missing = await client.post("/dishes", json=payload)
    assert missing.status_code == 400
    assert missing.json()["error"] == {
        "code": "VALIDATION_ERROR",
        "message": "Missing required header: X-Chef-Id",
    }

    invalid = await client.post("/dishes", json=payload, headers={"X-Chef-Id": "abc"})
    assert invalid.status_code == 400
    assert invalid.json()["error"]["message"] == "Invalid chef ID"

    unknown = await client.post("/dishes", json=payload, headers=_headers(999))
    assert unknown.status_code == 404
    assert unknown.json()["error"]["code"] == "NOT_FOUND"


@pytest.mark.asyncio
async def test_create_body_validation(client, kitchen):
    resp = await client.post(
        "/dishes",
        headers=_headers(kitchen["john"]),
        json={"name": "Soup", "ingredients": [{"ingredientId": kitchen["rice"], "ingredientAmount": -5}]},
    )
    assert resp.status_code == 400
    body = resp.json()
    assert body["success"] is False
    assert body["error"]["code"] == "VALIDATION_ERROR"
    assert body["error"]["message"] == "Request data validation failed"
    assert isinstance(body["error"]["details"], list)

    empty = await client.post("/dishes", headers=_headers(kitchen["john"]), json={"name": "Soup", "ingredients": []})
    assert empty.status_code == 400


@pytest.mark.asyncio
async def test_duplicate_names_per_chef(client, kitchen):
    payload = {"name": "Fried Rice", "ingredients": [{"ingredientId": kitchen["rice"], "ingredientAmount": 1}]}
    assert (await client.post("/dishes", json=payload, headers=_headers(kitchen["john"]))).status_code == 201
    assert (await client.post("/dishes", json=payload, headers=_headers(kitchen["mary"]))).status_code == 201

    again = await client.post("/dishes", json=payload, headers=_headers(kitchen["john"]))
    assert again.status_code == 409
    assert again.json()["error"]["code"] == "CONFLICT"


@pytest.mark.asyncio
async def test_revise_rejections_leave_version_unchanged(client, kitchen):
    create = await client.post(
        "/dishes",
        headers=_headers(kitchen["john"]),
        json={"name": "Congee", "ingredients": [{"ingredientId": kitchen["rice"], "ingredientAmount": 100}]},
    )
    dish_id = create.json()["data"]["id"]
    url = f"/dishes/{dish_id}/ingredients"

    foreign = await client.put(
        url,
        headers=_headers(kitchen["mary"]),
        json={"ingredients": [{"ingredientId": kitchen["rice"], "ingredientAmount": 1}]},
    )
    assert foreign.status_code == 403
    assert foreign.json()["error"]["code"] == "UNAUTHORIZED"

    unknown = await client.put(
        url,
        headers=_headers(kitchen["john"]),
        json={"ingredients": [{"ingredientId": 9999, "ingredientAmount": 1}]},
    )
    assert unknown.status_code == 404
    assert "9999" in unknown.json()["error"]["message"]

    duplicate = await client.put(
        url,
        headers=_headers(kitchen["john"]),
        json={
            "ingredients": [
                {"ingredientId": kitchen["rice"], "ingredientAmount": 1},
                {"ingredientId": kitchen["rice"], "ingredientAmount": 2},
            ]
        },
    )
    assert duplicate.status_code == 400
    assert duplicate.json()["error"]["code"] == "VALIDATION_ERROR"

    null_name = await client.put(
        url,
        headers=_headers(kitchen["john"]),
        json={"name": None, "ingredients": [{"ingredientId": kitchen["rice"], "ingredientAmount": 1}]},
    )
    assert null_name.status_code == 400

    missing_dish = await client.put(
        "/dishes/4242/ingredients",
        headers=_headers(kitchen["john"]),
        json={"ingredients": [{"ingredientId": kitchen["rice"], "ingredientAmount": 1}]},
    )
    assert missing_dish.status_code == 404

    current = await client.get(url)
    data = current.json()["data"]
    assert data["versionNumber"] == 1
    assert data["ingredients"][0]["ingredientAmount"] == 100.0


@pytest.mark.asyncio
async def test_revise_with_rename(client, kitchen):
    create = await client.post(
        "/dishes",
        headers=_headers(kitchen["john"]),
        json={"name": "Rice", "ingredients": [{"ingredientId": kitchen["rice"], "ingredientAmount": 100}]},
    )
    dish_id = create.json()["data"]["id"]

    resp = await client.put(
        f"/dishes/{dish_id}/ingredients",
        headers=_headers(kitchen["john"]),
        json={"name": "Plain Rice", "ingredients": [{"ingredientId": kitchen["rice"], "ingredientAmount": 120}]},
    )
    assert resp.status_code == 200
    assert resp.json()["data"]["name"] == "Plain Rice"
    assert resp.json()["data"]["versionNumber"] == 2


@pytest.mark.asyncio
async def test_current_ingredients_ownership_check(client, kitchen):
    create = await client.post(
        "/dishes",
        headers=_headers(kitchen["john"]),
        json={"name": "Congee", "ingredients": [{"ingredientId": kitchen["rice"], "ingredientAmount": 100}]},
    )
    dish_id = create.json()["data"]["id"]

    assert (await client.get(f"/dishes/{dish_id}/ingredients", headers=_headers(kitchen["john"]))).status_code == 200
    assert (await client.get(f"/dishes/{dish_id}/ingredients", headers=_headers(kitchen["mary"]))).status_code == 403
    assert (await client.get("/dishes/999/ingredients")).status_code == 404
    assert (await client.get("/dishes/0/ingredients")).status_code == 400

    # history does not enforce ownership
    assert (await client.get(f"/dishes/{dish_id}/ingredients/history", headers=_headers(kitchen["mary"]))).status_code == 200


@pytest.mark.asyncio
async def test_list_dishes(client, kitchen):
    for name in ("Fried Rice", "Rice Pudding", "Omelette"):
        resp = await client.post(
            "/dishes",
            headers=_headers(kitchen["john"]),
            json={"name": name, "ingredients": [{"ingredientId": kitchen["egg"], "ingredientAmount": 2}]},
        )
        assert resp.status_code == 201

    resp = await client.get("/dishes", params={"current": 1, "pageSize": 2})
    assert resp.status_code == 200
    body = resp.json()
    assert body["total"] == 3
    assert body["pageSize"] == 2
    assert len(body["data"]) == 2
    first = body["data"][0]
    assert first["name"] == "Omelette"
    assert first["chefName"] == "Chef John"
    assert first["ingredients"][0]["ingredientName"] == "Egg"

    search = await client.get("/dishes", params={"search": "rice"})
    assert search.json()["total"] == 2


@pytest.mark.asyncio
async def test_timestamps_are_sent_as_utc(client, kitchen):
    create = await client.post(
        "/dishes",
        headers=_headers(kitchen["john"]),
        json={"name": "Congee", "ingredients": [{"ingredientId": kitchen["rice"], "ingredientAmount": 100}]},
    )
    assert create.status_code == 201, create.text
    dish = create.json()["data"]
    assert dish["createdAt"].endswith("Z")
    assert dish["updatedAt"].endswith("Z")

    revise = await client.put(
        f"/dishes/{dish['id']}/ingredients",
        headers=_headers(kitchen["john"]),
        json={"ingredients": [{"ingredientId": kitchen["egg"], "ingredientAmount": 2}]},
    )
    assert revise.status_code == 200, revise.text
    assert revise.json()["data"]["updatedAt"].endswith("Z")

    history = await client.get(f"/dishes/{dish['id']}/ingredients/history")
    assert history.json()["data"]["dish"]["createdAt"].endswith("Z")


@pytest.mark.asyncio
async def test_ids_beyond_integer_range_are_rejected(client, kitchen):
    huge = 2**70
    line = {"ingredientId": kitchen["rice"], "ingredientAmount": 1}

    resp = await client.get(f"/dishes/{huge}/ingredients")
    assert resp.status_code == 400
    assert resp.json()["error"]["code"] == "VALIDATION_ERROR"

    resp = await client.get(f"/dishes/{huge}/ingredients/history")
    assert resp.status_code == 400

    resp = await client.post("/dishes", headers=_headers(huge), json={"name": "Congee", "ingredients": [line]})
    assert resp.status_code == 400
    assert resp.json()["error"]["message"] == "Invalid chef ID"

    resp = await client.post(
        "/dishes",
        headers=_headers(kitchen["john"]),
        json={"name": "Congee", "ingredients": [{"ingredientId": huge, "ingredientAmount": 1}]},
    )
    assert resp.status_code == 400
    assert resp.json()["error"]["code"] == "VALIDATION_ERROR"

    resp = await client.get("/dishes", params={"current": huge, "search": str(huge)})
    assert resp.status_code == 200, resp.text
    assert resp.json()["data"] == []
