"""End-to-end tests of the /jokebook routes, run against both store backends."""

PUN = {
    "category": "Puns",
    "setup": "Why did the scarecrow win an award?",
    "delivery": "Because he was outstanding in his field.",
}


def add_joke(client, **overrides):
    payload = {**PUN, **overrides}
    response = client.post("/jokebook/jokes", json=payload)
    assert response.status_code == 201, response.text
    return response.json()


def category_id(client, name):
    categories = client.get("/jokebook/categories").json()
    return next(c["id"] for c in categories if c["name"].lower() == name.lower())


def test_list_categories_returns_seeded_defaults_sorted(client):
    response = client.get("/jokebook/categories")

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("application/json")
    names = [c["name"] for c in response.json()]
    assert names == ["Funny Joke", "Lame Joke", "Tech Joke"]
    assert all(isinstance(c["id"], int) for c in response.json())


def test_add_joke_then_list_by_name(client):
    created = add_joke(client)

    assert isinstance(created["id"], int)
    assert created["setup"] == PUN["setup"]
    assert created["delivery"] == PUN["delivery"]
    assert created["category"] == "Puns"

    response = client.get("/jokebook/category/Puns")
    assert response.status_code == 200
    jokes = response.json()
    assert [j["id"] for j in jokes].count(created["id"]) == 1


def test_add_joke_creates_category_and_lists_by_id(client):
    created = add_joke(client, category="Knock Knock")

    categories = [c["name"] for c in client.get("/jokebook/categories").json()]
    assert "Knock Knock" in categories

    response = client.get(f"/jokebook/categories/{created['category_id']}")
    assert response.status_code == 200
    assert response.json()[0]["id"] == created["id"]


def test_category_names_are_matched_case_insensitively(client):
    first = add_joke(client, category="Puns")
    second = add_joke(client, category="  puns  ", setup="What do you call a fake noodle?")

    assert second["category_id"] == first["category_id"]
    assert second["category"] == "Puns"

    names = [c["name"] for c in client.get("/jokebook/categories").json()]
    assert sum(1 for n in names if n.lower() == "puns") == 1

    jokes = client.get("/jokebook/category/PUNS").json()
    assert [j["id"] for j in jokes] == [first["id"], second["id"]]


def test_non_ascii_category_round_trips(client):
    first = add_joke(client, category="Äpfel")

    response = client.get("/jokebook/category/Äpfel")
    assert response.status_code == 200
    assert [j["id"] for j in response.json()] == [first["id"]]

    second = add_joke(client, category="Äpfel", setup="Was ist rund und gelb?")
    assert second["category_id"] == first["category_id"]

    names = [c["name"] for c in client.get("/jokebook/categories").json()]
    assert names.count("Äpfel") == 1


def test_punchline_is_accepted_for_delivery(client):
    response = client.post(
        "/jokebook/jokes",
        json={"category": "Puns", "setup": "What do you call a bear with no teeth?", "punchline": "A gummy bear."},
    )

    assert response.status_code == 201
    assert response.json()["delivery"] == "A gummy bear."


def test_add_joke_missing_fields_is_rejected_without_mutation(client):
    before = client.get("/jokebook/categories").json()

    response = client.post("/jokebook/jokes", json={"category": "Ghosts", "setup": "   "})

    assert response.status_code == 400
    body = response.json()
    assert body["error"] == "Bad Request"
    assert "setup" in body["message"] and "delivery" in body["message"]
    assert body["details"] == ["setup", "delivery"]

    assert client.get("/jokebook/categories").json() == before
    assert client.get("/jokebook/random").status_code == 404


def test_add_joke_rejects_non_object_and_non_string_fields(client):
    assert client.post("/jokebook/jokes", json=["not", "an", "object"]).status_code == 400
    assert client.post("/jokebook/jokes").status_code == 400

    response = client.post("/jokebook/jokes", json={**PUN, "category": 7})
    assert response.status_code == 400
    assert response.json()["details"] == ["category"]


def test_malformed_json_body_is_a_bad_request(client):
    response = client.post(
        "/jokebook/jokes",
        content=b'{"category": "Puns",',
        headers={"Content-Type": "application/json"},
    )

    assert response.status_code == 400
    assert "error" in response.json()


def test_jokes_by_category_distinguishes_missing_from_empty(client):
    missing = client.get("/jokebook/categories/9999")
    assert missing.status_code == 404
    assert missing.json()["message"] == "Category not found"

    empty = client.get(f"/jokebook/categories/{category_id(client, 'Funny Joke')}")
    assert empty.status_code == 404
    assert empty.json()["message"] == "No jokes found for this category"

    assert client.get("/jokebook/category/Nope").json()["message"] == "Category not found"


def test_jokes_by_category_rejects_bad_ids_and_limits(client):
    for raw in ("abc", "0", "-1", "1.5"):
        response = client.get(f"/jokebook/categories/{raw}")
        assert response.status_code == 400, raw
        assert "category id" in response.json()["message"]

    add_joke(client)
    response = client.get("/jokebook/category/Puns", params={"limit": "zero"})
    assert response.status_code == 400
    assert response.json()["details"] == ["limit"]


def test_out_of_range_ids_are_bad_requests(client):
    huge = "99999999999999999999"

    for response in (
        client.get(f"/jokebook/categories/{huge}"),
        client.delete(f"/jokebook/jokes/{huge}"),
        client.put(f"/jokebook/jokes/{huge}", json=PUN),
        client.get(f"/jokebook/categories/{2**31}"),
    ):
        assert response.status_code == 400, response.text

    assert client.get(f"/jokebook/categories/{2**31 - 1}").status_code == 404


def test_non_ascii_digits_are_not_ids(client):
    assert client.get("/jokebook/categories/٣").status_code == 400
    assert client.delete("/jokebook/jokes/٣").status_code == 400


def test_jokes_by_category_limit_and_order(client):
    ids = [add_joke(client, setup=f"Setup {i}")["id"] for i in range(3)]

    everything = client.get("/jokebook/category/Puns").json()
    assert [j["id"] for j in everything] == sorted(ids)

    limited = client.get("/jokebook/category/Puns", params={"limit": 2}).json()
    assert [j["id"] for j in limited] == sorted(ids)[:2]


def test_random_joke_empty_then_present(client):
    response = client.get("/jokebook/random")
    assert response.status_code == 404
    assert response.json()["message"] == "No jokes available in the database"

    created = add_joke(client)
    response = client.get("/jokebook/random")
    assert response.status_code == 200
    assert response.json()["id"] == created["id"]


def test_update_joke(client):
    created = add_joke(client)

    response = client.put(
        f"/jokebook/jokes/{created['id']}",
        json={"category": "Tech Joke", "setup": "Why do programmers prefer dark mode?", "delivery": "Light attracts bugs."},
    )

    assert response.status_code == 200
    updated = response.json()
    assert updated["id"] == created["id"]
    assert updated["category"] == "Tech Joke"
    assert updated["delivery"] == "Light attracts bugs."

    tech = client.get("/jokebook/category/tech joke").json()
    assert [j["id"] for j in tech] == [created["id"]]


def test_update_missing_joke_and_bad_input(client):
    assert client.put("/jokebook/jokes/4242", json=PUN).status_code == 404
    assert client.put("/jokebook/jokes/abc", json=PUN).status_code == 400
    assert client.put("/jokebook/jokes/1", json={"setup": "x"}).status_code == 400


def test_delete_joke(client):
    created = add_joke(client)

    response = client.delete(f"/jokebook/jokes/{created['id']}")
    assert response.status_code == 204
    assert response.content == b""

    again = client.delete(f"/jokebook/jokes/{created['id']}")
    assert again.status_code == 404
    assert again.json()["message"] == "Joke not found"


def test_delete_nonexistent_joke_is_not_found(client):
    response = client.delete("/jokebook/jokes/123456")

    assert response.status_code == 404
    assert client.delete("/jokebook/jokes/nope").status_code == 400


def test_unknown_jokebook_path_returns_json_404(client):
    for method, path in (("get", "/jokebook/typo"), ("post", "/jokebook/categories"), ("get", "/jokebook/")):
        response = getattr(client, method)(path)
        assert response.status_code == 404, path
        assert response.json()["message"] == "Jokebook resource not found"
