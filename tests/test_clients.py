CLIENTE = {
    "nombre": "Eventos Sur S.L.",
    "tipo": "EMPRESA",
    "persona_de_contacto": "Marta",
    "nif": "B12345678",
    "ciudad": "Sevilla",
    "email": "Info@EventosSur.ES",
    "telefono": "600111222",
}


def test_create_then_get_round_trips(owner_a):
    res = owner_a.post("/clients", json=CLIENTE)
    assert res.status_code == 201
    created = res.json()
    for key, value in CLIENTE.items():
        assert created[key] == value
    assert created["es_intracomunitario"] is False

    fetched = owner_a.get(f"/clients/{created['id']}")
    assert fetched.status_code == 200
    assert fetched.json() == created


def test_list_is_scoped_and_ordered_by_name(owner_a, owner_b):
    owner_a.post("/clients", json={"nombre": "Zeta", "tipo": "PARTICULAR"})
    owner_a.post("/clients", json={"nombre": "Alfa", "tipo": "AUTONOMO"})
    owner_b.post("/clients", json={"nombre": "Beta", "tipo": "EMPRESA"})

    names = [c["nombre"] for c in owner_a.get("/clients").json()]
    assert names == ["Alfa", "Zeta"]
    assert [c["nombre"] for c in owner_b.get("/clients").json()] == ["Beta"]


def test_partial_update_leaves_other_fields(owner_a):
    created = owner_a.post("/clients", json=CLIENTE).json()
    res = owner_a.put(f"/clients/{created['id']}", json={"ciudad": "Cádiz"})
    assert res.status_code == 200
    updated = res.json()
    assert updated["ciudad"] == "Cádiz"
    assert updated["nif"] == CLIENTE["nif"]
    assert updated["nombre"] == CLIENTE["nombre"]


def test_empty_string_clears_field(owner_a):
    created = owner_a.post("/clients", json=CLIENTE).json()
    updated = owner_a.put(f"/clients/{created['id']}", json={"telefono": "   "}).json()
    assert updated["telefono"] is None
    assert updated["ciudad"] == "Sevilla"


def test_other_owner_cannot_see_or_touch(owner_a, owner_b):
    created = owner_a.post("/clients", json=CLIENTE).json()
    path = f"/clients/{created['id']}"

    assert owner_b.get(path).status_code == 404
    assert owner_b.put(path, json={"ciudad": "Huelva"}).status_code == 404
    assert owner_b.delete(path).status_code == 404
    assert owner_a.get(path).json()["ciudad"] == "Sevilla"


def test_delete_twice_is_not_found(owner_a):
    created = owner_a.post("/clients", json=CLIENTE).json()
    path = f"/clients/{created['id']}"

    first = owner_a.delete(path)
    assert first.status_code == 200
    assert first.json() == {"message": "Client deleted", "id": created["id"]}

    second = owner_a.delete(path)
    assert second.status_code == 404
    assert "not found or not owned" in second.json()["error"]


def test_get_missing_is_not_found(owner_a, missing_id):
    assert owner_a.get(f"/clients/{missing_id}").status_code == 404


def test_email_is_checked_but_kept_as_sent(owner_a):
    created = owner_a.post("/clients", json={"nombre": "Ana", "tipo": "PARTICULAR", "email": "  Ana@Example.COM "}).json()
    assert created["email"] == "Ana@Example.COM"
    assert owner_a.get(f"/clients/{created['id']}").json()["email"] == "Ana@Example.COM"

    res = owner_a.put(f"/clients/{created['id']}", json={"email": "ana@@example.com"})
    assert res.status_code == 400
    assert res.json()["details"]["email"][0].startswith("value is not a valid email address")


def test_blank_name_is_reported_as_empty(owner_a):
    res = owner_a.post("/clients", json={"nombre": "   ", "tipo": "EMPRESA"})
    assert res.status_code == 400
    assert res.json()["details"]["nombre"] == ["nombre cannot be empty"]

    created = owner_a.post("/clients", json=CLIENTE).json()
    res = owner_a.put(f"/clients/{created['id']}", json={"nombre": ""})
    assert res.status_code == 400
    assert res.json()["details"]["nombre"] == ["nombre cannot be empty"]
