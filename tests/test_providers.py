def test_provider_crud(owner_a, owner_b):
    res = owner_a.post(
        "/providers",
        json={"nombre": "Luz y Sonido", "tipo": "MIXTO", "email": "ventas@lys.com", "es_intracomunitario": True},
    )
    assert res.status_code == 201
    prov = res.json()
    assert prov["tipo"] == "MIXTO"
    assert prov["es_intracomunitario"] is True

    path = f"/providers/{prov['id']}"
    assert owner_b.get(path).status_code == 404

    updated = owner_a.put(path, json={"tipo": "SERVICIOS", "persona_de_contacto": "Jorge"}).json()
    assert updated["tipo"] == "SERVICIOS"
    assert updated["email"] == "ventas@lys.com"

    assert owner_a.delete(path).json() == {"message": "Provider deleted", "id": prov["id"]}
    assert owner_a.get("/providers").json() == []


def test_provider_rejects_unknown_tipo(owner_a):
    res = owner_a.post("/providers", json={"nombre": "Luz y Sonido", "tipo": "OTRO"})
    assert res.status_code == 400
    assert "tipo" in res.json()["details"]


def test_provider_email_length(owner_a):
    long_email = "a" * 60 + "@" + "b" * 40 + ".com"
    res = owner_a.post("/providers", json={"nombre": "Luz y Sonido", "tipo": "BIENES", "email": long_email})
    assert res.status_code == 400
    assert "email" in res.json()["details"]
