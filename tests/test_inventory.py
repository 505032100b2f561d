def _items(producto):
    return f"/products/{producto['id']}/items"


def test_create_item_updates_stock(owner_a, producto):
    res = owner_a.post(_items(producto), json={"numero_serie": "SN-001", "fecha_compra": "2024-03-01", "precio_compra": 900})
    assert res.status_code == 201
    item = res.json()
    assert item["estado"] == "DISPONIBLE"
    assert item["producto_id"] == producto["id"]
    assert item["producto_nombre"] == producto["nombre"]

    owner_a.post(_items(producto), json={"numero_serie": "SN-002"})
    assert owner_a.get(f"/products/{producto['id']}").json()["stock"] == 2

    owner_a.delete(f"{_items(producto)}/{item['id']}")
    assert owner_a.get(f"/products/{producto['id']}").json()["stock"] == 1


def test_serial_number_unique_per_product(owner_a, producto, categoria):
    assert owner_a.post(_items(producto), json={"numero_serie": "SN-1"}).status_code == 201
    dup = owner_a.post(_items(producto), json={"numero_serie": "SN-1"})
    assert dup.status_code == 409

    other = owner_a.post("/products", json={"nombre": "Altavoz", "precio": 300, "categoria_id": categoria["id"]}).json()
    assert owner_a.post(_items(other), json={"numero_serie": "SN-1"}).status_code == 201


def test_items_without_serial_number_do_not_clash(owner_a, producto):
    assert owner_a.post(_items(producto), json={}).status_code == 201
    assert owner_a.post(_items(producto), json={"numero_serie": ""}).status_code == 201
    assert len(owner_a.get(_items(producto)).json()) == 2


def test_item_estado_values(owner_a, producto):
    item = owner_a.post(_items(producto), json={"estado": "DAÑADO"}).json()
    assert item["estado"] == "DAÑADO"

    res = owner_a.put(f"{_items(producto)}/{item['id']}", json={"estado": "ALQUILADO"})
    assert res.status_code == 200
    assert res.json()["estado"] == "ALQUILADO"

    assert owner_a.put(f"{_items(producto)}/{item['id']}", json={"estado": "PERDIDO"}).status_code == 400


def test_item_provider_must_be_owned(owner_a, owner_b, producto):
    foreign = owner_b.post("/providers", json={"nombre": "Audiopro", "tipo": "BIENES"}).json()
    res = owner_a.post(_items(producto), json={"proveedor_id": foreign["id"]})
    assert res.status_code == 400
    assert res.json()["error"] == "Provider not valid"

    own = owner_a.post("/providers", json={"nombre": "Audiopro", "tipo": "BIENES"}).json()
    item = owner_a.post(_items(producto), json={"proveedor_id": own["id"]}).json()
    assert item["proveedor_nombre"] == "Audiopro"


def test_deleting_provider_detaches_items(owner_a, producto):
    prov = owner_a.post("/providers", json={"nombre": "Audiopro", "tipo": "BIENES"}).json()
    item = owner_a.post(_items(producto), json={"proveedor_id": prov["id"]}).json()

    assert owner_a.delete(f"/providers/{prov['id']}").status_code == 200
    fetched = owner_a.get(f"{_items(producto)}/{item['id']}").json()
    assert fetched["proveedor_id"] is None


def test_items_of_foreign_product(owner_a, owner_b, producto):
    assert owner_b.get(_items(producto)).status_code == 404
    assert owner_b.post(_items(producto), json={"numero_serie": "X"}).status_code == 404


def test_item_under_wrong_product_is_not_found(owner_a, producto, categoria):
    item = owner_a.post(_items(producto), json={"numero_serie": "SN-9"}).json()
    other = owner_a.post("/products", json={"nombre": "Altavoz", "precio": 300, "categoria_id": categoria["id"]}).json()
    assert owner_a.get(f"{_items(other)}/{item['id']}").status_code == 404


def test_deleting_product_removes_items(owner_a, producto, session_factory):
    from gestor.models.models import EquipoItem

    owner_a.post(_items(producto), json={"numero_serie": "SN-1"})
    owner_a.post(_items(producto), json={"numero_serie": "SN-2"})
    assert owner_a.delete(f"/products/{producto['id']}").status_code == 200

    db = session_factory()
    try:
        assert db.query(EquipoItem).count() == 0
    finally:
        db.close()


def test_items_newest_first(owner_a, producto):
    first = owner_a.post(_items(producto), json={"numero_serie": "A"}).json()
    second = owner_a.post(_items(producto), json={"numero_serie": "B"}).json()
    ids = [i["id"] for i in owner_a.get(_items(producto)).json()]
    assert ids == [second["id"], first["id"]]


def test_store_constraint_rejects_duplicate_serial(owner_a, producto, monkeypatch):
    from gestor.services.inventory import items

    monkeypatch.setattr(items, "ensure_unique", lambda *args, **kwargs: None)
    assert owner_a.post(_items(producto), json={"numero_serie": "SN-1"}).status_code == 201

    dup = owner_a.post(_items(producto), json={"numero_serie": "SN-1"})
    assert dup.status_code == 409
    assert dup.json() == {"error": "An item with that serial number already exists for this product"}
    assert owner_a.get(f"/products/{producto['id']}").json()["stock"] == 1
