# backend/catalog_service/tests/test_repository.py

from catalog.models import Product
from catalog.repository import ProductRepository
from sqlalchemy.orm import Session


def test_save_inserts_and_assigns_id(db_session_for_test: Session):
    repo = ProductRepository(db_session_for_test)

    stored = repo.save(Product(name="Pen", image_data=b"\x01"))

    assert stored.id is not None and stored.id > 0
    assert repo.find_by_id(stored.id).image_data == b"\x01"


def test_save_overwrites_existing_row(db_session_for_test: Session):
    repo = ProductRepository(db_session_for_test)
    original = repo.save(Product(name="Pen", brand="Bic", image_name="a.png"))
    product_id = original.id

    updated = repo.save(Product(id=product_id, name="Pen v2", brand="Pilot", image_name="b.png"))

    assert updated.id == product_id
    assert len(repo.find_all()) == 1
    stored = repo.find_by_id(product_id)
    assert stored.name == "Pen v2"
    assert stored.brand == "Pilot"
    assert stored.image_name == "b.png"


def test_save_with_unknown_id_inserts_new_row(db_session_for_test: Session):
    repo = ProductRepository(db_session_for_test)
    existing = repo.save(Product(name="Pen"))

    stored = repo.save(Product(id=existing.id + 1000, name="Stray"))

    assert stored.id != existing.id + 1000
    assert {p.name for p in repo.find_all()} == {"Pen", "Stray"}


def test_delete_by_id_is_idempotent(db_session_for_test: Session):
    repo = ProductRepository(db_session_for_test)
    stored = repo.save(Product(name="Pen"))

    repo.delete_by_id(stored.id)
    repo.delete_by_id(stored.id)

    assert repo.find_by_id(stored.id) is None


def test_search_is_case_insensitive_over_text_fields(db_session_for_test: Session):
    repo = ProductRepository(db_session_for_test)
    repo.save(Product(name="Gel PEN"))
    repo.save(Product(name="Lamp", description="pens not included"))
    repo.save(Product(name="Chair", category="Furniture"))

    assert [p.name for p in repo.search("pen")] == ["Gel PEN", "Lamp"]
    assert [p.name for p in repo.search("furn")] == ["Chair"]
    assert repo.search("nothing") == []


def test_search_treats_wildcards_literally(db_session_for_test: Session):
    repo = ProductRepository(db_session_for_test)
    repo.save(Product(name="Pen"))
    repo.save(Product(name="100% Cotton Shirt"))
    repo.save(Product(name="snake_case mug"))

    assert [p.name for p in repo.search("%")] == ["100% Cotton Shirt"]
    assert [p.name for p in repo.search("_")] == ["snake_case mug"]
    assert repo.search("P_n") == []
