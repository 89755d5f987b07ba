import json

import pytest

from backend.runner.store import (
    RecordStore,
    StoreFormatError,
    StoreNotFoundError,
    coerce_document,
    find_record,
    load_art_database,
    record_id,
)


def test_bare_array_is_wrapped_in_records_object(tmp_path, write_json):
    path = write_json(tmp_path / "db.json", [{"recordId": 1}, {"recordId": 2}])

    document = RecordStore(path).load()

    assert document["records"] == [{"recordId": 1}, {"recordId": 2}]
    assert document["metadata"] == {}


def test_save_writes_canonical_shape_and_timestamp(tmp_path, write_json):
    path = write_json(tmp_path / "db.json", [{"recordId": 1}])
    store = RecordStore(path)

    store.save(store.load())

    on_disk = json.loads(path.read_text(encoding="utf-8"))
    assert on_disk["records"] == [{"recordId": 1}]
    assert "lastUpdated" in on_disk["metadata"]


def test_save_leaves_no_temp_files_and_creates_parent(tmp_path):
    path = tmp_path / "nested" / "dir" / "db.json"

    RecordStore(path).save({"records": [{"recordId": 9}]})

    assert [p.name for p in path.parent.iterdir()] == ["db.json"]


def test_missing_file_raises_not_found(tmp_path):
    with pytest.raises(StoreNotFoundError):
        RecordStore(tmp_path / "nope.json").load()


def test_malformed_json_raises_format_error(tmp_path):
    path = tmp_path / "db.json"
    path.write_text("{ not json", encoding="utf-8")

    with pytest.raises(StoreFormatError):
        RecordStore(path).load()


@pytest.mark.parametrize(
    "raw",
    ["text", 3, {"items": []}, {"records": {}}, [1, "x", None], {"records": [{"recordId": 1}, "x"]}],
)
def test_unknown_shapes_are_rejected(raw):
    with pytest.raises(StoreFormatError):
        coerce_document(raw)


def test_record_id_falls_back_to_id():
    assert record_id({"recordId": 4, "id": 9}) == 4
    assert record_id({"id": 9}) == 9
    assert record_id({}) is None


def test_find_record_compares_ids_as_strings():
    document = {"records": [{"recordId": 7}, {"id": "B12"}]}

    assert find_record(document, "7") == {"recordId": 7}
    assert find_record(document, "B12") == {"id": "B12"}
    assert find_record(document, 8) is None


def test_loader_rereads_on_every_call(tmp_path, write_json):
    path = write_json(tmp_path / "db.json", {"records": [{"recordId": 1}]})
    assert len(load_art_database(path)["records"]) == 1

    write_json(path, {"records": [{"recordId": 1}, {"recordId": 2}]})
    assert len(load_art_database(path)["records"]) == 2


def test_loader_defaults_mime_without_touching_file(tmp_path, write_json):
    path = write_json(tmp_path / "db.json", {"records": [{"recordId": 1, "imageBase64": "AAAA"}]})
    before = path.read_text(encoding="utf-8")

    document = load_art_database(path)

    assert document["records"][0]["imageMimeType"] == "image/jpeg"
    assert path.read_text(encoding="utf-8") == before


def test_loader_missing_file_is_empty_store(tmp_path):
    path = tmp_path / "absent.json"

    assert load_art_database(path) == {"metadata": {}, "records": []}
    assert not path.exists()
