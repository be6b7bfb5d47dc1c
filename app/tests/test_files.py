import pytest
import json

from starkex.files import load_json, load_request, save_json


def test_save_and_load_json(tmp_path):
    path = tmp_path / "nested" / "artifact.json"
    save_json(path, {"b": 1, "a": "0x00"})
    assert load_json(path) == {"a": "0x00", "b": 1}
    assert path.read_text().index('"a"') < path.read_text().index('"b"')


def test_load_request_checks_keys(tmp_path):
    path = tmp_path / "request.json"
    path.write_text(json.dumps({"mnemonic": "x"}))
    assert load_request(path, ("mnemonic",)) == {"mnemonic": "x"}
    with pytest.raises(ValueError):
        load_request(path, ("mnemonic", "index"))


def test_load_request_rejects_lists(tmp_path):
    path = tmp_path / "request.json"
    path.write_text("[]")
    with pytest.raises(ValueError):
        load_request(path)


if __name__ == "__main__":
    pytest.main()
