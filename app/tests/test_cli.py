# Copyright (C) 2025 Logical Mechanism LLC
# SPDX-License-Identifier: GPL-3.0-only
import json

import pytest
from conftest import PRIVATE_KEY
from starkex.cli import build_parser, main


def test_parser_requires_command():
    with pytest.raises(SystemExit):
        build_parser().parse_args([])


def test_sign_command(tmp_path, capsys):
    request = tmp_path / "sign.json"
    request.write_text(json.dumps({"private_key": hex(PRIVATE_KEY), "msg_hash": "0x1234"}))
    out = tmp_path / "signed.json"
    assert main(["sign", str(request), str(out)]) == 0
    printed = json.loads(capsys.readouterr().out)
    assert printed == json.loads(out.read_text())


def test_failure_exit_code(tmp_path):
    request = tmp_path / "sign.json"
    request.write_text(json.dumps({"private_key": hex(PRIVATE_KEY), "msg_hash": "1234"}))
    assert main(["-v", "sign", str(request), str(tmp_path / "out.json")]) == 1


if __name__ == "__main__":
    pytest.main()
