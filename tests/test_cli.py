"""命令列工具測試"""

import pytest

from hashfield.cli import main

HELLO_ARGS = [
    "--salt",
    "hello world",
    "--min-length",
    "10",
    "--alphabet",
    "abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ1234567890",
]


@pytest.mark.usefixtures("clean_env")
class TestCli:
    def test_salt(self, capsys):
        assert main(["salt"]) == 0
        assert len(capsys.readouterr().out.strip()) == 32

    def test_salt_length(self, capsys):
        assert main(["salt", "--length", "12"]) == 0
        assert len(capsys.readouterr().out.strip()) == 12

    def test_encode(self, capsys):
        assert main(["encode", "158674", *HELLO_ARGS]) == 0
        assert capsys.readouterr().out.strip() == "qKknODM7Ej"

    def test_decode_single(self, capsys):
        assert main(["decode", "qKknODM7Ej", "--single", *HELLO_ARGS]) == 0
        assert capsys.readouterr().out.strip() == "158674"

    def test_sequence_roundtrip(self, capsys):
        main(["encode", "1", "2", "3", *HELLO_ARGS])
        token = capsys.readouterr().out.strip()
        assert main(["decode", token, *HELLO_ARGS]) == 0
        assert capsys.readouterr().out.strip() == "1 2 3"

    def test_single_rejects_sequence(self, capsys):
        main(["encode", "1", "2", *HELLO_ARGS])
        token = capsys.readouterr().out.strip()
        assert main(["decode", token, "--single", *HELLO_ARGS]) == 1
        assert "錯誤" in capsys.readouterr().err

    def test_invalid_token(self, capsys):
        assert main(["decode", "!!!", *HELLO_ARGS]) == 1
        assert "字母表以外" in capsys.readouterr().err

    def test_negative_value(self, capsys):
        assert main(["encode", "-1", *HELLO_ARGS]) == 1
        assert "錯誤" in capsys.readouterr().err

    def test_config_file(self, tmp_path, capsys):
        ini = tmp_path / "app.ini"
        ini.write_text("[hashfield]\nsalt = hello world\nmin_length = 10\n", encoding="utf-8")
        assert main(["encode", "158674", "--config", str(ini)]) == 0
        assert capsys.readouterr().out.strip() == "qKknODM7Ej"

    def test_missing_config_file(self, tmp_path, capsys):
        assert main(["encode", "1", "--config", str(tmp_path / "nope.ini")]) == 1

    def test_requires_command(self):
        with pytest.raises(SystemExit):
            main([])
