"""設定檔與環境變數載入測試"""

import pytest

from hashfield.config import configure, load_options
from hashfield.errors import OptionsError
from hashfield.options import get_options

HEX = "0123456789abcdef"


def _write_ini(path, body: str) -> str:
    path.write_text(body, encoding="utf-8")
    return str(path)


@pytest.mark.usefixtures("clean_env")
class TestLoadOptions:
    def test_reads_section(self, tmp_path):
        ini = _write_ini(
            tmp_path / "app.ini",
            "[hashfield]\nsalt = hello world\nmin_length = 10\nalphabet = 0123456789abcdef\n",
        )
        options = load_options(ini)
        assert (options.salt, options.min_length, options.alphabet) == ("hello world", 10, HEX)

    def test_missing_keys_keep_defaults(self, tmp_path):
        ini = _write_ini(tmp_path / "app.ini", "[hashfield]\nsalt = abc\n")
        options = load_options(ini)
        assert options.salt == "abc"
        assert options.min_length == 8

    def test_custom_section(self, tmp_path):
        ini = _write_ini(tmp_path / "app.ini", "[ids]\nmin_length = 12\n")
        assert load_options(ini, section="ids").min_length == 12

    def test_no_file_uses_defaults(self):
        options = load_options()
        assert options.min_length == 8
        assert len(options.salt) == 32

    def test_default_file_in_cwd(self, clean_env):
        _write_ini(clean_env / "hashfield.ini", "[hashfield]\nsalt = from-cwd\n")
        assert load_options().salt == "from-cwd"

    def test_config_path_from_env(self, tmp_path, monkeypatch):
        ini = _write_ini(tmp_path / "other.ini", "[hashfield]\nsalt = via-env-path\n")
        monkeypatch.setenv("HASHFIELD_CONFIG", ini)
        assert load_options().salt == "via-env-path"

    def test_empty_config_env_falls_back_to_cwd_file(self, clean_env, monkeypatch):
        _write_ini(clean_env / "hashfield.ini", "[hashfield]\nsalt = from-cwd\n")
        monkeypatch.setenv("HASHFIELD_CONFIG", "")
        assert load_options().salt == "from-cwd"

    def test_missing_explicit_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_options(str(tmp_path / "nope.ini"))

    def test_env_overrides_file(self, tmp_path, monkeypatch):
        ini = _write_ini(tmp_path / "app.ini", "[hashfield]\nsalt = file\nmin_length = 5\n")
        monkeypatch.setenv("HASHFIELD_SALT", "env")
        monkeypatch.setenv("HASHFIELD_MIN_LENGTH", "20")
        options = load_options(ini)
        assert (options.salt, options.min_length) == ("env", 20)

    def test_dotenv_file(self, tmp_path, monkeypatch):
        env_file = tmp_path / "custom.env"
        env_file.write_text("HASHFIELD_SALT=from-dotenv\nHASHFIELD_ALPHABET=0123456789abcdef\n")
        options = load_options(env_file=str(env_file))
        assert options.salt == "from-dotenv"
        assert options.alphabet == HEX

    def test_bad_min_length(self, tmp_path):
        ini = _write_ini(tmp_path / "app.ini", "[hashfield]\nmin_length = ten\n")
        with pytest.raises(OptionsError, match="min_length"):
            load_options(ini)

    def test_bad_alphabet(self, monkeypatch):
        monkeypatch.setenv("HASHFIELD_ALPHABET", "aabbcc")
        with pytest.raises(OptionsError):
            load_options()

    def test_percent_in_salt(self, tmp_path):
        ini = _write_ini(tmp_path / "app.ini", "[hashfield]\nsalt = 100%salt\n")
        assert load_options(ini).salt == "100%salt"


@pytest.mark.usefixtures("clean_env", "fresh_options")
class TestConfigure:
    def test_configure_installs_once(self, tmp_path):
        ini = _write_ini(tmp_path / "app.ini", "[hashfield]\nsalt = first\n")
        assert configure(ini) is True
        assert get_options().salt == "first"

        other = _write_ini(tmp_path / "other.ini", "[hashfield]\nsalt = second\n")
        assert configure(other) is False
        assert get_options().salt == "first"
