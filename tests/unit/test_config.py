# Unit tests for utils/config.py

import pytest
import os
import sys

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', '..', 'kit-project'))

from utils import config
from utils.errors import DecodeError, KitError


class TestReadConfig:
    # Tests for read_config() / get_user_identity()

    def test_missing_file_is_empty(self, mem_fs):
        assert config.read_config(mem_fs).sections() == []
        assert config.get_user_identity(mem_fs) == (config.DEFAULT_NAME, config.DEFAULT_EMAIL)

    def test_write_then_read(self, mem_fs):
        config.write_config(mem_fs, 'user.name', 'Test User')
        assert config.get_user_identity(mem_fs) == ('Test User', config.DEFAULT_EMAIL)

    def test_invalid_key(self, mem_fs):
        with pytest.raises(ValueError):
            config.write_config(mem_fs, 'nodot', 'x')

    @pytest.mark.parametrize('data', [
        b'garbage no section',
        b'[user\nname = x',
        b'[user]\nname = \xff\xfe',
    ])
    def test_bad_file_is_decode_error(self, mem_fs, data):
        mem_fs.write(config.CONFIG_PATH, data)
        with pytest.raises(DecodeError):
            config.read_config(mem_fs)
        with pytest.raises(KitError):
            config.get_user_identity(mem_fs)
