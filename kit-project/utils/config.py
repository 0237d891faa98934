# What it does: Manages read/write operations for the `.git/config` file, which holds the commit identity
# What data structure it uses: Map / Hash Table / Dictionary (the INI file format is a map of sections to key-value pairs, managed by Python's `configparser`)

import configparser
import io

from .errors import DecodeError, NotFound

CONFIG_PATH = '.git/config'

DEFAULT_NAME = 'kit'
DEFAULT_EMAIL = 'kit@example.com'


def read_config(fs): # Reads and returns the configuration as a ConfigParser object, empty if there is no config file
    config = configparser.ConfigParser()
    try:
        config.read_string(fs.read(CONFIG_PATH).decode('utf-8'))
    except NotFound:
        pass
    except (configparser.Error, UnicodeDecodeError) as e:
        raise DecodeError(f"bad config file {CONFIG_PATH}: {e}")
    return config


def write_config(fs, key, value): # Sets a 'section.key' to a value and writes the config file back
    try:
        section, option = key.split('.', 1)
    except ValueError:
        raise ValueError("Invalid key format. Should be 'section.key'.")

    config = read_config(fs)
    if not config.has_section(section):
        config.add_section(section)
    config.set(section, option, value)

    buffer = io.StringIO()
    config.write(buffer)
    fs.write(CONFIG_PATH, buffer.getvalue().encode('utf-8'))


def get_user_identity(fs): # Returns (name, email) from [user], falling back to the built-in identity
    config = read_config(fs)
    name = config.get('user', 'name', fallback=DEFAULT_NAME)
    email = config.get('user', 'email', fallback=DEFAULT_EMAIL)
    return name, email
