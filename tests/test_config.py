import pytest
from objectfs import ClientConfiguration, FileSystemOptions
from objectfs.config import DEFAULT_LISTING_CHUNK_LENGTH, FOLDER_SUFFIX

def test_default_options():
    options = FileSystemOptions()
    assert options.listing_chunk_length == DEFAULT_LISTING_CHUNK_LENGTH == 1000
    assert options.folder_suffix == FOLDER_SUFFIX == "_$folder$"
    assert options.root_uri == ""

def test_options_from_env():
    """Test reading options from OBJECTFS_* variables."""
    options = FileSystemOptions.from_env({
        "OBJECTFS_LISTING_CHUNK_LENGTH": "250",
        "OBJECTFS_FOLDER_SUFFIX": ".dir",
        "OBJECTFS_ROOT_URI": "mem://bucket",
    })
    assert options.listing_chunk_length == 250
    assert options.folder_suffix == ".dir"
    assert options.root_uri == "mem://bucket"

    assert FileSystemOptions.from_env({}) == FileSystemOptions()

def test_options_from_process_environment(monkeypatch):
    monkeypatch.setenv("OBJECTFS_LISTING_CHUNK_LENGTH", "7")
    assert FileSystemOptions.from_env().listing_chunk_length == 7

@pytest.mark.parametrize("kwargs", [
    {"listing_chunk_length": 0},
    {"folder_suffix": ""},
    {"folder_suffix": "/marker"},
])
def test_invalid_options(kwargs):
    with pytest.raises(ValueError):
        FileSystemOptions(**kwargs)

def test_client_configuration_defaults():
    config = ClientConfiguration()
    assert config.connect_timeout_ms == 50000
    assert config.socket_timeout_ms == 50000
    assert config.connection_ttl_ms == -1
    assert config.max_connections == 1024
    assert config.extra == {}
