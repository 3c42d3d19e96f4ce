from click.testing import CliRunner
from peerfs.cli.cli import cli
from peerfs.cli.config_file import ServerConfig, load_config, loads_config
from peerfs.node import NodeConfig

def test_defaults():
    config = load_config(None)
    assert config == ServerConfig()
    assert config.port == 9632
    assert config.node == NodeConfig()

def test_loads_config():
    config = loads_config('''
[server]
host = "0.0.0.0"
port = 8080

[node]
listen = ["/memory/gateway"]
bootstrap = []
fetch_timeout = 2.5
chunk_size = 1024
''')
    assert config.host == "0.0.0.0"
    assert config.port == 8080
    assert config.node.listen == ["/memory/gateway"]
    assert config.node.bootstrap == []
    assert config.node.fetch_timeout == 2.5
    assert config.node.chunk_size == 1024

def test_partial_config():
    config = loads_config('''
[node]
fetch_timeout = 1.0
''')
    assert config.port == 9632
    assert config.node.fetch_timeout == 1.0
    assert config.node.chunk_size == NodeConfig().chunk_size

def test_load_config_file(tmp_path):
    config_path = tmp_path / "peerfs.toml"
    config_path.write_text('[server]\nport = 9000\n')
    assert load_config(str(config_path)).port == 9000

def test_invalid_config():
    for toml in ('[server]\nprot = 1\n', 'server = 5\n', '[node]\nchunk_size = 0\n'):
        try:
            loads_config(toml)
            assert False
        except ValueError:
            assert True

def test_peer_id_command():
    result = CliRunner().invoke(cli, ["peer-id"])
    assert result.exit_code == 0
    assert "12D3KooW" in result.output
    assert "did:key:z6Mk" in result.output

def test_serve_with_invalid_config(tmp_path):
    config_path = tmp_path / "peerfs.toml"
    config_path.write_text('[node]\nfetch_timeout = -1\n')
    result = CliRunner().invoke(cli, ["serve", "--config", str(config_path)])
    assert result.exit_code != 0
    assert "Invalid configuration" in result.output
