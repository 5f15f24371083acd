from eiokit.adapter_options import RedisAdapterOptions, default_options, get_options


def test_default_options():
    options = default_options()
    assert options.addr == "127.0.0.1:6379"
    assert options.prefix == "socket.io"
    assert options.network == "tcp"
    assert options.host == ""
    assert options.password == ""


def test_get_options_without_input_is_default():
    assert get_options(None) == default_options()


def test_get_options_empty_input_is_default():
    assert get_options(RedisAdapterOptions()) == default_options()


def test_get_options_overlays_given_fields():
    password = "password"
    given = RedisAdapterOptions(addr="/tmp/redis.sock", network="unix", password=password)
    options = get_options(given)
    assert options.addr == given.addr
    assert options.network == given.network
    assert options.password == password
    assert options.prefix == default_options().prefix


def test_get_options_keeps_default_addr_when_only_host_given():
    options = get_options(RedisAdapterOptions(host="localhost", port="6380"))
    assert options.host == "localhost"
    assert options.port == "6380"
    assert options.get_addr() == "127.0.0.1:6379"


def test_get_addr_builds_from_host_and_port():
    options = RedisAdapterOptions(host="localhost", port="6380")
    assert options.get_addr() == "localhost:6380"
    assert options.addr == "localhost:6380"


def test_get_addr_prefers_addr():
    options = RedisAdapterOptions(host="localhost", port="6380", addr="redis.example.com:7000")
    assert options.get_addr() == "redis.example.com:7000"


def test_get_options_does_not_modify_input():
    given = RedisAdapterOptions(prefix="chat")
    options = get_options(given)
    assert options.prefix == "chat"
    assert given.addr == ""