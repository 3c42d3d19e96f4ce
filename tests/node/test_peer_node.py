import asyncio
from peerfs.blocks import *
from peerfs.errors import InvalidState, NotFound
from peerfs.node import *
import helpers_node as helpers

async def test_start_is_idempotent():
    node = PeerNode(PeerNetwork())
    assert node.state == NodeState.UNINITIALIZED
    assert node.peer_id is None
    identity = await node.start()
    assert node.is_running
    assert identity.peer_id.startswith("12D3KooW")
    assert await node.start() == identity
    assert len(node.addresses) == 1
    assert node.addresses[0].endswith("/p2p/" + identity.peer_id)

async def test_configured_private_key():
    identity = create_peer_identity()
    node = PeerNode(PeerNetwork(), private_key=identity.private_key)
    assert await node.start() == identity

async def test_publish_resolve_local():
    node = (await helpers.start_nodes(1))[0]
    cid = await node.publish(b"hello world")
    assert await node.has(cid)
    assert await node.resolve(cid) == b"hello world"

async def test_publish_is_idempotent():
    node = (await helpers.start_nodes(1))[0]
    assert await node.publish(b"same") == await node.publish(b"same")

async def test_operations_before_start():
    node = PeerNode(PeerNetwork())
    for operation in (
            lambda: node.publish(b"data"),
            lambda: node.resolve(helpers.get_random_content_id()),
            lambda: node.has(helpers.get_random_content_id()),
            lambda: node.dial("/memory/1")):
        try:
            await operation()
            assert False
        except InvalidState:
            assert True

async def test_operations_after_stop():
    node = (await helpers.start_nodes(1))[0]
    cid = await node.publish(b"data")
    await node.stop()
    assert node.state == NodeState.STOPPED
    assert node.addresses == []
    try:
        await node.resolve(cid)
        assert False
    except InvalidState:
        assert True
    try:
        await node.publish(b"data")
        assert False
    except InvalidState:
        assert True
    #stopped nodes do not restart
    try:
        await node.start()
        assert False
    except InvalidState:
        assert True

async def test_stop_unregisters_from_network():
    network = PeerNetwork()
    node = (await helpers.start_nodes(1, network=network))[0]
    assert network.find_addresses(node.peer_id) == node.addresses
    await node.stop()
    assert network.find_addresses(node.peer_id) == []
    assert len(network) == 0

async def test_resolve_unpublished_without_links():
    node = (await helpers.start_nodes(1))[0]
    try:
        await node.resolve(helpers.get_random_content_id())
        assert False
    except NotFound:
        assert True

async def test_resolve_through_link():
    node1, node2 = await helpers.start_nodes(2)
    await node1.connect(node2)
    cid = await node1.publish(b"hello world")
    assert not await node2.has(cid)
    assert await node2.resolve(cid) == b"hello world"
    #the block is kept locally after it was fetched
    assert await node2.has(cid)

async def test_resolve_both_directions():
    node1, node2 = await helpers.start_nodes(2)
    await node2.connect(node1)
    cid_1 = await node1.publish(b"from node 1")
    cid_2 = await node2.publish(b"from node 2")
    assert await node2.resolve(cid_1) == b"from node 1"
    assert await node1.resolve(cid_2) == b"from node 2"

async def test_resolve_unpublished_with_link():
    node1, node2 = await helpers.start_nodes(2)
    await node1.connect(node2)
    try:
        await node2.resolve(helpers.get_random_content_id())
        assert False
    except NotFound:
        assert True
    #the node keeps working
    cid = await node1.publish(b"still there")
    assert await node2.resolve(cid) == b"still there"

async def test_resolve_asks_all_links():
    node1, node2, node3 = await helpers.start_nodes(3)
    await node1.connect(node2)
    await node1.connect(node3)
    cid = await node3.publish(b"only on node 3")
    assert await node1.resolve(cid) == b"only on node 3"

async def test_concurrent_resolves_of_same_block():
    node1, node2 = await helpers.start_nodes(2)
    await node1.connect(node2)
    cid = await node1.publish(b"popular")
    results = await asyncio.gather(*[node2.resolve(cid) for _ in range(10)])
    assert results == [b"popular"] * 10

async def test_end_to_end():
    node1, node2 = await helpers.start_nodes(2)
    await node1.dial(node2.addresses[0])
    cid = await node1.publish("hello world".encode('utf-8'))
    content = await node2.resolve(cid)
    assert {"node": node2.peer_id, "content": content.decode('utf-8')} == {"node": node2.peer_id, "content": "hello world"}
