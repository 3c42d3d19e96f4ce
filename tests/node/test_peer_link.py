from peerfs.blocks import *
from peerfs.errors import LinkError, NotFound, PeerConnectionError, IntegrityError
from peerfs.node import *
import helpers_node as helpers

async def test_connect_is_idempotent():
    node1, node2 = await helpers.start_nodes(2)
    link_1 = await connect(node1, node2)
    link_2 = await connect(node1, node2)
    link_3 = await connect(node2, node1)
    assert link_1 is link_2
    assert link_1 is link_3
    assert node1.links == [link_1]
    assert node2.links == [link_1]
    assert link_1.remote(node1) is node2
    assert link_1.remote(node2) is node1
    assert link_1.status == "open"

async def test_connect_requires_running_nodes():
    network = PeerNetwork()
    node1 = (await helpers.start_nodes(1, network=network))[0]
    node2 = PeerNode(network)
    try:
        await connect(node1, node2)
        assert False
    except PeerConnectionError:
        assert True
    await node2.start()
    await node2.stop()
    try:
        await connect(node1, node2)
        assert False
    except PeerConnectionError:
        assert True

async def test_connect_to_self():
    node = (await helpers.start_nodes(1))[0]
    try:
        await connect(node, node)
        assert False
    except PeerConnectionError:
        assert True

async def test_fetch():
    node1, node2 = await helpers.start_nodes(2)
    link = await connect(node1, node2)
    cid = await node1.publish(b"remote data")
    assert await link.fetch(node1, cid) == b"remote data"
    try:
        await link.fetch(node2, cid)
        assert False
    except NotFound:
        assert True

async def test_fetch_on_closed_link():
    node1, node2 = await helpers.start_nodes(2)
    link = await connect(node1, node2)
    cid = await node1.publish(b"remote data")
    link.close()
    assert not link.is_open
    assert link.status == "closed"
    assert node1.links == []
    assert node2.links == []
    try:
        await link.fetch(node1, cid)
        assert False
    except LinkError:
        assert True
    #unlinked again, so the block cannot be found anymore
    try:
        await node2.resolve(cid)
        assert False
    except NotFound:
        assert True
    #connecting again creates a new link
    new_link = await connect(node1, node2)
    assert new_link is not link
    assert await node2.resolve(cid) == b"remote data"

async def test_stopping_a_node_closes_its_links():
    node1, node2 = await helpers.start_nodes(2)
    link = await connect(node1, node2)
    await node1.stop()
    assert not link.is_open
    assert node2.links == []

async def test_fetch_timeout():
    network = PeerNetwork()
    config = NodeConfig(fetch_timeout=0.05)
    slow_node = PeerNode(network, config, store=helpers.SlowContentStore(delay=1.0))
    node = PeerNode(network, config)
    await slow_node.start()
    await node.start()
    link = await connect(node, slow_node)
    cid = await slow_node.publish(b"slow data")
    try:
        await link.fetch(slow_node, cid)
        assert False
    except LinkError:
        assert True
    #resolve surfaces the link error, since no peer delivered the block
    try:
        await node.resolve(cid)
        assert False
    except LinkError:
        assert True

async def test_forged_blocks_are_rejected():
    network = PeerNetwork()
    forging_node = PeerNode(network, store=helpers.ForgingContentStore())
    node = PeerNode(network)
    await forging_node.start()
    await node.start()
    await node.connect(forging_node)
    cid = await forging_node.publish(b"real data")
    try:
        await node.resolve(cid)
        assert False
    except IntegrityError:
        assert True
    assert not await node.has(cid)

async def test_dial_by_address():
    node1, node2 = await helpers.start_nodes(2)
    link = await node1.dial(node2.addresses[0])
    assert link.remote(node1) is node2
    assert node1.get_link(node2.peer_id) is link
    assert node2.get_link(node1.peer_id) is link
