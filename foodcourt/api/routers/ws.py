# foodcourt/api/routers/ws.py
import asyncio
import uuid

from fastapi import APIRouter, WebSocket, WebSocketDisconnect
from starlette.concurrency import run_in_threadpool

from foodcourt.services.realtime import broadcast_channel, connection_channel
from foodcourt.utils.logging import get_logger

logger = get_logger(__name__)

router = APIRouter(tags=["realtime"])


async def _relay(pubsub, websocket: WebSocket):
    while True:
        message = await pubsub.get_message(ignore_subscribe_messages=True, timeout=1.0)
        if message is not None:
            await websocket.send_text(message["data"])


async def _drain(websocket: WebSocket):
    #clients only listen, anything they send is ignored until they disconnect
    try:
        while True:
            await websocket.receive_text()
    except WebSocketDisconnect:
        return


@router.websocket("/ws/orders")
async def order_events(websocket: WebSocket, user_id: int):
    """
    Relays order_status_updated events: every broadcast plus the events
    addressed to this connection. A user has at most one private connection,
    the newest one wins.
    """
    directory = websocket.app.state.connection_directory
    subscriber = websocket.app.state.event_subscriber
    connection_id = uuid.uuid4().hex

    await websocket.accept()

    pubsub = None
    try:
        pubsub = await subscriber.subscribe(broadcast_channel(), connection_channel(connection_id))
        await run_in_threadpool(directory.register, user_id, connection_id)
        logger.info(f"User {user_id} connected as {connection_id}")

        relay = asyncio.create_task(_relay(pubsub, websocket))
        drain = asyncio.create_task(_drain(websocket))
        done, pending = await asyncio.wait({relay, drain}, return_when=asyncio.FIRST_COMPLETED)

        for task in pending:
            task.cancel()
        await asyncio.gather(*pending, return_exceptions=True)

        for task in done:
            if task.exception() is not None:
                logger.warning(f"Connection {connection_id} closed with error: {task.exception()}")
    finally:
        try:
            await run_in_threadpool(directory.unregister, user_id, connection_id)
        except Exception as e:
            logger.warning(f"Could not unregister connection {connection_id}: {e}")
        if pubsub is not None:
            await pubsub.aclose()
        logger.info(f"User {user_id} disconnected ({connection_id})")
