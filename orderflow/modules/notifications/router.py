from fastapi import APIRouter, WebSocket, WebSocketDisconnect
from orderflow.modules.notifications.service import (
    DASHBOARD_CHANNEL,
    FULFILLMENT_CHANNEL,
    tracking_channel,
)

router = APIRouter()

async def _serve(websocket: WebSocket, channel: str):
    manager = websocket.app.state.connections
    await manager.connect(websocket, channel)
    try:
        while True:
            # Keep connection alive; client messages are ignored
            await websocket.receive_text()
    except WebSocketDisconnect:
        manager.disconnect(websocket, channel)

@router.websocket("/ws/dashboard")
async def dashboard_websocket(websocket: WebSocket):
    """Real-time order changes for the management dashboard"""
    await _serve(websocket, DASHBOARD_CHANNEL)

@router.websocket("/ws/fulfillment")
async def fulfillment_websocket(websocket: WebSocket):
    """Real-time changes to orders on the fulfillment board"""
    await _serve(websocket, FULFILLMENT_CHANNEL)

@router.websocket("/ws/tracking/{order_id}")
async def tracking_websocket(websocket: WebSocket, order_id: str):
    """Status changes and new tracking events for one order"""
    channel = tracking_channel(order_id)
    await _serve(websocket, channel)

    # Last viewer gone: stop simulating location updates for this order
    if not websocket.app.state.connections.has_subscribers(channel):
        await websocket.app.state.simulations.unwatch(order_id)
