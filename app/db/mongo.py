from motor.motor_asyncio import AsyncIOMotorClient
from pymongo.errors import PyMongoError

from app.config import Settings
from app.utils.logging import logger

def _describe_nodes(client) -> str:
    # nodes never raises, unlike address behind several mongos routers
    return ", ".join(f"{host}:{port}" for host, port in sorted(client.nodes)) or "?"

async def connect_db(app, settings: Settings) -> None:
    """Create client, ping the server and attach handles to app.state.

    Runs once per process. Connection problems are logged and leave
    ``app.state.db`` unset; the HTTP listener keeps serving. A client that
    never got attached (error or cancellation) is closed before returning.
    """
    app.state.mongo_client = None
    app.state.db = None
    if not settings.MONGODB_URI:
        logger.warning("MONGODB_URI not set; skipping database connection")
        return

    client = None
    try:
        client = AsyncIOMotorClient(settings.MONGODB_URI)
        await client.admin.command("ping")
        nodes = _describe_nodes(client)
        app.state.mongo_client = client
        app.state.db = client[settings.MONGODB_DATABASE]
    except PyMongoError as exc:
        logger.error(f"MongoDB connection error: {exc}")
        return
    finally:
        if client is not None and app.state.mongo_client is not client:
            client.close()

    logger.info(f"MongoDB connected: {nodes}")

async def close_db(app) -> None:
    client = getattr(app.state, "mongo_client", None)
    if client:
        client.close()
        app.state.mongo_client = None
        app.state.db = None
