"""FastAPI host for the Crawl4AI nodes."""

import logging
from typing import Any, Dict, List, Optional

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, ConfigDict, Field

from . import config
from .credentials import CREDENTIAL_DISPLAY_NAME, CREDENTIAL_NAME, CREDENTIAL_PROPERTIES, Crawl4aiCredentials
from .crawler.client import Crawl4AIClient
from .execution import NodeOperationError
from .nodes import NODE_TYPES
from .properties import describe

logging.basicConfig(
    level=config.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(title="Crawl4AI Nodes API")

# Enable CORS for local development
app.add_middleware(
    CORSMiddleware,
    allow_origins=["http://localhost:5173", "http://localhost:5678", "http://localhost:3000"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


class ExecuteRequest(BaseModel):
    """Request to run a node operation."""
    model_config = ConfigDict(populate_by_name=True)

    parameters: Dict[str, Any] = {}
    items: List[Dict[str, Any]] = []
    credentials: Optional[Crawl4aiCredentials] = None
    continue_on_fail: bool = Field(config.CONTINUE_ON_FAIL, alias="continueOnFail")


class ExecuteResponse(BaseModel):
    """Output items of a node run."""
    node: str
    items: List[Dict[str, Any]]


def _get_node(name: str):
    node = NODE_TYPES.get(name)
    if node is None:
        raise HTTPException(status_code=404, detail=f"Node not found: {name}")
    return node


def _serialize_item(item: Dict[str, Any]) -> Dict[str, Any]:
    """Make an output item JSON-safe (error objects become dicts)."""
    error = item.get("error")
    if isinstance(error, NodeOperationError):
        return {**item, "error": error.to_dict()}
    return item


@app.get("/")
async def root():
    """Health check endpoint."""
    return {"status": "ok", "service": "Crawl4AI Nodes API"}


@app.get("/api/nodes")
async def list_nodes():
    """List the available node types."""
    return [
        {
            "name": node.name,
            "displayName": node.description.display_name,
            "description": node.description.description,
            "operations": list(node.operations),
        }
        for node in NODE_TYPES.values()
    ]


@app.get("/api/nodes/{name}")
async def get_node_description(name: str):
    """Full description of a node, properties included."""
    return _get_node(name).description.to_dict()


@app.get("/api/credentials")
async def get_credentials_description():
    """Description of the Crawl4AI API credential type."""
    return {
        "name": CREDENTIAL_NAME,
        "displayName": CREDENTIAL_DISPLAY_NAME,
        "properties": describe(CREDENTIAL_PROPERTIES),
    }


@app.post("/api/nodes/{name}/execute", response_model=ExecuteResponse)
async def execute_node(name: str, request: ExecuteRequest):
    """
    Run a node operation over the given items.

    Credentials default to the CRAWL4AI_* environment settings.
    """
    node = _get_node(name)
    credentials = request.credentials or Crawl4aiCredentials.from_env()
    ctx = node.create_context(
        items=request.items,
        parameters=request.parameters,
        credentials=credentials,
        continue_on_fail=request.continue_on_fail,
    )

    logger.info(f"Executing {name} ({request.parameters.get('operation', 'default operation')}) "
                f"on {len(ctx.items)} item(s)")
    try:
        results = await node.execute(ctx)
    except NodeOperationError as e:
        logger.warning(f"{name} failed: {e}")
        raise HTTPException(status_code=400, detail=e.to_dict())

    return {"node": name, "items": [_serialize_item(item) for item in results]}


@app.get("/api/health")
async def health():
    """Report whether the configured Crawl4AI server is reachable."""
    credentials = Crawl4aiCredentials.from_env()
    client = Crawl4AIClient.from_credentials(credentials)
    details = await client.health_check_detailed()
    return {"serverUrl": client.base_url, **details}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8001)
