import logging
from datetime import datetime
from typing import Optional

import uvicorn
from fastapi import Depends, FastAPI, Form, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse, JSONResponse
from jinja2 import Template
from pydantic import BaseModel, Field, field_validator

from property_history.config import Settings, configure_logging
from property_history.errors import PropertyHistoryError
from property_history.main import TransactionHistoryGraph
from property_history.models import ErrorResponse, SearchResult
from property_history.zip_directory import ZipDirectory

settings = Settings.from_env()

# Configure logging
configure_logging(settings.log_level)
logger = logging.getLogger("property-history-api")

# Initialize FastAPI app
app = FastAPI(
    title="Property Transaction History API",
    description="API for looking up the sale history of a property address",
    version="1.0.0",
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Pydantic models
class AddressRequest(BaseModel):
    address: str = Field(..., min_length=1)

    @field_validator("address")
    @classmethod
    def validate_address(cls, address):
        if not address.strip():
            raise ValueError("Address must be a non-empty string")
        return address.strip()


def get_graph(request: Request) -> TransactionHistoryGraph:
    """The transaction history graph built at startup."""
    return request.app.state.graph


def lookup_address(graph: TransactionHistoryGraph, address: str):
    """Run one lookup; returns (payload, status code)."""
    try:
        result = graph.run(address)
        return result.to_payload(), 200
    except PropertyHistoryError as e:
        logger.error(f"Error processing address {address}: {e.message}")
        return {"error": e.message}, e.status_code
    except Exception as e:
        logger.exception(f"Unexpected error processing address {address}")
        return {"error": str(e) or "Failed to process transactions"}, 500


@app.post(
    "/api/process-address",
    response_model=SearchResult,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
def process_address(
    request: AddressRequest, graph: TransactionHistoryGraph = Depends(get_graph)
) -> JSONResponse:
    """Look up the sale transactions of a property address."""
    logger.info(f"Processing address: {request.address}")
    payload, status_code = lookup_address(graph, request.address)
    return JSONResponse(content=payload, status_code=status_code)


@app.get("/api/health")
def health_check(request: Request):
    """Health check endpoint."""
    graph: Optional[TransactionHistoryGraph] = getattr(request.app.state, "graph", None)
    return {
        "status": "healthy" if graph is not None else "starting",
        "timestamp": datetime.now().isoformat(),
        "zip_records": len(graph.directory) if graph is not None else 0,
    }


SEARCH_PAGE = Template(
    """
<!doctype html>
<title>Property Transaction Search</title>
<h2>Property Transaction Search</h2>
<form method="post">
  <input name="address" style="width:420px" placeholder="Enter address with ZIP code (e.g., 123 Main St, 12345)" value="{{ address }}" />
  <button type="submit">Search</button>
</form>
{% if error %}
<p style="color:#b00020">{{ error }}</p>
{% endif %}
{% if result %}
<h3>{{ result.city }}, {{ result.county }} County, {{ result.state }} ({{ result.state_id }}) {{ result.zipcode }}</h3>
<p>County FIPS: {{ result.county_fips }} &middot; <a href="{{ result.searchUrl }}">Assessor search</a></p>
{% if result.transactions %}
<table border="1" cellpadding="6" style="border-collapse:collapse">
  <tr><th>Sale Date</th><th>Sale Price</th><th>Buyer</th><th>Seller</th></tr>
  {% for transaction in result.transactions %}
  <tr>
    <td>{{ transaction.saleDate }}</td>
    <td>{{ transaction.salePrice }}</td>
    <td>{{ transaction.buyer }}</td>
    <td>{{ transaction.seller }}</td>
  </tr>
  {% endfor %}
</table>
{% else %}
<p>No transactions found for this property</p>
{% endif %}
{% endif %}
""",
    autoescape=True,
)


@app.get("/", response_class=HTMLResponse)
def search_page():
    return SEARCH_PAGE.render(address="", error=None, result=None)


@app.post("/", response_class=HTMLResponse)
def search_form(address: str = Form(""), graph: TransactionHistoryGraph = Depends(get_graph)):
    address = address.strip()
    if not address:
        return HTMLResponse(SEARCH_PAGE.render(address="", error="Please enter an address", result=None))

    payload, status_code = lookup_address(graph, address)
    if status_code != 200:
        return HTMLResponse(
            SEARCH_PAGE.render(address=address, error=payload["error"], result=None),
            status_code=status_code,
        )
    return HTMLResponse(SEARCH_PAGE.render(address=address, error=None, result=payload))


@app.on_event("startup")
def startup_event():
    logger.info("Starting Property Transaction History API")
    settings.require_api_keys()

    directory = ZipDirectory(settings.zip_table_path).load()
    app.state.graph = TransactionHistoryGraph.from_settings(settings, directory)
    app.state.graph.compile()


@app.on_event("shutdown")
def shutdown_event():
    logger.info("Shutting down Property Transaction History API")


if __name__ == "__main__":
    uvicorn.run("application:app", host="0.0.0.0", port=8000, reload=True)
