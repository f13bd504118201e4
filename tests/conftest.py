import json
import os
import socket
import sys
import urllib.request
from pathlib import Path

import pandas as pd
import pytest
from langchain_core.messages import AIMessage

REPO_ROOT = Path(__file__).resolve().parents[1]

# Prefer repo sources over any installed package.
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from property_history.completion import CompletionClient  # noqa: E402
from property_history.main import TransactionHistoryGraph  # noqa: E402
from property_history.search import SearchClient  # noqa: E402
from property_history.zip_directory import ZipDirectory  # noqa: E402


ZIP_ROWS = [
    {
        "zip": 6824,
        "city": "Fairfield",
        "state_id": "CT",
        "state_name": "Connecticut",
        "county_name": "Fairfield",
        "county_fips": 9001,
    },
    {
        "zip": 10001,
        "city": "New York",
        "state_id": "NY",
        "state_name": "New York",
        "county_name": "New York",
        "county_fips": 36061,
    },
    {
        # No county: dropped on load
        "zip": 96799,
        "city": "Pago Pago",
        "state_id": "AS",
        "state_name": "American Samoa",
        "county_name": None,
        "county_fips": None,
    },
]

PARCEL_URL = "https://gis.vgsi.com/fairfieldct/Parcel.aspx?pid=2271"

SEARCH_PAGE_RAW = (
    "# Search Results\n"
    "[12 OAK STREET](https://gis.vgsi.com/fairfieldct/Parcel.aspx?pid=1001)\n"
    f"[8 LYNNBROOK ROAD]({PARCEL_URL})\n"
)

RECORD_PAGE_RAW = (
    "## Ownership History\n"
    "| Owner | Sale Price | Sale Date |\n"
    "| SMITH JOHN | $1,250,000 | 06/15/2018 |\n"
    "| DOE JANE | $980,000 | 03/02/2009 |\n"
)

TYPE_1_ROWS = [
    {"type": "Type 1"},
    {"saleDate": "2018-06-15", "salePrice": "$1,250,000", "buyer": "SMITH JOHN", "seller": "DOE JANE"},
    {"saleDate": "2009-03-02", "salePrice": "$980,000", "buyer": "DOE JANE", "seller": "ROE RICHARD"},
]

TRANSACTION_ROWS = TYPE_1_ROWS[1:]


def search_result(url, content, score, raw_content=None, title=""):
    return {
        "url": url,
        "title": title,
        "content": content,
        "score": score,
        "raw_content": raw_content,
    }


class FakeSearchTool:
    """Stands in for TavilySearch; returns a canned response or raises."""

    def __init__(self, response=None):
        self.response = response if response is not None else {"results": []}
        self.calls = []

    def invoke(self, tool_input):
        self.calls.append(tool_input)
        if isinstance(self.response, Exception):
            raise self.response
        return self.response


class FakeExtractTool:
    """Stands in for TavilyExtract."""

    def __init__(self, response=None):
        self.response = response if response is not None else {"results": [], "failed_results": []}
        self.calls = []

    def invoke(self, tool_input):
        self.calls.append(tool_input)
        if isinstance(self.response, Exception):
            raise self.response
        return self.response


class FakeChatModel:
    """Stands in for ChatOpenAI; answers each call with the next queued reply."""

    def __init__(self, *replies):
        self.replies = list(replies)
        self.calls = []

    def queue(self, *replies):
        self.replies.extend(replies)

    def invoke(self, messages):
        self.calls.append(messages)
        reply = self.replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        if not isinstance(reply, str):
            reply = json.dumps(reply)
        return AIMessage(content=reply)


@pytest.fixture(autouse=True)
def block_network(monkeypatch):
    if os.getenv("LIVE") == "1":
        return

    real_connect = socket.socket.connect

    def guarded_connect(sock, address):
        host = address[0]
        if host not in ("127.0.0.1", "localhost"):
            raise RuntimeError("Network access blocked in tests")
        return real_connect(sock, address)

    monkeypatch.setattr(socket.socket, "connect", guarded_connect)
    monkeypatch.setattr(
        urllib.request,
        "urlopen",
        lambda *args, **kwargs: (_ for _ in ()).throw(
            RuntimeError("Network access blocked in tests")
        ),
    )


@pytest.fixture()
def zip_table(tmp_path):
    path = tmp_path / "uszips.csv"
    pd.DataFrame(ZIP_ROWS).to_csv(path, index=False)
    return str(path)


@pytest.fixture()
def directory(zip_table):
    return ZipDirectory(zip_table).load()


@pytest.fixture()
def search_tool():
    return FakeSearchTool(
        {
            "results": [
                search_result(
                    "https://gis.vgsi.com/fairfieldct/Search.aspx",
                    "Property search results for 8 LYNNBROOK ROAD Fairfield CT",
                    0.82,
                    raw_content=SEARCH_PAGE_RAW,
                ),
                search_result(
                    "https://gis.vgsi.com/fairfieldct/Parcel.aspx?pid=1001",
                    "12 OAK STREET owner history",
                    0.91,
                ),
            ]
        }
    )


@pytest.fixture()
def extract_tool():
    return FakeExtractTool(
        {"results": [{"url": PARCEL_URL, "raw_content": RECORD_PAGE_RAW}], "failed_results": []}
    )


@pytest.fixture()
def chat_model():
    return FakeChatModel()


@pytest.fixture()
def search_client(search_tool, extract_tool):
    return SearchClient(search_tool=search_tool, extract_tool=extract_tool)


@pytest.fixture()
def completion_client(chat_model):
    return CompletionClient(llm=chat_model)


@pytest.fixture()
def graph(directory, search_client, completion_client):
    return TransactionHistoryGraph(
        directory=directory,
        search_client=search_client,
        completion_client=completion_client,
    )
