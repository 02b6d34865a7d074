"""
dependencies.py — FastAPI dependency injection.
Every dependency reads what the lifespan put on Request.app.state.
"""
from __future__ import annotations

import httpx
from fastapi import Request

from adapters.stack_parser.grammar_parser import GrammarStackParser
from config import Settings


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_http_client(request: Request) -> httpx.AsyncClient:
    return request.app.state.http_client


def get_stack_parser(request: Request) -> GrammarStackParser:
    return request.app.state.stack_parser
