"""Spreadsheet-backed site data: fetch, normalize, cache."""

from sheetsite.assembler import SiteDataAssembler
from sheetsite.config import SheetsConfig
from sheetsite.fetcher import SheetsFetcher
from sheetsite.protocols import CacheStoreProtocol, SiteStoreProtocol, TabFetcherProtocol
from sheetsite.service import SiteDataService, build_cached_service, build_static_service

__all__ = [
    "CacheStoreProtocol",
    "SheetsConfig",
    "SheetsFetcher",
    "SiteDataAssembler",
    "SiteDataService",
    "SiteStoreProtocol",
    "TabFetcherProtocol",
    "build_cached_service",
    "build_static_service",
]
