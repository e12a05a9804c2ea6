"""Exception hierarchy for the site data pipeline."""


class SheetsiteError(RuntimeError):
    """Base class for all sheetsite errors."""


class SheetsFetchError(SheetsiteError):
    """A single tab could not be fetched or parsed."""

    def __init__(self, tab_name: str, message: str) -> None:
        super().__init__(f"Failed to fetch tab {tab_name!r}: {message}")
        self.tab_name = tab_name


class UpstreamUnreachableError(SheetsFetchError):
    """Transport failure, timeout, or non-success HTTP status."""


class MalformedResponseError(SheetsFetchError):
    """Response body is not the expected callback-wrapped JSON."""


class UpstreamReportedError(SheetsFetchError):
    """The spreadsheet endpoint answered with status "error"."""

    def __init__(self, tab_name: str, upstream_message: str) -> None:
        super().__init__(tab_name, f"Google Sheets API error: {upstream_message}")
        self.upstream_message = upstream_message


class MissingRequiredTabError(SheetsiteError):
    """One or more required tabs are not fetchable."""

    def __init__(self, missing_tabs: tuple[str, ...]) -> None:
        super().__init__(missing_tabs_message(missing_tabs))
        self.missing_tabs = missing_tabs


class CacheUnavailableError(SheetsiteError):
    """The cache persistence layer failed on read or write."""


class SiteStoreError(SheetsiteError):
    """The site record store failed to read or update a record."""


class SiteNotFoundError(SheetsiteError):
    """No site record exists for the given id."""

    def __init__(self, site_id: str) -> None:
        super().__init__(f"Site {site_id!r} not found")
        self.site_id = site_id


def missing_tabs_message(missing_tabs: tuple[str, ...]) -> str:
    return f"Spreadsheet is missing required tabs: {', '.join(missing_tabs)}"
