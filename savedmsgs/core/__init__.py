"""Core services: history fetch, grouping, paging, media and selection."""
from savedmsgs.core.archive_fetcher import ArchiveFetcher
from savedmsgs.core.media_resolver import MediaResolver
from savedmsgs.core.pagination import PaginationController
from savedmsgs.core.session import HistorySession

__all__ = ["ArchiveFetcher", "HistorySession", "MediaResolver", "PaginationController"]
