from burner_validator.sources.base import BlocklistSnapshot, BlocklistSource, SourceStats
from burner_validator.sources.discovered_domains import DiscoveredDomains
from burner_validator.sources.github_blocklist import (
    IMMEDIATE_DOMAINS,
    GitHubBlocklist,
    ancestor_domains,
    parse_blocklist,
)
from burner_validator.sources.scraped_domains import (
    FALLBACK_TEMP_MAIL_DOMAINS,
    ScrapedDomains,
    extract_domains,
)

__all__ = [
    "BlocklistSnapshot",
    "BlocklistSource",
    "DiscoveredDomains",
    "FALLBACK_TEMP_MAIL_DOMAINS",
    "GitHubBlocklist",
    "IMMEDIATE_DOMAINS",
    "ScrapedDomains",
    "SourceStats",
    "ancestor_domains",
    "extract_domains",
    "parse_blocklist",
]
