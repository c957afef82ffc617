"""Disposable domains scraped from deviceandbrowserinfo.com provider pages.

@see https://deviceandbrowserinfo.com/data/emails/providers
"""

import asyncio
import re

import aiohttp

from burner_validator.core.logging import get_logger
from burner_validator.errors import SourceFetchError

from .base import BlocklistSource

logger = get_logger(__name__)

# (provider name, page slug)
SCRAPED_PROVIDERS = [
    ("temp-mail.org", "temp-mail-org"),
    ("tinyhost.shop", "tinyhost-shop"),
    ("email-fake.com", "email-fake-com"),
    ("emailfake", "emailfake"),
    ("tempm.com", "tempm"),
    ("yopmail.com", "yopmail-com"),
]

# A scrape yielding this many unique domains or fewer is treated as broken
MIN_SCRAPED_DOMAINS = 100

FALLBACK_TEMP_MAIL_DOMAINS = frozenset(
    {
        "akixpres.com", "eubonus.com", "feanzier.com", "atinjo.com", "ixospace.com",
        "imfaya.com", "jparksky.com", "gopicta.com", "markuto.com", "emaxasp.com",
        "icousd.com", "24faw.com", "gavrom.com", "cucadas.com", "hudisk.com",
        "cameltok.com", "dubokutv.com", "fftube.com", "roratu.com", "arugy.com",
        "nctime.com", "mucate.com", "mekuron.com", "m3player.com", "gamintor.com",
        "tvtmall.com", "sofreak.com", "senione.com", "sanszero.com", "sesedm.com",
        "tazines.com", "alexida.com", "naqulu.com", "discounp.com", "lawior.com",
        "crsay.com", "kudimi.com", "roastic.com", "asurad.com", "zaxcal.com",
        "besaies.com", "skateru.com", "vipsalut.com", "tieal.com", "xanwich.com",
        "ncien.com", "inupup.com", "safetoca.com", "mirarmax.com", "cspaus.com",
        "certve.com", "pouxing.com", "dextrago.com", "paovod.com", "salexup.com",
        "knilok.com", "solca1.com", "dpwev.com", "taketik.com", "vidwobox.com",
        "ishense.com", "merumart.com", "wmxgroup.com", "poesd.com", "fanwn.com",
        "kwifa.com", "ekuali.com", "upmusk.com", "reifide.com", "obirah.com",
        "tosvot.com", "vnziu.com", "walakato.com", "taynit.com", "harkonin.com",
        "cerisun.com", "cnguopin.com", "dotxan.com", "bitfami.com", "mangatoo.com",
        "frestle.com", "artvara.com", "exiond.com", "anysilo.com", "camjoint.com",
        "dawhe.com", "jshiba.com", "nariapp.com", "avastu.com", "exoular.com",
        "doulas.org", "cindalle.com", "nestvia.com", "kenfern.com", "jontra.com",
        "seondes.com", "adrais.com", "ecstor.com", "lero3.com", "comsb.com",
        "dni8.com", "moranfx.com", "ndiety.com", "sablecc.com", "phamay.com",
        "avtolev.com", "w3heroes.com", "beltng.com", "miwacle.com", "ingitel.com",
        "yyxxi.com",
    }
)  # fmt: skip

# Infrastructure and provider homepages that show up in every page
EXCLUDED_DOMAINS = frozenset(
    {
        "deviceandbrowserinfo.com",
        "google.com",
        "facebook.com",
        "twitter.com",
        "github.com",
        "cloudflare.com",
        "jsdelivr.net",
        "w3.org",
        "schema.org",
        "temp-mail.org",
        "tinyhost.shop",
        "email-fake.com",
        "tempm.com",
        "yopmail.com",
    }
)

ASSET_SUFFIXES = (".js", ".css", ".png", ".jpg")

DOMAIN_PATTERN = re.compile(r"\b(?:[a-z0-9][-a-z0-9]*\.)+[a-z]{2,}\b", re.IGNORECASE)


def extract_domains(html: str) -> list[str]:
    """Pull candidate domains out of raw page text."""
    domains = []
    for match in DOMAIN_PATTERN.findall(html):
        domain = match.lower().removeprefix("www.").removeprefix("webmail.")
        if domain in EXCLUDED_DOMAINS or domain.endswith(ASSET_SUFFIXES):
            continue
        if len(domain.split(".")) >= 2:
            domains.append(domain)
    return domains


class ScrapedDomains(BlocklistSource):
    """Domains scraped from per-provider pages, backed by a static list."""

    name = "scraped_domains"

    def __init__(
        self,
        base_url: str,
        refresh_interval_seconds: float = 24 * 3600,
        timeout_seconds: float = 15,
        providers: list[tuple[str, str]] | None = None,
    ) -> None:
        super().__init__(refresh_interval_seconds)
        self.base_url = base_url.rstrip("/")
        self.timeout = aiohttp.ClientTimeout(total=timeout_seconds)
        self.providers = providers if providers is not None else SCRAPED_PROVIDERS

    async def fetch(self) -> frozenset[str]:
        logger.info("scraped_domains_fetching")

        async with aiohttp.ClientSession(
            timeout=self.timeout,
            headers={"User-Agent": "Mozilla/5.0 (compatible; BurnerValidator/1.0)"},
        ) as session:
            per_provider = await asyncio.gather(
                *(self._scrape_provider(session, name, slug) for name, slug in self.providers)
            )

        unique = frozenset(domain for domains in per_provider for domain in domains)
        if len(unique) <= MIN_SCRAPED_DOMAINS:
            logger.bind(found=len(unique)).warning("scraped_domains_using_fallback")
            return FALLBACK_TEMP_MAIL_DOMAINS

        return unique

    async def _scrape_provider(
        self, session: aiohttp.ClientSession, provider: str, slug: str
    ) -> list[str]:
        """Scrape one provider page. Failures yield no domains."""
        url = f"{self.base_url}/{slug}"
        try:
            async with session.get(url) as response:
                if response.status != 200:
                    raise SourceFetchError(f"HTTP {response.status} for {provider}")
                html = await response.text()
        except (aiohttp.ClientError, TimeoutError, SourceFetchError) as e:
            logger.bind(provider=provider, error=str(e)).warning("scraped_provider_failed")
            return []

        domains = extract_domains(html)
        logger.bind(provider=provider, count=len(domains)).debug("scraped_provider_done")
        return domains

    def contains(self, domain: str) -> bool:
        return domain in self._snapshot.domains or domain in FALLBACK_TEMP_MAIL_DOMAINS
