"""Runs audit checks concurrently against one fetched document."""

import logging
from typing import Any, Mapping, Optional, Sequence

from pageaudit.checks import CHECKS, DEFAULT_AUDIT_CHECKS, AuditCheck, AuditContext
from pageaudit.concurrency import settle_all
from pageaudit.config import Config
from pageaudit.document import HtmlDocument
from pageaudit.exceptions import PageAuditError
from pageaudit.fetcher import Fetcher
from pageaudit.models import AuditReport

logger = logging.getLogger(__name__)


class AuditOrchestrator:
    """Fans a page out to its checks and collects every outcome.

    The target is fetched and parsed once; all checks share that document.
    One check failing never removes another check's result.
    """

    def __init__(
        self,
        fetcher: Fetcher,
        config: Optional[Config] = None,
        checks: Optional[Mapping[str, AuditCheck]] = None,
        audit_checks: Sequence[str] = DEFAULT_AUDIT_CHECKS,
    ):
        """Initialize the orchestrator.

        Args:
            fetcher: Fetcher shared by every check
            config: Pipeline configuration
            checks: Registry of available checks by name
            audit_checks: Names of the checks a full audit runs
        """
        self.fetcher = fetcher
        self.config = config or Config()
        self.checks = dict(checks) if checks is not None else dict(CHECKS)
        self.audit_checks = tuple(audit_checks)

    def get_check(self, name: str) -> AuditCheck:
        try:
            return self.checks[name]
        except KeyError:
            raise KeyError(f"Unknown check: {name}") from None

    async def load_context(self, url: str, with_document: bool = True) -> AuditContext:
        """Build a check context, fetching and parsing the page when needed.

        Raises:
            NetworkError, HttpError: The page could not be fetched
        """
        context = AuditContext(url=url, fetcher=self.fetcher, config=self.config)
        if with_document:
            context.fetch_result = await self.fetcher.fetch(url)
            context.document = HtmlDocument(context.fetch_result.body)
        return context

    async def run_check(self, name: str, url: str) -> dict[str, Any]:
        """Run one check on a URL.

        Returns:
            The check's payload

        Raises:
            KeyError: Unknown check name
            PageAuditError: Fetch or check failure
        """
        check = self.get_check(name)
        context = await self.load_context(url, with_document=check.requires_document)
        return await check.run(context)

    async def run_full_audit(self, url: str) -> AuditReport:
        """Run every audit check against a single fetch of the page.

        Args:
            url: Page to audit

        Returns:
            AuditReport; never raises for fetch or check failures
        """
        try:
            context = await self.load_context(url)
        except PageAuditError as e:
            logger.warning(f"Audit of {url} failed: {e.message}")
            return AuditReport(url=url, error="Audit Failed", details=e.message)

        checks = [self.get_check(name) for name in self.audit_checks]
        outcomes = await settle_all(check.run(context) for check in checks)

        report = AuditReport(url=url)
        for check, settled in zip(checks, outcomes):
            if settled.ok:
                report.sections[check.name] = settled.value
            else:
                logger.warning(f"Check {check.name} failed for {url}: {settled.error!r}")
                report.sections[check.name] = check.failure_marker(settled.error)

        logger.info(
            f"Audit of {url} finished: {len(checks) - len(report.failed_checks())}/{len(checks)} checks succeeded"
        )
        return report
