"""Pull request data source backed by the Azure CLI (`az repos pr list`)."""

from __future__ import annotations

import asyncio
import json
import logging
import shutil
from datetime import date
from typing import Any, Dict, List, Optional, Protocol, Sequence, Tuple

from .exceptions import MalformedRecordError, SourceUnavailableError

logger = logging.getLogger(__name__)

# Homebrew locations first; GUI launchers often run without them on PATH.
DEFAULT_AZ_PATHS = ("/opt/homebrew/bin/az", "/usr/local/bin/az", "az")
AZURE_DEVOPS_URL = "https://dev.azure.com"
NOT_LOGGED_IN_MESSAGE = "Azure CLI is not logged in. Please run 'az login' first."


class PullRequestSource(Protocol):
    """Anything that can list raw pull request records for a repository."""

    async def list_pull_requests(
        self,
        organization: str,
        project: str,
        repository: str,
        since_date: date,
    ) -> List[Dict[str, Any]]: ...


class AzureCliSource:
    """Lists pull requests by shelling out to the Azure CLI.

    Authentication is entirely the CLI's business; this class only checks
    that a session exists and tells the user to run ``az login`` otherwise.
    """

    def __init__(
        self,
        az_path: Optional[str] = None,
        timeout: int = 60,
        candidates: Sequence[str] = DEFAULT_AZ_PATHS,
    ) -> None:
        self.az_path = az_path
        self.timeout = timeout
        self.candidates = tuple(candidates)
        self._resolved: Optional[str] = None

    async def _run(self, args: Sequence[str]) -> Tuple[int, str, str]:
        """Run a command without a shell and return (returncode, stdout, stderr)."""
        logger.debug("Running %s", " ".join(args))
        try:
            proc = await asyncio.create_subprocess_exec(
                *args,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as e:
            raise SourceUnavailableError(f"Failed to run {args[0]}: {e}") from e
        try:
            stdout, stderr = await asyncio.wait_for(
                proc.communicate(), timeout=self.timeout
            )
        except asyncio.TimeoutError as e:
            proc.kill()
            await proc.wait()
            raise SourceUnavailableError(
                f"'{' '.join(args[:4])}' timed out after {self.timeout}s"
            ) from e
        return (
            proc.returncode if proc.returncode is not None else -1,
            stdout.decode("utf-8", errors="replace"),
            stderr.decode("utf-8", errors="replace"),
        )

    async def resolve_az(self) -> str:
        """Find a working `az` executable, trying the configured path first."""
        if self._resolved:
            return self._resolved

        candidates = [self.az_path] if self.az_path else list(self.candidates)
        for candidate in candidates:
            executable = shutil.which(candidate)
            if executable is None:
                continue
            try:
                returncode, _, _ = await self._run([executable, "--version"])
            except SourceUnavailableError as e:
                logger.debug("Skipping %s: %s", executable, e)
                continue
            if returncode == 0:
                self._resolved = executable
                logger.debug("Using Azure CLI at %s", executable)
                return executable

        raise SourceUnavailableError(
            "Azure CLI not found. Install it and run 'az login' first."
        )

    async def ensure_logged_in(self, az: str) -> None:
        returncode, _, stderr = await self._run([az, "account", "show"])
        if returncode != 0:
            logger.debug("az account show failed: %s", stderr.strip())
            raise SourceUnavailableError(NOT_LOGGED_IN_MESSAGE, returncode=returncode)

    @staticmethod
    def build_list_command(
        az: str,
        organization: str,
        project: str,
        repository: str,
        since_date: date,
    ) -> List[str]:
        """Build the argument vector for listing PRs created on/after since_date."""
        return [
            az,
            "repos",
            "pr",
            "list",
            "--organization",
            f"{AZURE_DEVOPS_URL}/{organization}",
            "--project",
            project,
            "--repository",
            repository,
            "--status",
            "all",
            "--query",
            f"[?creationDate >= '{since_date.isoformat()}']",
            "--output",
            "json",
        ]

    async def list_pull_requests(
        self,
        organization: str,
        project: str,
        repository: str,
        since_date: date,
    ) -> List[Dict[str, Any]]:
        """Return raw pull request records as emitted by the Azure CLI.

        Raises:
            SourceUnavailableError: If az is missing, not logged in, or fails.
            MalformedRecordError: If the output is not a JSON list of objects.
        """
        az = await self.resolve_az()
        await self.ensure_logged_in(az)

        args = self.build_list_command(az, organization, project, repository, since_date)
        returncode, stdout, stderr = await self._run(args)
        if returncode != 0:
            message = stderr.strip() or f"az repos pr list exited with {returncode}"
            raise SourceUnavailableError(message, returncode=returncode)

        try:
            records = json.loads(stdout)
        except json.JSONDecodeError as e:
            raise MalformedRecordError(f"Azure CLI returned invalid JSON: {e}") from e
        if not isinstance(records, list) or not all(isinstance(r, dict) for r in records):
            raise MalformedRecordError("Azure CLI output is not a list of pull requests")

        logger.info(
            "Fetched %d pull request(s) for %s/%s/%s since %s",
            len(records),
            organization,
            project,
            repository,
            since_date,
        )
        return records
